"""Domain exceptions raised by services and translated at the API boundary."""
from typing import Any


class HotelPMSError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(HotelPMSError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, resource: str, identifier: Any):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")


class ConflictError(HotelPMSError):
    """Raised when a request breaks a business rule (overlap, bad transition, ...)."""
