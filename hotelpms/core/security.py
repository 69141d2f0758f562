"""Request identity."""
from typing import Optional
from fastapi import Header

SYSTEM_USER = "system"


def get_current_user(x_user_id: Optional[str] = Header(None, alias="X-User-Id")) -> str:
    """
    Identity of the staff member making the request.

    Authentication happens upstream; the gateway forwards the user id in
    the X-User-Id header. Requests without it are attributed to the system user.
    """
    return x_user_id or SYSTEM_USER
