"""PII redaction service."""
import re
from typing import List


class RedactionService:
    """Service for redacting guest PII from text."""

    # Common email pattern
    EMAIL_PATTERN = re.compile(
        r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b'
    )

    # "+44 20 7946 0958" style international numbers and "555-123-4567" / "(555) 123-4567"
    PHONE_PATTERNS = [
        re.compile(r'\+\d[\d\s().-]{6,}\d\b'),
        re.compile(r'(?:\(\d{3}\)\s*|\b\d{3}[-.\s])\d{3}[-.\s]\d{4}\b'),
    ]

    def redact_email(self, text: str) -> str:
        """Redact email addresses."""
        return self.EMAIL_PATTERN.sub('[EMAIL_REDACTED]', text)

    def redact_phone(self, text: str) -> str:
        """Redact phone numbers."""
        result = text
        for pattern in self.PHONE_PATTERNS:
            result = pattern.sub('[PHONE_REDACTED]', result)
        return result

    def redact_text(self, text: str) -> str:
        """Redact all PII from text."""
        if not isinstance(text, str):
            return text

        result = self.redact_email(text)
        result = self.redact_phone(result)
        return result

    def redact_list(self, items: List[str]) -> List[str]:
        """Redact PII from a list of strings."""
        return [self.redact_text(item) for item in items]
