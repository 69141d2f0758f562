"""Tests for guest PII redaction."""
import logging
from hotelpms.core.logging import RedactionFilter
from hotelpms.services.redaction import RedactionService


def test_redact_email():
    """Test e-mail redaction."""
    service = RedactionService()
    assert service.redact_text("Contact ada@example.com") == "Contact [EMAIL_REDACTED]"


def test_redact_phone_numbers():
    """Test phone redaction for common formats."""
    service = RedactionService()
    assert "[PHONE_REDACTED]" in service.redact_text("Call +44 20 7946 0958")
    assert service.redact_text("Call 555-123-4567 now") == "Call [PHONE_REDACTED] now"
    assert service.redact_text("Call (555) 123-4567") == "Call [PHONE_REDACTED]"


def test_dates_and_ids_are_kept():
    """Stay dates and confirmation numbers are not mistaken for phones."""
    service = RedactionService()
    text = "Booking BK-240601123456 from 2024-06-01 to 2024-06-04"
    assert service.redact_text(text) == text


def test_redact_list():
    """Test list redaction."""
    service = RedactionService()
    assert service.redact_list(["a@b.com", "plain"]) == ["[EMAIL_REDACTED]", "plain"]


def test_redaction_filter_scrubs_args():
    """Log arguments are redacted before formatting."""
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname=__file__, lineno=1,
        msg="Guest %s booked", args=("ada@example.com",), exc_info=None
    )
    assert RedactionFilter().filter(record) is True
    assert record.getMessage() == "Guest [EMAIL_REDACTED] booked"
