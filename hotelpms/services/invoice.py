"""Invoice service."""
from datetime import datetime
from typing import Optional
import logging
from sqlalchemy.orm import Session
from hotelpms.core.config import settings
from hotelpms.core.errors import NotFoundError, ConflictError
from hotelpms.db.models import Booking, Invoice, InvoiceStatus, PaymentMethod
from hotelpms.schemas.invoice import InvoiceCreate
from hotelpms.services.audit import AuditService

logger = logging.getLogger(__name__)


class InvoiceService:
    """Issues and settles invoices for bookings."""

    def __init__(self, audit_service: Optional[AuditService] = None):
        self.audit_service = audit_service or AuditService()

    def next_invoice_number(self, db: Session) -> str:
        """Sequential invoice number, e.g. INV-2024-000042."""
        sequence = db.query(Invoice).count() + 1
        while True:
            candidate = f"{settings.invoice_prefix}-{datetime.utcnow():%Y}-{sequence:06d}"
            if not db.query(Invoice).filter_by(invoice_number=candidate).count():
                return candidate
            sequence += 1

    def create_invoice(self, data: InvoiceCreate, db: Session, user: Optional[str] = None) -> Invoice:
        """
        Issue an invoice for a booking.

        Line totals are quantity * unit_price; tax is charged on the
        subtotal after discount.
        """
        booking = db.query(Booking).filter_by(id=data.booking_id).first()
        if not booking:
            raise NotFoundError("Booking", data.booking_id)

        items = []
        for item in data.items:
            line = item.model_dump()
            line["total"] = round(item.quantity * item.unit_price, 2)
            items.append(line)

        subtotal = round(sum(line["total"] for line in items), 2)
        taxable = max(subtotal - data.discount, 0.0)
        tax_amount = round(taxable * data.tax_rate / 100, 2)

        invoice = Invoice(
            invoice_number=self.next_invoice_number(db),
            guest_id=booking.guest_id,
            booking_id=booking.id,
            items=items,
            subtotal=subtotal,
            tax_amount=tax_amount,
            discount=data.discount,
            total=round(taxable + tax_amount, 2),
            currency=data.currency or settings.default_currency,
            status=InvoiceStatus.UNPAID,
            due_date=data.due_date,
            notes=data.notes,
        )
        db.add(invoice)
        db.flush()

        self.audit_service.log_action(
            action="create",
            entity="invoice",
            entity_id=invoice.id,
            user=user,
            after_state={"total": invoice.total, "booking_id": booking.id},
            db=db
        )
        db.commit()
        db.refresh(invoice)

        logger.info("Invoice %s issued for booking %s", invoice.invoice_number, booking.confirmation_number)
        return invoice

    def pay(self, invoice_id: str, payment_method: PaymentMethod, db: Session, user: Optional[str] = None) -> Invoice:
        """Mark an invoice as paid."""
        invoice = db.query(Invoice).filter_by(id=invoice_id).first()
        if not invoice:
            raise NotFoundError("Invoice", invoice_id)
        if invoice.status in (InvoiceStatus.PAID, InvoiceStatus.CANCELLED, InvoiceStatus.REFUNDED):
            raise ConflictError(f"Cannot pay an invoice with status: {invoice.status.value}")

        before = {"status": invoice.status.value}
        invoice.status = InvoiceStatus.PAID
        invoice.payment_method = payment_method
        invoice.paid_date = datetime.utcnow()

        self.audit_service.log_action(
            action="pay",
            entity="invoice",
            entity_id=invoice.id,
            user=user,
            before_state=before,
            after_state={"status": invoice.status.value, "payment_method": payment_method.value},
            db=db
        )
        db.commit()
        db.refresh(invoice)

        logger.info("Invoice %s paid by %s", invoice.invoice_number, payment_method.value)
        return invoice

    def cancel(self, invoice_id: str, db: Session, user: Optional[str] = None) -> Invoice:
        """Void an invoice that has not been settled."""
        invoice = db.query(Invoice).filter_by(id=invoice_id).first()
        if not invoice:
            raise NotFoundError("Invoice", invoice_id)
        if invoice.status not in (InvoiceStatus.UNPAID, InvoiceStatus.PARTIAL):
            raise ConflictError(f"Cannot cancel an invoice with status: {invoice.status.value}")

        before = {"status": invoice.status.value}
        invoice.status = InvoiceStatus.CANCELLED

        self.audit_service.log_action(
            action="cancel",
            entity="invoice",
            entity_id=invoice.id,
            user=user,
            before_state=before,
            after_state={"status": invoice.status.value},
            db=db
        )
        db.commit()
        db.refresh(invoice)

        logger.info("Invoice %s cancelled", invoice.invoice_number)
        return invoice
