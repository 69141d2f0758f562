"""Invoice API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from hotelpms.db.session import get_db
from hotelpms.db.models import Invoice as InvoiceModel, InvoiceStatus
from hotelpms.schemas.invoice import InvoiceCreate, InvoicePayment, Invoice as InvoiceSchema
from hotelpms.services.invoice import InvoiceService
from hotelpms.core.security import get_current_user

router = APIRouter()
invoice_service = InvoiceService()


@router.post("/invoices", response_model=InvoiceSchema, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice: InvoiceCreate,
    db: Session = Depends(get_db),
    user: str = Depends(get_current_user)
):
    """Issue an invoice for a booking."""
    return invoice_service.create_invoice(invoice, db, user=user)


@router.get("/invoices", response_model=List[InvoiceSchema])
async def list_invoices(
    invoice_status: Optional[InvoiceStatus] = Query(None, alias="status"),
    booking_id: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    """List invoices with optional filters."""
    query = db.query(InvoiceModel)

    if invoice_status:
        query = query.filter(InvoiceModel.status == invoice_status)

    if booking_id:
        query = query.filter_by(booking_id=booking_id)

    return query.order_by(InvoiceModel.issued_date.desc()).offset(skip).limit(limit).all()


@router.get("/invoices/{invoice_id}", response_model=InvoiceSchema)
async def get_invoice(
    invoice_id: str,
    db: Session = Depends(get_db)
):
    """Get a specific invoice by ID."""
    invoice = db.query(InvoiceModel).filter_by(id=invoice_id).first()
    if not invoice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Invoice {invoice_id} not found"
        )
    return invoice


@router.patch("/invoices/{invoice_id}/pay", response_model=InvoiceSchema)
async def pay_invoice(
    invoice_id: str,
    payment: InvoicePayment,
    db: Session = Depends(get_db),
    user: str = Depends(get_current_user)
):
    """Mark an invoice as paid."""
    return invoice_service.pay(invoice_id, payment.payment_method, db, user=user)


@router.patch("/invoices/{invoice_id}/cancel", response_model=InvoiceSchema)
async def cancel_invoice(
    invoice_id: str,
    db: Session = Depends(get_db),
    user: str = Depends(get_current_user)
):
    """Void an unpaid invoice."""
    return invoice_service.cancel(invoice_id, db, user=user)
