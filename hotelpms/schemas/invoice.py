"""Invoice Pydantic schemas."""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime, date
from hotelpms.db.models import InvoiceStatus, PaymentMethod


class InvoiceItem(BaseModel):
    """Invoice line item."""
    description: str
    quantity: int = Field(default=1, ge=1)
    unit_price: float = Field(..., ge=0)
    total: Optional[float] = Field(None, description="Computed as quantity * unit_price")


class InvoiceCreate(BaseModel):
    """Schema for creating an invoice."""
    booking_id: str = Field(..., description="Booking being invoiced")
    items: List[InvoiceItem] = Field(..., min_length=1, description="Line items")
    tax_rate: float = Field(default=0.0, ge=0, le=100, description="Tax percentage applied to the subtotal")
    discount: float = Field(default=0.0, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    due_date: Optional[date] = None
    notes: Optional[str] = None


class InvoicePayment(BaseModel):
    """Schema for settling an invoice."""
    payment_method: PaymentMethod


class Invoice(BaseModel):
    """Schema for invoice response."""
    id: str
    invoice_number: str
    guest_id: str
    booking_id: str
    items: List[InvoiceItem]
    subtotal: float
    tax_amount: float
    discount: float
    total: float
    currency: str
    status: InvoiceStatus
    payment_method: Optional[PaymentMethod]
    notes: Optional[str]
    issued_date: datetime
    due_date: Optional[date]
    paid_date: Optional[datetime]

    class Config:
        from_attributes = True
