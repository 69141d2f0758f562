"""Booking Pydantic schemas."""
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional, Dict, Any
from datetime import datetime, date
from hotelpms.db.models import BookingStatus, BookingSource, PaymentStatus, PriceCondition
from hotelpms.schemas.common import reject_explicit_nulls


class BookingCreate(BaseModel):
    """Schema for creating a booking."""
    guest_id: str = Field(..., description="Guest ID")
    room_id: str = Field(..., description="Room ID")
    check_in: date = Field(..., description="Arrival date")
    check_out: date = Field(..., description="Departure date")
    number_of_guests: int = Field(default=1, ge=1, description="Number of guests")
    booking_source: BookingSource = Field(default=BookingSource.DIRECT)
    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    total_amount: Optional[float] = Field(None, ge=0, description="Room charge; priced from rates when omitted")
    price_condition: Optional[PriceCondition] = Field(None, description="Restrict custom prices to this condition")
    discount: float = Field(default=0.0, ge=0)
    tax_rate: Optional[float] = Field(None, ge=0, le=100, description="Tax percentage")
    is_group_booking: bool = Field(default=False)
    group_id: Optional[str] = Field(None, description="Group identifier for group pricing")
    special_requests: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.check_in >= self.check_out:
            raise ValueError("check_in must be before check_out")
        return self


class BookingUpdate(BaseModel):
    """Schema for modifying a booking; omitted fields are left unchanged."""
    room_id: Optional[str] = Field(None, description="Move the stay to another room")
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    number_of_guests: Optional[int] = Field(None, ge=1)
    booking_source: Optional[BookingSource] = None
    payment_status: Optional[PaymentStatus] = None
    total_amount: Optional[float] = Field(None, ge=0, description="Room charge; re-priced from rates when omitted and the stay changes")
    price_condition: Optional[PriceCondition] = None
    discount: Optional[float] = Field(None, ge=0)
    tax_rate: Optional[float] = Field(None, ge=0, le=100)
    special_requests: Optional[str] = None

    @model_validator(mode="after")
    def check_required_columns(self):
        reject_explicit_nulls(self, (
            "room_id", "check_in", "check_out", "number_of_guests", "booking_source",
            "payment_status", "total_amount", "discount", "tax_rate",
        ))
        return self


class BookingCancel(BaseModel):
    """Schema for cancelling a booking."""
    cancellation_reason: Optional[str] = Field(None, description="Reason for cancellation")


class Booking(BaseModel):
    """Schema for booking response."""
    id: str
    confirmation_number: str
    guest_id: str
    room_id: str
    check_in: date
    check_out: date
    nights: int
    number_of_guests: int
    booking_source: BookingSource
    payment_status: PaymentStatus
    total_amount: float
    nightly_rates: List[Dict[str, Any]]
    price_condition: Optional[PriceCondition]
    discount: float
    tax_rate: float
    tax_amount: float
    grand_total: float
    is_group_booking: bool
    group_id: Optional[str]
    special_requests: Optional[str]
    status: BookingStatus
    cancellation_reason: Optional[str]
    cancellation_date: Optional[datetime]
    actual_check_in: Optional[datetime]
    actual_check_out: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class BookingList(BaseModel):
    """Schema for list of bookings."""
    bookings: List[Booking]
    total: int


class CalendarEntry(BaseModel):
    """Booking shaped for a room calendar view."""
    id: str
    title: str
    start: date
    end: date
    status: BookingStatus
    resource_id: str


class GroupStat(BaseModel):
    """Count and revenue for one group key."""
    key: str
    count: int
    revenue: float


class BookingTotals(BaseModel):
    """Overall booking totals."""
    total_bookings: int
    total_revenue: float
    avg_booking_value: float


class BookingStats(BaseModel):
    """Aggregated booking statistics."""
    by_status: List[GroupStat]
    by_source: List[GroupStat]
    totals: BookingTotals
