"""Analytics Pydantic schemas."""
from pydantic import BaseModel, Field
from typing import List
from datetime import date


class MethodRevenue(BaseModel):
    """Revenue collected through one payment method."""
    method: str
    total: float
    count: int


class RevenueSummary(BaseModel):
    """Revenue from paid invoices."""
    total_revenue: float
    by_payment_method: List[MethodRevenue]


class InvoiceStatusSummary(BaseModel):
    """Invoice count and amount for one status."""
    status: str
    count: int
    total_amount: float


class Occupancy(BaseModel):
    """Occupancy for a single night."""
    date: date
    occupied_rooms: int
    total_rooms: int
    occupancy_rate: float = Field(..., ge=0, le=1)


class RoomTypePopularity(BaseModel):
    """Bookings and revenue for one room type."""
    room_type_id: str
    room_type_name: str
    bookings: int
    revenue: float
