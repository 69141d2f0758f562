"""Analytics API endpoints."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from hotelpms.db.session import get_db
from hotelpms.schemas.analytics import RevenueSummary, InvoiceStatusSummary, Occupancy, RoomTypePopularity
from hotelpms.services.analytics import AnalyticsService

router = APIRouter()
analytics_service = AnalyticsService()


@router.get("/analytics/revenue", response_model=RevenueSummary)
async def get_revenue(db: Session = Depends(get_db)):
    """Revenue from paid invoices."""
    return analytics_service.revenue(db)


@router.get("/analytics/invoices", response_model=List[InvoiceStatusSummary])
async def get_invoice_summary(db: Session = Depends(get_db)):
    """Invoice count and amount per status."""
    return analytics_service.invoice_status_summary(db)


@router.get("/analytics/occupancy", response_model=Occupancy)
async def get_occupancy(
    night: Optional[date] = Query(None, alias="date", description="Night to measure; defaults to today"),
    db: Session = Depends(get_db)
):
    """Occupancy rate for a night."""
    return analytics_service.occupancy(night or date.today(), db)


@router.get("/analytics/room-types", response_model=List[RoomTypePopularity])
async def get_room_type_popularity(db: Session = Depends(get_db)):
    """Bookings and revenue per room type."""
    return analytics_service.room_type_popularity(db)
