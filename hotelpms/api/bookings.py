"""Booking API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from datetime import date
from hotelpms.db.session import get_db
from hotelpms.db.models import (
    Booking as BookingModel, BookingStatus, BookingSource, PaymentStatus,
)
from hotelpms.schemas.booking import (
    BookingCreate, BookingUpdate, BookingCancel, Booking as BookingSchema, BookingList, BookingStats, CalendarEntry,
)
from hotelpms.services.analytics import AnalyticsService
from hotelpms.services.booking import BookingService
from hotelpms.core.security import get_current_user

router = APIRouter()
booking_service = BookingService()
analytics_service = AnalyticsService()


@router.post("/bookings", response_model=BookingSchema, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking: BookingCreate,
    db: Session = Depends(get_db),
    user: str = Depends(get_current_user)
):
    """Create a booking, pricing the stay when no amount is given."""
    return booking_service.create_booking(booking, db, user=user)


@router.get("/bookings", response_model=BookingList)
async def list_bookings(
    guest_id: Optional[str] = Query(None),
    room_id: Optional[str] = Query(None),
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    payment_status: Optional[PaymentStatus] = Query(None),
    booking_source: Optional[BookingSource] = Query(None),
    start_date: Optional[date] = Query(None, description="Stays ending on or after this date"),
    end_date: Optional[date] = Query(None, description="Stays starting on or before this date"),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    """List bookings with filters and pagination."""
    query = db.query(BookingModel)

    if guest_id:
        query = query.filter_by(guest_id=guest_id)
    if room_id:
        query = query.filter_by(room_id=room_id)
    if booking_status:
        query = query.filter(BookingModel.status == booking_status)
    if payment_status:
        query = query.filter(BookingModel.payment_status == payment_status)
    if booking_source:
        query = query.filter(BookingModel.booking_source == booking_source)

    # Stay overlaps the requested range
    if start_date:
        query = query.filter(BookingModel.check_out >= start_date)
    if end_date:
        query = query.filter(BookingModel.check_in <= end_date)

    total = query.count()
    bookings = query.order_by(BookingModel.created_at.desc()).offset(skip).limit(limit).all()

    return BookingList(bookings=bookings, total=total)


@router.get("/bookings/stats", response_model=BookingStats)
async def get_booking_stats(
    start_date: Optional[date] = Query(None, description="Created on or after"),
    end_date: Optional[date] = Query(None, description="Created on or before"),
    db: Session = Depends(get_db)
):
    """Booking counts and revenue by status and source."""
    return analytics_service.booking_stats(db, start_date=start_date, end_date=end_date)


@router.get("/bookings/calendar", response_model=List[CalendarEntry])
async def get_booking_calendar(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db)
):
    """Bookings overlapping a date range, shaped for a room calendar."""
    if start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date must not be after end_date"
        )

    bookings = db.query(BookingModel).options(
        joinedload(BookingModel.guest), joinedload(BookingModel.room)
    ).filter(
        BookingModel.check_in <= end_date,
        BookingModel.check_out >= start_date,
        BookingModel.status.notin_((BookingStatus.CANCELLED, BookingStatus.NO_SHOW)),
    ).order_by(BookingModel.check_in).all()

    return [
        CalendarEntry(
            id=b.id,
            title=f"{b.guest.full_name} - Room {b.room.room_number}",
            start=b.check_in,
            end=b.check_out,
            status=b.status,
            resource_id=b.room_id
        )
        for b in bookings
    ]


@router.get("/bookings/{booking_id}", response_model=BookingSchema)
async def get_booking(
    booking_id: str,
    db: Session = Depends(get_db)
):
    """Get a specific booking by ID."""
    booking = db.query(BookingModel).filter_by(id=booking_id).first()
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Booking {booking_id} not found"
        )
    return booking


@router.put("/bookings/{booking_id}", response_model=BookingSchema)
async def update_booking(
    booking_id: str,
    booking_update: BookingUpdate,
    db: Session = Depends(get_db),
    user: str = Depends(get_current_user)
):
    """Modify a booking; moving the stay re-checks availability and re-prices it."""
    return booking_service.update_booking(booking_id, booking_update, db, user=user)


@router.patch("/bookings/{booking_id}/cancel", response_model=BookingSchema)
async def cancel_booking(
    booking_id: str,
    request: Optional[BookingCancel] = None,
    db: Session = Depends(get_db),
    user: str = Depends(get_current_user)
):
    """Cancel a confirmed booking."""
    reason = request.cancellation_reason if request else None
    return booking_service.cancel(booking_id, reason, db, user=user)


@router.patch("/bookings/{booking_id}/check-in", response_model=BookingSchema)
async def check_in_booking(
    booking_id: str,
    db: Session = Depends(get_db),
    user: str = Depends(get_current_user)
):
    """Check in a confirmed booking."""
    return booking_service.check_in(booking_id, db, user=user)


@router.patch("/bookings/{booking_id}/check-out", response_model=BookingSchema)
async def check_out_booking(
    booking_id: str,
    db: Session = Depends(get_db),
    user: str = Depends(get_current_user)
):
    """Check out a checked-in booking."""
    return booking_service.check_out(booking_id, db, user=user)
