"""Room CRUD, availability and pricing API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from hotelpms.db.session import get_db
from hotelpms.db.models import Room as RoomModel, RoomType as RoomTypeModel, Booking as BookingModel, PriceCondition, RoomStatus
from hotelpms.schemas.room import (
    RoomCreate, RoomUpdate, RoomStatusUpdate, Room as RoomSchema, PriceResolution, PriceQuote,
)
from hotelpms.services.booking import BookingService
from hotelpms.services.pricing import RateResolver

router = APIRouter()
booking_service = BookingService()
rate_resolver = RateResolver()


def _get_room_or_404(room_id: str, db: Session) -> RoomModel:
    room = db.query(RoomModel).filter_by(id=room_id).first()
    if not room:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Room {room_id} not found"
        )
    return room


def _ensure_room_type(room_type_id: str, db: Session) -> None:
    if not db.query(RoomTypeModel).filter_by(id=room_type_id).first():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Room type {room_type_id} not found"
        )


@router.post("/rooms", response_model=RoomSchema, status_code=status.HTTP_201_CREATED)
async def create_room(
    room: RoomCreate,
    db: Session = Depends(get_db)
):
    """Create a new room."""
    _ensure_room_type(room.room_type_id, db)

    existing = db.query(RoomModel).filter_by(room_number=room.room_number).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Room {room.room_number} already exists"
        )

    db_room = RoomModel(**room.model_dump())
    db.add(db_room)
    db.commit()
    db.refresh(db_room)

    return db_room


@router.get("/rooms", response_model=List[RoomSchema])
async def list_rooms(
    room_type_id: Optional[str] = Query(None, description="Filter by room type"),
    floor: Optional[int] = Query(None, description="Filter by floor"),
    room_status: Optional[RoomStatus] = Query(None, alias="status", description="Filter by housekeeping status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    """List rooms with optional filters."""
    query = db.query(RoomModel)

    if room_type_id:
        query = query.filter_by(room_type_id=room_type_id)

    if floor is not None:
        query = query.filter_by(floor=floor)

    if room_status:
        query = query.filter(RoomModel.status == room_status)

    return query.order_by(RoomModel.room_number).offset(skip).limit(limit).all()


@router.get("/rooms/available", response_model=List[RoomSchema])
async def list_available_rooms(
    check_in: date = Query(..., description="Arrival date"),
    check_out: date = Query(..., description="Departure date"),
    room_type_id: Optional[str] = Query(None, description="Filter by room type"),
    capacity: Optional[int] = Query(None, ge=1, description="Minimum occupancy"),
    db: Session = Depends(get_db)
):
    """List rooms free for the whole stay."""
    if check_in >= check_out:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="check_in must be before check_out"
        )

    return booking_service.available_rooms(check_in, check_out, db, room_type_id=room_type_id, capacity=capacity)


@router.get("/rooms/{room_id}", response_model=RoomSchema)
async def get_room(
    room_id: str,
    db: Session = Depends(get_db)
):
    """Get a specific room by ID."""
    return _get_room_or_404(room_id, db)


@router.put("/rooms/{room_id}", response_model=RoomSchema)
async def update_room(
    room_id: str,
    room_update: RoomUpdate,
    db: Session = Depends(get_db)
):
    """Update a room."""
    room = _get_room_or_404(room_id, db)

    update_data = room_update.model_dump(exclude_unset=True)
    if "room_type_id" in update_data:
        _ensure_room_type(update_data["room_type_id"], db)

    number = update_data.get("room_number")
    if number is not None and number != room.room_number:
        if db.query(RoomModel).filter_by(room_number=number).first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Room {number} already exists"
            )

    for field, value in update_data.items():
        setattr(room, field, value)

    db.commit()
    db.refresh(room)

    return room


@router.patch("/rooms/{room_id}/status", response_model=RoomSchema)
async def update_room_status(
    room_id: str,
    status_update: RoomStatusUpdate,
    db: Session = Depends(get_db)
):
    """Change a room's housekeeping status."""
    room = _get_room_or_404(room_id, db)
    room.status = status_update.status
    db.commit()
    db.refresh(room)

    return room


@router.delete("/rooms/{room_id}", status_code=status.HTTP_200_OK)
async def delete_room(
    room_id: str,
    db: Session = Depends(get_db)
):
    """Delete a room that has never been booked."""
    room = _get_room_or_404(room_id, db)

    if db.query(BookingModel).filter_by(room_id=room_id).count():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Room has bookings and cannot be deleted"
        )

    db.delete(room)
    db.commit()

    return {"message": "Room deleted successfully"}


@router.get("/rooms/{room_id}/price", response_model=PriceResolution)
async def get_room_price(
    room_id: str,
    target_date: date = Query(..., alias="date", description="Night to price"),
    condition: Optional[PriceCondition] = Query(None, description="Only apply custom prices with this condition"),
    db: Session = Depends(get_db)
):
    """Resolve the effective nightly price of a room."""
    rate = rate_resolver.resolve(room_id, target_date, condition, db)
    return PriceResolution(
        room_id=room_id,
        date=target_date,
        price=rate.price,
        source=rate.source,
        custom_price_id=rate.custom_price_id
    )


@router.get("/rooms/{room_id}/quote", response_model=PriceQuote)
async def get_room_quote(
    room_id: str,
    check_in: date = Query(..., description="Arrival date"),
    check_out: date = Query(..., description="Departure date"),
    condition: Optional[PriceCondition] = Query(None, description="Only apply custom prices with this condition"),
    group_id: Optional[str] = Query(None, description="Group for negotiated group pricing"),
    db: Session = Depends(get_db)
):
    """Price every night of a prospective stay."""
    if check_in >= check_out:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="check_in must be before check_out"
        )

    return rate_resolver.quote(room_id, check_in, check_out, condition=condition, db=db, group_id=group_id)
