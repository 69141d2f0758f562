"""Guest CRUD API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import List, Optional
from hotelpms.db.session import get_db
from hotelpms.db.models import Guest as GuestModel, Booking as BookingModel
from hotelpms.schemas.guest import GuestCreate, GuestUpdate, GuestBlacklist, Guest as GuestSchema, GuestList
from hotelpms.schemas.booking import Booking as BookingSchema

router = APIRouter()


def _get_guest_or_404(guest_id: str, db: Session) -> GuestModel:
    guest = db.query(GuestModel).filter_by(id=guest_id).first()
    if not guest:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Guest {guest_id} not found"
        )
    return guest


@router.post("/guests", response_model=GuestSchema, status_code=status.HTTP_201_CREATED)
async def create_guest(
    guest: GuestCreate,
    db: Session = Depends(get_db)
):
    """Create a new guest."""
    data = guest.model_dump()
    if data.get("email"):
        data["email"] = data["email"].lower()
        existing = db.query(GuestModel).filter_by(email=data["email"]).first()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A guest with this email already exists"
            )

    db_guest = GuestModel(**data)
    db.add(db_guest)
    db.commit()
    db.refresh(db_guest)

    return db_guest


@router.get("/guests", response_model=GuestList)
async def list_guests(
    search: Optional[str] = Query(None, description="Match name, email or phone"),
    vip: Optional[bool] = Query(None),
    blacklisted: Optional[bool] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    """List guests with search and pagination."""
    query = db.query(GuestModel)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            GuestModel.full_name.ilike(pattern),
            GuestModel.email.ilike(pattern),
            GuestModel.phone.ilike(pattern),
        ))

    if vip is not None:
        query = query.filter_by(vip=vip)

    if blacklisted is not None:
        query = query.filter_by(blacklisted=blacklisted)

    total = query.count()
    guests = query.order_by(GuestModel.created_at.desc()).offset(skip).limit(limit).all()

    return GuestList(guests=guests, total=total)


@router.get("/guests/{guest_id}", response_model=GuestSchema)
async def get_guest(
    guest_id: str,
    db: Session = Depends(get_db)
):
    """Get a specific guest by ID."""
    return _get_guest_or_404(guest_id, db)


@router.put("/guests/{guest_id}", response_model=GuestSchema)
async def update_guest(
    guest_id: str,
    guest_update: GuestUpdate,
    db: Session = Depends(get_db)
):
    """Update a guest."""
    guest = _get_guest_or_404(guest_id, db)

    update_data = guest_update.model_dump(exclude_unset=True)
    if update_data.get("email"):
        update_data["email"] = update_data["email"].lower()
        clash = db.query(GuestModel).filter(
            GuestModel.email == update_data["email"],
            GuestModel.id != guest_id,
        ).first()
        if clash:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A guest with this email already exists"
            )

    for field, value in update_data.items():
        setattr(guest, field, value)

    db.commit()
    db.refresh(guest)

    return guest


@router.patch("/guests/{guest_id}/vip", response_model=GuestSchema)
async def toggle_guest_vip(
    guest_id: str,
    db: Session = Depends(get_db)
):
    """Flip the VIP flag of a guest."""
    guest = _get_guest_or_404(guest_id, db)
    guest.vip = not guest.vip

    db.commit()
    db.refresh(guest)

    return guest


@router.patch("/guests/{guest_id}/blacklist", response_model=GuestSchema)
async def set_guest_blacklist(
    guest_id: str,
    blacklist: GuestBlacklist,
    db: Session = Depends(get_db)
):
    """Blacklist a guest with a reason, or lift the blacklist."""
    guest = _get_guest_or_404(guest_id, db)
    guest.blacklisted = blacklist.blacklisted
    guest.blacklist_reason = blacklist.reason if blacklist.blacklisted else None

    db.commit()
    db.refresh(guest)

    return guest


@router.delete("/guests/{guest_id}", status_code=status.HTTP_200_OK)
async def delete_guest(
    guest_id: str,
    db: Session = Depends(get_db)
):
    """Delete a guest without bookings."""
    guest = _get_guest_or_404(guest_id, db)

    if db.query(BookingModel).filter_by(guest_id=guest_id).count():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Guest has bookings and cannot be deleted"
        )

    db.delete(guest)
    db.commit()

    return {"message": "Guest deleted successfully"}


@router.get("/guests/{guest_id}/bookings", response_model=List[BookingSchema])
async def get_guest_bookings(
    guest_id: str,
    db: Session = Depends(get_db)
):
    """Booking history of a guest, most recent stay first."""
    _get_guest_or_404(guest_id, db)
    return db.query(BookingModel).filter_by(guest_id=guest_id).order_by(BookingModel.check_in.desc()).all()
