"""Room type CRUD API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from hotelpms.db.session import get_db
from hotelpms.db.models import RoomType as RoomTypeModel, Room as RoomModel
from hotelpms.schemas.room import RoomTypeCreate, RoomTypeUpdate, RoomType as RoomTypeSchema

router = APIRouter()


def _get_room_type_or_404(room_type_id: str, db: Session) -> RoomTypeModel:
    room_type = db.query(RoomTypeModel).filter_by(id=room_type_id).first()
    if not room_type:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Room type {room_type_id} not found"
        )
    return room_type


@router.post("/room-types", response_model=RoomTypeSchema, status_code=status.HTTP_201_CREATED)
async def create_room_type(
    room_type: RoomTypeCreate,
    db: Session = Depends(get_db)
):
    """Create a new room type."""
    existing = db.query(RoomTypeModel).filter_by(name=room_type.name).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Room type {room_type.name} already exists"
        )

    db_room_type = RoomTypeModel(**room_type.model_dump())
    db.add(db_room_type)
    db.commit()
    db.refresh(db_room_type)

    return db_room_type


@router.get("/room-types", response_model=List[RoomTypeSchema])
async def list_room_types(
    is_active: Optional[bool] = Query(None, description="Filter by active flag"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    """List room types."""
    query = db.query(RoomTypeModel)

    if is_active is not None:
        query = query.filter_by(is_active=is_active)

    return query.order_by(RoomTypeModel.name).offset(skip).limit(limit).all()


@router.get("/room-types/{room_type_id}", response_model=RoomTypeSchema)
async def get_room_type(
    room_type_id: str,
    db: Session = Depends(get_db)
):
    """Get a specific room type by ID."""
    return _get_room_type_or_404(room_type_id, db)


@router.put("/room-types/{room_type_id}", response_model=RoomTypeSchema)
async def update_room_type(
    room_type_id: str,
    room_type_update: RoomTypeUpdate,
    db: Session = Depends(get_db)
):
    """Update a room type."""
    room_type = _get_room_type_or_404(room_type_id, db)

    update_data = room_type_update.model_dump(exclude_unset=True)
    if "name" in update_data and update_data["name"] != room_type.name:
        clash = db.query(RoomTypeModel).filter_by(name=update_data["name"]).first()
        if clash:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Room type {update_data['name']} already exists"
            )

    for field, value in update_data.items():
        setattr(room_type, field, value)

    db.commit()
    db.refresh(room_type)

    return room_type


@router.delete("/room-types/{room_type_id}", status_code=status.HTTP_200_OK)
async def delete_room_type(
    room_type_id: str,
    db: Session = Depends(get_db)
):
    """Delete a room type that no room uses."""
    room_type = _get_room_type_or_404(room_type_id, db)

    if db.query(RoomModel).filter_by(room_type_id=room_type_id).count():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Room type is still assigned to rooms"
        )

    db.delete(room_type)
    db.commit()

    return {"message": "Room type deleted successfully"}
