"""Custom price API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from hotelpms.db.session import get_db
from hotelpms.db.models import CustomPrice as CustomPriceModel, RoomType as RoomTypeModel
from hotelpms.schemas.custom_price import CustomPriceCreate, CustomPrice as CustomPriceSchema

router = APIRouter()


@router.post("/custom-prices", response_model=CustomPriceSchema, status_code=status.HTTP_201_CREATED)
async def create_custom_price(
    custom_price: CustomPriceCreate,
    db: Session = Depends(get_db)
):
    """Create a promotional price for a room type."""
    room_type = db.query(RoomTypeModel).filter_by(id=custom_price.room_type_id).first()
    if not room_type:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Room type {custom_price.room_type_id} not found"
        )

    db_custom_price = CustomPriceModel(**custom_price.model_dump())
    db.add(db_custom_price)
    db.commit()
    db.refresh(db_custom_price)

    return db_custom_price


@router.get("/custom-prices", response_model=List[CustomPriceSchema])
async def list_custom_prices(
    room_type_id: Optional[str] = Query(None, description="Filter by room type"),
    active: Optional[bool] = Query(None, description="Filter by active flag"),
    db: Session = Depends(get_db)
):
    """List custom prices together with their room type."""
    query = db.query(CustomPriceModel).options(joinedload(CustomPriceModel.room_type))

    if room_type_id:
        query = query.filter_by(room_type_id=room_type_id)

    if active is not None:
        query = query.filter_by(is_active=active)

    return query.order_by(CustomPriceModel.start_date.desc()).all()


@router.delete("/custom-prices/{custom_price_id}", status_code=status.HTTP_200_OK)
async def delete_custom_price(
    custom_price_id: str,
    db: Session = Depends(get_db)
):
    """Delete a custom price."""
    custom_price = db.query(CustomPriceModel).filter_by(id=custom_price_id).first()
    if not custom_price:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Custom price {custom_price_id} not found"
        )

    db.delete(custom_price)
    db.commit()

    return {"message": "Custom price removed"}
