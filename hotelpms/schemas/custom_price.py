"""Custom (promotional) price Pydantic schemas."""
from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime, date
from hotelpms.db.models import PriceCondition
from hotelpms.schemas.room import RoomType


class CustomPriceCreate(BaseModel):
    """Schema for creating a custom price."""
    room_type_id: str = Field(..., description="Room type the price applies to")
    title: str = Field(..., min_length=1, description="Promotion title")
    description: Optional[str] = Field(None, description="Promotion description")
    start_date: date = Field(..., description="First night the price applies (inclusive)")
    end_date: date = Field(..., description="Last night the price applies (inclusive)")
    price: float = Field(..., ge=0, description="Nightly price")
    condition: PriceCondition = Field(default=PriceCondition.NONE, description="Condition tag")
    is_active: bool = Field(default=True)

    @model_validator(mode="after")
    def check_window(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class CustomPrice(BaseModel):
    """Schema for custom price response."""
    id: str
    room_type_id: str
    title: str
    description: Optional[str]
    start_date: date
    end_date: date
    price: float
    condition: PriceCondition
    is_active: bool
    created_at: datetime
    room_type: Optional[RoomType] = None

    class Config:
        from_attributes = True
