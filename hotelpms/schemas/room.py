"""Room and room type Pydantic schemas."""
from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Dict
from datetime import datetime, date
from hotelpms.db.models import RoomStatus
from hotelpms.schemas.common import reject_explicit_nulls


class RoomTypeCreate(BaseModel):
    """Schema for creating a room type."""
    name: str = Field(..., min_length=1, description="Unique room type name")
    description: Optional[str] = Field(None, description="Room type description")
    base_price: float = Field(..., ge=0, description="Base nightly price")
    currency: str = Field(default="USD", min_length=3, max_length=3, description="ISO currency code")
    capacity_adults: int = Field(default=1, ge=1, description="Adult capacity")
    capacity_children: int = Field(default=0, ge=0, description="Child capacity")
    max_occupancy: int = Field(default=1, ge=1, description="Maximum occupancy")
    size: Optional[float] = Field(None, gt=0, description="Room size in square metres")
    bed_configuration: Optional[str] = Field(None, description="Bed configuration")
    amenities: List[str] = Field(default_factory=list, description="Amenities")
    group_prices: Dict[str, float] = Field(default_factory=dict, description="Nightly price per group id")
    is_active: bool = Field(default=True, description="Whether the room type can be sold")


class RoomTypeUpdate(BaseModel):
    """Schema for updating a room type."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    base_price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    capacity_adults: Optional[int] = Field(None, ge=1)
    capacity_children: Optional[int] = Field(None, ge=0)
    max_occupancy: Optional[int] = Field(None, ge=1)
    size: Optional[float] = Field(None, gt=0)
    bed_configuration: Optional[str] = None
    amenities: Optional[List[str]] = None
    group_prices: Optional[Dict[str, float]] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def check_required_columns(self):
        reject_explicit_nulls(self, (
            "name", "base_price", "currency", "capacity_adults", "capacity_children",
            "max_occupancy", "amenities", "group_prices", "is_active",
        ))
        return self


class RoomType(BaseModel):
    """Schema for room type response."""
    id: str
    name: str
    description: Optional[str]
    base_price: float
    currency: str
    capacity_adults: int
    capacity_children: int
    max_occupancy: int
    size: Optional[float]
    bed_configuration: Optional[str]
    amenities: List[str]
    group_prices: Dict[str, float]
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class RoomCreate(BaseModel):
    """Schema for creating a room."""
    room_number: str = Field(..., min_length=1, description="Unique room number")
    room_type_id: str = Field(..., description="Room type ID")
    floor: int = Field(..., description="Floor number")
    status: RoomStatus = Field(default=RoomStatus.AVAILABLE, description="Housekeeping status")
    price_override: Optional[float] = Field(None, ge=0, description="Nightly price replacing the room type base price")
    amenities: List[str] = Field(default_factory=list, description="Room-specific amenities")
    notes: Optional[str] = Field(None, description="Free text notes")
    is_active: bool = Field(default=True)


class RoomUpdate(BaseModel):
    """Schema for updating a room."""
    room_number: Optional[str] = Field(None, min_length=1)
    room_type_id: Optional[str] = None
    floor: Optional[int] = None
    price_override: Optional[float] = Field(None, ge=0)
    amenities: Optional[List[str]] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def check_required_columns(self):
        # price_override may be cleared with null
        reject_explicit_nulls(self, ("room_number", "room_type_id", "floor", "amenities", "is_active"))
        return self


class RoomStatusUpdate(BaseModel):
    """Schema for changing a room's housekeeping status."""
    status: RoomStatus


class Room(BaseModel):
    """Schema for room response."""
    id: str
    room_number: str
    room_type_id: str
    floor: int
    status: RoomStatus
    price_override: Optional[float]
    amenities: List[str]
    notes: Optional[str]
    is_active: bool
    created_at: datetime
    room_type: Optional[RoomType] = None

    class Config:
        from_attributes = True


class ResolvedRate(BaseModel):
    """Outcome of a single price resolution."""
    price: float = Field(..., ge=0)
    source: str
    custom_price_id: Optional[str] = None


class PriceResolution(BaseModel):
    """Effective nightly price for a room on a date."""
    room_id: str
    date: date
    price: float = Field(..., ge=0)
    source: str = Field(..., description="custom_price, override or base")
    custom_price_id: Optional[str] = None


class NightlyRate(BaseModel):
    """Price charged for a single night."""
    date: date
    price: float = Field(..., ge=0)
    source: str


class PriceQuote(BaseModel):
    """Per-night breakdown for a stay."""
    room_id: str
    check_in: date
    check_out: date
    nights: List[NightlyRate]
    total: float = Field(..., ge=0)
