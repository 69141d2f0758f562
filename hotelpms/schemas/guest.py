"""Guest Pydantic schemas."""
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from datetime import datetime
from hotelpms.schemas.common import reject_explicit_nulls


class GuestCreate(BaseModel):
    """Schema for creating a guest."""
    full_name: str = Field(..., min_length=1, description="Guest full name")
    email: Optional[str] = Field(None, pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$", description="E-mail address")
    phone: str = Field(..., min_length=3, description="Phone number")
    nationality: Optional[str] = Field(None, description="Nationality")
    vip: bool = Field(default=False)
    notes: Optional[str] = None


class GuestUpdate(BaseModel):
    """Schema for updating a guest."""
    full_name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    phone: Optional[str] = Field(None, min_length=3)
    nationality: Optional[str] = None
    vip: Optional[bool] = None
    blacklisted: Optional[bool] = None
    blacklist_reason: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_required_columns(self):
        reject_explicit_nulls(self, ("full_name", "phone", "vip", "blacklisted"))
        return self


class GuestBlacklist(BaseModel):
    """Schema for adding a guest to or removing one from the blacklist."""
    blacklisted: bool
    reason: Optional[str] = Field(None, description="Required when blacklisting")

    @model_validator(mode="after")
    def check_reason(self):
        if self.blacklisted and not (self.reason or "").strip():
            raise ValueError("A reason is required when blacklisting a guest")
        return self


class Guest(BaseModel):
    """Schema for guest response."""
    id: str
    full_name: str
    email: Optional[str]
    phone: str
    nationality: Optional[str]
    vip: bool
    blacklisted: bool
    blacklist_reason: Optional[str]
    notes: Optional[str]
    total_stays: int
    total_spent: float
    average_stay_length: float
    last_stay: Optional[datetime]
    favorite_room_type_id: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class GuestList(BaseModel):
    """Schema for list of guests."""
    guests: List[Guest]
    total: int
