"""Maintenance ticket Pydantic schemas."""
from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime, date
from hotelpms.db.models import IssueType, MaintenancePriority, MaintenanceStatus
from hotelpms.schemas.common import reject_explicit_nulls


class MaintenanceCreate(BaseModel):
    """Schema for reporting a maintenance issue."""
    room_id: str = Field(..., description="Affected room")
    issue_type: IssueType
    description: str = Field(..., min_length=1)
    priority: MaintenancePriority = Field(default=MaintenancePriority.MEDIUM)
    reported_by: Optional[str] = Field(None, description="Reporter; defaults to the current user")
    assigned_to: Optional[str] = None
    scheduled_date: Optional[date] = None


class MaintenanceUpdate(BaseModel):
    """Schema for updating a maintenance ticket."""
    description: Optional[str] = Field(None, min_length=1)
    priority: Optional[MaintenancePriority] = None
    status: Optional[MaintenanceStatus] = None
    assigned_to: Optional[str] = None
    cost: Optional[float] = Field(None, ge=0)
    resolution: Optional[str] = None
    scheduled_date: Optional[date] = None

    @model_validator(mode="after")
    def check_required_columns(self):
        reject_explicit_nulls(self, ("description", "priority", "status", "cost"))
        return self


class MaintenanceAssign(BaseModel):
    """Schema for assigning a ticket to a technician."""
    assigned_to: str = Field(..., min_length=1, description="Technician taking the ticket")


class MaintenanceTicket(BaseModel):
    """Schema for maintenance ticket response."""
    id: str
    room_id: str
    issue_type: IssueType
    description: str
    priority: MaintenancePriority
    status: MaintenanceStatus
    reported_by: str
    assigned_to: Optional[str]
    cost: float
    resolution: Optional[str]
    reported_date: datetime
    scheduled_date: Optional[date]
    resolved_date: Optional[datetime]

    class Config:
        from_attributes = True


class MaintenanceStats(BaseModel):
    """Ticket counts per status and cost figures."""
    total: int
    pending: int
    in_progress: int
    resolved: int
    cancelled: int
    total_cost: float
    avg_cost: float
