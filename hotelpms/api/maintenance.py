"""Maintenance ticket API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
import logging
from hotelpms.db.session import get_db
from hotelpms.db.models import (
    MaintenanceTicket as MaintenanceModel, MaintenanceStatus, MaintenancePriority, Room as RoomModel, RoomStatus,
)
from hotelpms.schemas.maintenance import (
    MaintenanceCreate, MaintenanceUpdate, MaintenanceAssign, MaintenanceTicket as MaintenanceSchema, MaintenanceStats,
)
from hotelpms.services.analytics import AnalyticsService
from hotelpms.services.audit import AuditService
from hotelpms.core.security import get_current_user

router = APIRouter()
analytics_service = AnalyticsService()
audit_service = AuditService()
logger = logging.getLogger(__name__)

OPEN_TICKET_STATUSES = (MaintenanceStatus.PENDING, MaintenanceStatus.IN_PROGRESS)


def _get_ticket_or_404(ticket_id: str, db: Session) -> MaintenanceModel:
    ticket = db.query(MaintenanceModel).filter_by(id=ticket_id).first()
    if not ticket:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Maintenance ticket {ticket_id} not found"
        )
    return ticket


@router.post("/maintenance", response_model=MaintenanceSchema, status_code=status.HTTP_201_CREATED)
async def create_maintenance_ticket(
    ticket: MaintenanceCreate,
    db: Session = Depends(get_db),
    user: str = Depends(get_current_user)
):
    """Report a maintenance issue; an available room is taken out of service."""
    room = db.query(RoomModel).filter_by(id=ticket.room_id).first()
    if not room:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Room {ticket.room_id} not found"
        )

    data = ticket.model_dump()
    data["reported_by"] = data.get("reported_by") or user
    db_ticket = MaintenanceModel(**data)
    db.add(db_ticket)

    if room.status == RoomStatus.AVAILABLE:
        room.status = RoomStatus.MAINTENANCE

    db.commit()
    db.refresh(db_ticket)

    logger.info("Maintenance ticket %s opened for room %s", db_ticket.id, room.room_number)
    return db_ticket


@router.get("/maintenance", response_model=List[MaintenanceSchema])
async def list_maintenance_tickets(
    room_id: Optional[str] = Query(None),
    ticket_status: Optional[MaintenanceStatus] = Query(None, alias="status"),
    priority: Optional[MaintenancePriority] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    """List maintenance tickets with optional filters."""
    query = db.query(MaintenanceModel)

    if room_id:
        query = query.filter_by(room_id=room_id)
    if ticket_status:
        query = query.filter(MaintenanceModel.status == ticket_status)
    if priority:
        query = query.filter(MaintenanceModel.priority == priority)

    return query.order_by(MaintenanceModel.reported_date.desc()).offset(skip).limit(limit).all()


@router.get("/maintenance/stats", response_model=MaintenanceStats)
async def get_maintenance_stats(
    db: Session = Depends(get_db)
):
    """Ticket counts per status and cost figures."""
    return analytics_service.maintenance_stats(db)


@router.get("/maintenance/{ticket_id}", response_model=MaintenanceSchema)
async def get_maintenance_ticket(
    ticket_id: str,
    db: Session = Depends(get_db)
):
    """Get a specific maintenance ticket by ID."""
    return _get_ticket_or_404(ticket_id, db)


@router.put("/maintenance/{ticket_id}", response_model=MaintenanceSchema)
async def update_maintenance_ticket(
    ticket_id: str,
    ticket_update: MaintenanceUpdate,
    db: Session = Depends(get_db),
    user: str = Depends(get_current_user)
):
    """Update a ticket; resolving it returns the room to service."""
    ticket = _get_ticket_or_404(ticket_id, db)
    previous_status = ticket.status

    update_data = ticket_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(ticket, field, value)

    newly_resolved = ticket.status == MaintenanceStatus.RESOLVED and previous_status != MaintenanceStatus.RESOLVED
    if newly_resolved:
        ticket.resolved_date = datetime.utcnow()
        room = db.query(RoomModel).filter_by(id=ticket.room_id).first()
        if room and room.status == RoomStatus.MAINTENANCE:
            room.status = RoomStatus.AVAILABLE

    if ticket.status != previous_status:
        audit_service.log_action(
            action=ticket.status.value,
            entity="maintenance",
            entity_id=ticket.id,
            user=user,
            before_state={"status": previous_status.value},
            after_state={"status": ticket.status.value},
            db=db
        )

    db.commit()
    db.refresh(ticket)

    if newly_resolved:
        logger.info("Maintenance ticket %s resolved", ticket.id)
    return ticket


@router.patch("/maintenance/{ticket_id}/assign", response_model=MaintenanceSchema)
async def assign_maintenance_ticket(
    assignment: MaintenanceAssign,
    ticket_id: str,
    db: Session = Depends(get_db),
    user: str = Depends(get_current_user)
):
    """Assign an open ticket to a technician and start work on it."""
    ticket = _get_ticket_or_404(ticket_id, db)
    if ticket.status not in OPEN_TICKET_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot assign a ticket with status: {ticket.status.value}"
        )

    previous_status = ticket.status
    ticket.assigned_to = assignment.assigned_to
    ticket.status = MaintenanceStatus.IN_PROGRESS

    audit_service.log_action(
        action="assign",
        entity="maintenance",
        entity_id=ticket.id,
        user=user,
        before_state={"status": previous_status.value},
        after_state={"status": ticket.status.value, "assigned_to": ticket.assigned_to},
        db=db
    )
    db.commit()
    db.refresh(ticket)

    return ticket


@router.delete("/maintenance/{ticket_id}", status_code=status.HTTP_200_OK)
async def delete_maintenance_ticket(
    ticket_id: str,
    db: Session = Depends(get_db),
    user: str = Depends(get_current_user)
):
    """Delete a ticket; a room held only by it goes back into service."""
    ticket = _get_ticket_or_404(ticket_id, db)
    room_id = ticket.room_id

    db.delete(ticket)
    db.flush()

    room = db.query(RoomModel).filter_by(id=room_id).first()
    other_open = db.query(MaintenanceModel).filter(
        MaintenanceModel.room_id == room_id,
        MaintenanceModel.status.in_(OPEN_TICKET_STATUSES),
    ).count()
    if room and room.status == RoomStatus.MAINTENANCE and not other_open:
        room.status = RoomStatus.AVAILABLE

    audit_service.log_action(
        action="delete",
        entity="maintenance",
        entity_id=ticket_id,
        user=user,
        db=db
    )
    db.commit()

    logger.info("Maintenance ticket %s deleted", ticket_id)
    return {"message": "Maintenance ticket deleted successfully"}
