"""Booking workflow service."""
from datetime import date, datetime
from typing import List, Optional
import logging
import random
from sqlalchemy import select
from sqlalchemy.orm import Session
from hotelpms.core.config import settings
from hotelpms.core.errors import NotFoundError, ConflictError
from hotelpms.db.models import (
    Booking, BookingStatus, Guest, Invoice, InvoiceStatus, Room, RoomStatus, RoomType,
    INACTIVE_BOOKING_STATUSES,
)
from hotelpms.schemas.booking import BookingCreate, BookingUpdate
from hotelpms.services.audit import AuditService
from hotelpms.services.pricing import RateResolver

logger = logging.getLogger(__name__)

MODIFIABLE_BOOKING_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN)


def _snapshot(booking: Booking) -> dict:
    return {
        "status": booking.status.value if booking.status else None,
        "room_id": booking.room_id,
        "check_in": booking.check_in,
        "check_out": booking.check_out,
        "total_amount": booking.total_amount,
    }


class BookingService:
    """Creates bookings and drives their status transitions."""

    def __init__(self, rate_resolver: Optional[RateResolver] = None, audit_service: Optional[AuditService] = None):
        self.rate_resolver = rate_resolver or RateResolver()
        self.audit_service = audit_service or AuditService()

    def get_booking(self, booking_id: str, db: Session) -> Booking:
        booking = db.query(Booking).filter_by(id=booking_id).first()
        if not booking:
            raise NotFoundError("Booking", booking_id)
        return booking

    def find_conflict(
        self,
        room_id: str,
        check_in: date,
        check_out: date,
        db: Session,
        exclude_booking_id: Optional[str] = None
    ) -> Optional[Booking]:
        """Return an active booking of the room overlapping [check_in, check_out), if any."""
        query = db.query(Booking).filter(
            Booking.room_id == room_id,
            Booking.check_in < check_out,
            Booking.check_out > check_in,
            Booking.status.notin_(INACTIVE_BOOKING_STATUSES),
        )
        if exclude_booking_id:
            query = query.filter(Booking.id != exclude_booking_id)
        return query.first()

    def generate_confirmation_number(self, db: Session) -> str:
        """Generate a confirmation number not used by any booking."""
        while True:
            candidate = f"{settings.booking_prefix}-{datetime.utcnow():%y%m%d}{random.randint(0, 999999):06d}"
            if not db.query(Booking).filter_by(confirmation_number=candidate).count():
                return candidate

    def create_booking(self, data: BookingCreate, db: Session, user: Optional[str] = None) -> Booking:
        """
        Create a booking.

        When no total amount is supplied the stay is priced night by night
        with the rate resolver (or the room type's group price for group
        bookings).

        Raises:
            NotFoundError: guest or room missing
            ConflictError: guest blacklisted or room already booked for the dates
        """
        guest = db.query(Guest).filter_by(id=data.guest_id).first()
        if not guest:
            raise NotFoundError("Guest", data.guest_id)
        if guest.blacklisted:
            raise ConflictError(f"Guest {guest.id} is blacklisted")

        room = self.rate_resolver.load_room(data.room_id, db)

        if self.find_conflict(room.id, data.check_in, data.check_out, db):
            raise ConflictError("Room is not available for the selected dates")

        group_id = data.group_id if data.is_group_booking else None
        if data.total_amount is not None:
            total_amount = data.total_amount
            nightly_rates = []
        else:
            quote = self.rate_resolver.quote(
                room.id,
                data.check_in,
                data.check_out,
                condition=data.price_condition,
                db=db,
                group_id=group_id
            )
            total_amount = quote.total
            nightly_rates = [n.model_dump(mode="json") for n in quote.nights]

        tax_rate = data.tax_rate if data.tax_rate is not None else settings.default_tax_rate
        taxable = max(total_amount - data.discount, 0.0)
        tax_amount = round(taxable * tax_rate / 100, 2)

        booking = Booking(
            confirmation_number=self.generate_confirmation_number(db),
            guest_id=guest.id,
            room_id=room.id,
            check_in=data.check_in,
            check_out=data.check_out,
            number_of_guests=data.number_of_guests,
            booking_source=data.booking_source,
            payment_status=data.payment_status,
            total_amount=total_amount,
            nightly_rates=nightly_rates,
            price_condition=data.price_condition,
            discount=data.discount,
            tax_rate=tax_rate,
            tax_amount=tax_amount,
            is_group_booking=data.is_group_booking,
            group_id=data.group_id,
            special_requests=data.special_requests,
            status=BookingStatus.CONFIRMED,
        )
        db.add(booking)

        room.status = RoomStatus.RESERVED
        guest.record_stay((data.check_out - data.check_in).days, total_amount, room.room_type_id)

        db.flush()
        self.audit_service.log_action(
            action="create",
            entity="booking",
            entity_id=booking.id,
            user=user,
            after_state=_snapshot(booking),
            metadata={"confirmation_number": booking.confirmation_number},
            db=db
        )
        db.commit()
        db.refresh(booking)

        logger.info("Booking %s created for room %s (%s)", booking.confirmation_number, room.room_number, total_amount)
        return booking

    def update_booking(
        self,
        booking_id: str,
        data: BookingUpdate,
        db: Session,
        user: Optional[str] = None
    ) -> Booking:
        """
        Modify a confirmed or checked-in booking.

        Moving the stay (room or dates) re-checks availability against every
        other active booking and, unless a total amount is supplied, re-prices
        it night by night. A room change releases the old room.

        Raises:
            NotFoundError: booking or new room missing
            ConflictError: booking closed, dates out of order, or new stay unavailable
        """
        booking = self.get_booking(booking_id, db)
        if booking.status not in MODIFIABLE_BOOKING_STATUSES:
            raise ConflictError(f"Cannot modify a booking with status: {booking.status.value}")

        changes = data.model_dump(exclude_unset=True)
        before = _snapshot(booking)

        room_id = changes.get("room_id", booking.room_id)
        check_in = changes.get("check_in", booking.check_in)
        check_out = changes.get("check_out", booking.check_out)
        if check_in >= check_out:
            raise ConflictError("check_in must be before check_out")

        room_changed = room_id != booking.room_id
        stay_changed = room_changed or check_in != booking.check_in or check_out != booking.check_out

        new_room = self.rate_resolver.load_room(room_id, db)
        if stay_changed and self.find_conflict(room_id, check_in, check_out, db, exclude_booking_id=booking.id):
            raise ConflictError("Room is not available for the selected dates")

        condition = changes.get("price_condition", booking.price_condition)
        if "total_amount" in changes:
            booking.total_amount = changes["total_amount"]
            booking.nightly_rates = []
        elif stay_changed or "price_condition" in changes:
            quote = self.rate_resolver.quote(
                room_id,
                check_in,
                check_out,
                condition=condition,
                db=db,
                group_id=booking.group_id if booking.is_group_booking else None
            )
            booking.total_amount = quote.total
            booking.nightly_rates = [n.model_dump(mode="json") for n in quote.nights]

        for field in ("number_of_guests", "booking_source", "payment_status", "discount",
                      "tax_rate", "special_requests", "price_condition"):
            if field in changes:
                setattr(booking, field, changes[field])

        if room_changed:
            old_room = db.query(Room).filter_by(id=booking.room_id).first()
            if old_room:
                old_room.status = RoomStatus.AVAILABLE
            new_room.status = (
                RoomStatus.OCCUPIED if booking.status == BookingStatus.CHECKED_IN else RoomStatus.RESERVED
            )

        booking.room_id = room_id
        booking.check_in = check_in
        booking.check_out = check_out

        taxable = max(booking.total_amount - booking.discount, 0.0)
        booking.tax_amount = round(taxable * booking.tax_rate / 100, 2)

        self.audit_service.log_action(
            action="update",
            entity="booking",
            entity_id=booking.id,
            user=user,
            before_state=before,
            after_state=_snapshot(booking),
            metadata={"fields": sorted(changes)},
            db=db
        )
        db.commit()
        db.refresh(booking)

        logger.info("Booking %s modified (%s)", booking.confirmation_number, ", ".join(sorted(changes)) or "no changes")
        return booking

    def _transition(
        self,
        booking: Booking,
        action: str,
        new_status: BookingStatus,
        room_status: RoomStatus,
        db: Session,
        user: Optional[str]
    ) -> Booking:
        before = _snapshot(booking)
        booking.status = new_status
        room = db.query(Room).filter_by(id=booking.room_id).first()
        if room:
            room.status = room_status

        self.audit_service.log_action(
            action=action,
            entity="booking",
            entity_id=booking.id,
            user=user,
            before_state=before,
            after_state=_snapshot(booking),
            db=db
        )
        db.commit()
        db.refresh(booking)

        logger.info("Booking %s: %s -> %s", booking.confirmation_number, before["status"], new_status.value)
        return booking

    def cancel(self, booking_id: str, reason: Optional[str], db: Session, user: Optional[str] = None) -> Booking:
        """Cancel a confirmed booking and release the room."""
        booking = self.get_booking(booking_id, db)
        if booking.status == BookingStatus.CANCELLED:
            raise ConflictError("Booking is already cancelled")
        if booking.status != BookingStatus.CONFIRMED:
            raise ConflictError(f"Cannot cancel a booking with status: {booking.status.value}")

        booking.cancellation_reason = reason
        booking.cancellation_date = datetime.utcnow()
        return self._transition(booking, "cancel", BookingStatus.CANCELLED, RoomStatus.AVAILABLE, db, user)

    def check_in(self, booking_id: str, db: Session, user: Optional[str] = None) -> Booking:
        """Check in a confirmed booking."""
        booking = self.get_booking(booking_id, db)
        if booking.status != BookingStatus.CONFIRMED:
            raise ConflictError(f"Cannot check in a booking with status: {booking.status.value}")

        booking.actual_check_in = datetime.utcnow()
        return self._transition(booking, "check_in", BookingStatus.CHECKED_IN, RoomStatus.OCCUPIED, db, user)

    def check_out(self, booking_id: str, db: Session, user: Optional[str] = None) -> Booking:
        """Check out a checked-in booking whose invoices are settled."""
        booking = self.get_booking(booking_id, db)
        if booking.status != BookingStatus.CHECKED_IN:
            raise ConflictError(f"Cannot check out a booking with status: {booking.status.value}")

        unpaid_invoices = db.query(Invoice).filter(
            Invoice.booking_id == booking.id,
            Invoice.status.notin_((InvoiceStatus.PAID, InvoiceStatus.CANCELLED)),
        ).count()
        if unpaid_invoices > 0:
            raise ConflictError("Cannot check out with unpaid invoices")

        booking.actual_check_out = datetime.utcnow()
        return self._transition(booking, "check_out", BookingStatus.CHECKED_OUT, RoomStatus.CLEANING, db, user)

    def available_rooms(
        self,
        check_in: date,
        check_out: date,
        db: Session,
        room_type_id: Optional[str] = None,
        capacity: Optional[int] = None
    ) -> List[Room]:
        """Rooms free for the whole stay and ready to be sold."""
        booked_room_ids = select(Booking.room_id).where(
            Booking.check_in < check_out,
            Booking.check_out > check_in,
            Booking.status.notin_(INACTIVE_BOOKING_STATUSES),
        )

        query = db.query(Room).filter(
            Room.id.notin_(booked_room_ids),
            Room.status.in_((RoomStatus.AVAILABLE, RoomStatus.CLEANING)),
            Room.is_active.is_(True),
        )

        if room_type_id:
            query = query.filter(Room.room_type_id == room_type_id)

        if capacity:
            query = query.join(RoomType).filter(RoomType.max_occupancy >= capacity)

        return query.order_by(Room.room_number).all()
