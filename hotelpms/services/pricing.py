"""Nightly rate resolution for rooms."""
from datetime import date, datetime, timedelta
from typing import List, Optional, Union
import logging
from sqlalchemy.orm import Session
from hotelpms.core.errors import NotFoundError
from hotelpms.db.models import Room, RoomType, CustomPrice, PriceCondition
from hotelpms.schemas.room import NightlyRate, PriceQuote, ResolvedRate

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]

SOURCE_CUSTOM_PRICE = "custom_price"
SOURCE_OVERRIDE = "override"
SOURCE_BASE = "base"
SOURCE_GROUP = "group"


def normalize_date(value: DateLike) -> date:
    """Truncate a timestamp to its calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


class RateResolver:
    """
    Resolves the nightly price of a room.

    Priority, highest first: an active custom price of the room's type whose
    inclusive window contains the date, the room's price override, the room
    type's base price. Among overlapping custom prices the one with the latest
    start date wins; equal start dates fall back to the lowest record id.
    Resolution never writes.
    """

    def load_room(self, room_id: str, db: Session) -> Room:
        """Load a room together with its room type."""
        room = db.query(Room).filter_by(id=room_id).first()
        if not room:
            raise NotFoundError("Room", room_id)
        if room.room_type is None:
            raise NotFoundError("RoomType", room.room_type_id)
        return room

    def base_price(self, room: Room) -> ResolvedRate:
        """Price before promotions: override if set, else the room type base price."""
        if room.price_override is not None:
            return ResolvedRate(price=room.price_override, source=SOURCE_OVERRIDE)
        return ResolvedRate(price=room.room_type.base_price, source=SOURCE_BASE)

    def find_custom_price(
        self,
        room_type_id: str,
        target_date: date,
        condition: Optional[PriceCondition],
        db: Session
    ) -> Optional[CustomPrice]:
        """Return the winning active custom price for a date, if any."""
        query = db.query(CustomPrice).filter(
            CustomPrice.room_type_id == room_type_id,
            CustomPrice.is_active.is_(True),
            CustomPrice.start_date <= target_date,
            CustomPrice.end_date >= target_date,
        )

        if condition is not None:
            query = query.filter(CustomPrice.condition == condition)

        return query.order_by(CustomPrice.start_date.desc(), CustomPrice.id.asc()).first()

    def resolve_for_room(
        self,
        room: Room,
        target_date: DateLike,
        condition: Optional[PriceCondition],
        db: Session
    ) -> ResolvedRate:
        """Resolve the price for an already loaded room."""
        night = normalize_date(target_date)
        custom_price = self.find_custom_price(room.room_type_id, night, condition, db)
        if custom_price is not None:
            logger.debug("Custom price %s applies to room %s on %s", custom_price.id, room.id, night)
            return ResolvedRate(
                price=custom_price.price,
                source=SOURCE_CUSTOM_PRICE,
                custom_price_id=custom_price.id
            )
        logger.debug("No custom price for room %s on %s, using base rate", room.id, night)
        return self.base_price(room)

    def resolve(
        self,
        room_id: str,
        target_date: DateLike,
        condition: Optional[PriceCondition] = None,
        db: Session = None
    ) -> ResolvedRate:
        """
        Resolve the nightly price of a room on a date.

        Args:
            room_id: Room ID
            target_date: Night to price; datetimes are truncated to their date
            condition: Only consider custom prices carrying this condition tag
            db: Database session

        Returns:
            ResolvedRate with the price and where it came from

        Raises:
            NotFoundError: if the room or its room type does not exist
        """
        room = self.load_room(room_id, db)
        return self.resolve_for_room(room, target_date, condition, db)

    def resolve_price(
        self,
        room_id: str,
        target_date: DateLike,
        condition: Optional[PriceCondition] = None,
        db: Session = None
    ) -> float:
        """Resolve the nightly price of a room on a date."""
        return self.resolve(room_id, target_date, condition, db).price

    def resolve_group_price(self, room_type: RoomType, group_id: Optional[str]) -> Optional[float]:
        """Return the room type's negotiated price for a group, if one exists."""
        if not group_id:
            return None
        price = (room_type.group_prices or {}).get(group_id)
        return float(price) if price is not None else None

    def quote(
        self,
        room_id: str,
        check_in: DateLike,
        check_out: DateLike,
        condition: Optional[PriceCondition] = None,
        db: Session = None,
        group_id: Optional[str] = None
    ) -> PriceQuote:
        """
        Price every night of a stay.

        Nights run from check-in (inclusive) to check-out (exclusive). A group
        price negotiated for `group_id` replaces per-night resolution.
        """
        start = normalize_date(check_in)
        end = normalize_date(check_out)
        room = self.load_room(room_id, db)

        group_price = self.resolve_group_price(room.room_type, group_id)

        nights: List[NightlyRate] = []
        night = start
        while night < end:
            if group_price is not None:
                rate = ResolvedRate(price=group_price, source=SOURCE_GROUP)
            else:
                rate = self.resolve_for_room(room, night, condition, db)
            nights.append(NightlyRate(date=night, price=rate.price, source=rate.source))
            night += timedelta(days=1)

        total = round(sum(n.price for n in nights), 2)
        return PriceQuote(
            room_id=room.id,
            check_in=start,
            check_out=end,
            nights=nights,
            total=total
        )
