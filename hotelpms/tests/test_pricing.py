"""Tests for nightly rate resolution."""
import pytest
from datetime import date, datetime
from hotelpms.core.errors import NotFoundError
from hotelpms.db.models import CustomPrice, PriceCondition, Room
from hotelpms.services.pricing import RateResolver, SOURCE_BASE, SOURCE_OVERRIDE, SOURCE_CUSTOM_PRICE, SOURCE_GROUP


def add_custom_price(db_session, room_type, start, end, price, **kwargs):
    cp = CustomPrice(
        room_type_id=room_type.id,
        title=kwargs.pop("title", f"Promo {price}"),
        start_date=start,
        end_date=end,
        price=price,
        **kwargs
    )
    db_session.add(cp)
    db_session.commit()
    db_session.refresh(cp)
    return cp


def test_base_price_when_nothing_else_applies(db_session, room):
    """Room type base price is the fallback."""
    rate = RateResolver().resolve(room.id, date(2024, 6, 1), db=db_session)
    assert rate.price == 100.0
    assert rate.source == SOURCE_BASE
    assert rate.custom_price_id is None


def test_override_beats_base_price(db_session, room):
    """Room price override replaces the base price."""
    room.price_override = 120.0
    db_session.commit()

    rate = RateResolver().resolve(room.id, date(2024, 6, 1), db=db_session)
    assert rate.price == 120.0
    assert rate.source == SOURCE_OVERRIDE


def test_zero_override_is_honoured(db_session, room):
    """An override of zero is a real price, not a missing one."""
    room.price_override = 0.0
    db_session.commit()

    assert RateResolver().resolve_price(room.id, date(2024, 6, 1), db=db_session) == 0.0


def test_custom_price_beats_override(db_session, room_type, room):
    """An applicable custom price wins over the room override."""
    room.price_override = 120.0
    db_session.commit()
    cp = add_custom_price(db_session, room_type, date(2024, 6, 1), date(2024, 6, 10), 80.0)

    rate = RateResolver().resolve(room.id, date(2024, 6, 5), db=db_session)
    assert rate.price == 80.0
    assert rate.source == SOURCE_CUSTOM_PRICE
    assert rate.custom_price_id == cp.id


def test_overlapping_custom_prices_latest_start_wins(db_session, room_type, room):
    """Base 100, A 06-01..06-10 at 80, B 06-05..06-07 at 60."""
    add_custom_price(db_session, room_type, date(2024, 6, 1), date(2024, 6, 10), 80.0, title="A")
    add_custom_price(db_session, room_type, date(2024, 6, 5), date(2024, 6, 7), 60.0, title="B")
    resolver = RateResolver()

    assert resolver.resolve_price(room.id, date(2024, 6, 6), db=db_session) == 60.0
    assert resolver.resolve_price(room.id, date(2024, 6, 2), db=db_session) == 80.0
    assert resolver.resolve_price(room.id, date(2024, 6, 20), db=db_session) == 100.0


def test_equal_start_dates_lowest_id_wins(db_session, room_type, room):
    """Ties on start date are broken by record id."""
    first = CustomPrice(id="a-price", room_type_id=room_type.id, title="A",
                        start_date=date(2024, 6, 1), end_date=date(2024, 6, 5), price=90.0)
    second = CustomPrice(id="b-price", room_type_id=room_type.id, title="B",
                         start_date=date(2024, 6, 1), end_date=date(2024, 6, 5), price=70.0)
    db_session.add_all([second, first])
    db_session.commit()

    rate = RateResolver().resolve(room.id, date(2024, 6, 3), db=db_session)
    assert rate.custom_price_id == "a-price"
    assert rate.price == 90.0


def test_window_boundaries_are_inclusive(db_session, room_type, room):
    """First and last day of the window both apply."""
    add_custom_price(db_session, room_type, date(2024, 6, 1), date(2024, 6, 3), 75.0)
    resolver = RateResolver()

    assert resolver.resolve_price(room.id, date(2024, 6, 1), db=db_session) == 75.0
    assert resolver.resolve_price(room.id, date(2024, 6, 3), db=db_session) == 75.0
    assert resolver.resolve_price(room.id, date(2024, 5, 31), db=db_session) == 100.0
    assert resolver.resolve_price(room.id, date(2024, 6, 4), db=db_session) == 100.0


def test_single_day_window(db_session, room_type, room):
    """A window with start equal to end covers exactly that day."""
    add_custom_price(db_session, room_type, date(2024, 6, 1), date(2024, 6, 1), 50.0)

    assert RateResolver().resolve_price(room.id, date(2024, 6, 1), db=db_session) == 50.0


def test_inactive_custom_price_is_ignored(db_session, room_type, room):
    """Inactive promotions never apply."""
    add_custom_price(db_session, room_type, date(2024, 6, 1), date(2024, 6, 10), 80.0, is_active=False)

    rate = RateResolver().resolve(room.id, date(2024, 6, 5), db=db_session)
    assert rate.price == 100.0
    assert rate.source == SOURCE_BASE


def test_custom_price_of_other_room_type_is_ignored(db_session, room):
    """Promotions only apply to their own room type."""
    from hotelpms.db.models import RoomType
    other = RoomType(name="Suite", base_price=300.0)
    db_session.add(other)
    db_session.commit()
    add_custom_price(db_session, other, date(2024, 6, 1), date(2024, 6, 10), 10.0)

    assert RateResolver().resolve_price(room.id, date(2024, 6, 5), db=db_session) == 100.0


def test_condition_filter(db_session, room_type, room):
    """With a condition given, only custom prices carrying it are considered."""
    add_custom_price(db_session, room_type, date(2024, 6, 1), date(2024, 6, 10), 80.0)
    weekend = add_custom_price(db_session, room_type, date(2024, 6, 1), date(2024, 6, 10), 130.0,
                               condition=PriceCondition.WEEKEND_ONLY)
    resolver = RateResolver()

    rate = resolver.resolve(room.id, date(2024, 6, 8), PriceCondition.WEEKEND_ONLY, db_session)
    assert rate.custom_price_id == weekend.id
    assert rate.price == 130.0

    # No matching condition falls through to the base price
    assert resolver.resolve_price(room.id, date(2024, 6, 8), PriceCondition.HOLIDAY, db_session) == 100.0


def test_datetime_is_truncated_to_date(db_session, room_type, room):
    """Time of day does not matter."""
    add_custom_price(db_session, room_type, date(2024, 6, 10), date(2024, 6, 10), 55.0)

    price = RateResolver().resolve_price(room.id, datetime(2024, 6, 10, 23, 59), db=db_session)
    assert price == 55.0


def test_missing_room_raises_without_custom_price_lookup(db_session, monkeypatch):
    """An unknown room fails before any custom price query."""
    def fail(*args, **kwargs):
        raise AssertionError("custom prices must not be queried")

    monkeypatch.setattr(RateResolver, "find_custom_price", fail)

    with pytest.raises(NotFoundError) as exc_info:
        RateResolver().resolve("missing-room", date(2024, 6, 1), db=db_session)
    assert exc_info.value.resource == "Room"


def test_missing_room_type_raises(db_session, monkeypatch):
    """A room pointing at a deleted room type is reported as not found."""
    orphan = Room(room_number="999", room_type_id="gone", floor=9)
    db_session.add(orphan)
    db_session.commit()

    def fail(*args, **kwargs):
        raise AssertionError("custom prices must not be queried")

    monkeypatch.setattr(RateResolver, "find_custom_price", fail)

    with pytest.raises(NotFoundError) as exc_info:
        RateResolver().resolve(orphan.id, date(2024, 6, 1), db=db_session)
    assert exc_info.value.resource == "RoomType"


def test_resolution_does_not_write(db_session, room_type, room):
    """Resolving leaves the session clean."""
    add_custom_price(db_session, room_type, date(2024, 6, 1), date(2024, 6, 10), 80.0)

    RateResolver().resolve(room.id, date(2024, 6, 5), db=db_session)
    assert not db_session.new
    assert not db_session.dirty
    assert not db_session.deleted


def test_quote_prices_each_night(db_session, room_type, room):
    """Quote covers check-in up to, not including, check-out."""
    add_custom_price(db_session, room_type, date(2024, 6, 5), date(2024, 6, 7), 60.0)

    quote = RateResolver().quote(room.id, date(2024, 6, 4), date(2024, 6, 8), db=db_session)
    assert [n.date for n in quote.nights] == [
        date(2024, 6, 4), date(2024, 6, 5), date(2024, 6, 6), date(2024, 6, 7)
    ]
    assert [n.price for n in quote.nights] == [100.0, 60.0, 60.0, 60.0]
    assert quote.total == 280.0


def test_quote_uses_group_price(db_session, room):
    """A negotiated group price replaces per-night resolution."""
    quote = RateResolver().quote(room.id, date(2024, 6, 1), date(2024, 6, 3), db=db_session, group_id="ACME")
    assert quote.total == 140.0
    assert all(n.source == SOURCE_GROUP for n in quote.nights)


def test_unknown_group_falls_back(db_session, room):
    """Groups without a negotiated price pay the normal rate."""
    quote = RateResolver().quote(room.id, date(2024, 6, 1), date(2024, 6, 3), db=db_session, group_id="OTHER")
    assert quote.total == 200.0


def test_weekend_filter_excludes_holiday_price(db_session, room_type, room):
    """A Holiday promotion is not applied when WeekendOnly is requested."""
    add_custom_price(db_session, room_type, date(2024, 6, 1), date(2024, 6, 10), 150.0,
                     condition=PriceCondition.HOLIDAY)

    rate = RateResolver().resolve(room.id, date(2024, 6, 8), PriceCondition.WEEKEND_ONLY, db_session)
    assert rate.price == 100.0
    assert rate.source == SOURCE_BASE
