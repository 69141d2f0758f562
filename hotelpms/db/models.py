"""SQLAlchemy database models."""
from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, JSON, Enum as SQLEnum, Boolean, Float, Text
from sqlalchemy.orm import relationship, declarative_base
from datetime import datetime
import enum
import uuid


Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class RoomStatus(str, enum.Enum):
    """Housekeeping status of a physical room."""
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    CLEANING = "cleaning"
    RESERVED = "reserved"


class PriceCondition(str, enum.Enum):
    """Condition tag restricting when a custom price applies."""
    NONE = "None"
    WEEKEND_ONLY = "WeekendOnly"
    WEEKDAY_ONLY = "WeekdayOnly"
    HOLIDAY = "Holiday"
    GROUP_BOOKING = "GroupBooking"


class BookingStatus(str, enum.Enum):
    """Booking lifecycle status."""
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


# Bookings in these states no longer hold the room
INACTIVE_BOOKING_STATUSES = (BookingStatus.CANCELLED, BookingStatus.CHECKED_OUT, BookingStatus.NO_SHOW)


class BookingSource(str, enum.Enum):
    """Channel a booking came in through."""
    DIRECT = "direct"
    WEBSITE = "website"
    PHONE = "phone"
    EMAIL = "email"
    WALK_IN = "walk_in"
    AGENT = "agent"
    OTA = "ota"
    OTHER = "other"


class PaymentStatus(str, enum.Enum):
    """Payment status of a booking."""
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    REFUNDED = "refunded"


class PaymentMethod(str, enum.Enum):
    """Payment method."""
    CASH = "cash"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    BANK_TRANSFER = "bank_transfer"
    MOBILE_MONEY = "mobile_money"
    ONLINE = "online"


class InvoiceStatus(str, enum.Enum):
    """Invoice status."""
    UNPAID = "unpaid"
    PAID = "paid"
    PARTIAL = "partial"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class IssueType(str, enum.Enum):
    """Maintenance issue category."""
    PLUMBING = "plumbing"
    ELECTRICAL = "electrical"
    FURNITURE = "furniture"
    APPLIANCE = "appliance"
    STRUCTURAL = "structural"
    CLEANING = "cleaning"
    OTHER = "other"


class MaintenancePriority(str, enum.Enum):
    """Maintenance ticket priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class MaintenanceStatus(str, enum.Enum):
    """Maintenance ticket status."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


class RoomType(Base):
    """Room type model."""
    __tablename__ = "room_types"

    id = Column(String, primary_key=True, default=_uuid)
    name = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    base_price = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    capacity_adults = Column(Integer, nullable=False, default=1)
    capacity_children = Column(Integer, nullable=False, default=0)
    max_occupancy = Column(Integer, nullable=False, default=1)
    size = Column(Float, nullable=True)  # square metres
    bed_configuration = Column(String, nullable=True)
    amenities = Column(JSON, default=list)
    group_prices = Column(JSON, default=dict)  # group id -> nightly price
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    rooms = relationship("Room", back_populates="room_type")
    custom_prices = relationship("CustomPrice", back_populates="room_type", cascade="all, delete-orphan")


class Room(Base):
    """Physical room model."""
    __tablename__ = "rooms"

    id = Column(String, primary_key=True, default=_uuid)
    room_number = Column(String, unique=True, nullable=False, index=True)
    room_type_id = Column(String, ForeignKey("room_types.id"), nullable=False, index=True)
    floor = Column(Integer, nullable=False)
    status = Column(SQLEnum(RoomStatus), default=RoomStatus.AVAILABLE, nullable=False, index=True)
    price_override = Column(Float, nullable=True)
    amenities = Column(JSON, default=list)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    room_type = relationship("RoomType", back_populates="rooms")
    bookings = relationship("Booking", back_populates="room")
    maintenance_tickets = relationship("MaintenanceTicket", back_populates="room")


class CustomPrice(Base):
    """Time-boxed promotional price for a room type."""
    __tablename__ = "custom_prices"

    id = Column(String, primary_key=True, default=_uuid)
    room_type_id = Column(String, ForeignKey("room_types.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)  # inclusive
    price = Column(Float, nullable=False)
    condition = Column(SQLEnum(PriceCondition), default=PriceCondition.NONE, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    room_type = relationship("RoomType", back_populates="custom_prices")


class Guest(Base):
    """Guest model."""
    __tablename__ = "guests"

    id = Column(String, primary_key=True, default=_uuid)
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=True, index=True)
    phone = Column(String, nullable=False, index=True)
    nationality = Column(String, nullable=True)
    vip = Column(Boolean, default=False, nullable=False)
    blacklisted = Column(Boolean, default=False, nullable=False)
    blacklist_reason = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    # Stay history
    total_stays = Column(Integer, default=0, nullable=False)
    total_spent = Column(Float, default=0.0, nullable=False)
    average_stay_length = Column(Float, default=0.0, nullable=False)
    last_stay = Column(DateTime, nullable=True)
    favorite_room_type_id = Column(String, ForeignKey("room_types.id"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    bookings = relationship("Booking", back_populates="guest")

    def record_stay(self, nights: int, amount: float, room_type_id: str) -> None:
        """Fold a new stay into the guest's stay history."""
        total_nights = self.average_stay_length * self.total_stays + nights
        self.total_stays += 1
        self.average_stay_length = total_nights / self.total_stays
        self.total_spent += amount
        self.last_stay = datetime.utcnow()
        self.favorite_room_type_id = room_type_id


class Booking(Base):
    """Booking model. Bookings are never deleted."""
    __tablename__ = "bookings"

    id = Column(String, primary_key=True, default=_uuid)
    confirmation_number = Column(String, unique=True, nullable=False, index=True)
    guest_id = Column(String, ForeignKey("guests.id"), nullable=False, index=True)
    room_id = Column(String, ForeignKey("rooms.id"), nullable=False, index=True)
    check_in = Column(Date, nullable=False, index=True)
    check_out = Column(Date, nullable=False, index=True)
    number_of_guests = Column(Integer, nullable=False, default=1)
    booking_source = Column(SQLEnum(BookingSource), default=BookingSource.DIRECT, nullable=False)
    payment_status = Column(SQLEnum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)
    total_amount = Column(Float, nullable=False)
    nightly_rates = Column(JSON, default=list)  # [{date, price}]
    price_condition = Column(SQLEnum(PriceCondition), nullable=True)
    discount = Column(Float, default=0.0, nullable=False)
    tax_rate = Column(Float, default=0.0, nullable=False)
    tax_amount = Column(Float, default=0.0, nullable=False)
    is_group_booking = Column(Boolean, default=False, nullable=False)
    group_id = Column(String, nullable=True)
    special_requests = Column(Text, nullable=True)
    status = Column(SQLEnum(BookingStatus), default=BookingStatus.CONFIRMED, nullable=False, index=True)
    cancellation_reason = Column(String, nullable=True)
    cancellation_date = Column(DateTime, nullable=True)
    actual_check_in = Column(DateTime, nullable=True)
    actual_check_out = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    guest = relationship("Guest", back_populates="bookings")
    room = relationship("Room", back_populates="bookings")
    invoices = relationship("Invoice", back_populates="booking")

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def grand_total(self) -> float:
        return round(self.total_amount - (self.discount or 0.0) + (self.tax_amount or 0.0), 2)


class Invoice(Base):
    """Invoice model."""
    __tablename__ = "invoices"

    id = Column(String, primary_key=True, default=_uuid)
    invoice_number = Column(String, unique=True, nullable=False, index=True)
    guest_id = Column(String, ForeignKey("guests.id"), nullable=False, index=True)
    booking_id = Column(String, ForeignKey("bookings.id"), nullable=False, index=True)
    items = Column(JSON, default=list)  # [{description, quantity, unit_price, total}]
    subtotal = Column(Float, nullable=False, default=0.0)
    tax_amount = Column(Float, nullable=False, default=0.0)
    discount = Column(Float, nullable=False, default=0.0)
    total = Column(Float, nullable=False, default=0.0)
    currency = Column(String(3), nullable=False, default="USD")
    status = Column(SQLEnum(InvoiceStatus), default=InvoiceStatus.UNPAID, nullable=False, index=True)
    payment_method = Column(SQLEnum(PaymentMethod), nullable=True)
    notes = Column(Text, nullable=True)
    issued_date = Column(DateTime, default=datetime.utcnow)
    due_date = Column(Date, nullable=True)
    paid_date = Column(DateTime, nullable=True)

    # Relationships
    booking = relationship("Booking", back_populates="invoices")
    guest = relationship("Guest")


class MaintenanceTicket(Base):
    """Maintenance ticket model."""
    __tablename__ = "maintenance_tickets"

    id = Column(String, primary_key=True, default=_uuid)
    room_id = Column(String, ForeignKey("rooms.id"), nullable=False, index=True)
    issue_type = Column(SQLEnum(IssueType), nullable=False)
    description = Column(Text, nullable=False)
    priority = Column(SQLEnum(MaintenancePriority), default=MaintenancePriority.MEDIUM, nullable=False)
    status = Column(SQLEnum(MaintenanceStatus), default=MaintenanceStatus.PENDING, nullable=False, index=True)
    reported_by = Column(String, nullable=False)
    assigned_to = Column(String, nullable=True)
    cost = Column(Float, default=0.0, nullable=False)
    resolution = Column(Text, nullable=True)
    reported_date = Column(DateTime, default=datetime.utcnow, index=True)
    scheduled_date = Column(Date, nullable=True)
    resolved_date = Column(DateTime, nullable=True)

    # Relationships
    room = relationship("Room", back_populates="maintenance_tickets")


class AuditLog(Base):
    """Audit log model for tracking state changes."""
    __tablename__ = "audit_logs"

    id = Column(String, primary_key=True, default=_uuid)
    entity = Column(String, nullable=False)  # booking, invoice, maintenance
    entity_id = Column(String, nullable=True, index=True)
    user = Column(String, nullable=False)
    action = Column(String, nullable=False)  # create, cancel, check_in, check_out, ...
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    before_hash = Column(String, nullable=True)
    after_hash = Column(String, nullable=True)
    metadata_json = Column("metadata", JSON, nullable=True)
