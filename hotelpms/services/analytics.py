"""Aggregated reporting over bookings, invoices and maintenance tickets."""
from datetime import date
from typing import Optional, List
from sqlalchemy import func
from sqlalchemy.orm import Session
from hotelpms.db.models import (
    Booking, BookingStatus, Invoice, InvoiceStatus, MaintenanceTicket, MaintenanceStatus,
    Room, RoomType,
)
from hotelpms.schemas.analytics import (
    MethodRevenue, RevenueSummary, InvoiceStatusSummary, Occupancy, RoomTypePopularity,
)
from hotelpms.schemas.booking import BookingStats, BookingTotals, GroupStat
from hotelpms.schemas.maintenance import MaintenanceStats


class AnalyticsService:
    """Service computing dashboard figures with database aggregates."""

    def revenue(self, db: Session) -> RevenueSummary:
        """Revenue collected from paid invoices, overall and per payment method."""
        rows = db.query(
            Invoice.payment_method,
            func.coalesce(func.sum(Invoice.total), 0.0),
            func.count(Invoice.id),
        ).filter(
            Invoice.status == InvoiceStatus.PAID
        ).group_by(Invoice.payment_method).all()

        by_method = [
            MethodRevenue(
                method=method.value if method else "unknown",
                total=round(total, 2),
                count=count
            )
            for method, total, count in rows
        ]
        return RevenueSummary(
            total_revenue=round(sum(m.total for m in by_method), 2),
            by_payment_method=by_method
        )

    def invoice_status_summary(self, db: Session) -> List[InvoiceStatusSummary]:
        rows = db.query(
            Invoice.status,
            func.count(Invoice.id),
            func.coalesce(func.sum(Invoice.total), 0.0),
        ).group_by(Invoice.status).all()

        return [
            InvoiceStatusSummary(status=status.value, count=count, total_amount=round(total, 2))
            for status, count, total in rows
        ]

    def occupancy(self, night: date, db: Session) -> Occupancy:
        """Share of active rooms held by an active booking on a night."""
        total_rooms = db.query(Room).filter(Room.is_active.is_(True)).count()
        occupied = db.query(func.count(func.distinct(Booking.room_id))).filter(
            Booking.check_in <= night,
            Booking.check_out > night,
            Booking.status.notin_((BookingStatus.CANCELLED, BookingStatus.NO_SHOW)),
        ).scalar() or 0

        rate = occupied / total_rooms if total_rooms else 0.0
        return Occupancy(
            date=night,
            occupied_rooms=occupied,
            total_rooms=total_rooms,
            occupancy_rate=round(min(rate, 1.0), 4)
        )

    def room_type_popularity(self, db: Session) -> List[RoomTypePopularity]:
        """Non-cancelled bookings and booked revenue per room type, most booked first."""
        rows = db.query(
            RoomType.id,
            RoomType.name,
            func.count(Booking.id),
            func.coalesce(func.sum(Booking.total_amount), 0.0),
        ).join(
            Room, Room.room_type_id == RoomType.id
        ).join(
            Booking, Booking.room_id == Room.id
        ).filter(
            Booking.status != BookingStatus.CANCELLED
        ).group_by(RoomType.id, RoomType.name).order_by(func.count(Booking.id).desc(), RoomType.name).all()

        return [
            RoomTypePopularity(room_type_id=rt_id, room_type_name=name, bookings=count, revenue=round(revenue, 2))
            for rt_id, name, count, revenue in rows
        ]

    def booking_stats(
        self,
        db: Session,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> BookingStats:
        """Booking counts and revenue by status and source for bookings created in a range."""
        filters = []
        if start_date:
            filters.append(func.date(Booking.created_at) >= start_date.isoformat())
        if end_date:
            filters.append(func.date(Booking.created_at) <= end_date.isoformat())

        def grouped(column) -> List[GroupStat]:
            rows = db.query(
                column,
                func.count(Booking.id),
                func.coalesce(func.sum(Booking.total_amount), 0.0),
            ).filter(*filters).group_by(column).all()
            return [
                GroupStat(key=key.value, count=count, revenue=round(revenue, 2))
                for key, count, revenue in rows
            ]

        total_bookings, total_revenue = db.query(
            func.count(Booking.id),
            func.coalesce(func.sum(Booking.total_amount), 0.0),
        ).filter(*filters).one()

        return BookingStats(
            by_status=grouped(Booking.status),
            by_source=grouped(Booking.booking_source),
            totals=BookingTotals(
                total_bookings=total_bookings,
                total_revenue=round(total_revenue, 2),
                avg_booking_value=round(total_revenue / total_bookings, 2) if total_bookings else 0.0
            )
        )

    def maintenance_stats(self, db: Session) -> MaintenanceStats:
        rows = db.query(
            MaintenanceTicket.status,
            func.count(MaintenanceTicket.id),
            func.coalesce(func.sum(MaintenanceTicket.cost), 0.0),
        ).group_by(MaintenanceTicket.status).all()

        counts = {status: 0 for status in MaintenanceStatus}
        total_cost = 0.0
        for status, count, cost in rows:
            counts[status] = count
            total_cost += cost

        total = sum(counts.values())
        return MaintenanceStats(
            total=total,
            pending=counts[MaintenanceStatus.PENDING],
            in_progress=counts[MaintenanceStatus.IN_PROGRESS],
            resolved=counts[MaintenanceStatus.RESOLVED],
            cancelled=counts[MaintenanceStatus.CANCELLED],
            total_cost=round(total_cost, 2),
            avg_cost=round(total_cost / total, 2) if total else 0.0
        )
