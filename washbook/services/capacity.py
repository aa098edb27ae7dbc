from datetime import datetime
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..core.clock import as_utc
from ..db import models
from ..db.models.booking import BookingStatus

ACTIVE_STATUSES = (
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.IN_PROGRESS,
)


def count_overlapping(
    db: Session,
    location_id: int,
    start: datetime,
    end: datetime,
    exclude_booking_id: int | None = None,
) -> int:
    stmt = select(func.count(models.Booking.id)).where(
        models.Booking.location_id == location_id,
        models.Booking.status.in_(ACTIVE_STATUSES),
        models.Booking.scheduled_start < as_utc(end),
        models.Booking.scheduled_end > as_utc(start),
    )
    if exclude_booking_id is not None:
        stmt = stmt.where(models.Booking.id != exclude_booking_id)
    return int(db.scalar(stmt) or 0)


def has_capacity(
    db: Session,
    location: models.Location,
    start: datetime,
    end: datetime,
    exclude_booking_id: int | None = None,
) -> bool:
    overlapping = count_overlapping(db, location.id, start, end, exclude_booking_id)
    return overlapping < location.parallel_slots


def load_active_bookings(
    db: Session, location_id: int, start: datetime, end: datetime
) -> list[models.Booking]:
    """Active bookings of a location that overlap ``[start, end)``."""
    return list(
        db.execute(
            select(models.Booking).where(
                models.Booking.location_id == location_id,
                models.Booking.status.in_(ACTIVE_STATUSES),
                models.Booking.scheduled_start < as_utc(end),
                models.Booking.scheduled_end > as_utc(start),
            )
        )
        .scalars()
        .all()
    )


def overlap_count(bookings: Iterable[models.Booking], start: datetime, end: datetime) -> int:
    return sum(
        1
        for booking in bookings
        if as_utc(booking.scheduled_start) < end and as_utc(booking.scheduled_end) > start
    )


__all__ = [
    "ACTIVE_STATUSES",
    "count_overlapping",
    "has_capacity",
    "load_active_bookings",
    "overlap_count",
]
