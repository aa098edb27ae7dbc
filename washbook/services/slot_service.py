"""Fixed-grid slot generation for one location and day."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Sequence
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from ..core.clock import Clock, as_utc
from ..db import models
from . import directory
from .blocked_periods import is_blocked, load_blocks_for_day
from .capacity import load_active_bookings, overlap_count
from .opening_hours import OpeningWindow, location_timezone, resolve_opening_window


@dataclass(frozen=True, slots=True)
class SlotAvailability:
    start: datetime
    end: datetime
    available: bool
    remaining_capacity: int


def generate_slots(
    location: models.Location,
    window: OpeningWindow | None,
    target_date: date,
    duration_minutes: int,
    bookings: Sequence[models.Booking],
    blocks: Sequence[models.BlockedTimeSlot],
    now: datetime,
    tz: ZoneInfo,
) -> list[SlotAvailability]:
    if window is None:
        return []
    day_start, day_end = window.bounds(target_date, tz)
    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=location.slot_interval_minutes)
    earliest_start = as_utc(now) + timedelta(hours=location.min_booking_notice_hours)

    slots: list[SlotAvailability] = []
    local_start = day_start
    while local_start + duration <= day_end:
        start = as_utc(local_start)
        end = start + duration
        overlapping = overlap_count(bookings, start, end)
        available = (
            start >= earliest_start
            and overlapping < location.parallel_slots
            and not is_blocked(blocks, start, end, tz)
        )
        remaining = max(0, location.parallel_slots - overlapping) if available else 0
        slots.append(
            SlotAvailability(
                start=start,
                end=end,
                available=available,
                remaining_capacity=remaining,
            )
        )
        local_start += step
    return slots


def list_available_slots(
    db: Session,
    network_id: int,
    location_id: int,
    target_date: date,
    service_offering_id: int | None = None,
    *,
    clock: Clock,
) -> list[SlotAvailability]:
    location = directory.get_location(db, network_id, location_id)
    duration_minutes = location.slot_interval_minutes
    if service_offering_id is not None:
        offering = directory.get_service_offering(db, network_id, service_offering_id)
        duration_minutes = offering.duration_minutes
    if not location.booking_enabled:
        return []
    window = resolve_opening_window(db, location, target_date)
    if window is None:
        return []
    tz = location_timezone(location)
    day_start, day_end = window.bounds(target_date, tz)
    bookings = load_active_bookings(db, location.id, as_utc(day_start), as_utc(day_end))
    blocks = load_blocks_for_day(db, location, target_date)
    return generate_slots(
        location,
        window,
        target_date,
        duration_minutes,
        bookings,
        blocks,
        clock.now(),
        tz,
    )


__all__ = ["SlotAvailability", "generate_slots", "list_available_slots"]
