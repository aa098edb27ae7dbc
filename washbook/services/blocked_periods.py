"""Blocked periods: one-off blackout intervals and weekly recurring windows."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Iterable
from zoneinfo import ZoneInfo

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from ..core.clock import as_utc
from ..core.time_of_day import minute_of_day, normalize_time_of_day, parse_time_of_day
from ..db import models
from . import directory
from .errors import NotFound, PolicyViolation
from .opening_hours import location_timezone, weekday_of

logger = logging.getLogger(__name__)


def overlaps(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    """Half-open interval overlap: ``[start, end)`` against ``[other_start, other_end)``."""
    return start < other_end and end > other_start


def block_matches(
    block: models.BlockedTimeSlot,
    start: datetime,
    end: datetime,
    tz: ZoneInfo,
) -> bool:
    if block.is_recurring:
        local_start = start.astimezone(tz)
        if weekday_of(local_start.date()) != block.recurring_day_of_week:
            return False
        start_minute = minute_of_day(local_start)
        end_minute = start_minute + int((end - start).total_seconds() // 60)
        block_start = parse_time_of_day(block.recurring_start_time)
        block_end = parse_time_of_day(block.recurring_end_time)
        return start_minute < block_end and end_minute > block_start
    return overlaps(start, end, as_utc(block.start_time), as_utc(block.end_time))


def is_blocked(
    blocks: Iterable[models.BlockedTimeSlot],
    start: datetime,
    end: datetime,
    tz: ZoneInfo,
) -> bool:
    return any(block_matches(block, start, end, tz) for block in blocks)


def load_blocks_between(
    db: Session,
    location: models.Location,
    start: datetime,
    end: datetime,
) -> list[models.BlockedTimeSlot]:
    """One-off blocks touching ``[start, end)`` plus recurring blocks on the local weekdays spanned."""
    tz = location_timezone(location)
    first_day = start.astimezone(tz).date()
    last_day = end.astimezone(tz).date()
    weekdays = {weekday_of(first_day + timedelta(days=offset))
                for offset in range((last_day - first_day).days + 1)}
    stmt = select(models.BlockedTimeSlot).where(
        models.BlockedTimeSlot.location_id == location.id,
        or_(
            and_(
                models.BlockedTimeSlot.is_recurring.is_(False),
                models.BlockedTimeSlot.start_time < end,
                models.BlockedTimeSlot.end_time > start,
            ),
            and_(
                models.BlockedTimeSlot.is_recurring.is_(True),
                models.BlockedTimeSlot.recurring_day_of_week.in_(weekdays),
            ),
        ),
    )
    return list(db.execute(stmt).scalars().all())


def load_blocks_for_day(
    db: Session, location: models.Location, target_date: date
) -> list[models.BlockedTimeSlot]:
    tz = location_timezone(location)
    day_start = datetime.combine(target_date, datetime.min.time(), tzinfo=tz)
    day_end = datetime.combine(target_date + timedelta(days=1), datetime.min.time(), tzinfo=tz)
    return load_blocks_between(db, location, as_utc(day_start), as_utc(day_end))


def list_blocked_periods(
    db: Session, network_id: int, location_id: int | None = None
) -> list[models.BlockedTimeSlot]:
    stmt = select(models.BlockedTimeSlot).where(models.BlockedTimeSlot.network_id == network_id)
    if location_id is not None:
        stmt = stmt.where(models.BlockedTimeSlot.location_id == location_id)
    stmt = stmt.order_by(
        models.BlockedTimeSlot.is_recurring,
        models.BlockedTimeSlot.start_time,
        models.BlockedTimeSlot.id,
    )
    return list(db.execute(stmt).scalars().all())


def create_blocked_period(
    db: Session,
    network_id: int,
    *,
    location_id: int,
    start_time: datetime,
    end_time: datetime,
    reason: str | None = None,
    created_by: str | None = None,
) -> models.BlockedTimeSlot:
    directory.get_location(db, network_id, location_id)
    start_time, end_time = as_utc(start_time), as_utc(end_time)
    if end_time <= start_time:
        raise PolicyViolation("Blocked period must end after it starts")
    block = models.BlockedTimeSlot(
        network_id=network_id,
        location_id=location_id,
        start_time=start_time,
        end_time=end_time,
        is_recurring=False,
        reason=reason,
        created_by=created_by,
    )
    db.add(block)
    db.commit()
    db.refresh(block)
    logger.info(
        "Blocked period created",
        extra={"location_id": location_id, "blocked_period_id": block.id},
    )
    return block


def create_recurring_block(
    db: Session,
    network_id: int,
    *,
    location_id: int,
    day_of_week: models.DayOfWeek,
    start_time: str,
    end_time: str,
    reason: str | None = None,
    created_by: str | None = None,
) -> models.BlockedTimeSlot:
    directory.get_location(db, network_id, location_id)
    try:
        start_minute, end_minute = parse_time_of_day(start_time), parse_time_of_day(end_time)
    except ValueError as exc:
        raise PolicyViolation(str(exc)) from exc
    if end_minute <= start_minute:
        raise PolicyViolation("Recurring block must end after it starts")
    block = models.BlockedTimeSlot(
        network_id=network_id,
        location_id=location_id,
        is_recurring=True,
        recurring_day_of_week=day_of_week,
        recurring_start_time=normalize_time_of_day(start_time),
        recurring_end_time=normalize_time_of_day(end_time),
        reason=reason,
        created_by=created_by,
    )
    db.add(block)
    db.commit()
    db.refresh(block)
    logger.info(
        "Recurring block created",
        extra={"location_id": location_id, "blocked_period_id": block.id},
    )
    return block


def delete_blocked_period(db: Session, network_id: int, block_id: int) -> None:
    block = db.execute(
        select(models.BlockedTimeSlot).where(
            models.BlockedTimeSlot.id == block_id,
            models.BlockedTimeSlot.network_id == network_id,
        )
    ).scalar_one_or_none()
    if block is None:
        raise NotFound("Blocked period not found")
    db.delete(block)
    db.commit()


__all__ = [
    "overlaps",
    "block_matches",
    "is_blocked",
    "load_blocks_between",
    "load_blocks_for_day",
    "list_blocked_periods",
    "create_blocked_period",
    "create_recurring_block",
    "delete_blocked_period",
]
