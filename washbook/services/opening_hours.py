"""Resolve a location's opening window for a calendar date.

A weekday without an opening-hours row is closed, the same as a row with
``is_closed`` set.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..config import get_settings
from ..core.time_of_day import parse_time_of_day
from ..db import models


@dataclass(frozen=True, slots=True)
class OpeningWindow:
    open_minute: int
    close_minute: int

    def contains(self, start_minute: int, end_minute: int) -> bool:
        return self.open_minute <= start_minute and end_minute <= self.close_minute

    def bounds(self, target_date: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
        midnight = datetime.combine(target_date, time(), tzinfo=tz)
        return (
            midnight + timedelta(minutes=self.open_minute),
            midnight + timedelta(minutes=self.close_minute),
        )


def weekday_of(target_date: date) -> models.DayOfWeek:
    # date.weekday() counts from Monday; the schedule counts from Sunday
    return models.DayOfWeek.from_position(target_date.weekday() + 1)


def location_timezone(location: models.Location) -> ZoneInfo:
    return ZoneInfo(location.timezone or get_settings().timezone)


def window_from_entry(entry: models.OpeningHours | None) -> OpeningWindow | None:
    if entry is None or entry.is_closed:
        return None
    open_minute = parse_time_of_day(entry.open_time)
    close_minute = parse_time_of_day(entry.close_time)
    if close_minute <= open_minute:
        return None
    return OpeningWindow(open_minute=open_minute, close_minute=close_minute)


def resolve_opening_window(
    db: Session, location: models.Location, target_date: date
) -> OpeningWindow | None:
    entry = db.execute(
        select(models.OpeningHours).where(
            models.OpeningHours.location_id == location.id,
            models.OpeningHours.day_of_week == weekday_of(target_date),
        )
    ).scalar_one_or_none()
    return window_from_entry(entry)


__all__ = [
    "OpeningWindow",
    "weekday_of",
    "location_timezone",
    "window_from_entry",
    "resolve_opening_window",
]
