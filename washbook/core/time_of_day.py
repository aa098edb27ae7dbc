"""Conversions between ``HH:MM`` strings and minute-of-day integers."""

from datetime import datetime

MINUTES_PER_DAY = 24 * 60


def parse_time_of_day(value: str) -> int:
    """Return the minute of day for ``HH:MM``; ``24:00`` is the end of day."""
    parts = value.strip().split(":")
    if len(parts) != 2 or not parts[0].isdigit() or not parts[1].isdigit():
        raise ValueError(f"Invalid time of day {value!r}, expected HH:MM")
    hours, minutes = int(parts[0]), int(parts[1])
    if minutes >= 60 or hours > 24 or (hours == 24 and minutes != 0):
        raise ValueError(f"Invalid time of day {value!r}, expected HH:MM")
    return hours * 60 + minutes


def format_time_of_day(minute: int) -> str:
    hours, minutes = divmod(minute, 60)
    return f"{hours:02d}:{minutes:02d}"


def minute_of_day(value: datetime) -> int:
    return value.hour * 60 + value.minute


def normalize_time_of_day(value: str) -> str:
    return format_time_of_day(parse_time_of_day(value))
