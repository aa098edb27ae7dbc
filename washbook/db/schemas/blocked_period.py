from datetime import datetime
from pydantic import BaseModel, field_validator

from ...core.time_of_day import normalize_time_of_day
from ..models.location import DayOfWeek


class BlockedPeriodCreate(BaseModel):
    location_id: int
    start_time: datetime
    end_time: datetime
    reason: str | None = None


class RecurringBlockCreate(BaseModel):
    location_id: int
    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    reason: str | None = None

    @field_validator("day_of_week", mode="before")
    @classmethod
    def _upper_day(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("start_time", "end_time")
    @classmethod
    def _time_of_day(cls, value: str) -> str:
        return normalize_time_of_day(value)


class BlockedPeriod(BaseModel):
    id: int
    network_id: int
    location_id: int
    start_time: datetime | None = None
    end_time: datetime | None = None
    is_recurring: bool
    recurring_day_of_week: DayOfWeek | None = None
    recurring_start_time: str | None = None
    recurring_end_time: str | None = None
    reason: str | None = None
    created_by: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True
