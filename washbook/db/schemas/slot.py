from datetime import date, datetime
from pydantic import BaseModel


class Slot(BaseModel):
    start: datetime
    end: datetime
    available: bool
    remaining_capacity: int

    class Config:
        from_attributes = True


class SlotList(BaseModel):
    location_id: int
    date: date
    slots: list[Slot]
