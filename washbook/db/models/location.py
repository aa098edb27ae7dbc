from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..session import Base


class DayOfWeek(str, PyEnum):
    SUNDAY = "SUNDAY"
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"

    @property
    def position(self) -> int:
        """Position in the week, 0 = Sunday."""
        return _DAY_ORDER.index(self)

    @classmethod
    def from_position(cls, position: int) -> "DayOfWeek":
        return _DAY_ORDER[position % 7]


_DAY_ORDER = list(DayOfWeek)


class Location(Base):
    __tablename__ = "locations"
    __table_args__ = (
        CheckConstraint("parallel_slots >= 1", name="ck_location_parallel_slots_positive"),
        CheckConstraint("slot_interval_minutes > 0", name="ck_location_slot_interval_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    network_id: Mapped[int] = mapped_column(ForeignKey("networks.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str | None] = mapped_column(String(32))
    city: Mapped[str | None] = mapped_column(String(128))
    address: Mapped[str | None] = mapped_column(String(255))
    timezone: Mapped[str | None] = mapped_column(String(64))
    parallel_slots: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    slot_interval_minutes: Mapped[int] = mapped_column(Integer, default=30, nullable=False)
    min_booking_notice_hours: Mapped[int] = mapped_column(Integer, default=2, nullable=False)
    max_booking_advance_days: Mapped[int] = mapped_column(Integer, default=30, nullable=False)
    booking_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    network = relationship("Network", back_populates="locations")
    opening_hours = relationship(
        "OpeningHours", back_populates="location", cascade="all, delete-orphan"
    )


class OpeningHours(Base):
    __tablename__ = "location_opening_hours"
    __table_args__ = (
        UniqueConstraint("location_id", "day_of_week", name="uq_opening_hours_location_day"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    location_id: Mapped[int] = mapped_column(ForeignKey("locations.id", ondelete="CASCADE"))
    day_of_week: Mapped[DayOfWeek] = mapped_column(Enum(DayOfWeek), nullable=False)
    open_time: Mapped[str] = mapped_column(String(5), default="08:00", nullable=False)
    close_time: Mapped[str] = mapped_column(String(5), default="18:00", nullable=False)
    is_closed: Mapped[bool] = mapped_column(Boolean, default=False)

    location = relationship("Location", back_populates="opening_hours")
