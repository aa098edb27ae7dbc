from datetime import datetime
from sqlalchemy import Boolean, CheckConstraint, DateTime, Enum, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..session import Base
from .location import DayOfWeek


class BlockedTimeSlot(Base):
    """A one-off interval or a weekly recurring window closed for booking."""

    __tablename__ = "blocked_time_slots"
    __table_args__ = (
        CheckConstraint(
            "(NOT is_recurring AND start_time IS NOT NULL AND end_time IS NOT NULL"
            " AND recurring_day_of_week IS NULL AND recurring_start_time IS NULL"
            " AND recurring_end_time IS NULL)"
            " OR (is_recurring AND start_time IS NULL AND end_time IS NULL"
            " AND recurring_day_of_week IS NOT NULL AND recurring_start_time IS NOT NULL"
            " AND recurring_end_time IS NOT NULL)",
            name="ck_blocked_time_slot_shape",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    network_id: Mapped[int] = mapped_column(ForeignKey("networks.id", ondelete="CASCADE"), index=True)
    location_id: Mapped[int] = mapped_column(
        ForeignKey("locations.id", ondelete="CASCADE"), index=True
    )
    start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    recurring_day_of_week: Mapped[DayOfWeek | None] = mapped_column(Enum(DayOfWeek))
    recurring_start_time: Mapped[str | None] = mapped_column(String(5))
    recurring_end_time: Mapped[str | None] = mapped_column(String(5))
    reason: Mapped[str | None] = mapped_column(String(255))
    created_by: Mapped[str | None] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    location = relationship("Location")
