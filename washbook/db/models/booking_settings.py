from datetime import datetime
from decimal import Decimal
from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, Numeric, Text, func
from sqlalchemy.orm import Mapped, mapped_column
from ..session import Base


def _default_reminder_hours() -> list[int]:
    return [24, 2]


class BookingSettings(Base):
    __tablename__ = "booking_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    network_id: Mapped[int] = mapped_column(
        ForeignKey("networks.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    cancellation_deadline_hours: Mapped[int] = mapped_column(Integer, default=24, nullable=False)
    cancellation_fee_percent: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("50"), nullable=False
    )
    no_show_fee_percent: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("100"), nullable=False
    )
    reminder_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    reminder_hours_before: Mapped[list[int]] = mapped_column(JSON, default=_default_reminder_hours)
    require_prepayment_online: Mapped[bool] = mapped_column(Boolean, default=False)
    allow_pay_on_site_cash: Mapped[bool] = mapped_column(Boolean, default=True)
    allow_pay_on_site_card: Mapped[bool] = mapped_column(Boolean, default=True)
    allow_online_card: Mapped[bool] = mapped_column(Boolean, default=True)
    allow_apple_pay: Mapped[bool] = mapped_column(Boolean, default=False)
    allow_google_pay: Mapped[bool] = mapped_column(Boolean, default=False)
    cancellation_policy_text: Mapped[str | None] = mapped_column(Text)
    confirmation_message: Mapped[str | None] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
