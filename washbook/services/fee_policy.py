"""Cancellation and no-show charges.

Money is kept as ``Decimal`` and rounded half-up to cents. An absent fee is
``None``, never zero.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from ..core.clock import as_utc
from ..db import models

_CENTS = Decimal("0.01")
_SECONDS_PER_HOUR = Decimal(3600)


def hours_until_start(scheduled_start: datetime, now: datetime) -> Decimal:
    delta = as_utc(scheduled_start) - as_utc(now)
    return Decimal(str(delta.total_seconds())) / _SECONDS_PER_HOUR


def _percent_of(amount: Decimal, percent: Decimal) -> Decimal:
    return (Decimal(amount) * Decimal(percent) / Decimal(100)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def cancellation_fee(
    booking: models.Booking, settings: models.BookingSettings, now: datetime
) -> Decimal | None:
    hours_left = hours_until_start(booking.scheduled_start, now)
    if hours_left >= settings.cancellation_deadline_hours:
        return None
    return _percent_of(booking.service_price, settings.cancellation_fee_percent)


def no_show_fee(booking: models.Booking, settings: models.BookingSettings) -> Decimal | None:
    fee = _percent_of(booking.service_price, settings.no_show_fee_percent)
    return fee if fee > 0 else None


__all__ = ["hours_until_start", "cancellation_fee", "no_show_fee"]
