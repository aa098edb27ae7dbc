from . import (
    slots,
    bookings,
    blocked_periods,
    booking_settings,
    misc,
)

__all__ = [
    "slots",
    "bookings",
    "blocked_periods",
    "booking_settings",
    "misc",
]
