from . import (
    blocked_periods,
    booking_codes,
    booking_lifecycle,
    booking_service,
    capacity,
    directory,
    fee_policy,
    opening_hours,
    settings_service,
    slot_service,
)
__all__ = [
    "blocked_periods",
    "booking_codes",
    "booking_lifecycle",
    "booking_service",
    "capacity",
    "directory",
    "fee_policy",
    "opening_hours",
    "settings_service",
    "slot_service",
]
