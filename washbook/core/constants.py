"""Common application-wide constants."""

# Booking code alphabet without visually ambiguous symbols (I, O, 0, 1)
BOOKING_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
BOOKING_CODE_LENGTH = 8
# Generate-and-check attempts before the code generator gives up
MAX_CODE_ATTEMPTS = 10

DEFAULT_CUSTOMER_NAME = "Customer"


__all__ = [
    "BOOKING_CODE_ALPHABET",
    "BOOKING_CODE_LENGTH",
    "MAX_CODE_ATTEMPTS",
    "DEFAULT_CUSTOMER_NAME",
]
