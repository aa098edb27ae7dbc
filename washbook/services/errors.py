class BookingError(Exception):
    pass


class NotFound(BookingError):
    pass


class PolicyViolation(BookingError):
    pass


class Conflict(BookingError):
    pass


class InvalidStateTransition(BookingError):
    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot {requested} a booking in state {current}")


class GenerationExhausted(BookingError):
    pass


__all__ = [
    "BookingError",
    "NotFound",
    "PolicyViolation",
    "Conflict",
    "InvalidStateTransition",
    "GenerationExhausted",
]
