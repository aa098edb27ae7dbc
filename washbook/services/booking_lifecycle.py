"""Booking state machine.

PENDING -> CONFIRMED -> IN_PROGRESS -> COMPLETED is the happy path; PENDING
and CONFIRMED bookings may also end as CANCELLED or NO_SHOW. Every action
not listed in ``TRANSITIONS`` for the current state is rejected.
"""

from enum import Enum

from ..db import models
from ..db.models.booking import BookingStatus
from .errors import InvalidStateTransition


class BookingAction(str, Enum):
    update = "update"
    confirm = "confirm"
    start = "start"
    complete = "complete"
    cancel = "cancel"
    no_show = "no_show"


# action -> (states it may be applied in, resulting state)
TRANSITIONS: dict[BookingAction, tuple[frozenset[BookingStatus], BookingStatus]] = {
    BookingAction.update: (frozenset({BookingStatus.PENDING}), BookingStatus.PENDING),
    BookingAction.confirm: (frozenset({BookingStatus.PENDING}), BookingStatus.CONFIRMED),
    BookingAction.start: (frozenset({BookingStatus.CONFIRMED}), BookingStatus.IN_PROGRESS),
    BookingAction.complete: (frozenset({BookingStatus.IN_PROGRESS}), BookingStatus.COMPLETED),
    BookingAction.cancel: (
        frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED}),
        BookingStatus.CANCELLED,
    ),
    BookingAction.no_show: (
        frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED}),
        BookingStatus.NO_SHOW,
    ),
}

TERMINAL_STATUSES = frozenset(
    {BookingStatus.CANCELLED, BookingStatus.COMPLETED, BookingStatus.NO_SHOW}
)


def target_status(current: BookingStatus, action: BookingAction) -> BookingStatus:
    allowed, target = TRANSITIONS[action]
    if current not in allowed:
        raise InvalidStateTransition(current.value, action.value)
    return target


def ensure_transition(booking: models.Booking, action: BookingAction) -> BookingStatus:
    return target_status(BookingStatus(booking.status), action)


def is_terminal(status: BookingStatus) -> bool:
    return status in TERMINAL_STATUSES
