from fastapi import HTTPException, status

from ..services.errors import (
    BookingError,
    Conflict,
    GenerationExhausted,
    InvalidStateTransition,
    NotFound,
    PolicyViolation,
)

_STATUS_CODES: list[tuple[type[BookingError], int]] = [
    (NotFound, status.HTTP_404_NOT_FOUND),
    (PolicyViolation, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (Conflict, status.HTTP_409_CONFLICT),
    (InvalidStateTransition, status.HTTP_409_CONFLICT),
    (GenerationExhausted, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def http_error(exc: BookingError) -> HTTPException:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
