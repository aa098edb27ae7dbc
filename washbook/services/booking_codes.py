from __future__ import annotations

import logging
import random
import secrets

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.constants import BOOKING_CODE_ALPHABET, BOOKING_CODE_LENGTH, MAX_CODE_ATTEMPTS
from ..db import models
from .errors import GenerationExhausted

logger = logging.getLogger(__name__)


def random_code(rng: random.Random | None = None) -> str:
    choose = rng.choice if rng is not None else secrets.choice
    return "".join(choose(BOOKING_CODE_ALPHABET) for _ in range(BOOKING_CODE_LENGTH))


def code_exists(db: Session, code: str) -> bool:
    return (
        db.execute(select(models.Booking.id).where(models.Booking.booking_code == code)).first()
        is not None
    )


def generate_booking_code(
    db: Session,
    *,
    rng: random.Random | None = None,
    max_attempts: int = MAX_CODE_ATTEMPTS,
) -> str:
    """Return a code no existing booking uses.

    The unique constraint on ``bookings.booking_code`` remains the final
    guard against a concurrent writer picking the same code.
    """
    for attempt in range(1, max_attempts + 1):
        code = random_code(rng)
        if not code_exists(db, code):
            return code
        logger.warning("Booking code collision", extra={"attempt": attempt})
    logger.error("Booking code generation exhausted", extra={"attempts": max_attempts})
    raise GenerationExhausted(f"No unique booking code after {max_attempts} attempts")
