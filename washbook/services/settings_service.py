from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import models


@dataclass(slots=True)
class BookingSettingsUpdate:
    cancellation_deadline_hours: int | None = None
    cancellation_fee_percent: Decimal | None = None
    no_show_fee_percent: Decimal | None = None
    reminder_enabled: bool | None = None
    reminder_hours_before: list[int] | None = None
    require_prepayment_online: bool | None = None
    allow_pay_on_site_cash: bool | None = None
    allow_pay_on_site_card: bool | None = None
    allow_online_card: bool | None = None
    allow_apple_pay: bool | None = None
    allow_google_pay: bool | None = None
    cancellation_policy_text: str | None = None
    confirmation_message: str | None = None


def get_booking_settings(db: Session, network_id: int) -> models.BookingSettings:
    """Return the network's booking settings, creating the defaults on first read."""
    stmt = select(models.BookingSettings).where(models.BookingSettings.network_id == network_id)
    settings = db.execute(stmt).scalar_one_or_none()
    if settings is not None:
        return settings
    settings = models.BookingSettings(network_id=network_id)
    db.add(settings)
    try:
        db.commit()
    except IntegrityError:
        # another request created the row first
        db.rollback()
        return db.execute(stmt).scalar_one()
    db.refresh(settings)
    return settings


def update_booking_settings(
    db: Session, network_id: int, update: BookingSettingsUpdate
) -> models.BookingSettings:
    settings = get_booking_settings(db, network_id)
    for field in fields(update):
        value = getattr(update, field.name)
        if value is not None:
            setattr(settings, field.name, value)
    db.commit()
    db.refresh(settings)
    return settings


__all__ = [
    "BookingSettingsUpdate",
    "get_booking_settings",
    "update_booking_settings",
]
