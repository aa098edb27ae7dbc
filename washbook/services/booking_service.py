from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.clock import Clock, as_utc
from ..core.constants import DEFAULT_CUSTOMER_NAME
from ..core.security import Actor
from ..core.time_of_day import minute_of_day
from ..db import models
from ..db.models.booking import BookingStatus
from . import directory
from .blocked_periods import is_blocked, load_blocks_between
from .booking_codes import generate_booking_code
from .booking_lifecycle import BookingAction, ensure_transition
from .capacity import ACTIVE_STATUSES, has_capacity
from .errors import (
    BookingError,
    Conflict,
    GenerationExhausted,
    InvalidStateTransition,
    NotFound,
    PolicyViolation,
)
from .fee_policy import cancellation_fee, no_show_fee
from .locks import location_guard
from .notifications import BookingSummary, NotificationSender
from .opening_hours import location_timezone, resolve_opening_window
from .settings_service import get_booking_settings

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BookingCreate:
    location_id: int
    service_offering_id: int
    scheduled_start: datetime
    driver_id: int | None = None
    plate_number: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    payment_provider: str | None = None
    notes: str | None = None


@dataclass(slots=True)
class BookingUpdate:
    """Fields a pending booking may change; ``None`` leaves a field as it is."""

    scheduled_start: datetime | None = None
    service_offering_id: int | None = None
    plate_number: str | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    notes: str | None = None

    @property
    def moves_slot(self) -> bool:
        return self.scheduled_start is not None or self.service_offering_id is not None


@dataclass(slots=True)
class BookingFilter:
    location_id: int | None = None
    status: BookingStatus | None = None
    date_from: date | None = None
    date_to: date | None = None
    page: int = 1
    limit: int = 20


_CONTACT_FIELDS = ("plate_number", "customer_name", "customer_phone", "customer_email", "notes")


def _log_rejection(exc: BookingError, **context) -> None:
    if isinstance(exc, GenerationExhausted):
        level = logging.ERROR
    elif isinstance(exc, InvalidStateTransition):
        level = logging.WARNING
    else:
        level = logging.INFO
    logger.log(level, "Booking request rejected: %s", exc, extra=context)


def _actor_type(actor: Actor) -> models.ActorType:
    try:
        return models.ActorType(actor.role)
    except ValueError:
        return models.ActorType.system


def _audit(db: Session, booking: models.Booking, actor: Actor, action: str, **payload) -> None:
    payload.update(
        {
            "booking_id": booking.id,
            "booking_code": booking.booking_code,
            "status": BookingStatus(booking.status).value,
        }
    )
    db.add(
        models.AuditLog(
            network_id=booking.network_id,
            actor_type=_actor_type(actor),
            actor_id=actor.id,
            action=action,
            payload=payload,
        )
    )


def _validate_slot(
    db: Session,
    location: models.Location,
    start: datetime,
    end: datetime,
    now: datetime,
) -> None:
    """Policy checks shared by creation and rescheduling, capacity excluded."""
    if not location.booking_enabled:
        raise PolicyViolation("Online booking is disabled at this location")
    if start < now + timedelta(hours=location.min_booking_notice_hours):
        raise PolicyViolation(
            f"Bookings must be made at least {location.min_booking_notice_hours} hours ahead"
        )
    if start > now + timedelta(days=location.max_booking_advance_days):
        raise PolicyViolation(
            f"Bookings can be made at most {location.max_booking_advance_days} days ahead"
        )

    tz = location_timezone(location)
    local_start = start.astimezone(tz)
    window = resolve_opening_window(db, location, local_start.date())
    if window is None:
        raise PolicyViolation("The location is closed on this day")
    start_minute = minute_of_day(local_start)
    end_minute = start_minute + int((end - start).total_seconds() // 60)
    if not window.contains(start_minute, end_minute):
        raise PolicyViolation("The requested time is outside opening hours")

    if is_blocked(load_blocks_between(db, location, start, end), start, end, tz):
        raise PolicyViolation("The requested time is blocked at this location")


def _ensure_capacity(
    db: Session,
    location: models.Location,
    start: datetime,
    end: datetime,
    exclude_booking_id: int | None = None,
) -> None:
    if not has_capacity(db, location, start, end, exclude_booking_id):
        raise Conflict("The requested time slot is already fully booked")


def _send_confirmation(
    booking: models.Booking,
    location: models.Location,
    offering: models.ServiceOffering,
    notifier: NotificationSender | None,
) -> None:
    recipient = booking.customer_email or booking.customer_phone
    if notifier is None or not recipient:
        return
    summary = BookingSummary(
        booking_code=booking.booking_code,
        customer_name=booking.customer_name or DEFAULT_CUSTOMER_NAME,
        location_name=location.name,
        location_address=location.address,
        scheduled_start=as_utc(booking.scheduled_start),
        scheduled_end=as_utc(booking.scheduled_end),
        service_name=offering.service_package.name if offering.service_package else "",
        vehicle_type=booking.vehicle_type,
        plate_number=booking.plate_number,
        price=booking.service_price,
        currency=booking.currency,
    )
    try:
        delivered = notifier.send_booking_confirmation(recipient, summary)
    except Exception:
        logger.exception(
            "Notification sender failed", extra={"booking_code": booking.booking_code}
        )
        return
    if not delivered:
        logger.warning(
            "Booking confirmation was not delivered",
            extra={"booking_code": booking.booking_code},
        )


def create_booking(
    db: Session,
    network_id: int,
    request: BookingCreate,
    *,
    actor: Actor,
    clock: Clock,
    notifier: NotificationSender | None = None,
    rng: random.Random | None = None,
) -> models.Booking:
    now = clock.now()
    start = as_utc(request.scheduled_start)
    try:
        offering = directory.get_service_offering(db, network_id, request.service_offering_id)
        end = start + timedelta(minutes=offering.duration_minutes)
        with location_guard(request.location_id):
            try:
                location = directory.get_location(db, network_id, request.location_id, lock=True)
                _validate_slot(db, location, start, end, now)
                _ensure_capacity(db, location, start, end)
                booking = models.Booking(
                    booking_code=generate_booking_code(db, rng=rng),
                    network_id=network_id,
                    location_id=location.id,
                    driver_id=request.driver_id,
                    service_offering_id=offering.id,
                    service_package_id=offering.service_package_id,
                    vehicle_type=offering.vehicle_type,
                    plate_number=request.plate_number,
                    scheduled_start=start,
                    scheduled_end=end,
                    status=BookingStatus.PENDING,
                    payment_status=models.PaymentStatus.PENDING,
                    payment_provider=request.payment_provider,
                    service_duration_minutes=offering.duration_minutes,
                    service_price=offering.price,
                    currency=offering.currency,
                    customer_name=request.customer_name,
                    customer_phone=request.customer_phone,
                    customer_email=request.customer_email,
                    notes=request.notes,
                    created_by_type=actor.role,
                    created_by_id=actor.id,
                )
                db.add(booking)
                db.flush()
                _audit(db, booking, actor, "booking_created", scheduled_start=start.isoformat())
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise Conflict("The booking could not be stored, please try again") from exc
            except BookingError:
                db.rollback()
                raise
    except BookingError as exc:
        _log_rejection(exc, location_id=request.location_id, scheduled_start=start.isoformat())
        raise
    db.refresh(booking)
    logger.info(
        "Booking created",
        extra={"booking_code": booking.booking_code, "location_id": location.id},
    )
    _send_confirmation(booking, location, offering, notifier)
    return booking


def get_booking(
    db: Session, network_id: int, booking_id: int, *, lock: bool = False
) -> models.Booking:
    stmt = select(models.Booking).where(
        models.Booking.id == booking_id,
        models.Booking.network_id == network_id,
    )
    if lock:
        stmt = stmt.with_for_update()
    booking = db.execute(stmt).scalar_one_or_none()
    if booking is None:
        raise NotFound("Booking not found")
    return booking


def get_booking_by_code(db: Session, booking_code: str) -> models.Booking:
    booking = db.execute(
        select(models.Booking).where(models.Booking.booking_code == booking_code.upper())
    ).scalar_one_or_none()
    if booking is None:
        raise NotFound("Booking not found")
    return booking


def list_bookings(
    db: Session, network_id: int, query: BookingFilter
) -> tuple[list[models.Booking], int]:
    stmt = select(models.Booking).where(models.Booking.network_id == network_id)
    if query.location_id is not None:
        stmt = stmt.where(models.Booking.location_id == query.location_id)
    if query.status is not None:
        stmt = stmt.where(models.Booking.status == query.status)
    if query.date_from is not None:
        stmt = stmt.where(
            models.Booking.scheduled_start
            >= datetime.combine(query.date_from, time(), tzinfo=timezone.utc)
        )
    if query.date_to is not None:
        stmt = stmt.where(
            models.Booking.scheduled_start
            < datetime.combine(query.date_to + timedelta(days=1), time(), tzinfo=timezone.utc)
        )
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    page = max(query.page, 1)
    items = (
        db.execute(
            stmt.order_by(models.Booking.scheduled_start, models.Booking.id)
            .offset((page - 1) * query.limit)
            .limit(query.limit)
        )
        .scalars()
        .all()
    )
    return list(items), int(total)


def list_todays_bookings(
    db: Session, network_id: int, location_id: int, *, clock: Clock
) -> list[models.Booking]:
    location = directory.get_location(db, network_id, location_id)
    tz = location_timezone(location)
    today = clock.now().astimezone(tz).date()
    day_start = datetime.combine(today, time(), tzinfo=tz)
    day_end = datetime.combine(today + timedelta(days=1), time(), tzinfo=tz)
    return list(
        db.execute(
            select(models.Booking)
            .where(
                models.Booking.network_id == network_id,
                models.Booking.location_id == location_id,
                models.Booking.status.in_(ACTIVE_STATUSES),
                models.Booking.scheduled_start >= as_utc(day_start),
                models.Booking.scheduled_start < as_utc(day_end),
            )
            .order_by(models.Booking.scheduled_start)
        )
        .scalars()
        .all()
    )


def update_booking(
    db: Session,
    network_id: int,
    booking_id: int,
    update: BookingUpdate,
    *,
    actor: Actor,
    clock: Clock,
) -> models.Booking:
    booking = get_booking(db, network_id, booking_id)
    try:
        ensure_transition(booking, BookingAction.update)
        if not update.moves_slot:
            _apply_contact_fields(booking, update)
            _audit(db, booking, actor, "booking_updated")
            db.commit()
            db.refresh(booking)
            return booking

        offering = None
        duration_minutes = booking.service_duration_minutes
        if (
            update.service_offering_id is not None
            and update.service_offering_id != booking.service_offering_id
        ):
            offering = directory.get_service_offering(db, network_id, update.service_offering_id)
            duration_minutes = offering.duration_minutes
        start = as_utc(update.scheduled_start or booking.scheduled_start)
        end = start + timedelta(minutes=duration_minutes)

        with location_guard(booking.location_id):
            try:
                location = directory.get_location(db, network_id, booking.location_id, lock=True)
                booking = get_booking(db, network_id, booking_id, lock=True)
                db.refresh(booking)
                ensure_transition(booking, BookingAction.update)
                _validate_slot(db, location, start, end, clock.now())
                _ensure_capacity(db, location, start, end, exclude_booking_id=booking.id)
                previous_start = as_utc(booking.scheduled_start)
                booking.scheduled_start = start
                booking.scheduled_end = end
                if offering is not None:
                    booking.service_offering_id = offering.id
                    booking.service_package_id = offering.service_package_id
                    booking.vehicle_type = offering.vehicle_type
                    booking.service_duration_minutes = offering.duration_minutes
                    booking.service_price = offering.price
                    booking.currency = offering.currency
                _apply_contact_fields(booking, update)
                _audit(
                    db,
                    booking,
                    actor,
                    "booking_rescheduled",
                    previous_start=previous_start.isoformat(),
                    scheduled_start=start.isoformat(),
                )
                db.commit()
            except BookingError:
                db.rollback()
                raise
    except BookingError as exc:
        _log_rejection(exc, booking_id=booking_id)
        raise
    db.refresh(booking)
    return booking


def reschedule_booking(
    db: Session,
    network_id: int,
    booking_id: int,
    new_start: datetime,
    *,
    actor: Actor,
    clock: Clock,
) -> models.Booking:
    return update_booking(
        db,
        network_id,
        booking_id,
        BookingUpdate(scheduled_start=new_start),
        actor=actor,
        clock=clock,
    )


def _apply_contact_fields(booking: models.Booking, update: BookingUpdate) -> None:
    for field in _CONTACT_FIELDS:
        value = getattr(update, field)
        if value is not None:
            setattr(booking, field, value)


def _transition(
    db: Session,
    network_id: int,
    booking_id: int,
    action: BookingAction,
    actor: Actor,
    **changes,
) -> models.Booking:
    booking = get_booking(db, network_id, booking_id, lock=True)
    try:
        booking.status = ensure_transition(booking, action)
    except InvalidStateTransition as exc:
        db.rollback()
        _log_rejection(exc, booking_id=booking_id)
        raise
    for field, value in changes.items():
        setattr(booking, field, value)
    audit_payload = {
        key: str(value) if value is not None else None for key, value in changes.items()
    }
    _audit(db, booking, actor, f"booking_{action.value}", **audit_payload)
    db.commit()
    db.refresh(booking)
    logger.info(
        "Booking transition applied",
        extra={"booking_code": booking.booking_code, "action": action.value},
    )
    return booking


def confirm_booking(db: Session, network_id: int, booking_id: int, *, actor: Actor) -> models.Booking:
    return _transition(db, network_id, booking_id, BookingAction.confirm, actor)


def start_booking(db: Session, network_id: int, booking_id: int, *, actor: Actor) -> models.Booking:
    return _transition(db, network_id, booking_id, BookingAction.start, actor)


def complete_booking(
    db: Session,
    network_id: int,
    booking_id: int,
    *,
    actor: Actor,
    wash_event_id: str | None = None,
) -> models.Booking:
    changes = {"wash_event_id": wash_event_id} if wash_event_id else {}
    return _transition(db, network_id, booking_id, BookingAction.complete, actor, **changes)


def cancel_booking(
    db: Session,
    network_id: int,
    booking_id: int,
    *,
    reason: str | None,
    actor: Actor,
    clock: Clock,
) -> models.Booking:
    settings = get_booking_settings(db, network_id)
    booking = get_booking(db, network_id, booking_id)
    now = clock.now()
    return _transition(
        db,
        network_id,
        booking_id,
        BookingAction.cancel,
        actor,
        cancelled_at=now,
        cancelled_by=actor.label,
        cancellation_reason=reason,
        cancellation_fee_applied=cancellation_fee(booking, settings, now),
    )


def mark_no_show(
    db: Session, network_id: int, booking_id: int, *, actor: Actor
) -> models.Booking:
    settings = get_booking_settings(db, network_id)
    booking = get_booking(db, network_id, booking_id)
    return _transition(
        db,
        network_id,
        booking_id,
        BookingAction.no_show,
        actor,
        cancellation_fee_applied=no_show_fee(booking, settings),
    )
