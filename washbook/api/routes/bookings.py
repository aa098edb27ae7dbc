from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ...api import deps
from ...api.errors import http_error
from ...core.clock import Clock
from ...core.security import Actor
from ...db.session import get_db
from ...db import models, schemas
from ...services import booking_service
from ...services.errors import BookingError
from ...services.notifications import NotificationSender

router = APIRouter(prefix="/bookings", tags=["bookings"])


def _visible_to(booking: models.Booking, actor: Actor) -> models.Booking:
    # drivers only see bookings they created themselves
    if actor.role == "driver" and booking.created_by_id != actor.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return booking


@router.get("", response_model=schemas.BookingPage)
def list_bookings(
    query: Annotated[schemas.BookingListQuery, Query()],
    db: Session = Depends(get_db),
    actor: Actor = Depends(deps.require_roles(*deps.STAFF_ROLES)),
):
    items, total = booking_service.list_bookings(
        db,
        actor.network_id,
        booking_service.BookingFilter(
            location_id=query.location_id,
            status=query.status,
            date_from=query.date_from,
            date_to=query.date_to,
            page=query.page,
            limit=query.limit,
        ),
    )
    return schemas.BookingPage(
        items=[schemas.Booking.model_validate(item) for item in items],
        total=total,
        page=query.page,
        limit=query.limit,
    )


@router.get("/today", response_model=list[schemas.Booking])
def list_todays_bookings(
    location_id: int = Query(...),
    db: Session = Depends(get_db),
    clock: Clock = Depends(deps.get_clock),
    actor: Actor = Depends(deps.require_roles(*deps.STAFF_ROLES)),
):
    try:
        return booking_service.list_todays_bookings(
            db, actor.network_id, location_id, clock=clock
        )
    except BookingError as exc:
        raise http_error(exc) from exc


@router.get("/code/{booking_code}", response_model=schemas.Booking)
def get_booking_by_code(
    booking_code: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(deps.require_roles(*deps.ALL_ROLES)),
):
    try:
        booking = booking_service.get_booking_by_code(db, booking_code)
    except BookingError as exc:
        raise http_error(exc) from exc
    if booking.network_id != actor.network_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return booking


@router.get("/{booking_id}", response_model=schemas.Booking)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(deps.require_roles(*deps.ALL_ROLES)),
):
    try:
        booking = booking_service.get_booking(db, actor.network_id, booking_id)
    except BookingError as exc:
        raise http_error(exc) from exc
    return _visible_to(booking, actor)


@router.post("", response_model=schemas.Booking, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: schemas.BookingCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(deps.get_clock),
    notifier: NotificationSender = Depends(deps.get_notifier),
    actor: Actor = Depends(deps.require_roles(*deps.ALL_ROLES)),
):
    request = booking_service.BookingCreate(**payload.model_dump())
    if actor.role == "driver":
        request.driver_id = int(actor.id) if actor.id.isdigit() else None
    try:
        return booking_service.create_booking(
            db,
            actor.network_id,
            request,
            actor=actor,
            clock=clock,
            notifier=notifier,
        )
    except BookingError as exc:
        raise http_error(exc) from exc


@router.patch("/{booking_id}", response_model=schemas.Booking)
def update_booking(
    booking_id: int,
    payload: schemas.BookingUpdate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(deps.get_clock),
    actor: Actor = Depends(deps.require_roles(*deps.STAFF_ROLES)),
):
    update = booking_service.BookingUpdate(**payload.model_dump(exclude_unset=True))
    try:
        return booking_service.update_booking(
            db, actor.network_id, booking_id, update, actor=actor, clock=clock
        )
    except BookingError as exc:
        raise http_error(exc) from exc


@router.post("/{booking_id}/reschedule", response_model=schemas.Booking)
def reschedule_booking(
    booking_id: int,
    payload: schemas.BookingReschedule,
    db: Session = Depends(get_db),
    clock: Clock = Depends(deps.get_clock),
    actor: Actor = Depends(deps.require_roles(*deps.STAFF_ROLES)),
):
    try:
        return booking_service.reschedule_booking(
            db,
            actor.network_id,
            booking_id,
            payload.scheduled_start,
            actor=actor,
            clock=clock,
        )
    except BookingError as exc:
        raise http_error(exc) from exc


@router.post("/{booking_id}/confirm", response_model=schemas.Booking)
def confirm_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(deps.require_roles(*deps.STAFF_ROLES)),
):
    try:
        return booking_service.confirm_booking(db, actor.network_id, booking_id, actor=actor)
    except BookingError as exc:
        raise http_error(exc) from exc


@router.post("/{booking_id}/start", response_model=schemas.Booking)
def start_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(deps.require_roles(*deps.STAFF_ROLES)),
):
    try:
        return booking_service.start_booking(db, actor.network_id, booking_id, actor=actor)
    except BookingError as exc:
        raise http_error(exc) from exc


@router.post("/{booking_id}/complete", response_model=schemas.Booking)
def complete_booking(
    booking_id: int,
    payload: schemas.BookingComplete | None = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(deps.require_roles(*deps.STAFF_ROLES)),
):
    wash_event_id = payload.wash_event_id if payload else None
    try:
        return booking_service.complete_booking(
            db, actor.network_id, booking_id, actor=actor, wash_event_id=wash_event_id
        )
    except BookingError as exc:
        raise http_error(exc) from exc


@router.post("/{booking_id}/cancel", response_model=schemas.Booking)
def cancel_booking(
    booking_id: int,
    payload: schemas.BookingCancel,
    db: Session = Depends(get_db),
    clock: Clock = Depends(deps.get_clock),
    actor: Actor = Depends(deps.require_roles(*deps.ALL_ROLES)),
):
    try:
        _visible_to(booking_service.get_booking(db, actor.network_id, booking_id), actor)
        return booking_service.cancel_booking(
            db,
            actor.network_id,
            booking_id,
            reason=payload.reason,
            actor=actor,
            clock=clock,
        )
    except BookingError as exc:
        raise http_error(exc) from exc


@router.post("/{booking_id}/no-show", response_model=schemas.Booking)
def mark_no_show(
    booking_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(deps.require_roles(*deps.STAFF_ROLES)),
):
    try:
        return booking_service.mark_no_show(db, actor.network_id, booking_id, actor=actor)
    except BookingError as exc:
        raise http_error(exc) from exc
