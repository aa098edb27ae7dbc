from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...api import deps
from ...api.errors import http_error
from ...core.security import Actor
from ...db.session import get_db
from ...db import schemas
from ...services import blocked_periods as blocked_period_service
from ...services.errors import BookingError

router = APIRouter(prefix="/blocked-periods", tags=["blocked-periods"])


@router.get("", response_model=list[schemas.BlockedPeriod])
def list_blocked_periods(
    location_id: int | None = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(deps.require_roles(*deps.STAFF_ROLES)),
):
    return blocked_period_service.list_blocked_periods(db, actor.network_id, location_id)


@router.post("", response_model=schemas.BlockedPeriod, status_code=status.HTTP_201_CREATED)
def create_blocked_period(
    payload: schemas.BlockedPeriodCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(deps.require_roles(*deps.STAFF_ROLES)),
):
    try:
        return blocked_period_service.create_blocked_period(
            db,
            actor.network_id,
            location_id=payload.location_id,
            start_time=payload.start_time,
            end_time=payload.end_time,
            reason=payload.reason,
            created_by=actor.label,
        )
    except BookingError as exc:
        raise http_error(exc) from exc


@router.post(
    "/recurring", response_model=schemas.BlockedPeriod, status_code=status.HTTP_201_CREATED
)
def create_recurring_block(
    payload: schemas.RecurringBlockCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(deps.require_roles(*deps.STAFF_ROLES)),
):
    try:
        return blocked_period_service.create_recurring_block(
            db,
            actor.network_id,
            location_id=payload.location_id,
            day_of_week=payload.day_of_week,
            start_time=payload.start_time,
            end_time=payload.end_time,
            reason=payload.reason,
            created_by=actor.label,
        )
    except BookingError as exc:
        raise http_error(exc) from exc


@router.delete("/{block_id}")
def delete_blocked_period(
    block_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(deps.require_roles(*deps.STAFF_ROLES)),
):
    try:
        blocked_period_service.delete_blocked_period(db, actor.network_id, block_id)
    except BookingError as exc:
        raise http_error(exc) from exc
    return {"status": "deleted"}
