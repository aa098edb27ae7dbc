from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...api import deps
from ...core.security import Actor
from ...db.session import get_db
from ...db import schemas
from ...services import settings_service

router = APIRouter(prefix="/booking-settings", tags=["booking-settings"])


@router.get("", response_model=schemas.BookingSettings)
def read_booking_settings(
    db: Session = Depends(get_db),
    actor: Actor = Depends(deps.require_roles(*deps.STAFF_ROLES)),
):
    return settings_service.get_booking_settings(db, actor.network_id)


@router.put("", response_model=schemas.BookingSettings)
def update_booking_settings(
    payload: schemas.BookingSettingsUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(deps.require_roles("network_admin")),
):
    update = settings_service.BookingSettingsUpdate(**payload.model_dump(exclude_unset=True))
    return settings_service.update_booking_settings(db, actor.network_id, update)
