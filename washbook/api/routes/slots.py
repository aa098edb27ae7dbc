from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...api import deps
from ...api.errors import http_error
from ...core.clock import Clock
from ...core.security import Actor
from ...db.session import get_db
from ...db import schemas
from ...services import slot_service
from ...services.errors import BookingError

router = APIRouter(prefix="/locations", tags=["slots"])


@router.get("/{location_id}/slots", response_model=schemas.SlotList)
def list_slots(
    location_id: int,
    target_date: date = Query(..., alias="date"),
    service_offering_id: int | None = None,
    db: Session = Depends(get_db),
    clock: Clock = Depends(deps.get_clock),
    actor: Actor = Depends(deps.require_roles(*deps.ALL_ROLES)),
):
    try:
        slots = slot_service.list_available_slots(
            db,
            actor.network_id,
            location_id,
            target_date,
            service_offering_id,
            clock=clock,
        )
    except BookingError as exc:
        raise http_error(exc) from exc
    return schemas.SlotList(
        location_id=location_id,
        date=target_date,
        slots=[schemas.Slot.model_validate(slot) for slot in slots],
    )
