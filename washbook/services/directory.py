"""Read-only, tenant-scoped lookups of locations and service offerings."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import models
from .errors import NotFound


def get_location(
    db: Session, network_id: int, location_id: int, *, lock: bool = False
) -> models.Location:
    stmt = select(models.Location).where(
        models.Location.id == location_id,
        models.Location.network_id == network_id,
        models.Location.deleted_at.is_(None),
    )
    if lock:
        stmt = stmt.with_for_update()
    location = db.execute(stmt).scalar_one_or_none()
    if location is None:
        raise NotFound("Location not found")
    return location


def get_service_offering(
    db: Session, network_id: int, service_offering_id: int
) -> models.ServiceOffering:
    offering = db.execute(
        select(models.ServiceOffering).where(
            models.ServiceOffering.id == service_offering_id,
            models.ServiceOffering.network_id == network_id,
            models.ServiceOffering.is_active.is_(True),
        )
    ).scalar_one_or_none()
    if offering is None:
        raise NotFound("Service is not available for this vehicle type")
    return offering
