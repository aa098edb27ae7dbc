from decimal import Decimal
from sqlalchemy import select
from sqlalchemy.orm import Session
from ..db.session import SessionLocal
from ..db import models

_WEEKDAY_HOURS = ("08:00", "20:00")
_SATURDAY_HOURS = ("09:00", "16:00")


def _opening_hours(location: models.Location) -> list[models.OpeningHours]:
    entries = []
    for day in models.DayOfWeek:
        if day is models.DayOfWeek.SUNDAY:
            entries.append(models.OpeningHours(location=location, day_of_week=day, is_closed=True))
            continue
        open_time, close_time = (
            _SATURDAY_HOURS if day is models.DayOfWeek.SATURDAY else _WEEKDAY_HOURS
        )
        entries.append(
            models.OpeningHours(
                location=location,
                day_of_week=day,
                open_time=open_time,
                close_time=close_time,
            )
        )
    return entries


def seed(session: Session) -> None:
    if session.execute(select(models.Network.id)).first() is not None:
        return
    network = models.Network(name="Demo Wash Network")
    session.add(network)
    session.flush()

    location = models.Location(
        network_id=network.id,
        name="Budapest Csepel",
        code="BUD-01",
        city="Budapest",
        address="Weiss Manfred ut 5",
        timezone="Europe/Budapest",
        parallel_slots=2,
        slot_interval_minutes=30,
    )
    session.add(location)
    session.add_all(_opening_hours(location))

    package = models.ServicePackage(network_id=network.id, name="Exterior wash", code="EXT")
    session.add(package)
    session.flush()
    session.add_all(
        [
            models.ServiceOffering(
                network_id=network.id,
                service_package_id=package.id,
                vehicle_type="TRUCK",
                duration_minutes=60,
                price=Decimal("25000.00"),
            ),
            models.ServiceOffering(
                network_id=network.id,
                service_package_id=package.id,
                vehicle_type="VAN",
                duration_minutes=30,
                price=Decimal("12000.00"),
            ),
        ]
    )
    session.add(models.BookingSettings(network_id=network.id))
    session.commit()


if __name__ == "__main__":
    with SessionLocal() as session:
        seed(session)
        print("Seed data created")
