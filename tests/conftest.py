from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from washbook.core.clock import FixedClock
from washbook.core.security import Actor
from washbook.db import models
from washbook.db.session import Base

# Monday, 2026-10-19 06:00 UTC
NOW = datetime(2026, 10, 19, 6, 0, tzinfo=timezone.utc)


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(
        bind=engine, autoflush=False, autocommit=False, expire_on_commit=False
    )
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock():
    return FixedClock(NOW)


@pytest.fixture()
def network(db_session):
    network = models.Network(name="Test Network")
    db_session.add(network)
    db_session.commit()
    db_session.refresh(network)
    return network


@pytest.fixture()
def operator(network):
    return Actor(id="7", role="operator", network_id=network.id)


@pytest.fixture()
def driver(network):
    return Actor(id="42", role="driver", network_id=network.id)


def add_location(session, network, hours=("08:00", "16:00"), closed_days=(), **overrides):
    values = {
        "network_id": network.id,
        "name": "Csepel",
        "address": "Main street 1",
        "timezone": "UTC",
        "parallel_slots": 2,
        "slot_interval_minutes": 30,
        "min_booking_notice_hours": 0,
        "max_booking_advance_days": 30,
    }
    values.update(overrides)
    location = models.Location(**values)
    session.add(location)
    session.flush()
    if hours is not None:
        for day in models.DayOfWeek:
            session.add(
                models.OpeningHours(
                    location_id=location.id,
                    day_of_week=day,
                    open_time=hours[0],
                    close_time=hours[1],
                    is_closed=day in closed_days,
                )
            )
    session.commit()
    session.refresh(location)
    return location


def add_offering(session, network, duration_minutes=60, price="10000.00", **overrides):
    package = models.ServicePackage(network_id=network.id, name="Exterior wash", code="EXT")
    session.add(package)
    session.flush()
    values = {
        "network_id": network.id,
        "service_package_id": package.id,
        "vehicle_type": "TRUCK",
        "duration_minutes": duration_minutes,
        "price": Decimal(price),
    }
    values.update(overrides)
    offering = models.ServiceOffering(**values)
    session.add(offering)
    session.commit()
    session.refresh(offering)
    return offering


def add_booking(session, location, offering, start, status=models.BookingStatus.PENDING, code=None):
    booking = models.Booking(
        booking_code=code or f"T{session.query(models.Booking).count():07d}",
        network_id=location.network_id,
        location_id=location.id,
        service_offering_id=offering.id,
        service_package_id=offering.service_package_id,
        vehicle_type=offering.vehicle_type,
        scheduled_start=start,
        scheduled_end=start + timedelta(minutes=offering.duration_minutes),
        status=status,
        service_duration_minutes=offering.duration_minutes,
        service_price=offering.price,
        currency=offering.currency,
    )
    session.add(booking)
    session.commit()
    session.refresh(booking)
    return booking


@pytest.fixture()
def location(db_session, network):
    return add_location(db_session, network)


@pytest.fixture()
def offering(db_session, network):
    return add_offering(db_session, network)


class ApiHarness:
    def __init__(self, client, session_factory):
        self.client = client
        self.SessionLocal = session_factory
        self.actor = None

    def as_actor(self, actor):
        self.actor = actor
        return self


@pytest.fixture()
def api(clock):
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from sqlalchemy.pool import StaticPool

    from washbook.api import deps
    from washbook.api.routes import blocked_periods, booking_settings, bookings, misc, slots
    from washbook.config import Settings
    from washbook.db.session import get_db
    from washbook.services.notifications.log import LogNotificationSender

    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    TestingSessionLocal = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    test_app = FastAPI()
    for module in (slots, bookings, blocked_periods, booking_settings, misc):
        test_app.include_router(module.router, prefix="/api/v1")

    with TestClient(test_app) as client:
        harness = ApiHarness(client, TestingSessionLocal)
        test_app.dependency_overrides[get_db] = override_get_db
        test_app.dependency_overrides[deps.get_clock] = lambda: clock
        test_app.dependency_overrides[deps.get_notifier] = lambda: LogNotificationSender(Settings())
        test_app.dependency_overrides[deps.get_current_actor] = lambda: harness.actor
        yield harness

    test_app.dependency_overrides.clear()
