from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

import pytest

from conftest import NOW, add_booking, add_location, add_offering
from washbook.core.constants import BOOKING_CODE_ALPHABET
from washbook.db import models
from washbook.services import blocked_periods, booking_service
from washbook.services.booking_service import BookingCreate, BookingFilter, BookingUpdate
from washbook.services.errors import Conflict, InvalidStateTransition, NotFound, PolicyViolation

TUESDAY = date(2026, 10, 20)


def at(day, hour, minute=0):
    return datetime.combine(day, time(hour, minute), tzinfo=timezone.utc)


def request_for(location, offering, start, **extra):
    return BookingCreate(
        location_id=location.id,
        service_offering_id=offering.id,
        scheduled_start=start,
        **extra,
    )


class RecordingNotifier:
    def __init__(self, result=True, error=None):
        self.result = result
        self.error = error
        self.sent = []

    def send_booking_confirmation(self, recipient, summary):
        self.sent.append((recipient, summary))
        if self.error is not None:
            raise self.error
        return self.result


def test_create_booking(db_session, network, location, offering, operator, clock):
    booking = booking_service.create_booking(
        db_session,
        network.id,
        request_for(location, offering, at(TUESDAY, 9), plate_number="ABC-123"),
        actor=operator,
        clock=clock,
    )

    assert booking.status == models.BookingStatus.PENDING
    assert booking.payment_status == models.PaymentStatus.PENDING
    assert len(booking.booking_code) == 8
    assert set(booking.booking_code) <= set(BOOKING_CODE_ALPHABET)
    assert booking.scheduled_end.replace(tzinfo=timezone.utc) == at(TUESDAY, 10)
    assert booking.service_price == Decimal("10000.00")
    assert booking.service_duration_minutes == 60
    assert booking.vehicle_type == "TRUCK"
    assert booking.created_by_type == "operator"
    assert booking.created_by_id == "7"

    audit = db_session.query(models.AuditLog).one()
    assert audit.action == "booking_created"
    assert audit.actor_type == models.ActorType.operator
    assert audit.payload["booking_code"] == booking.booking_code


def test_create_booking_accepts_naive_start_as_utc(db_session, network, location, offering, operator, clock):
    booking = booking_service.create_booking(
        db_session,
        network.id,
        request_for(location, offering, datetime(2026, 10, 20, 9, 0)),
        actor=operator,
        clock=clock,
    )

    assert booking.scheduled_start.replace(tzinfo=timezone.utc) == at(TUESDAY, 9)


def test_capacity_conflict(db_session, network, location, offering, operator, clock):
    for _ in range(location.parallel_slots):
        booking_service.create_booking(
            db_session, network.id, request_for(location, offering, at(TUESDAY, 9)),
            actor=operator, clock=clock,
        )

    with pytest.raises(Conflict):
        booking_service.create_booking(
            db_session, network.id, request_for(location, offering, at(TUESDAY, 9, 30)),
            actor=operator, clock=clock,
        )
    assert db_session.query(models.Booking).count() == 2


def test_cancelled_booking_frees_capacity(db_session, network, offering, operator, clock):
    location = add_location(db_session, network, parallel_slots=1)
    first = booking_service.create_booking(
        db_session, network.id, request_for(location, offering, at(TUESDAY, 9)),
        actor=operator, clock=clock,
    )
    booking_service.cancel_booking(
        db_session, network.id, first.id, reason=None, actor=operator, clock=clock
    )

    second = booking_service.create_booking(
        db_session, network.id, request_for(location, offering, at(TUESDAY, 9)),
        actor=operator, clock=clock,
    )

    assert second.booking_code != first.booking_code


@pytest.mark.parametrize(
    "location_overrides, start",
    [
        ({"booking_enabled": False}, at(TUESDAY, 9)),
        ({"min_booking_notice_hours": 2}, NOW + timedelta(hours=1)),
        ({"max_booking_advance_days": 1}, at(TUESDAY, 9) + timedelta(days=2)),
        ({"closed_days": (models.DayOfWeek.TUESDAY,)}, at(TUESDAY, 9)),
        ({}, at(TUESDAY, 7, 30)),
        ({}, at(TUESDAY, 15, 30)),
    ],
    ids=["disabled", "notice", "advance", "closed-day", "before-open", "past-close"],
)
def test_policy_violations(db_session, network, offering, operator, clock, location_overrides, start):
    location = add_location(db_session, network, **location_overrides)

    with pytest.raises(PolicyViolation):
        booking_service.create_booking(
            db_session, network.id, request_for(location, offering, start),
            actor=operator, clock=clock,
        )
    assert db_session.query(models.Booking).count() == 0
    assert db_session.query(models.AuditLog).count() == 0


def test_booking_may_end_exactly_at_close(db_session, network, location, offering, operator, clock):
    booking = booking_service.create_booking(
        db_session, network.id, request_for(location, offering, at(TUESDAY, 15)),
        actor=operator, clock=clock,
    )

    assert booking.scheduled_end.replace(tzinfo=timezone.utc) == at(TUESDAY, 16)


def test_blocked_time_is_rejected(db_session, network, location, offering, operator, clock):
    blocked_periods.create_recurring_block(
        db_session,
        network.id,
        location_id=location.id,
        day_of_week=models.DayOfWeek.TUESDAY,
        start_time="12:00",
        end_time="13:00",
    )

    with pytest.raises(PolicyViolation):
        booking_service.create_booking(
            db_session, network.id, request_for(location, offering, at(TUESDAY, 11, 30)),
            actor=operator, clock=clock,
        )
    booking = booking_service.create_booking(
        db_session, network.id, request_for(location, offering, at(TUESDAY, 13)),
        actor=operator, clock=clock,
    )
    assert booking.id is not None


def test_unknown_location_and_offering(db_session, network, location, offering, operator, clock):
    with pytest.raises(NotFound):
        booking_service.create_booking(
            db_session,
            network.id,
            BookingCreate(location_id=999, service_offering_id=offering.id, scheduled_start=at(TUESDAY, 9)),
            actor=operator,
            clock=clock,
        )
    inactive = add_offering(db_session, network, is_active=False)
    with pytest.raises(NotFound):
        booking_service.create_booking(
            db_session, network.id, request_for(location, inactive, at(TUESDAY, 9)),
            actor=operator, clock=clock,
        )


def test_confirmation_is_sent_to_customer(db_session, network, location, offering, driver, clock):
    notifier = RecordingNotifier()

    booking = booking_service.create_booking(
        db_session,
        network.id,
        request_for(location, offering, at(TUESDAY, 9), customer_email="driver@example.com"),
        actor=driver,
        clock=clock,
        notifier=notifier,
    )

    recipient, summary = notifier.sent[0]
    assert recipient == "driver@example.com"
    assert summary.booking_code == booking.booking_code
    assert summary.location_name == location.name
    assert summary.service_name == "Exterior wash"
    assert summary.customer_name == "Customer"


def test_notification_failure_keeps_booking(db_session, network, location, offering, driver, clock):
    notifier = RecordingNotifier(error=RuntimeError("smtp down"))

    booking = booking_service.create_booking(
        db_session,
        network.id,
        request_for(location, offering, at(TUESDAY, 9), customer_phone="+3612345678"),
        actor=driver,
        clock=clock,
        notifier=notifier,
    )

    assert booking_service.get_booking(db_session, network.id, booking.id).id == booking.id


def test_no_confirmation_without_contact(db_session, network, location, offering, driver, clock):
    notifier = RecordingNotifier()

    booking_service.create_booking(
        db_session, network.id, request_for(location, offering, at(TUESDAY, 9)),
        actor=driver, clock=clock, notifier=notifier,
    )

    assert notifier.sent == []


def test_reschedule_excludes_own_booking(db_session, network, offering, operator, clock):
    location = add_location(db_session, network, parallel_slots=1)
    booking = booking_service.create_booking(
        db_session, network.id, request_for(location, offering, at(TUESDAY, 9)),
        actor=operator, clock=clock,
    )

    moved = booking_service.reschedule_booking(
        db_session, network.id, booking.id, at(TUESDAY, 9, 30), actor=operator, clock=clock
    )

    assert moved.scheduled_start.replace(tzinfo=timezone.utc) == at(TUESDAY, 9, 30)
    assert moved.scheduled_end.replace(tzinfo=timezone.utc) == at(TUESDAY, 10, 30)
    actions = [row.action for row in db_session.query(models.AuditLog).order_by(models.AuditLog.id)]
    assert actions == ["booking_created", "booking_rescheduled"]


def test_reschedule_into_full_slot_conflicts(db_session, network, offering, operator, clock):
    location = add_location(db_session, network, parallel_slots=1)
    booking = booking_service.create_booking(
        db_session, network.id, request_for(location, offering, at(TUESDAY, 9)),
        actor=operator, clock=clock,
    )
    booking_service.create_booking(
        db_session, network.id, request_for(location, offering, at(TUESDAY, 11)),
        actor=operator, clock=clock,
    )

    with pytest.raises(Conflict):
        booking_service.update_booking(
            db_session,
            network.id,
            booking.id,
            BookingUpdate(scheduled_start=at(TUESDAY, 11), notes="moved"),
            actor=operator,
            clock=clock,
        )

    db_session.expire_all()
    unchanged = booking_service.get_booking(db_session, network.id, booking.id)
    assert unchanged.scheduled_start.replace(tzinfo=timezone.utc) == at(TUESDAY, 9)
    assert unchanged.notes is None


def test_update_changes_service_snapshot(db_session, network, location, offering, operator, clock):
    van = add_offering(db_session, network, duration_minutes=30, price="4000.00", vehicle_type="VAN")
    booking = booking_service.create_booking(
        db_session, network.id, request_for(location, offering, at(TUESDAY, 9)),
        actor=operator, clock=clock,
    )

    updated = booking_service.update_booking(
        db_session,
        network.id,
        booking.id,
        BookingUpdate(service_offering_id=van.id),
        actor=operator,
        clock=clock,
    )

    assert updated.vehicle_type == "VAN"
    assert updated.service_price == Decimal("4000.00")
    assert updated.scheduled_end.replace(tzinfo=timezone.utc) == at(TUESDAY, 9, 30)


def test_update_contact_fields_only(db_session, network, location, offering, operator, clock):
    booking = booking_service.create_booking(
        db_session, network.id, request_for(location, offering, at(TUESDAY, 9)),
        actor=operator, clock=clock,
    )

    updated = booking_service.update_booking(
        db_session,
        network.id,
        booking.id,
        BookingUpdate(customer_name="Kovacs", plate_number="XYZ-987"),
        actor=operator,
        clock=clock,
    )

    assert updated.customer_name == "Kovacs"
    assert updated.plate_number == "XYZ-987"


def test_update_requires_pending(db_session, network, location, offering, operator, clock):
    booking = booking_service.create_booking(
        db_session, network.id, request_for(location, offering, at(TUESDAY, 9)),
        actor=operator, clock=clock,
    )
    booking_service.confirm_booking(db_session, network.id, booking.id, actor=operator)

    with pytest.raises(InvalidStateTransition):
        booking_service.update_booking(
            db_session,
            network.id,
            booking.id,
            BookingUpdate(scheduled_start=at(TUESDAY, 12)),
            actor=operator,
            clock=clock,
        )


def test_lookups(db_session, network, location, offering, operator, clock):
    booking = booking_service.create_booking(
        db_session, network.id, request_for(location, offering, at(TUESDAY, 9)),
        actor=operator, clock=clock,
    )

    assert booking_service.get_booking_by_code(db_session, booking.booking_code.lower()).id == booking.id
    with pytest.raises(NotFound):
        booking_service.get_booking_by_code(db_session, "ZZZZZZZZ")
    with pytest.raises(NotFound):
        booking_service.get_booking(db_session, network.id + 1, booking.id)


def test_list_bookings_filters_and_pages(db_session, network, location, offering):
    for hour in (12, 9, 10):
        add_booking(db_session, location, offering, at(TUESDAY, hour))
    add_booking(db_session, location, offering, at(TUESDAY, 11), status=models.BookingStatus.CANCELLED)
    add_booking(db_session, location, offering, at(TUESDAY + timedelta(days=1), 9))

    items, total = booking_service.list_bookings(
        db_session,
        network.id,
        BookingFilter(status=models.BookingStatus.PENDING, date_from=TUESDAY, date_to=TUESDAY, limit=2),
    )
    assert total == 3
    assert [item.scheduled_start.hour for item in items] == [9, 10]

    items, total = booking_service.list_bookings(
        db_session,
        network.id,
        BookingFilter(status=models.BookingStatus.PENDING, date_from=TUESDAY, date_to=TUESDAY, page=2, limit=2),
    )
    assert [item.scheduled_start.hour for item in items] == [12]

    _, everything = booking_service.list_bookings(db_session, network.id, BookingFilter())
    assert everything == 5


def test_list_todays_bookings(db_session, network, location, offering):
    from washbook.core.clock import FixedClock

    add_booking(db_session, location, offering, at(TUESDAY, 9))
    add_booking(db_session, location, offering, at(TUESDAY, 10), status=models.BookingStatus.CANCELLED)
    add_booking(db_session, location, offering, at(TUESDAY + timedelta(days=1), 9))

    todays = booking_service.list_todays_bookings(
        db_session, network.id, location.id, clock=FixedClock(at(TUESDAY, 7))
    )

    assert len(todays) == 1
    assert todays[0].scheduled_start.hour == 9
