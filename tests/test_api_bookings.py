import pytest

from conftest import add_location, add_offering
from washbook.core.security import Actor
from washbook.db import models


@pytest.fixture()
def world(api):
    with api.SessionLocal() as db:
        network = models.Network(name="Api")
        db.add(network)
        db.commit()
        location = add_location(db, network, parallel_slots=1)
        offering = add_offering(db, network)
        ids = {"network": network.id, "location": location.id, "offering": offering.id}
    api.as_actor(Actor(id="7", role="operator", network_id=ids["network"]))
    return ids


def create(api, world, start="2026-10-20T09:00:00Z", **extra):
    payload = {
        "location_id": world["location"],
        "service_offering_id": world["offering"],
        "scheduled_start": start,
    }
    payload.update(extra)
    return api.client.post("/api/v1/bookings", json=payload)


def test_create_booking(api, world):
    response = create(api, world, plate_number="ABC-123", customer_email="d@example.com")

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "PENDING"
    assert len(body["booking_code"]) == 8
    assert body["service_price"] == "10000.00"
    assert body["plate_number"] == "ABC-123"


def test_double_booking_conflicts(api, world):
    assert create(api, world).status_code == 201

    response = create(api, world, start="2026-10-20T09:30:00Z")

    assert response.status_code == 409
    assert "fully booked" in response.json()["detail"]


def test_policy_violation_is_unprocessable(api, world):
    response = create(api, world, start="2026-10-20T06:00:00Z")

    assert response.status_code == 422
    assert response.json()["detail"] == "The requested time is outside opening hours"


def test_unknown_location(api, world):
    response = api.client.post(
        "/api/v1/bookings",
        json={
            "location_id": 999,
            "service_offering_id": world["offering"],
            "scheduled_start": "2026-10-20T09:00:00Z",
        },
    )

    assert response.status_code == 404


def test_lifecycle_routes(api, world):
    booking = create(api, world).json()
    base = f"/api/v1/bookings/{booking['id']}"

    assert api.client.post(f"{base}/confirm").json()["status"] == "CONFIRMED"
    response = api.client.patch(base, json={"notes": "late"})
    assert response.status_code == 409
    assert api.client.post(f"{base}/start").json()["status"] == "IN_PROGRESS"
    completed = api.client.post(f"{base}/complete", json={"wash_event_id": "w-1"}).json()
    assert completed["status"] == "COMPLETED"
    assert completed["wash_event_id"] == "w-1"
    assert api.client.post(f"{base}/cancel", json={}).status_code == 409


def test_reschedule_and_cancel(api, world):
    booking = create(api, world).json()
    base = f"/api/v1/bookings/{booking['id']}"

    moved = api.client.post(f"{base}/reschedule", json={"scheduled_start": "2026-10-20T11:00:00Z"})
    assert moved.status_code == 200
    assert moved.json()["scheduled_start"].startswith("2026-10-20T11:00:00")

    cancelled = api.client.post(f"{base}/cancel", json={"reason": "Plans changed"}).json()
    assert cancelled["status"] == "CANCELLED"
    assert cancelled["cancellation_fee_applied"] is None
    assert cancelled["cancelled_by"] == "operator:7"


def test_no_show_route(api, world):
    booking = create(api, world).json()

    body = api.client.post(f"/api/v1/bookings/{booking['id']}/no-show").json()

    assert body["status"] == "NO_SHOW"
    assert body["cancellation_fee_applied"] == "10000.00"


def test_read_routes(api, world):
    booking = create(api, world).json()
    create(api, world, start="2026-10-20T12:00:00Z")

    assert api.client.get(f"/api/v1/bookings/{booking['id']}").json()["id"] == booking["id"]
    by_code = api.client.get(f"/api/v1/bookings/code/{booking['booking_code']}")
    assert by_code.json()["id"] == booking["id"]
    page = api.client.get("/api/v1/bookings", params={"limit": 1, "status": "PENDING"}).json()
    assert page["total"] == 2
    assert len(page["items"]) == 1
    assert page["items"][0]["id"] == booking["id"]
    assert api.client.get("/api/v1/bookings/999").status_code == 404


def test_todays_bookings(api, world):
    create(api, world)

    response = api.client.get("/api/v1/bookings/today", params={"location_id": world["location"]})

    # the fixed clock is on Monday, the booking is on Tuesday
    assert response.status_code == 200
    assert response.json() == []


def test_driver_access(api, world):
    operator_booking = create(api, world).json()
    api.as_actor(Actor(id="42", role="driver", network_id=world["network"]))

    assert api.client.get("/api/v1/bookings").status_code == 403
    assert api.client.get(f"/api/v1/bookings/{operator_booking['id']}").status_code == 404
    assert api.client.post(f"/api/v1/bookings/{operator_booking['id']}/confirm").status_code == 403

    own = create(api, world, start="2026-10-20T12:00:00Z").json()
    assert own["driver_id"] == 42
    assert api.client.get(f"/api/v1/bookings/{own['id']}").status_code == 200
    assert api.client.post(f"/api/v1/bookings/{own['id']}/cancel", json={}).status_code == 200


def test_bookings_are_scoped_to_network(api, world):
    booking = create(api, world).json()
    api.as_actor(Actor(id="9", role="network_admin", network_id=world["network"] + 1))

    assert api.client.get(f"/api/v1/bookings/{booking['id']}").status_code == 404
    assert api.client.get(f"/api/v1/bookings/code/{booking['booking_code']}").status_code == 404
