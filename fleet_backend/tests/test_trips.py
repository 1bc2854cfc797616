"""
Integration tests for trip scheduling.
"""

import pytest

from fleet_backend.app.models.lookups import RouteMaster


@pytest.fixture
async def master_route(db_session):
    route = RouteMaster(name="Nairobi-Mombasa", start_location="Nairobi", end_location="Mombasa", distance_km=485)
    db_session.add(route)
    await db_session.commit()
    return route


@pytest.mark.asyncio
async def test_trip_prefilled_from_master_route(client, operations_headers, vehicle, master_route):
    payload = {
        "vehicle_id": vehicle.id,
        "route": "Nairobi-Mombasa",
        "start_time": "2026-10-18T06:00:00Z",
        "estimated_duration_hours": 9,
    }
    response = await client.post("/v1/trips", json=payload, headers=operations_headers)

    assert response.status_code == 201
    trip = response.json()
    assert trip["start_location"] == "Nairobi"
    assert trip["end_location"] == "Mombasa"
    assert trip["distance_km"] == 485
    assert trip["status"] == "scheduled"
    assert trip["vehicle_license_plate"] == "KCA 123A"


@pytest.mark.asyncio
async def test_explicit_locations_win_over_master_route(client, operations_headers, vehicle, master_route):
    payload = {
        "vehicle_id": vehicle.id,
        "route": "Nairobi-Mombasa",
        "start_location": "Athi River",
        "start_time": "2026-10-18T06:00:00Z",
    }
    response = await client.post("/v1/trips", json=payload, headers=operations_headers)
    assert response.status_code == 201
    assert response.json()["start_location"] == "Athi River"
    assert response.json()["end_location"] == "Mombasa"


@pytest.mark.asyncio
async def test_unknown_route_needs_locations(client, operations_headers, vehicle):
    payload = {"vehicle_id": vehicle.id, "route": "Eldoret-Kitale", "start_time": "2026-10-18T06:00:00Z"}
    response = await client.post("/v1/trips", json=payload, headers=operations_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Start location is required"


@pytest.mark.asyncio
async def test_blank_route_rejected(client, operations_headers, vehicle):
    payload = {
        "vehicle_id": vehicle.id,
        "route": "  ",
        "start_location": "Nairobi",
        "end_location": "Nakuru",
        "start_time": "2026-10-18T06:00:00Z",
    }
    response = await client.post("/v1/trips", json=payload, headers=operations_headers)
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "route"}


@pytest.mark.asyncio
async def test_trip_for_missing_vehicle(client, operations_headers):
    payload = {
        "vehicle_id": 404,
        "route": "Nairobi-Nakuru",
        "start_location": "Nairobi",
        "end_location": "Nakuru",
        "start_time": "2026-10-18T06:00:00Z",
    }
    response = await client.post("/v1/trips", json=payload, headers=operations_headers)
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "vehicle_id"}


@pytest.mark.asyncio
async def test_non_positive_estimate_rejected(client, operations_headers, vehicle):
    payload = {
        "vehicle_id": vehicle.id,
        "route": "Nairobi-Nakuru",
        "start_location": "Nairobi",
        "end_location": "Nakuru",
        "start_time": "2026-10-18T06:00:00Z",
        "estimated_duration_hours": 0,
    }
    response = await client.post("/v1/trips", json=payload, headers=operations_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_and_progress_update(client, operations_headers, vehicle, master_route):
    for hour in (6, 9):
        await client.post(
            "/v1/trips",
            json={"vehicle_id": vehicle.id, "route": "Nairobi-Mombasa", "start_time": f"2026-10-18T0{hour}:00:00Z"},
            headers=operations_headers,
        )

    listing = await client.get("/v1/trips", headers=operations_headers)
    trips = listing.json()["trips"]
    assert listing.json()["total"] == 2
    # newest start first
    assert trips[0]["start_time"].startswith("2026-10-18T09:00:00")

    response = await client.patch(
        f"/v1/trips/{trips[1]['id']}",
        json={"status": "in_progress", "progress_percent": 40},
        headers=operations_headers,
    )
    assert response.status_code == 200
    assert response.json()["progress_percent"] == 40

    in_progress = await client.get("/v1/trips", params={"status": "in_progress"}, headers=operations_headers)
    assert in_progress.json()["total"] == 1
