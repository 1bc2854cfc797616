"""
Integration tests for vehicle management.
"""

import pytest

from fleet_backend.app.services.changefeed import ChangeType, change_feed


@pytest.mark.asyncio
async def test_create_and_fetch_vehicle(client, manager_headers):
    payload = {
        "license_plate": "  KDA 777X ",
        "vehicle_type": "Matatu",
        "route_assigned": "   ",
        "fuel_efficiency_kml": 8.2,
        "insurance_expiry": "2027-03-31",
    }
    response = await client.post("/v1/vehicles", json=payload, headers=manager_headers)
    assert response.status_code == 201
    created = response.json()
    assert created["license_plate"] == "KDA 777X"
    assert created["route_assigned"] is None
    assert created["status"] == "active"
    assert created["maintenance_status"] == "good"

    response = await client.get(f"/v1/vehicles/{created['id']}", headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["insurance_expiry"] == "2027-03-31"


@pytest.mark.asyncio
async def test_duplicate_plate_rejected(client, manager_headers, vehicle):
    payload = {"license_plate": vehicle.license_plate, "vehicle_type": "Truck"}
    response = await client.post("/v1/vehicles", json=payload, headers=manager_headers)
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "license_plate"}


@pytest.mark.asyncio
async def test_blank_plate_rejected(client, manager_headers):
    response = await client.post(
        "/v1/vehicles", json={"license_plate": "   ", "vehicle_type": "Truck"}, headers=manager_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_filters_by_status(client, operations_headers, vehicle):
    await client.post(
        "/v1/vehicles",
        json={"license_plate": "KBX 100C", "vehicle_type": "Van", "status": "maintenance"},
        headers=operations_headers,
    )

    response = await client.get("/v1/vehicles", params={"status": "maintenance"}, headers=operations_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["vehicles"][0]["license_plate"] == "KBX 100C"

    everything = await client.get("/v1/vehicles", headers=operations_headers)
    assert everything.json()["total"] == 2


@pytest.mark.asyncio
async def test_update_and_delete_publish_changes(client, manager_headers, vehicle):
    subscription = change_feed.subscribe(["vehicles"])
    try:
        response = await client.patch(
            f"/v1/vehicles/{vehicle.id}", json={"maintenance_status": "critical"}, headers=manager_headers
        )
        assert response.status_code == 200
        assert response.json()["maintenance_status"] == "critical"

        response = await client.delete(f"/v1/vehicles/{vehicle.id}", headers=manager_headers)
        assert response.status_code == 204

        first = await subscription.get()
        second = await subscription.get()
        assert (first.event, first.id) == (ChangeType.UPDATE, vehicle.id)
        assert (second.event, second.id) == (ChangeType.DELETE, vehicle.id)
    finally:
        subscription.close()

    response = await client.get(f"/v1/vehicles/{vehicle.id}", headers=manager_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_finance_cannot_edit_vehicles(client, finance_headers, vehicle):
    response = await client.patch(f"/v1/vehicles/{vehicle.id}", json={"status": "idle"}, headers=finance_headers)
    assert response.status_code == 403
