"""
Integration tests for the callable functions.
"""

import logging
import random

import pytest
from sqlalchemy import select

from fleet_backend.app.core.config import settings
from fleet_backend.app.models.driver import Driver
from fleet_backend.app.models.enums import AppRole, VehicleStatus
from fleet_backend.app.models.profile import Profile
from fleet_backend.app.models.user_role import UserRoleAssignment
from fleet_backend.app.models.vehicle import Vehicle
from fleet_backend.app.services.accounts import TEST_ACCOUNTS
from fleet_backend.app.services.live_locations import ROUTE_WAYPOINTS, generate_live_locations, next_position


@pytest.mark.asyncio
async def test_create_driver(client, manager_headers, vehicle, db_session, caplog):
    payload = {
        "email": "Otieno@SafiriSmart.co.ke",
        "full_name": "Brian Otieno",
        "mobile_phone": "+254712345678",
        "license_number": "DL-88321",
        "vehicle_id": vehicle.id,
    }
    with caplog.at_level(logging.DEBUG):
        response = await client.post("/v1/functions/create-driver", json=payload, headers=manager_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    password = data["credentials"]["password"]
    assert password.startswith("Driver") and password.endswith("!")
    assert data["credentials"]["email"] == "otieno@safirismart.co.ke"
    assert password not in caplog.text

    driver = (await db_session.execute(select(Driver).where(Driver.id == data["driver_id"]))).scalar_one()
    assert driver.performance_score == 100
    assert driver.total_trips == 0
    assert driver.vehicle_id == vehicle.id

    profile = (await db_session.execute(select(Profile).where(Profile.id == driver.user_id))).scalar_one()
    assert profile.base_station == "Nairobi"
    role = (await db_session.execute(
        select(UserRoleAssignment.role).where(UserRoleAssignment.user_id == driver.user_id)
    )).scalar_one()
    assert role == AppRole.DRIVER

    sign_in = await client.post(
        "/v1/auth/sign-in", json={"email": "otieno@safirismart.co.ke", "password": password}
    )
    assert sign_in.status_code == 200
    assert sign_in.json()["role"] == "driver"


@pytest.mark.asyncio
async def test_create_driver_duplicate_email(client, manager_headers):
    payload = {"email": "manager@safirismart.co.ke", "full_name": "Someone", "license_number": "DL-1"}
    response = await client.post("/v1/functions/create-driver", json=payload, headers=manager_headers)

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "A user with this email address has already been registered",
    }


@pytest.mark.asyncio
async def test_create_driver_unknown_vehicle(client, manager_headers):
    payload = {"email": "x@safirismart.co.ke", "full_name": "X", "license_number": "DL-1", "vehicle_id": 999}
    response = await client.post("/v1/functions/create-driver", json=payload, headers=manager_headers)
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_create_driver_requires_fleet_manager(client, operations_headers):
    payload = {"email": "x@safirismart.co.ke", "full_name": "X", "license_number": "DL-1"}
    response = await client.post("/v1/functions/create-driver", json=payload, headers=operations_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_seed_test_accounts_is_idempotent(client, db_session):
    first = await client.post("/v1/functions/seed-test-accounts")
    assert first.status_code == 200
    statuses = {r["email"]: r["status"] for r in first.json()["results"]}
    assert statuses == {account.email: "created" for account in TEST_ACCOUNTS}

    second = await client.post("/v1/functions/seed-test-accounts")
    assert {r["status"] for r in second.json()["results"]} == {"already_exists"}

    drivers = (await db_session.execute(select(Driver))).scalars().all()
    assert len(drivers) == 1
    assert drivers[0].performance_score == 85

    sign_in = await client.post(
        "/v1/auth/sign-in", json={"email": "john.kamau@safirismart.co.ke", "password": "Driver2024!"}
    )
    assert sign_in.json()["role"] == "driver"


@pytest.mark.asyncio
async def test_seeding_can_be_disabled(client, mocker):
    mocker.patch.object(settings, "enable_test_seeding", False)
    response = await client.post("/v1/functions/seed-test-accounts")
    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Test account seeding is disabled"}


def test_next_position_wraps_around():
    points = ROUTE_WAYPOINTS["Nairobi-Nakuru"]
    rng = random.Random(7)

    lat, lng = next_position(points, *points[-1], rng=rng)
    assert abs(lat - points[0][0]) <= 0.005
    assert abs(lng - points[0][1]) <= 0.005

    lat, lng = next_position(points, None, None, rng=rng)
    assert abs(lat - points[1][0]) <= 0.005


@pytest.mark.asyncio
async def test_generate_live_locations(client, operations_headers, vehicle, db_session):
    db_session.add_all([
        Vehicle(license_plate="KBB 200B", vehicle_type="Van", status=VehicleStatus.MAINTENANCE,
                route_assigned="Nairobi-Nakuru"),
        Vehicle(license_plate="KCC 300C", vehicle_type="Van", status=VehicleStatus.ACTIVE,
                route_assigned="Unmapped Route"),
    ])
    await db_session.commit()

    response = await client.post("/v1/functions/generate-live-locations", headers=operations_headers)

    assert response.status_code == 200
    assert response.json()["updated"] == 1

    await db_session.refresh(vehicle)
    assert vehicle.current_latitude is not None
    assert vehicle.last_location_update is not None


@pytest.mark.asyncio
async def test_generate_live_locations_without_vehicles(db_session):
    assert await generate_live_locations(db_session) == 0
