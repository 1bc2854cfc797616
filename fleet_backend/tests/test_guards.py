"""
Tests for role-based route guards and navigation.
"""

import pytest

from fleet_backend.app.core.dependencies import CurrentSession
from fleet_backend.app.core.guards import ROUTE_ACCESS, can_access, dashboard_info, navigation_for
from fleet_backend.app.models.enums import AppRole
from fleet_backend.app.models.profile import Profile
from fleet_backend.app.models.user import User


def session_for(role, full_name="Test User"):
    user = User(id=1, email="someone@safirismart.co.ke", hashed_password="x", is_active=True)
    profile = Profile(id=1, full_name=full_name) if full_name else None
    return CurrentSession(user=user, profile=profile, role=role, token="token")


def nav_titles(session):
    return [item["title"] for item in navigation_for(session)]


def test_role_predicates():
    manager = session_for(AppRole.FLEET_MANAGER)
    assert manager.is_fleet_manager
    assert not manager.is_driver
    assert manager.has_role(AppRole.FLEET_MANAGER)
    assert manager.has_role([AppRole.FINANCE, AppRole.FLEET_MANAGER])
    assert not manager.has_role(AppRole.FINANCE)


def test_user_without_role_has_no_access():
    nobody = session_for(None)
    assert not nobody.is_fleet_manager
    assert not nobody.is_operations
    assert not nobody.is_driver
    assert not nobody.is_finance
    assert not any(can_access(nobody, key) for key in ROUTE_ACCESS)
    assert nav_titles(nobody) == []
    assert dashboard_info(nobody)["title"] == "Dashboard"


def test_navigation_per_role():
    assert nav_titles(session_for(AppRole.FLEET_MANAGER)) == [
        "Dashboard", "Vehicles", "Drivers", "Live Tracking", "Maintenance", "Analytics",
    ]
    assert nav_titles(session_for(AppRole.OPERATIONS)) == [
        "Dashboard", "Vehicles", "Drivers", "Live Tracking", "Maintenance",
    ]
    assert nav_titles(session_for(AppRole.FINANCE)) == ["Dashboard", "Maintenance", "Analytics"]
    assert nav_titles(session_for(AppRole.DRIVER)) == ["Dashboard"]


def test_driver_dashboard_greets_by_name():
    assert dashboard_info(session_for(AppRole.DRIVER, "John Kamau"))["title"] == "Karibu, John Kamau!"
    assert dashboard_info(session_for(AppRole.DRIVER, None))["title"] == "Karibu, Driver!"
    assert dashboard_info(session_for(AppRole.FINANCE))["title"] == "Finance Dashboard"


def test_only_fleet_managers_manage_settings():
    assert can_access(session_for(AppRole.FLEET_MANAGER), "settings")
    assert not can_access(session_for(AppRole.OPERATIONS), "settings")


@pytest.mark.asyncio
async def test_denied_route_returns_403(client, create_user):
    _, headers = await create_user("driver@safirismart.co.ke", AppRole.DRIVER, "John Kamau")

    response = await client.get("/v1/vehicles", headers=headers)

    assert response.status_code == 403
    body = response.json()
    assert body["error_code"] == "ERR_PERM_001"
    assert body["message"] == "You don't have permission to access this page"
    assert body["details"] == {"route": "vehicles:read", "role": "driver"}


@pytest.mark.asyncio
async def test_navigation_endpoint(client, create_user):
    _, headers = await create_user("driver@safirismart.co.ke", AppRole.DRIVER, "John Kamau")

    response = await client.get("/v1/navigation", headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "driver"
    assert data["items"] == [{"title": "Dashboard", "path": "/dashboard"}]
    assert data["dashboard"]["title"] == "Karibu, John Kamau!"
