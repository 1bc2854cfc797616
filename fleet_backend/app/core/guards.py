"""
Role-based route guards.

Every gated route is declared once in ``ROUTE_ACCESS``; endpoints depend on
``require_route(key)`` instead of repeating role checks.
"""

from typing import Dict, FrozenSet, List
from fastapi import Depends
from fleet_backend.app.models.enums import AppRole
from fleet_backend.app.core.dependencies import CurrentSession, get_current_session
from fleet_backend.app.core.exceptions import InsufficientPermissionsError

ALL_ROLES = frozenset(AppRole)
MANAGEMENT = frozenset({AppRole.FLEET_MANAGER, AppRole.OPERATIONS})
FINANCE_VIEW = frozenset({AppRole.FLEET_MANAGER, AppRole.FINANCE})

ROUTE_ACCESS: Dict[str, FrozenSet[AppRole]] = {
    "dashboard": ALL_ROLES,
    "vehicles:read": MANAGEMENT,
    "vehicles:write": MANAGEMENT,
    "drivers:read": MANAGEMENT,
    "drivers:write": MANAGEMENT,
    "trips:read": MANAGEMENT,
    "trips:write": MANAGEMENT,
    "live_tracking": MANAGEMENT,
    "alerts": MANAGEMENT,
    "maintenance:read": MANAGEMENT | {AppRole.FINANCE},
    "maintenance:write": MANAGEMENT,
    "fuel:read": MANAGEMENT | {AppRole.FINANCE},
    "fuel:write": MANAGEMENT,
    "lookups:read": MANAGEMENT,
    "lookups:write": frozenset({AppRole.FLEET_MANAGER}),
    "analytics": FINANCE_VIEW,
    "reports": FINANCE_VIEW,
    "finance": FINANCE_VIEW,
    "settings": frozenset({AppRole.FLEET_MANAGER}),
    "driver_dashboard": frozenset({AppRole.DRIVER}),
    "functions:create_driver": frozenset({AppRole.FLEET_MANAGER}),
    "functions:live_locations": MANAGEMENT,
}

# (title, path, route key); shown only when the role may open the route
NAV_ITEMS: List[tuple] = [
    ("Dashboard", "/dashboard", "dashboard"),
    ("Vehicles", "/vehicles", "vehicles:read"),
    ("Drivers", "/drivers", "drivers:read"),
    ("Live Tracking", "/live-tracking", "live_tracking"),
    ("Maintenance", "/maintenance", "maintenance:read"),
    ("Analytics", "/analytics", "analytics"),
]

DASHBOARD_INFO: Dict[AppRole, Dict[str, str]] = {
    AppRole.FLEET_MANAGER: {
        "title": "Fleet Manager Dashboard",
        "description": "Complete overview of your fleet operations, performance, and analytics",
    },
    AppRole.OPERATIONS: {
        "title": "Operations Dashboard",
        "description": "Monitor vehicles, drivers, and daily operations",
    },
    AppRole.FINANCE: {
        "title": "Finance Dashboard",
        "description": "Financial overview, costs, and budget analysis",
    },
}


def allowed_roles(route_key: str) -> FrozenSet[AppRole]:
    try:
        return ROUTE_ACCESS[route_key]
    except KeyError:
        raise KeyError(f"Unknown route key: {route_key}")


def can_access(session: CurrentSession, route_key: str) -> bool:
    return session.has_any_role(allowed_roles(route_key))


def require_route(route_key: str):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.post("/vehicles")
        async def create_vehicle(session: CurrentSession = Depends(require_route("vehicles:write"))):
            ...

    Raises:
        InsufficientPermissionsError (403) if the session's role may not open the route
    """
    roles = allowed_roles(route_key)

    async def route_checker(session: CurrentSession = Depends(get_current_session)) -> CurrentSession:
        if not session.has_any_role(roles):
            raise InsufficientPermissionsError(
                message="You don't have permission to access this page",
                details={"route": route_key, "role": session.role.value if session.role else None},
            )
        return session

    return route_checker


def navigation_for(session: CurrentSession) -> List[Dict[str, str]]:
    return [
        {"title": title, "path": path}
        for title, path, key in NAV_ITEMS
        if can_access(session, key)
    ]


def dashboard_info(session: CurrentSession) -> Dict[str, str]:
    if session.is_driver:
        name = session.full_name or "Driver"
        return {"title": f"Karibu, {name}!", "description": "Your trips, vehicle, and performance overview"}
    if session.role is None:
        return {"title": "Dashboard", "description": "Overview of your fleet"}
    return DASHBOARD_INFO[session.role]
