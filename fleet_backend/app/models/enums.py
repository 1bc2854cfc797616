"""
Fleet enumerations.

Defines the closed value sets stored on vehicles, trips and role rows.
"""

import enum

from sqlalchemy import Enum


class AppRole(str, enum.Enum):
    """
    Role assignment used purely for view gating.

    Roles:
        FLEET_MANAGER: Full access to fleet, analytics and settings
        OPERATIONS: Day-to-day vehicles, drivers, trips and maintenance
        DRIVER: Own vehicle, trips and fuel logs
        FINANCE: Costs, analytics and reports
    """
    FLEET_MANAGER = "fleet_manager"
    OPERATIONS = "operations"
    DRIVER = "driver"
    FINANCE = "finance"


class VehicleStatus(str, enum.Enum):
    """Operational status of a vehicle."""
    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    INACTIVE = "inactive"
    IDLE = "idle"


class MaintenanceStatus(str, enum.Enum):
    """Maintenance condition, independent of the operational status."""
    GOOD = "good"
    NEEDS_SERVICE = "needs_service"
    CRITICAL = "critical"


def db_enum(enum_cls, name: str) -> Enum:
    """Column type storing the enum *values* (lowercase) rather than member names."""
    return Enum(enum_cls, name=name, values_callable=lambda members: [m.value for m in members])
