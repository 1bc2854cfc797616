"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from fleet_backend.app.api.v1.endpoints import (
    auth, navigation,
    vehicles, drivers, trips,
    maintenance, fuel_logs, lookups,
    alerts, analytics, reports,
    live_tracking, settings,
    functions, realtime
)

router = APIRouter()

# Authentication and role-filtered navigation
router.include_router(auth.router)
router.include_router(navigation.router)

# Fleet records
router.include_router(vehicles.router)
router.include_router(drivers.router)
router.include_router(drivers.me_router)
router.include_router(trips.router)
router.include_router(maintenance.router)
router.include_router(fuel_logs.router)
router.include_router(lookups.router)

# Derived views
router.include_router(alerts.router)
router.include_router(analytics.router)
router.include_router(reports.router)
router.include_router(live_tracking.router)

# Configuration
router.include_router(settings.router)

# Callable functions
router.include_router(functions.router)

# Change notifications
router.include_router(realtime.router)
