"""
Alert API endpoints.

Alerts are derived from vehicles and in-progress trips on every call.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.db.session import get_db
from fleet_backend.app.core.dependencies import CurrentSession
from fleet_backend.app.core.guards import require_route
from fleet_backend.app.services.alerts import unacknowledged_count
from fleet_backend.app.services.analytics import AnalyticsService
from fleet_backend.app.schemas.alert import AlertListResponse

router = APIRouter(prefix="/alerts", tags=["Alerts"])


@router.get("", response_model=AlertListResponse)
async def list_alerts(
    session: CurrentSession = Depends(require_route("alerts")),
    db: AsyncSession = Depends(get_db)
):
    alerts = await AnalyticsService.get_alerts(db)
    return AlertListResponse(
        alerts=alerts,
        total=len(alerts),
        unacknowledged=unacknowledged_count(alerts),
    )
