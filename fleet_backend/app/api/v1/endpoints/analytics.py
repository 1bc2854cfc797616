"""
Analytics API endpoints.

Read-only dashboard data. Failed fetches do not fail the request; their
messages come back in ``errors``.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.db.session import get_db
from fleet_backend.app.core.dependencies import CurrentSession
from fleet_backend.app.core.guards import require_route
from fleet_backend.app.services.analytics import AnalyticsService
from fleet_backend.app.schemas.analytics import AnalyticsResponse, FleetMetrics, FinanceSummary

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("", response_model=AnalyticsResponse)
async def get_analytics(
    session: CurrentSession = Depends(require_route("analytics")),
    db: AsyncSession = Depends(get_db)
):
    """Cost totals, route on-time rates, six-month trend and top drivers."""
    metrics, errors = await AnalyticsService.get_metrics(db)
    return AnalyticsResponse(metrics=metrics, errors=errors)


@router.get("/fleet-metrics", response_model=FleetMetrics)
async def get_fleet_metrics(
    session: CurrentSession = Depends(require_route("dashboard")),
    db: AsyncSession = Depends(get_db)
):
    """Vehicle availability and today's trip counters."""
    return await AnalyticsService.get_fleet_metrics(db)


@router.get("/finance", response_model=FinanceSummary)
async def get_finance_summary(
    session: CurrentSession = Depends(require_route("finance")),
    db: AsyncSession = Depends(get_db)
):
    return await AnalyticsService.get_finance_summary(db)
