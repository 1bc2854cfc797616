"""
Analytics Service.

Fetches the rows the dashboards need and hands them to the pure
aggregators in ``metrics``. READ-ONLY.

An ``AsyncSession`` is not safe for concurrent use, so the fetches run one
after another on the request's session. Each fetch is guarded: a failure is
logged, replaced by an empty list and reported back in ``errors``.
"""

import logging
from datetime import datetime
from typing import Awaitable, List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.core.dates import as_utc, utcnow
from fleet_backend.app.models.fuel_log import FuelLog
from fleet_backend.app.models.maintenance_log import MaintenanceLog
from fleet_backend.app.models.trip import Trip
from fleet_backend.app.models.trip_enums import TripStatus
from fleet_backend.app.models.vehicle import Vehicle
from fleet_backend.app.repositories.drivers import DriverRepository
from fleet_backend.app.repositories.fuel_logs import FuelLogRepository
from fleet_backend.app.repositories.maintenance import MaintenanceLogRepository
from fleet_backend.app.repositories.trips import TripRepository
from fleet_backend.app.repositories.vehicles import VehicleRepository
from fleet_backend.app.schemas.alert import Alert
from fleet_backend.app.schemas.analytics import FinanceSummary, FleetMetrics, MetricsView
from fleet_backend.app.services.alerts import derive_alerts
from fleet_backend.app.services.metrics import aggregate, compute_fleet_metrics, day_bounds

logger = logging.getLogger(__name__)

vehicles_repo = VehicleRepository()
drivers_repo = DriverRepository()
trips_repo = TripRepository()
fuel_repo = FuelLogRepository()
maintenance_repo = MaintenanceLogRepository()


async def guarded_fetch(db: AsyncSession, label: str, fetch: Awaitable, errors: List[str]) -> list:
    """Await ``fetch``; on a database error log it, record it and return []."""
    try:
        return list(await fetch)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Error fetching %s: %s", label, e)
        errors.append(f"Failed to load {label}: {e.__class__.__name__}")
        return []


class AnalyticsService:

    @staticmethod
    async def fetch_rows(db: AsyncSession) -> Tuple[dict, List[str]]:
        """The five analytics datasets, plus messages for any that failed."""
        # Awaited one after another: a single AsyncSession cannot run queries concurrently.
        errors: List[str] = []
        rows = {
            "vehicles": await guarded_fetch(db, "vehicles", vehicles_repo.list(db), errors),
            "drivers": await guarded_fetch(db, "drivers", drivers_repo.list_items(db), errors),
            "trips": await guarded_fetch(db, "trips", trips_repo.list_items(db), errors),
            "fuel_logs": await guarded_fetch(db, "fuel logs", fuel_repo.list(db), errors),
            "maintenance_logs": await guarded_fetch(db, "maintenance logs", maintenance_repo.list_items(db), errors),
        }
        return rows, errors

    @staticmethod
    async def get_metrics(db: AsyncSession, now: Optional[datetime] = None) -> Tuple[MetricsView, List[str]]:
        rows, errors = await AnalyticsService.fetch_rows(db)
        metrics = aggregate(
            rows["vehicles"],
            rows["drivers"],
            rows["trips"],
            rows["fuel_logs"],
            rows["maintenance_logs"],
            now=now,
        )
        return metrics, errors

    @staticmethod
    async def get_fleet_metrics(db: AsyncSession, now: Optional[datetime] = None) -> FleetMetrics:
        """Fleet widget counters; trips are those starting today (UTC)."""
        now = as_utc(now) if now else utcnow()
        start, end = day_bounds(now)

        vehicles = (await db.execute(select(Vehicle))).scalars().all()
        todays_trips = (await db.execute(
            select(Trip).where(Trip.start_time >= start, Trip.start_time < end)
        )).scalars().all()

        return compute_fleet_metrics(vehicles, todays_trips)

    @staticmethod
    async def get_alerts(db: AsyncSession, now: Optional[datetime] = None) -> List[Alert]:
        vehicles = await vehicles_repo.list(db)
        trips = await trips_repo.list_items(db, status=[TripStatus.IN_PROGRESS])
        return derive_alerts(vehicles, trips, now=now)

    @staticmethod
    async def get_finance_summary(db: AsyncSession, now: Optional[datetime] = None) -> FinanceSummary:
        """Fuel and maintenance spend for the current calendar month."""
        now = as_utc(now) if now else utcnow()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        fuel_cost, fuel_count = (await db.execute(
            select(func.coalesce(func.sum(FuelLog.total_cost_kes), 0), func.count(FuelLog.id))
            .where(FuelLog.created_at >= month_start)
        )).one()

        maintenance_cost, maintenance_count = (await db.execute(
            select(func.coalesce(func.sum(MaintenanceLog.cost_kes), 0), func.count(MaintenanceLog.id))
            .where(MaintenanceLog.date_performed >= month_start.date())
        )).one()

        vehicle_count = (await db.execute(select(func.count(Vehicle.id)))).scalar() or 0

        return FinanceSummary(
            month=month_start.strftime("%B %Y"),
            fuel_cost=float(fuel_cost),
            fuel_log_count=fuel_count,
            maintenance_cost=float(maintenance_cost),
            maintenance_log_count=maintenance_count,
            total_cost=float(fuel_cost) + float(maintenance_cost),
            vehicle_count=vehicle_count,
        )
