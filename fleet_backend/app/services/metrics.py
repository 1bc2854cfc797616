"""
Metrics aggregation.

Pure reductions from raw rows into chart-ready series. Every function
accepts ORM rows or any object with the same attributes, and treats a
missing (``None``) input list as empty.
"""

import calendar
import math
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from fleet_backend.app.core.dates import as_utc, utcnow
from fleet_backend.app.models.enums import VehicleStatus
from fleet_backend.app.models.trip_enums import TripStatus
from fleet_backend.app.schemas.analytics import (
    DriverRanking,
    FleetMetrics,
    MetricsView,
    MonthlyBucket,
    RoutePerformance,
)

ROUTE_LABEL_LENGTH = 15
MAX_ROUTES = 6
MONTH_WINDOW = 6
TOP_DRIVERS = 5
ON_TIME_GRACE = 1.1

OPERATIONAL_STATUSES = (VehicleStatus.ACTIVE, VehicleStatus.IDLE)
OUT_OF_SERVICE_STATUSES = (VehicleStatus.MAINTENANCE, VehicleStatus.INACTIVE)
ON_TIME_TRIP_STATUSES = (TripStatus.COMPLETED, TripStatus.IN_PROGRESS)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _number(value) -> float:
    return float(value) if value is not None else 0.0


def fuel_cost(log) -> float:
    """Cost recomputed from litres and unit price; the stored total is ignored."""
    return _number(log.liters) * _number(log.price_per_liter_kes)


def share(part: float, total: float) -> float:
    return round(part / total * 100, 1) if total > 0 else 0.0


def route_label(route: str) -> str:
    if len(route) > ROUTE_LABEL_LENGTH:
        return route[:ROUTE_LABEL_LENGTH] + "..."
    return route


def route_performance(trips: Optional[Iterable]) -> List[RoutePerformance]:
    """
    Group trips by route name. A trip counts as on time when it is
    completed or in progress; only the first six routes seen are kept.
    """
    groups: "OrderedDict[str, List[int]]" = OrderedDict()
    for trip in trips or []:
        route = trip.route or "Unknown"
        counts = groups.setdefault(route, [0, 0])
        counts[1] += 1
        if trip.status in ON_TIME_TRIP_STATUSES:
            counts[0] += 1

    return [
        RoutePerformance(
            route=route,
            label=route_label(route),
            ontime=round_half_up(100 * ontime / total),
            total=total,
        )
        for route, (ontime, total) in list(groups.items())[:MAX_ROUTES]
    ]


def month_window(now: datetime, months: int = MONTH_WINDOW) -> List[Tuple[int, int]]:
    """``(year, month)`` keys for the last ``months`` months, oldest first."""
    keys = []
    year, month = now.year, now.month
    for _ in range(months):
        keys.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def monthly_data(fuel_logs: Optional[Iterable], maintenance_logs: Optional[Iterable], now: datetime) -> List[MonthlyBucket]:
    """Six monthly cost buckets ending at the month of ``now``; older logs are dropped."""
    buckets = OrderedDict(
        ((year, month), MonthlyBucket(month=calendar.month_abbr[month], year=year, month_number=month))
        for year, month in month_window(now)
    )

    for log in fuel_logs or []:
        created = as_utc(log.created_at)
        bucket = buckets.get((created.year, created.month)) if created else None
        if bucket is not None:
            bucket.fuel += fuel_cost(log)

    for log in maintenance_logs or []:
        performed = log.date_performed
        bucket = buckets.get((performed.year, performed.month)) if performed else None
        if bucket is not None:
            bucket.maintenance += _number(log.cost_kes)

    return list(buckets.values())


def driver_performance(drivers: Optional[Iterable]) -> List[DriverRanking]:
    rankings = []
    for driver in drivers or []:
        full_name = getattr(driver, "full_name", None) or ""
        tokens = full_name.split()
        rankings.append(DriverRanking(
            name=tokens[0] if tokens else "Unknown",
            score=driver.performance_score or 0,
            trips=driver.total_trips or 0,
        ))
    rankings.sort(key=lambda r: r.score, reverse=True)
    return rankings[:TOP_DRIVERS]


def average_performance_score(drivers: List) -> int:
    if not drivers:
        return 0
    return round_half_up(sum((d.performance_score or 0) for d in drivers) / len(drivers))


def aggregate(
    vehicles: Optional[Iterable],
    drivers: Optional[Iterable],
    trips: Optional[Iterable],
    fuel_logs: Optional[Iterable],
    maintenance_logs: Optional[Iterable],
    now: Optional[datetime] = None,
) -> MetricsView:
    """Build the analytics view from whatever rows were fetched."""
    now = as_utc(now) if now else utcnow()
    vehicles = list(vehicles or [])
    drivers = list(drivers or [])
    trips = list(trips or [])
    fuel_logs = list(fuel_logs or [])
    maintenance_logs = list(maintenance_logs or [])

    total_maintenance = sum(_number(log.cost_kes) for log in maintenance_logs)
    total_fuel = sum(fuel_cost(log) for log in fuel_logs)
    total_operating = total_maintenance + total_fuel

    return MetricsView(
        total_maintenance_cost=total_maintenance,
        total_fuel_cost=total_fuel,
        fuel_consumption=sum(_number(log.liters) for log in fuel_logs),
        total_operating_cost=total_operating,
        fuel_percentage=share(total_fuel, total_operating),
        maintenance_percentage=share(total_maintenance, total_operating),
        vehicle_count=len(vehicles),
        avg_performance_score=average_performance_score(drivers),
        route_performance=route_performance(trips),
        monthly_data=monthly_data(fuel_logs, maintenance_logs, now),
        driver_performance=driver_performance(drivers),
    )


def day_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """UTC midnight of ``now``'s day and of the next day."""
    start = as_utc(now).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def on_time_percentage(todays_trips: Optional[Iterable]) -> float:
    """
    Share of today's completed trips that finished within their estimate
    plus 10%. Only completed trips with a start, an end and an estimate are
    eligible; with none eligible the result is 100.
    """
    eligible = [
        t for t in (todays_trips or [])
        if t.status == TripStatus.COMPLETED and t.start_time and t.end_time and t.estimated_duration_hours
    ]
    if not eligible:
        return 100.0

    on_time = 0
    for trip in eligible:
        actual_hours = (as_utc(trip.end_time) - as_utc(trip.start_time)).total_seconds() / 3600
        if actual_hours <= trip.estimated_duration_hours * ON_TIME_GRACE:
            on_time += 1
    return on_time / len(eligible) * 100


def compute_fleet_metrics(vehicles: Optional[Iterable], todays_trips: Optional[Iterable]) -> FleetMetrics:
    vehicles = list(vehicles or [])
    todays_trips = list(todays_trips or [])

    total = len(vehicles)
    operational = sum(1 for v in vehicles if v.status in OPERATIONAL_STATUSES)

    return FleetMetrics(
        vehicles_operational=operational,
        vehicles_out_of_service=sum(1 for v in vehicles if v.status in OUT_OF_SERVICE_STATUSES),
        total_vehicles=total,
        operational_percentage=operational / total * 100 if total else 0.0,
        on_time_percentage=on_time_percentage(todays_trips),
        trips_completed_today=sum(1 for t in todays_trips if t.status == TripStatus.COMPLETED),
        trips_scheduled_today=len(todays_trips),
        total_fuel_consumption=sum(_number(v.monthly_fuel_consumption_liters) for v in vehicles),
        avg_fuel_efficiency=sum(_number(v.fuel_efficiency_kml) for v in vehicles) / (total or 1),
    )
