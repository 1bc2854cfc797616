"""
Analytics Pydantic schemas.

Read-only view models derived from raw rows.
"""

from pydantic import BaseModel, Field
from typing import List


class RoutePerformance(BaseModel):
    route: str
    label: str = Field(..., description="Route name shortened for chart axes")
    ontime: int = Field(..., description="Share of completed or in-progress trips, in percent")
    total: int


class MonthlyBucket(BaseModel):
    month: str = Field(..., description="Abbreviated month name, e.g. 'Jan'")
    year: int
    month_number: int
    fuel: float = 0.0
    maintenance: float = 0.0


class DriverRanking(BaseModel):
    name: str
    score: int
    trips: int


class MetricsView(BaseModel):
    total_maintenance_cost: float
    total_fuel_cost: float
    fuel_consumption: float
    total_operating_cost: float
    fuel_percentage: float
    maintenance_percentage: float
    vehicle_count: int
    avg_performance_score: int
    route_performance: List[RoutePerformance]
    monthly_data: List[MonthlyBucket]
    driver_performance: List[DriverRanking]


class AnalyticsResponse(BaseModel):
    metrics: MetricsView
    errors: List[str] = Field(default_factory=list, description="Messages of fetches that failed")


class FleetMetrics(BaseModel):
    vehicles_operational: int
    vehicles_out_of_service: int
    total_vehicles: int
    operational_percentage: float
    on_time_percentage: float
    trips_completed_today: int
    trips_scheduled_today: int
    total_fuel_consumption: float
    avg_fuel_efficiency: float


class FinanceSummary(BaseModel):
    """Current-month cost totals for the finance dashboard."""
    month: str
    fuel_cost: float
    fuel_log_count: int
    maintenance_cost: float
    maintenance_log_count: int
    total_cost: float
    vehicle_count: int
