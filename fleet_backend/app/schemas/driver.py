"""
Driver Pydantic schemas.

Join-fetched driver data is returned as explicit projections instead of
nested rows of loose shape.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, List
from fleet_backend.app.models.enums import VehicleStatus
from fleet_backend.app.schemas.trip import TripResponse
from fleet_backend.app.schemas.fuel import FuelLogResponse


class DriverCreate(BaseModel):
    """Schema for a driver row without a linked login."""
    license_number: str = Field(..., min_length=1, max_length=100)
    performance_score: int = Field(default=100, ge=0, le=100)
    vehicle_id: Optional[int] = None

    @field_validator("license_number")
    @classmethod
    def strip_license(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("License number is required")
        return value


class DriverUpdate(BaseModel):
    """Schema for editing a driver row."""
    license_number: Optional[str] = Field(None, min_length=1, max_length=100)
    performance_score: Optional[int] = Field(None, ge=0, le=100)
    total_trips: Optional[int] = Field(None, ge=0)
    speeding_incidents: Optional[int] = Field(None, ge=0)
    harsh_braking_events: Optional[int] = Field(None, ge=0)
    idle_time_hours: Optional[float] = Field(None, ge=0)
    vehicle_id: Optional[int] = None


class DriverResponse(BaseModel):
    id: int
    user_id: Optional[int]
    vehicle_id: Optional[int]
    license_number: str
    performance_score: Optional[int]
    total_trips: Optional[int]
    speeding_incidents: Optional[int]
    harsh_braking_events: Optional[int]
    idle_time_hours: Optional[float]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DriverListItem(DriverResponse):
    """Driver row joined with its profile and assigned vehicle."""
    full_name: Optional[str] = None
    mobile_phone: Optional[str] = None
    vehicle_license_plate: Optional[str] = None


class DriverListResponse(BaseModel):
    drivers: List[DriverListItem]
    total: int


class DriverVehicleSummary(BaseModel):
    id: int
    license_plate: str
    vehicle_type: str
    status: VehicleStatus
    route_assigned: Optional[str]
    fuel_efficiency_kml: Optional[float]

    class Config:
        from_attributes = True


class DriverDashboardView(BaseModel):
    """Everything the signed-in driver's dashboard shows."""
    driver: DriverResponse
    vehicle: Optional[DriverVehicleSummary] = None
    recent_trips: List[TripResponse]
    recent_fuel_logs: List[FuelLogResponse]
    active_trip: Optional[TripResponse] = None
    completed_recent_trips: int
