"""
Vehicle Pydantic schemas.

Defines request and response models for vehicle management.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional, List
from fleet_backend.app.models.enums import VehicleStatus, MaintenanceStatus


class VehicleCreate(BaseModel):
    """Schema for registering a new vehicle."""
    license_plate: str = Field(..., min_length=1, max_length=50, description="Registration plate, e.g. KCA 123A")
    vehicle_type: str = Field(..., min_length=1, max_length=100, description="Vehicle type (e.g., Truck, Van)")
    route_assigned: Optional[str] = Field(None, max_length=255)
    status: VehicleStatus = Field(default=VehicleStatus.ACTIVE)
    fuel_efficiency_kml: Optional[float] = Field(None, gt=0, description="Fuel efficiency in km per litre")

    maintenance_status: Optional[MaintenanceStatus] = Field(default=MaintenanceStatus.GOOD)
    last_service_date: Optional[date] = None
    insurance_expiry: Optional[date] = None
    monthly_fuel_consumption_liters: Optional[float] = Field(None, ge=0)

    @field_validator("license_plate", "vehicle_type")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("route_assigned")
    @classmethod
    def blank_route_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class VehicleUpdate(BaseModel):
    """Schema for updating an existing vehicle."""
    license_plate: Optional[str] = Field(None, min_length=1, max_length=50)
    vehicle_type: Optional[str] = Field(None, min_length=1, max_length=100)
    route_assigned: Optional[str] = Field(None, max_length=255)
    status: Optional[VehicleStatus] = None
    fuel_efficiency_kml: Optional[float] = Field(None, gt=0)
    maintenance_status: Optional[MaintenanceStatus] = None
    last_service_date: Optional[date] = None
    insurance_expiry: Optional[date] = None
    monthly_fuel_consumption_liters: Optional[float] = Field(None, ge=0)


class VehicleResponse(BaseModel):
    """Schema for vehicle response."""
    id: int
    license_plate: str
    vehicle_type: str
    route_assigned: Optional[str]
    status: VehicleStatus
    fuel_efficiency_kml: Optional[float]
    maintenance_status: Optional[MaintenanceStatus]
    last_service_date: Optional[date]
    insurance_expiry: Optional[date]
    monthly_fuel_consumption_liters: Optional[float]
    current_latitude: Optional[float]
    current_longitude: Optional[float]
    last_location_update: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class VehicleListResponse(BaseModel):
    """Schema for vehicle list."""
    vehicles: List[VehicleResponse]
    total: int
