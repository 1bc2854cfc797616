"""
Trip Pydantic schemas.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, List
from fleet_backend.app.models.trip_enums import TripStatus


class TripCreate(BaseModel):
    """
    Schema for scheduling a trip.

    ``start_location``/``end_location`` may be omitted when ``route`` names a
    master route; they are then copied from it.
    """
    vehicle_id: int = Field(..., description="Vehicle on the trip")
    driver_id: Optional[int] = None
    route: str = Field(..., max_length=255)
    start_location: Optional[str] = Field(None, max_length=255)
    end_location: Optional[str] = Field(None, max_length=255)
    start_time: datetime
    estimated_duration_hours: Optional[float] = Field(None, gt=0)
    distance_km: Optional[float] = Field(None, gt=0)
    status: TripStatus = Field(default=TripStatus.SCHEDULED)
    progress_percent: int = Field(default=0, ge=0, le=100)

    @field_validator("route", "start_location", "end_location")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else None


class TripUpdate(BaseModel):
    driver_id: Optional[int] = None
    route: Optional[str] = Field(None, max_length=255)
    start_location: Optional[str] = Field(None, max_length=255)
    end_location: Optional[str] = Field(None, max_length=255)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    estimated_duration_hours: Optional[float] = Field(None, gt=0)
    distance_km: Optional[float] = Field(None, gt=0)
    status: Optional[TripStatus] = None
    progress_percent: Optional[int] = Field(None, ge=0, le=100)

    @field_validator("route", "start_location", "end_location")
    @classmethod
    def strip_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class TripResponse(BaseModel):
    id: int
    vehicle_id: int
    driver_id: Optional[int]
    route: str
    start_location: str
    end_location: str
    start_time: datetime
    end_time: Optional[datetime]
    estimated_duration_hours: Optional[float]
    distance_km: Optional[float]
    status: TripStatus
    progress_percent: Optional[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TripListItem(TripResponse):
    """Trip joined with its vehicle plate and driver name."""
    vehicle_license_plate: Optional[str] = None
    driver_name: Optional[str] = None


class TripListResponse(BaseModel):
    trips: List[TripListItem]
    total: int
