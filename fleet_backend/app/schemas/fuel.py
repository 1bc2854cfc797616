"""
Fuel log Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List


class FuelLogCreate(BaseModel):
    vehicle_id: int
    driver_id: Optional[int] = None
    liters: float = Field(..., gt=0)
    price_per_liter_kes: float = Field(..., gt=0)
    route: Optional[str] = Field(None, max_length=255)
    station_location: Optional[str] = Field(None, max_length=255)
    odometer_reading: Optional[float] = Field(None, ge=0)
    created_at: Optional[datetime] = Field(None, description="Defaults to the time of insert")


class FuelLogUpdate(BaseModel):
    driver_id: Optional[int] = None
    liters: Optional[float] = Field(None, gt=0)
    price_per_liter_kes: Optional[float] = Field(None, gt=0)
    route: Optional[str] = Field(None, max_length=255)
    station_location: Optional[str] = Field(None, max_length=255)
    odometer_reading: Optional[float] = Field(None, ge=0)


class FuelLogResponse(BaseModel):
    id: int
    vehicle_id: int
    driver_id: Optional[int]
    liters: float
    price_per_liter_kes: float
    total_cost_kes: Optional[float]
    route: Optional[str]
    station_location: Optional[str]
    odometer_reading: Optional[float]
    created_at: datetime

    class Config:
        from_attributes = True


class FuelLogListResponse(BaseModel):
    logs: List[FuelLogResponse]
    total: int
