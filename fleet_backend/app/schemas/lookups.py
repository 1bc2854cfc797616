"""
Lookup Pydantic schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional


class VehicleTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class VehicleTypeResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]

    class Config:
        from_attributes = True


class RouteCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    start_location: str = Field(..., min_length=1, max_length=255)
    end_location: str = Field(..., min_length=1, max_length=255)
    distance_km: Optional[float] = Field(None, gt=0)


class RouteResponse(BaseModel):
    id: int
    name: str
    start_location: str
    end_location: str
    distance_km: Optional[float]

    class Config:
        from_attributes = True
