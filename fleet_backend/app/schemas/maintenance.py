"""
Maintenance log Pydantic schemas.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional, List


class MaintenanceLogCreate(BaseModel):
    vehicle_id: int
    service_type: str = Field(..., max_length=100)
    description: Optional[str] = None
    performed_by: Optional[str] = Field(None, max_length=255)
    date_performed: date = Field(default_factory=date.today)
    next_due_date: Optional[date] = None
    cost_kes: float = Field(..., gt=0, description="Cost in KES")

    @field_validator("service_type")
    @classmethod
    def service_type_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Service type is required")
        return value


class MaintenanceLogUpdate(BaseModel):
    service_type: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    performed_by: Optional[str] = Field(None, max_length=255)
    date_performed: Optional[date] = None
    next_due_date: Optional[date] = None
    cost_kes: Optional[float] = Field(None, gt=0)


class MaintenanceLogResponse(BaseModel):
    id: int
    vehicle_id: int
    service_type: str
    description: Optional[str]
    performed_by: Optional[str]
    date_performed: date
    next_due_date: Optional[date]
    cost_kes: float
    created_at: datetime

    class Config:
        from_attributes = True


class MaintenanceListItem(MaintenanceLogResponse):
    vehicle_license_plate: Optional[str] = None


class MaintenanceListResponse(BaseModel):
    logs: List[MaintenanceListItem]
    total: int
