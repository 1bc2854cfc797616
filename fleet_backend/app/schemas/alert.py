"""
Alert Pydantic schemas.

Alerts are derived on every request and never stored.
"""

from pydantic import BaseModel
from datetime import datetime
from enum import Enum
from typing import Optional, List


class AlertType(str, Enum):
    CRITICAL = "critical"
    MAINTENANCE = "maintenance"
    SCHEDULE = "schedule"


class Alert(BaseModel):
    id: str
    type: AlertType
    title: str
    description: str
    timestamp: datetime
    vehicle_id: Optional[int] = None
    license_plate: Optional[str] = None
    acknowledged: bool = False


class AlertListResponse(BaseModel):
    alerts: List[Alert]
    total: int
    unacknowledged: int
