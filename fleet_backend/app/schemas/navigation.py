"""
Navigation Pydantic schemas.
"""

from pydantic import BaseModel
from typing import List, Optional

from fleet_backend.app.models.enums import AppRole


class NavItem(BaseModel):
    title: str
    path: str


class DashboardInfo(BaseModel):
    title: str
    description: str


class NavigationResponse(BaseModel):
    role: Optional[AppRole] = None
    items: List[NavItem]
    dashboard: DashboardInfo
