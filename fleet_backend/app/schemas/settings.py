"""
Settings Pydantic schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional


class ApiKeysUpdate(BaseModel):
    """Omitted keys stay as they are; an empty string clears a key."""
    mapbox: Optional[str] = Field(None, description="Public Mapbox token (pk.*)")
    weather: Optional[str] = None
    fuel: Optional[str] = None


class ApiKeysStatus(BaseModel):
    mapbox_configured: bool
    weather_configured: bool
    fuel_configured: bool
    mapbox_from_environment: bool
    mapbox_token: Optional[str] = Field(None, description="The public token the map should use")
