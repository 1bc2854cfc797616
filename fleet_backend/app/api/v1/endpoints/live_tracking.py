"""
Live Tracking API endpoints.

Positions of vehicles that have reported one, plus the public map token
the dashboard needs to draw them.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.db.session import get_db
from fleet_backend.app.core.dependencies import CurrentSession
from fleet_backend.app.core.guards import require_route
from fleet_backend.app.api.v1.endpoints.settings import get_config_store
from fleet_backend.app.models.vehicle import Vehicle
from fleet_backend.app.schemas.vehicle import VehicleResponse
from fleet_backend.app.services.config_store import ConfigStore

router = APIRouter(prefix="/live-tracking", tags=["Live Tracking"])


class LiveTrackingResponse(BaseModel):
    vehicles: List[VehicleResponse]
    mapbox_token: Optional[str] = None


@router.get("", response_model=LiveTrackingResponse)
async def get_live_positions(
    session: CurrentSession = Depends(require_route("live_tracking")),
    db: AsyncSession = Depends(get_db),
    store: ConfigStore = Depends(get_config_store)
):
    result = await db.execute(
        select(Vehicle)
        .where(Vehicle.current_latitude.isnot(None), Vehicle.current_longitude.isnot(None))
        .order_by(Vehicle.license_plate)
    )
    return LiveTrackingResponse(
        vehicles=[VehicleResponse.model_validate(v) for v in result.scalars().all()],
        mapbox_token=store.get_mapbox_token(),
    )
