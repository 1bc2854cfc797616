"""
Trip management API endpoints.
"""

from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_backend.app.db.session import get_db
from fleet_backend.app.core.dependencies import CurrentSession
from fleet_backend.app.core.guards import require_route
from fleet_backend.app.models.trip_enums import TripStatus
from fleet_backend.app.repositories.trips import TripRepository
from fleet_backend.app.schemas.trip import TripCreate, TripUpdate, TripListItem, TripListResponse

router = APIRouter(prefix="/trips", tags=["Trips"])
trips = TripRepository()


@router.get("", response_model=TripListResponse)
async def list_trips(
    status_filter: Optional[List[TripStatus]] = Query(None, alias="status"),
    vehicle_id: Optional[int] = Query(None),
    started_from: Optional[datetime] = Query(None, description="Only trips starting at or after this time"),
    started_before: Optional[datetime] = Query(None, description="Only trips starting before this time"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    session: CurrentSession = Depends(require_route("trips:read")),
    db: AsyncSession = Depends(get_db)
):
    """Trips with vehicle plate and driver name, latest start first."""
    items = await trips.list_items(
        db,
        status=status_filter,
        vehicle_id=vehicle_id,
        started_from=started_from,
        started_before=started_before,
        limit=limit,
    )
    return TripListResponse(trips=items, total=len(items))


@router.post("", response_model=TripListItem, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    session: CurrentSession = Depends(require_route("trips:write")),
    db: AsyncSession = Depends(get_db)
):
    """
    Schedule a trip.

    When ``route`` names a master route, omitted locations and distance are
    filled in from it.
    """
    trip = await trips.create(db, trip_data.model_dump())
    return await trips.get_item(db, trip.id)


@router.get("/{trip_id}", response_model=TripListItem)
async def get_trip(
    trip_id: int = Path(..., description="Trip ID"),
    session: CurrentSession = Depends(require_route("trips:read")),
    db: AsyncSession = Depends(get_db)
):
    return await trips.get_item(db, trip_id)


@router.patch("/{trip_id}", response_model=TripListItem)
async def update_trip(
    trip_data: TripUpdate,
    trip_id: int = Path(..., description="Trip ID"),
    session: CurrentSession = Depends(require_route("trips:write")),
    db: AsyncSession = Depends(get_db)
):
    await trips.update(db, trip_id, trip_data.model_dump(exclude_unset=True))
    return await trips.get_item(db, trip_id)


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_trip(
    trip_id: int = Path(..., description="Trip ID"),
    session: CurrentSession = Depends(require_route("trips:write")),
    db: AsyncSession = Depends(get_db)
):
    await trips.delete(db, trip_id)
