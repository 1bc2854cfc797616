"""
Vehicle management API endpoints.

Fleet managers and operations staff register, edit and remove vehicles.
"""

from typing import Optional
from fastapi import APIRouter, Depends, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_backend.app.db.session import get_db
from fleet_backend.app.core.dependencies import CurrentSession
from fleet_backend.app.core.guards import require_route
from fleet_backend.app.models.enums import VehicleStatus
from fleet_backend.app.repositories.vehicles import VehicleRepository
from fleet_backend.app.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleResponse, VehicleListResponse

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])
vehicles = VehicleRepository()


@router.get("", response_model=VehicleListResponse)
async def list_vehicles(
    status_filter: Optional[VehicleStatus] = Query(None, alias="status", description="Only vehicles with this status"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    session: CurrentSession = Depends(require_route("vehicles:read")),
    db: AsyncSession = Depends(get_db)
):
    """List vehicles, newest first."""
    filters = {"status": status_filter} if status_filter else None
    rows = await vehicles.list(db, filters=filters, limit=limit)
    return VehicleListResponse(
        vehicles=[VehicleResponse.model_validate(v) for v in rows],
        total=len(rows),
    )


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle_data: VehicleCreate,
    session: CurrentSession = Depends(require_route("vehicles:write")),
    db: AsyncSession = Depends(get_db)
):
    """Register a vehicle. License plates are unique."""
    vehicle = await vehicles.create(db, vehicle_data.model_dump())
    return VehicleResponse.model_validate(vehicle)


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    session: CurrentSession = Depends(require_route("vehicles:read")),
    db: AsyncSession = Depends(get_db)
):
    return VehicleResponse.model_validate(await vehicles.get(db, vehicle_id))


@router.patch("/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(
    vehicle_data: VehicleUpdate,
    vehicle_id: int = Path(..., description="Vehicle ID"),
    session: CurrentSession = Depends(require_route("vehicles:write")),
    db: AsyncSession = Depends(get_db)
):
    """Update the supplied fields only."""
    vehicle = await vehicles.update(db, vehicle_id, vehicle_data.model_dump(exclude_unset=True))
    return VehicleResponse.model_validate(vehicle)


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vehicle(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    session: CurrentSession = Depends(require_route("vehicles:write")),
    db: AsyncSession = Depends(get_db)
):
    await vehicles.delete(db, vehicle_id)
