"""
Lookup table API endpoints: vehicle types and master routes.
"""

from typing import List
from fastapi import APIRouter, Depends, status, Path
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_backend.app.db.session import get_db
from fleet_backend.app.core.dependencies import CurrentSession
from fleet_backend.app.core.guards import require_route
from fleet_backend.app.repositories.lookups import RouteRepository, VehicleTypeRepository
from fleet_backend.app.schemas.lookups import (
    VehicleTypeCreate,
    VehicleTypeResponse,
    RouteCreate,
    RouteResponse,
)

router = APIRouter(prefix="/lookups", tags=["Lookups"])
vehicle_types = VehicleTypeRepository()
routes = RouteRepository()


@router.get("/vehicle-types", response_model=List[VehicleTypeResponse])
async def list_vehicle_types(
    session: CurrentSession = Depends(require_route("lookups:read")),
    db: AsyncSession = Depends(get_db)
):
    return [VehicleTypeResponse.model_validate(t) for t in await vehicle_types.list(db)]


@router.post("/vehicle-types", response_model=VehicleTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_vehicle_type(
    payload: VehicleTypeCreate,
    session: CurrentSession = Depends(require_route("lookups:write")),
    db: AsyncSession = Depends(get_db)
):
    return VehicleTypeResponse.model_validate(await vehicle_types.create(db, payload.model_dump()))


@router.delete("/vehicle-types/{type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vehicle_type(
    type_id: int = Path(...),
    session: CurrentSession = Depends(require_route("lookups:write")),
    db: AsyncSession = Depends(get_db)
):
    await vehicle_types.delete(db, type_id)


@router.get("/routes", response_model=List[RouteResponse])
async def list_routes(
    session: CurrentSession = Depends(require_route("lookups:read")),
    db: AsyncSession = Depends(get_db)
):
    return [RouteResponse.model_validate(r) for r in await routes.list(db)]


@router.post("/routes", response_model=RouteResponse, status_code=status.HTTP_201_CREATED)
async def create_route(
    payload: RouteCreate,
    session: CurrentSession = Depends(require_route("lookups:write")),
    db: AsyncSession = Depends(get_db)
):
    return RouteResponse.model_validate(await routes.create(db, payload.model_dump()))


@router.delete("/routes/{route_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_route(
    route_id: int = Path(...),
    session: CurrentSession = Depends(require_route("lookups:write")),
    db: AsyncSession = Depends(get_db)
):
    await routes.delete(db, route_id)
