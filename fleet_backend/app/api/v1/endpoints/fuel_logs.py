"""
Fuel log API endpoints.

``total_cost_kes`` is always computed from litres and unit price.
"""

from typing import Optional
from fastapi import APIRouter, Depends, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_backend.app.db.session import get_db
from fleet_backend.app.core.dependencies import CurrentSession
from fleet_backend.app.core.guards import require_route
from fleet_backend.app.repositories.fuel_logs import FuelLogRepository
from fleet_backend.app.schemas.fuel import FuelLogCreate, FuelLogUpdate, FuelLogResponse, FuelLogListResponse

router = APIRouter(prefix="/fuel-logs", tags=["Fuel"])
logs = FuelLogRepository()


@router.get("", response_model=FuelLogListResponse)
async def list_fuel_logs(
    vehicle_id: Optional[int] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=500),
    session: CurrentSession = Depends(require_route("fuel:read")),
    db: AsyncSession = Depends(get_db)
):
    filters = {"vehicle_id": vehicle_id} if vehicle_id is not None else None
    rows = await logs.list(db, filters=filters, limit=limit)
    return FuelLogListResponse(logs=[FuelLogResponse.model_validate(r) for r in rows], total=len(rows))


@router.post("", response_model=FuelLogResponse, status_code=status.HTTP_201_CREATED)
async def create_fuel_log(
    log_data: FuelLogCreate,
    session: CurrentSession = Depends(require_route("fuel:write")),
    db: AsyncSession = Depends(get_db)
):
    log = await logs.create(db, log_data.model_dump())
    return FuelLogResponse.model_validate(log)


@router.patch("/{log_id}", response_model=FuelLogResponse)
async def update_fuel_log(
    log_data: FuelLogUpdate,
    log_id: int = Path(..., description="Fuel log ID"),
    session: CurrentSession = Depends(require_route("fuel:write")),
    db: AsyncSession = Depends(get_db)
):
    log = await logs.update(db, log_id, log_data.model_dump(exclude_unset=True))
    return FuelLogResponse.model_validate(log)


@router.delete("/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_fuel_log(
    log_id: int = Path(..., description="Fuel log ID"),
    session: CurrentSession = Depends(require_route("fuel:write")),
    db: AsyncSession = Depends(get_db)
):
    await logs.delete(db, log_id)
