"""
Maintenance log API endpoints.

Finance can read the service history; only fleet managers and operations
can record it.
"""

from typing import Optional
from fastapi import APIRouter, Depends, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_backend.app.db.session import get_db
from fleet_backend.app.core.dependencies import CurrentSession
from fleet_backend.app.core.guards import require_route
from fleet_backend.app.repositories.maintenance import MaintenanceLogRepository
from fleet_backend.app.schemas.maintenance import (
    MaintenanceLogCreate,
    MaintenanceLogUpdate,
    MaintenanceLogResponse,
    MaintenanceListResponse,
)

router = APIRouter(prefix="/maintenance-logs", tags=["Maintenance"])
logs = MaintenanceLogRepository()


@router.get("", response_model=MaintenanceListResponse)
async def list_maintenance_logs(
    vehicle_id: Optional[int] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=500),
    session: CurrentSession = Depends(require_route("maintenance:read")),
    db: AsyncSession = Depends(get_db)
):
    items = await logs.list_items(db, vehicle_id=vehicle_id, limit=limit)
    return MaintenanceListResponse(logs=items, total=len(items))


@router.post("", response_model=MaintenanceLogResponse, status_code=status.HTTP_201_CREATED)
async def create_maintenance_log(
    log_data: MaintenanceLogCreate,
    session: CurrentSession = Depends(require_route("maintenance:write")),
    db: AsyncSession = Depends(get_db)
):
    log = await logs.create(db, log_data.model_dump())
    return MaintenanceLogResponse.model_validate(log)


@router.patch("/{log_id}", response_model=MaintenanceLogResponse)
async def update_maintenance_log(
    log_data: MaintenanceLogUpdate,
    log_id: int = Path(..., description="Maintenance log ID"),
    session: CurrentSession = Depends(require_route("maintenance:write")),
    db: AsyncSession = Depends(get_db)
):
    log = await logs.update(db, log_id, log_data.model_dump(exclude_unset=True))
    return MaintenanceLogResponse.model_validate(log)


@router.delete("/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_maintenance_log(
    log_id: int = Path(..., description="Maintenance log ID"),
    session: CurrentSession = Depends(require_route("maintenance:write")),
    db: AsyncSession = Depends(get_db)
):
    await logs.delete(db, log_id)
