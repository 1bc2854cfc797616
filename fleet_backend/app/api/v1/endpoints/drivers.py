"""
Driver management API endpoints.

Driver logins are created through the create-driver function; these
endpoints list, edit and remove driver rows.
"""

from fastapi import APIRouter, Depends, status, Path
from sqlalchemy.ext.asyncio import AsyncSession
from fleet_backend.app.db.session import get_db
from fleet_backend.app.core.dependencies import CurrentSession
from fleet_backend.app.core.guards import require_route
from fleet_backend.app.repositories.drivers import DriverRepository
from fleet_backend.app.schemas.driver import (
    DriverCreate,
    DriverUpdate,
    DriverListItem,
    DriverListResponse,
    DriverDashboardView,
)

router = APIRouter(prefix="/drivers", tags=["Drivers"])
me_router = APIRouter(prefix="/me", tags=["Driver Dashboard"])
drivers = DriverRepository()


@router.get("", response_model=DriverListResponse)
async def list_drivers(
    session: CurrentSession = Depends(require_route("drivers:read")),
    db: AsyncSession = Depends(get_db)
):
    """Drivers with name, phone and assigned vehicle plate, best score first."""
    items = await drivers.list_items(db)
    return DriverListResponse(drivers=items, total=len(items))


@router.post("", response_model=DriverListItem, status_code=status.HTTP_201_CREATED)
async def create_driver_row(
    driver_data: DriverCreate,
    session: CurrentSession = Depends(require_route("drivers:write")),
    db: AsyncSession = Depends(get_db)
):
    """Add a driver without a login account."""
    driver = await drivers.create(db, driver_data.model_dump())
    return await drivers.get_item(db, driver.id)


@router.get("/{driver_id}", response_model=DriverListItem)
async def get_driver(
    driver_id: int = Path(..., description="Driver ID"),
    session: CurrentSession = Depends(require_route("drivers:read")),
    db: AsyncSession = Depends(get_db)
):
    return await drivers.get_item(db, driver_id)


@router.patch("/{driver_id}", response_model=DriverListItem)
async def update_driver(
    driver_data: DriverUpdate,
    driver_id: int = Path(..., description="Driver ID"),
    session: CurrentSession = Depends(require_route("drivers:write")),
    db: AsyncSession = Depends(get_db)
):
    await drivers.update(db, driver_id, driver_data.model_dump(exclude_unset=True))
    return await drivers.get_item(db, driver_id)


@router.delete("/{driver_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_driver(
    driver_id: int = Path(..., description="Driver ID"),
    session: CurrentSession = Depends(require_route("drivers:write")),
    db: AsyncSession = Depends(get_db)
):
    """Remove the driver row. The linked login, if any, is kept."""
    await drivers.delete(db, driver_id)


@me_router.get("/driver", response_model=DriverDashboardView)
async def get_my_driver_dashboard(
    session: CurrentSession = Depends(require_route("driver_dashboard")),
    db: AsyncSession = Depends(get_db)
):
    """The signed-in driver's vehicle, recent trips and recent fuel logs."""
    return await drivers.dashboard(db, session.user_id)
