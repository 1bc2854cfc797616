"""
Callable function endpoints.

These answer with ``{success, ...}`` bodies; failures come back as
``{success: false, error}`` instead of the standard error
envelope.
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.db.session import get_db
from fleet_backend.app.core.config import settings
from fleet_backend.app.core.dependencies import CurrentSession
from fleet_backend.app.core.exceptions import AppException
from fleet_backend.app.core.guards import require_route
from fleet_backend.app.schemas.functions import (
    CreateDriverRequest,
    CreateDriverResponse,
    DriverCredentials,
    FunctionError,
    LiveLocationsResponse,
    SeedResponse,
)
from fleet_backend.app.services.accounts import AccountService
from fleet_backend.app.services.live_locations import generate_live_locations

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions", tags=["Functions"])


def function_error(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=FunctionError(error=message).model_dump(),
    )


@router.post(
    "/create-driver",
    response_model=CreateDriverResponse,
    responses={400: {"model": FunctionError}},
)
async def create_driver(
    request: CreateDriverRequest,
    session: CurrentSession = Depends(require_route("functions:create_driver")),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a driver login, profile, role and driver row.

    The generated password is only ever returned in this response.
    """
    try:
        driver, password = await AccountService.create_driver(db, request)
    except AppException as e:
        return function_error(e.message)
    except SQLAlchemyError as e:
        logger.error("Error creating driver account: %s", e)
        return function_error("Failed to create driver account")

    return CreateDriverResponse(
        driver_id=driver.id,
        credentials=DriverCredentials(email=request.email.lower(), password=password),
    )


@router.post(
    "/seed-test-accounts",
    response_model=SeedResponse,
    responses={403: {"model": FunctionError}},
)
async def seed_test_accounts(db: AsyncSession = Depends(get_db)):
    """Create the demo accounts. Safe to call repeatedly."""
    if not settings.enable_test_seeding:
        return function_error("Test account seeding is disabled", status.HTTP_403_FORBIDDEN)
    results = await AccountService.seed_test_accounts(db)
    return SeedResponse(results=results)


@router.post("/generate-live-locations", response_model=LiveLocationsResponse)
async def move_vehicles(
    session: CurrentSession = Depends(require_route("functions:live_locations")),
    db: AsyncSession = Depends(get_db)
):
    """Advance active vehicles one waypoint along their assigned route."""
    updated = await generate_live_locations(db)
    return LiveLocationsResponse(updated=updated, message=f"Updated {updated} vehicle locations")
