"""
FastAPI Application Entry Point.

This is the main application file for the Fleet Dashboard Backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fleet_backend.app.core.config import settings
from fleet_backend.app.core.logging_config import setup_logging
from fleet_backend.app.core.observability import ObservabilityMiddleware
from fleet_backend.app.core.redis_client import ping_redis, close_redis
from fleet_backend.app.api.v1.router import router as api_v1_router
from fleet_backend.app.db.session import engine, Base
from fleet_backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from fleet_backend.app.models.user import User
from fleet_backend.app.models.profile import Profile
from fleet_backend.app.models.user_role import UserRoleAssignment
from fleet_backend.app.models.vehicle import Vehicle
from fleet_backend.app.models.driver import Driver
from fleet_backend.app.models.trip import Trip
from fleet_backend.app.models.maintenance_log import MaintenanceLog
from fleet_backend.app.models.fuel_log import FuelLog
from fleet_backend.app.models.lookups import VehicleType, RouteMaster

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    Creates database tables on startup.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s started", settings.app_name)
    yield
    await engine.dispose()
    await close_redis()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Fleet management dashboard backend: vehicles, drivers, trips, costs and reports",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status, application information and Redis reachability
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
        "redis": "up" if await ping_redis() else "down",
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to the {settings.brand_name} API",
        "docs": "/docs",
        "health": "/health",
    }
