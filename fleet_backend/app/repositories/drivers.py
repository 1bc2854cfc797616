from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.core.exceptions import ResourceNotFoundError, ValidationFailedError
from fleet_backend.app.models.driver import Driver
from fleet_backend.app.models.fuel_log import FuelLog
from fleet_backend.app.models.profile import Profile
from fleet_backend.app.models.trip import Trip
from fleet_backend.app.models.trip_enums import TripStatus
from fleet_backend.app.models.vehicle import Vehicle
from fleet_backend.app.repositories.base import BaseRepository
from fleet_backend.app.schemas.driver import (
    DriverDashboardView,
    DriverListItem,
    DriverResponse,
    DriverVehicleSummary,
)
from fleet_backend.app.schemas.fuel import FuelLogResponse
from fleet_backend.app.schemas.trip import TripResponse

RECENT_TRIPS_LIMIT = 10
RECENT_FUEL_LOGS_LIMIT = 5


class DriverRepository(BaseRepository[Driver]):
    model = Driver
    resource_name = "Driver"
    default_order = "performance_score"
    default_descending = True

    def _list_statement(self):
        return (
            select(Driver, Profile.full_name, Profile.mobile_phone, Vehicle.license_plate)
            .outerjoin(Profile, Profile.id == Driver.user_id)
            .outerjoin(Vehicle, Vehicle.id == Driver.vehicle_id)
        )

    @staticmethod
    def _to_item(driver: Driver, full_name, mobile_phone, plate) -> DriverListItem:
        base = DriverResponse.model_validate(driver).model_dump()
        return DriverListItem(
            **base,
            full_name=full_name,
            mobile_phone=mobile_phone,
            vehicle_license_plate=plate,
        )

    async def list_items(self, db: AsyncSession, limit: Optional[int] = None) -> List[DriverListItem]:
        """Drivers joined with profile and vehicle, best performers first."""
        stmt = self._list_statement().order_by(Driver.performance_score.desc(), Driver.id)
        if limit:
            stmt = stmt.limit(limit)
        rows = (await db.execute(stmt)).all()
        return [self._to_item(*row) for row in rows]

    async def get_item(self, db: AsyncSession, driver_id: int) -> DriverListItem:
        row = (await db.execute(self._list_statement().where(Driver.id == driver_id))).first()
        if row is None:
            raise ResourceNotFoundError("Driver", driver_id)
        return self._to_item(*row)

    async def find_by_user(self, db: AsyncSession, user_id: int) -> Optional[Driver]:
        result = await db.execute(select(Driver).where(Driver.user_id == user_id))
        return result.scalar_one_or_none()

    async def _check_vehicle(self, db: AsyncSession, vehicle_id: Optional[int], exclude_id: Optional[int] = None) -> None:
        if vehicle_id is None:
            return
        await self._ensure_exists(db, Vehicle, vehicle_id, "Vehicle", "vehicle_id")
        holder = (await db.execute(select(Driver.id).where(Driver.vehicle_id == vehicle_id))).scalar_one_or_none()
        if holder is not None and holder != exclude_id:
            raise ValidationFailedError(
                f"Vehicle {vehicle_id} is already assigned to another driver",
                field="vehicle_id",
            )

    async def create(self, db: AsyncSession, data: Dict[str, Any]) -> Driver:
        await self._check_vehicle(db, data.get("vehicle_id"))
        return await super().create(db, data)

    async def update(self, db: AsyncSession, row_id: int, data: Dict[str, Any]) -> Driver:
        if "vehicle_id" in data:
            await self._check_vehicle(db, data["vehicle_id"], exclude_id=row_id)
        return await super().update(db, row_id, data)

    async def dashboard(self, db: AsyncSession, user_id: int) -> DriverDashboardView:
        """
        The signed-in driver's own view: their row, assigned vehicle, the
        10 most recent trips and the 5 most recent fuel logs.
        """
        driver = await self.find_by_user(db, user_id)
        if driver is None:
            raise ResourceNotFoundError("Driver profile")

        vehicle = None
        if driver.vehicle_id is not None:
            vehicle = (await db.execute(select(Vehicle).where(Vehicle.id == driver.vehicle_id))).scalar_one_or_none()

        trips = (await db.execute(
            select(Trip)
            .where(Trip.driver_id == driver.id)
            .order_by(Trip.start_time.desc())
            .limit(RECENT_TRIPS_LIMIT)
        )).scalars().all()

        fuel_logs = (await db.execute(
            select(FuelLog)
            .where(FuelLog.driver_id == driver.id)
            .order_by(FuelLog.created_at.desc())
            .limit(RECENT_FUEL_LOGS_LIMIT)
        )).scalars().all()

        recent_trips = [TripResponse.model_validate(t) for t in trips]
        active_trip = next((t for t in recent_trips if t.status == TripStatus.IN_PROGRESS), None)

        return DriverDashboardView(
            driver=DriverResponse.model_validate(driver),
            vehicle=DriverVehicleSummary.model_validate(vehicle) if vehicle else None,
            recent_trips=recent_trips,
            recent_fuel_logs=[FuelLogResponse.model_validate(f) for f in fuel_logs],
            active_trip=active_trip,
            completed_recent_trips=sum(1 for t in recent_trips if t.status == TripStatus.COMPLETED),
        )
