from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.core.exceptions import ResourceNotFoundError, ValidationFailedError
from fleet_backend.app.models.driver import Driver
from fleet_backend.app.models.lookups import RouteMaster
from fleet_backend.app.models.profile import Profile
from fleet_backend.app.models.trip import Trip
from fleet_backend.app.models.trip_enums import TripStatus
from fleet_backend.app.models.vehicle import Vehicle
from fleet_backend.app.repositories.base import BaseRepository
from fleet_backend.app.schemas.trip import TripListItem, TripResponse


class TripRepository(BaseRepository[Trip]):
    model = Trip
    resource_name = "Trip"
    default_order = "start_time"
    default_descending = True

    def _list_statement(self):
        return (
            select(Trip, Vehicle.license_plate, Profile.full_name)
            .outerjoin(Vehicle, Vehicle.id == Trip.vehicle_id)
            .outerjoin(Driver, Driver.id == Trip.driver_id)
            .outerjoin(Profile, Profile.id == Driver.user_id)
        )

    @staticmethod
    def _to_item(trip: Trip, plate, driver_name) -> TripListItem:
        base = TripResponse.model_validate(trip).model_dump()
        return TripListItem(**base, vehicle_license_plate=plate, driver_name=driver_name)

    async def list_items(
        self,
        db: AsyncSession,
        status: Optional[List[TripStatus]] = None,
        vehicle_id: Optional[int] = None,
        started_from: Optional[datetime] = None,
        started_before: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[TripListItem]:
        """Trips joined with vehicle plate and driver name, newest first."""
        stmt = self._list_statement()
        if status:
            stmt = stmt.where(Trip.status.in_(status))
        if vehicle_id is not None:
            stmt = stmt.where(Trip.vehicle_id == vehicle_id)
        if started_from is not None:
            stmt = stmt.where(Trip.start_time >= started_from)
        if started_before is not None:
            stmt = stmt.where(Trip.start_time < started_before)
        stmt = stmt.order_by(Trip.start_time.desc(), Trip.id.desc())
        if limit:
            stmt = stmt.limit(limit)
        rows = (await db.execute(stmt)).all()
        return [self._to_item(*row) for row in rows]

    async def get_item(self, db: AsyncSession, trip_id: int) -> TripListItem:
        row = (await db.execute(self._list_statement().where(Trip.id == trip_id))).first()
        if row is None:
            raise ResourceNotFoundError("Trip", trip_id)
        return self._to_item(*row)

    async def find_route(self, db: AsyncSession, name: str) -> Optional[RouteMaster]:
        result = await db.execute(select(RouteMaster).where(RouteMaster.name == name))
        return result.scalar_one_or_none()

    async def create(self, db: AsyncSession, data: Dict[str, Any]) -> Trip:
        """
        Schedule a trip. Missing start/end locations and distance are taken
        from the master route of the same name when there is one.
        """
        data = dict(data)
        for field in ("route", "start_location", "end_location"):
            if isinstance(data.get(field), str):
                data[field] = data[field].strip() or None

        if not data.get("route"):
            raise ValidationFailedError("Route is required", field="route")

        master = await self.find_route(db, data["route"])
        if master is not None:
            data["start_location"] = data.get("start_location") or master.start_location
            data["end_location"] = data.get("end_location") or master.end_location
            if data.get("distance_km") is None:
                data["distance_km"] = master.distance_km

        for field, label in (("start_location", "Start location"), ("end_location", "End location")):
            if not data.get(field):
                raise ValidationFailedError(f"{label} is required", field=field)

        await self._ensure_exists(db, Vehicle, data["vehicle_id"], "Vehicle", "vehicle_id")
        if data.get("driver_id") is not None:
            await self._ensure_exists(db, Driver, data["driver_id"], "Driver", "driver_id")

        return await super().create(db, data)

    async def update(self, db: AsyncSession, row_id: int, data: Dict[str, Any]) -> Trip:
        if data.get("driver_id") is not None:
            await self._ensure_exists(db, Driver, data["driver_id"], "Driver", "driver_id")
        return await super().update(db, row_id, data)
