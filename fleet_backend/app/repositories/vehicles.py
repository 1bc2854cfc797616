from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.core.exceptions import ValidationFailedError
from fleet_backend.app.models.vehicle import Vehicle
from fleet_backend.app.repositories.base import BaseRepository


class VehicleRepository(BaseRepository[Vehicle]):
    model = Vehicle
    resource_name = "Vehicle"
    default_order = "created_at"
    default_descending = True

    async def find_by_plate(self, db: AsyncSession, license_plate: str) -> Optional[Vehicle]:
        result = await db.execute(select(Vehicle).where(Vehicle.license_plate == license_plate))
        return result.scalar_one_or_none()

    async def _check_plate(self, db: AsyncSession, license_plate: str, exclude_id: Optional[int] = None) -> None:
        existing = await self.find_by_plate(db, license_plate)
        if existing is not None and existing.id != exclude_id:
            raise ValidationFailedError(
                f"A vehicle with license plate {license_plate} already exists",
                field="license_plate",
            )

    async def create(self, db: AsyncSession, data: Dict[str, Any]) -> Vehicle:
        await self._check_plate(db, data["license_plate"])
        return await super().create(db, data)

    async def update(self, db: AsyncSession, row_id: int, data: Dict[str, Any]) -> Vehicle:
        if data.get("license_plate"):
            await self._check_plate(db, data["license_plate"], exclude_id=row_id)
        return await super().update(db, row_id, data)
