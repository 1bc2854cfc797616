from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.models.driver import Driver
from fleet_backend.app.models.fuel_log import FuelLog
from fleet_backend.app.models.vehicle import Vehicle
from fleet_backend.app.repositories.base import BaseRepository


def total_cost(liters: float, price_per_liter: float) -> float:
    return round(liters * price_per_liter, 2)


class FuelLogRepository(BaseRepository[FuelLog]):
    model = FuelLog
    resource_name = "Fuel log"
    default_order = "created_at"
    default_descending = True

    async def create(self, db: AsyncSession, data: Dict[str, Any]) -> FuelLog:
        data = {k: v for k, v in data.items() if not (k == "created_at" and v is None)}
        await self._ensure_exists(db, Vehicle, data["vehicle_id"], "Vehicle", "vehicle_id")
        if data.get("driver_id") is not None:
            await self._ensure_exists(db, Driver, data["driver_id"], "Driver", "driver_id")
        data["total_cost_kes"] = total_cost(data["liters"], data["price_per_liter_kes"])
        return await super().create(db, data)

    async def update(self, db: AsyncSession, row_id: int, data: Dict[str, Any]) -> FuelLog:
        row = await self.get(db, row_id)
        if "liters" in data or "price_per_liter_kes" in data:
            liters: Optional[float] = data.get("liters", row.liters)
            price: Optional[float] = data.get("price_per_liter_kes", row.price_per_liter_kes)
            data = {**data, "total_cost_kes": total_cost(liters, price)}
        return await super().update(db, row_id, data)
