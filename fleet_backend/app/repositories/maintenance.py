from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.models.maintenance_log import MaintenanceLog
from fleet_backend.app.models.vehicle import Vehicle
from fleet_backend.app.repositories.base import BaseRepository
from fleet_backend.app.schemas.maintenance import MaintenanceListItem, MaintenanceLogResponse


class MaintenanceLogRepository(BaseRepository[MaintenanceLog]):
    model = MaintenanceLog
    resource_name = "Maintenance log"
    default_order = "date_performed"
    default_descending = True

    async def list_items(
        self,
        db: AsyncSession,
        vehicle_id: Optional[int] = None,
        performed_from: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[MaintenanceListItem]:
        """Maintenance logs with the vehicle plate, most recent first."""
        stmt = (
            select(MaintenanceLog, Vehicle.license_plate)
            .outerjoin(Vehicle, Vehicle.id == MaintenanceLog.vehicle_id)
        )
        if vehicle_id is not None:
            stmt = stmt.where(MaintenanceLog.vehicle_id == vehicle_id)
        if performed_from is not None:
            stmt = stmt.where(MaintenanceLog.date_performed >= performed_from)
        stmt = stmt.order_by(MaintenanceLog.date_performed.desc(), MaintenanceLog.id.desc())
        if limit:
            stmt = stmt.limit(limit)

        rows = (await db.execute(stmt)).all()
        return [
            MaintenanceListItem(
                **MaintenanceLogResponse.model_validate(log).model_dump(),
                vehicle_license_plate=plate,
            )
            for log, plate in rows
        ]

    async def create(self, db: AsyncSession, data: Dict[str, Any]) -> MaintenanceLog:
        await self._ensure_exists(db, Vehicle, data["vehicle_id"], "Vehicle", "vehicle_id")
        return await super().create(db, data)
