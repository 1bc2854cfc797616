from typing import Any, Dict, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.core.exceptions import ValidationFailedError
from fleet_backend.app.models.lookups import RouteMaster, VehicleType
from fleet_backend.app.repositories.base import BaseRepository


class _NamedLookupRepository(BaseRepository):
    default_order = "name"

    async def create(self, db: AsyncSession, data: Dict[str, Any]):
        model: Type = self.model
        data = {**data, "name": data["name"].strip()}
        existing = (await db.execute(select(model.id).where(model.name == data["name"]))).scalar_one_or_none()
        if existing is not None:
            raise ValidationFailedError(f"{self.resource_name} '{data['name']}' already exists", field="name")
        return await super().create(db, data)


class VehicleTypeRepository(_NamedLookupRepository):
    model = VehicleType
    resource_name = "Vehicle type"


class RouteRepository(_NamedLookupRepository):
    model = RouteMaster
    resource_name = "Route"
