"""
Generic async repository over one table.

Repositories are the only place entity rows are written; every committed
write is published on the change feed.
"""

import logging
from typing import Any, Dict, Generic, Optional, Sequence, Type, TypeVar

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.core.exceptions import ResourceNotFoundError, ValidationFailedError
from fleet_backend.app.db.session import Base
from fleet_backend.app.services.changefeed import ChangeFeed, ChangeType, change_feed

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    model: Type[ModelT]
    resource_name: str = "Resource"
    default_order: Optional[str] = "id"
    default_descending: bool = False

    def __init__(self, feed: Optional[ChangeFeed] = None):
        self.feed = feed or change_feed

    @property
    def table_name(self) -> str:
        return self.model.__tablename__

    def _apply_filters(self, stmt, filters: Optional[Dict[str, Any]]):
        for column_name, value in (filters or {}).items():
            column = getattr(self.model, column_name)
            if isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(list(value)))
            elif value is None:
                stmt = stmt.where(column.is_(None))
            else:
                stmt = stmt.where(column == value)
        return stmt

    def _apply_order(self, stmt, order_by: Optional[str], descending: Optional[bool]):
        order_by = order_by or self.default_order
        if order_by is None:
            return stmt
        column = getattr(self.model, order_by)
        if descending is None:
            descending = self.default_descending
        return stmt.order_by(column.desc() if descending else column.asc())

    async def list(
        self,
        db: AsyncSession,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> Sequence[ModelT]:
        stmt = self._apply_order(self._apply_filters(select(self.model), filters), order_by, descending)
        if limit:
            stmt = stmt.limit(limit)
        result = await db.execute(stmt)
        return result.scalars().all()

    async def count(self, db: AsyncSession, filters: Optional[Dict[str, Any]] = None) -> int:
        stmt = self._apply_filters(select(func.count(self.model.id)), filters)
        return (await db.execute(stmt)).scalar() or 0

    async def find(self, db: AsyncSession, row_id: int) -> Optional[ModelT]:
        result = await db.execute(select(self.model).where(self.model.id == row_id))
        return result.scalar_one_or_none()

    async def get(self, db: AsyncSession, row_id: int) -> ModelT:
        row = await self.find(db, row_id)
        if row is None:
            raise ResourceNotFoundError(self.resource_name, row_id)
        return row

    async def create(self, db: AsyncSession, data: Dict[str, Any]) -> ModelT:
        row = self.model(**data)
        db.add(row)
        await self._commit(db)
        await db.refresh(row)
        self.feed.notify(self.table_name, ChangeType.INSERT, row.id)
        return row

    async def update(self, db: AsyncSession, row_id: int, data: Dict[str, Any]) -> ModelT:
        row = await self.get(db, row_id)
        for field, value in data.items():
            setattr(row, field, value)
        await self._commit(db)
        await db.refresh(row)
        self.feed.notify(self.table_name, ChangeType.UPDATE, row.id)
        return row

    async def delete(self, db: AsyncSession, row_id: int) -> None:
        row = await self.get(db, row_id)
        await db.delete(row)
        await self._commit(db)
        self.feed.notify(self.table_name, ChangeType.DELETE, row_id)

    async def _commit(self, db: AsyncSession) -> None:
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.warning("Integrity error writing %s: %s", self.table_name, e.orig)
            raise ValidationFailedError(f"{self.resource_name} conflicts with an existing record")

    async def _ensure_exists(self, db: AsyncSession, model: Type[Base], row_id: int, label: str, field: str) -> None:
        found = (await db.execute(select(model.id).where(model.id == row_id))).scalar_one_or_none()
        if found is None:
            raise ValidationFailedError(f"{label} {row_id} does not exist", field=field)
