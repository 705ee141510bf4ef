"""Base repository: generic get_by_id and create for ORM models."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrail.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id and create.

    Subclasses map ORM rows to application DTOs; ORM instances never leave the
    repository layer.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _get_orm_by_id(
        self, entity_id: str, *, for_update: bool = False
    ) -> ModelType | None:
        """Return a single record by primary key, or None.

        for_update locks the row until the unit of work ends (no-op on SQLite,
        where write units already hold the database lock).
        """
        model: Any = self.model
        stmt = select(self.model).where(model.id == entity_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _create(self, obj: ModelType) -> ModelType:
        """Persist a new record; IntegrityError propagates to the caller."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj
