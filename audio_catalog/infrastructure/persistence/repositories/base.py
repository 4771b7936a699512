"""Base repository: single-row writes with lifecycle hooks, and bulk UPDATE helper."""

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from sqlalchemy import Update, select
from sqlalchemy.ext.asyncio import AsyncSession

from audio_catalog.infrastructure.persistence.database import Base, run_after_commit


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """ORM-level create / update / delete for one model.

    Subclasses map rows to application DTOs and may override the
    _on_after_create, _on_after_update and _on_before_delete hooks.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    def on_commit(self, callback: Callable[[], None]) -> None:
        """Run callback once the session's request transaction commits."""
        run_after_commit(self.db, callback)

    async def _get(self, entity_id: str) -> ModelType | None:
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def _execute_update(self, stmt: Update) -> int:
        """Run a bulk UPDATE and return the number of matched rows."""
        result: Any = await self.db.execute(stmt)
        return result.rowcount or 0

    async def create(self, obj: ModelType) -> ModelType:
        """Insert obj, load server defaults, then run _on_after_create."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_create(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush pending changes on an attached row, then run _on_after_update."""
        await self.db.flush()
        await self.db.refresh(obj)
        await self._on_after_update(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        await self._on_before_delete(obj)
        await self.db.delete(obj)
        await self.db.flush()

    async def _on_after_create(self, obj: ModelType) -> None:
        pass

    async def _on_after_update(self, obj: ModelType) -> None:
        pass

    async def _on_before_delete(self, obj: ModelType) -> None:
        pass
