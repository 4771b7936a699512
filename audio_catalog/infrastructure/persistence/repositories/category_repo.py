"""Category repository. Returns application DTOs.

audio_count is computed on demand with a correlated count over audios
referencing the category as primary or secondary.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import ColumnElement, exists, func, literal, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from audio_catalog.application.dtos.category import (
    CategoryQuery,
    CategoryReorder,
    CategoryResult,
    CategoryStats,
)
from audio_catalog.core.constants import SEARCH_RESULT_LIMIT
from audio_catalog.domain.enums import CategoryLevel
from audio_catalog.infrastructure.persistence.models.audio import Audio
from audio_catalog.infrastructure.persistence.models.category import Category
from audio_catalog.infrastructure.persistence.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

_ORDER = (Category.level.asc(), Category.sort_order.asc(), Category.name.asc())


def _to_result(c: Category, audio_count: int = 0) -> CategoryResult:
    """Map ORM Category to CategoryResult."""
    return CategoryResult(
        id=c.id,
        name=c.name,
        level=c.level,
        parent_id=c.parent_id,
        description=c.description,
        color=c.color,
        icon=c.icon,
        sort_order=c.sort_order,
        is_active=c.is_active,
        audio_count=audio_count or 0,
        created_at=c.created_at,
        updated_at=c.updated_at,
    )


def _references_category() -> ColumnElement[bool]:
    return or_(Audio.category_id == Category.id, Audio.subcategory_id == Category.id)


def _audio_count_column(include_count: bool) -> Any:
    if not include_count:
        return literal(0).label("audio_count")
    return (
        select(func.count(Audio.id))
        .where(_references_category())
        .correlate(Category)
        .scalar_subquery()
        .label("audio_count")
    )


def _siblings_of(parent_id: str | None) -> ColumnElement[bool]:
    if parent_id is None:
        return Category.parent_id.is_(None)
    return Category.parent_id == parent_id


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CategoryRepository(BaseRepository[Category]):
    """Category persistence over the categories table."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Category)

    async def _on_after_create(self, obj: Category) -> None:
        logger.info("Category created: id=%s level=%s", obj.id, obj.level)

    async def _on_before_delete(self, obj: Category) -> None:
        logger.info("Deleting category: id=%s level=%s", obj.id, obj.level)

    async def list_categories(self, query: CategoryQuery) -> list[CategoryResult]:
        stmt = select(Category, _audio_count_column(query.include_count))
        if not query.include_inactive:
            stmt = stmt.where(Category.is_active.is_(True))
        if query.parent_id is not None:
            stmt = stmt.where(Category.parent_id == query.parent_id)
        if query.level is not None:
            stmt = stmt.where(Category.level == query.level)
        result = await self.db.execute(stmt.order_by(*_ORDER))
        return [_to_result(c, count) for c, count in result.all()]

    async def get_by_id(
        self, category_id: str, include_count: bool = False
    ) -> CategoryResult | None:
        result = await self.db.execute(
            select(Category, _audio_count_column(include_count)).where(
                Category.id == category_id
            )
        )
        row = result.one_or_none()
        return _to_result(row[0], row[1]) if row else None

    async def get_statistics(self) -> CategoryStats:
        has_audio = exists().where(_references_category())
        result = await self.db.execute(
            select(
                func.count(Category.id),
                func.count(Category.id).filter(Category.level == CategoryLevel.PRIMARY),
                func.count(Category.id).filter(Category.level == CategoryLevel.SECONDARY),
                func.count(Category.id).filter(Category.is_active.is_(True)),
                func.count(Category.id).filter(has_audio),
            )
        )
        total, level1, level2, active, with_audio = result.one()
        return CategoryStats(
            total_categories=total,
            level1_count=level1,
            level2_count=level2,
            active_count=active,
            inactive_count=total - active,
            categories_with_audio=with_audio,
            empty_categories_count=total - with_audio,
        )

    async def next_sort_order(self, parent_id: str | None) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.max(Category.sort_order), -1) + 1).where(
                _siblings_of(parent_id)
            )
        )
        return int(result.scalar_one())

    async def create_category(
        self,
        *,
        name: str,
        parent_id: str | None,
        level: int,
        sort_order: int,
        description: str | None = None,
        color: str | None = None,
        icon: str | None = None,
        is_active: bool = True,
    ) -> CategoryResult:
        entity = Category(
            name=name,
            parent_id=parent_id,
            level=level,
            sort_order=sort_order,
            description=description,
            color=color,
            icon=icon,
            is_active=is_active,
        )
        created = await self.create(entity)
        return _to_result(created)

    async def update_category(
        self, category_id: str, values: dict[str, object]
    ) -> CategoryResult | None:
        entity = await self._get(category_id)
        if not entity:
            return None
        for column, value in values.items():
            setattr(entity, column, value)
        await self.update(entity)
        return await self.get_by_id(category_id, include_count=True)

    async def delete_category(self, category_id: str, detach_audio: bool = False) -> bool:
        """Delete a category; its subcategories go with it (ON DELETE CASCADE)."""
        entity = await self._get(category_id)
        if not entity:
            return False
        if detach_audio:
            affected = select(Category.id).where(
                or_(Category.id == category_id, Category.parent_id == category_id)
            )
            for column in (Audio.category_id, Audio.subcategory_id):
                await self._execute_update(
                    update(Audio).where(column.in_(affected)).values({column.key: None})
                )
        await self.delete(entity)
        return True

    async def reorder(self, items: list[CategoryReorder]) -> int:
        updated = 0
        for item in items:
            updated += await self._execute_update(
                update(Category)
                .where(Category.id == item.id)
                .values(sort_order=item.sort_order, updated_at=func.now())
            )
        return updated

    async def set_active(self, category_ids: list[str], is_active: bool) -> int:
        if not category_ids:
            return 0
        return await self._execute_update(
            update(Category)
            .where(Category.id.in_(category_ids))
            .values(is_active=is_active, updated_at=func.now())
        )

    async def search(
        self,
        term: str,
        *,
        include_inactive: bool = False,
        level: int | None = None,
        limit: int = SEARCH_RESULT_LIMIT,
    ) -> list[CategoryResult]:
        pattern = f"%{_escape_like(term.strip())}%"
        stmt = select(Category).where(
            or_(
                Category.name.ilike(pattern, escape="\\"),
                Category.description.ilike(pattern, escape="\\"),
            )
        )
        if not include_inactive:
            stmt = stmt.where(Category.is_active.is_(True))
        if level is not None:
            stmt = stmt.where(Category.level == level)
        result = await self.db.execute(stmt.order_by(*_ORDER).limit(limit))
        return [_to_result(c) for c in result.scalars().all()]

    async def is_name_available(
        self, name: str, parent_id: str | None, exclude_id: str | None = None
    ) -> bool:
        stmt = select(Category.id).where(Category.name == name, _siblings_of(parent_id))
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none() is None
