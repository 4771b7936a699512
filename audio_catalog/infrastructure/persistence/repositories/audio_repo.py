"""Audio category-field repository. Reads and writes only subject and category ids."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from audio_catalog.application.dtos.audio import AudioCategoryRecord
from audio_catalog.infrastructure.persistence.models.audio import Audio
from audio_catalog.infrastructure.persistence.models.category import Category
from audio_catalog.infrastructure.persistence.repositories.base import BaseRepository


class AudioCategoryRepository(BaseRepository[Audio]):
    """Category columns of the audios table."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Audio)

    async def list_records(
        self, audio_ids: list[str] | None = None
    ) -> list[AudioCategoryRecord]:
        stmt = select(
            Audio.id, Audio.title, Audio.subject, Audio.category_id, Audio.subcategory_id
        )
        if audio_ids is not None:
            stmt = stmt.where(Audio.id.in_(audio_ids))
        result = await self.db.execute(stmt.order_by(Audio.created_at.asc(), Audio.id.asc()))
        return [
            AudioCategoryRecord(
                id=row.id,
                title=row.title,
                subject=row.subject,
                category_id=row.category_id,
                subcategory_id=row.subcategory_id,
            )
            for row in result.all()
        ]

    async def update_fields(self, records: list[AudioCategoryRecord]) -> int:
        updated = 0
        for record in records:
            updated += await self._execute_update(
                update(Audio)
                .where(Audio.id == record.id)
                .values(
                    subject=record.subject,
                    category_id=record.category_id,
                    subcategory_id=record.subcategory_id,
                )
            )
        return updated

    async def clear_orphaned_references(self) -> int:
        existing = select(Category.id)
        cleared = 0
        for column in (Audio.category_id, Audio.subcategory_id):
            cleared += await self._execute_update(
                update(Audio)
                .where(column.is_not(None), column.not_in(existing))
                .values({column.key: None})
            )
        return cleared
