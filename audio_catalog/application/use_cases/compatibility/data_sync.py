"""Synchronize legacy audio subjects with relational category references."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from audio_catalog.application.dtos.audio import (
    AudioCategoryRecord,
    BatchFixResult,
    CompatibilityReport,
)
from audio_catalog.application.dtos.category import CategoryQuery, CategoryResult
from audio_catalog.application.interfaces.repositories import (
    IAudioCategoryRepository,
    ICategoryRepository,
)
from audio_catalog.application.services.category_compatibility import (
    CategoryCompatibilityAdapter,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncResult:
    """Outcome of sync or fix over a set of audio records."""

    examined: int = 0
    updated: int = 0
    errors: list[dict[str, str]] = field(default_factory=list)


class DataSyncService:
    """Checks and repairs the category fields of audio records.

    Rows are only written when their synchronized fields differ from what
    is stored.
    """

    def __init__(
        self,
        audio_repo: IAudioCategoryRepository,
        category_repo: ICategoryRepository,
        adapter: CategoryCompatibilityAdapter,
    ) -> None:
        self.audio_repo = audio_repo
        self.category_repo = category_repo
        self.adapter = adapter

    def after_commit(self, callback: Callable[[], None]) -> None:
        """Run callback once the audio writes of this request commit."""
        self.audio_repo.on_commit(callback)

    async def _categories(self) -> list[CategoryResult]:
        # Inactive categories still resolve existing references.
        return await self.category_repo.list_categories(CategoryQuery(include_inactive=True))

    async def check_data_consistency(self) -> CompatibilityReport:
        """Report inconsistencies without changing anything."""
        audios = await self.audio_repo.list_records()
        return self.adapter.generate_compatibility_report(audios, await self._categories())

    async def generate_report(self) -> CompatibilityReport:
        report = await self.check_data_consistency()
        logger.info(
            "Compatibility report: total=%d relational=%d legacy_only=%d inconsistent=%d",
            report.total_audios,
            report.with_new_fields,
            report.with_legacy_only,
            report.inconsistent,
        )
        return report

    async def sync_audio_fields(self, audio_ids: list[str] | None = None) -> SyncResult:
        """Lenient sync: fill missing side of each reference, keep unknown ids."""
        audios = await self.audio_repo.list_records(audio_ids)
        categories = await self._categories()
        changed = [
            synced
            for audio in audios
            if (synced := audio.with_fields(self.adapter.sync_audio_fields(audio, categories)))
            != audio
        ]
        updated = await self.audio_repo.update_fields(changed) if changed else 0
        logger.info("Synced audio category fields: examined=%d updated=%d", len(audios), updated)
        return SyncResult(examined=len(audios), updated=updated)

    async def fix_data_inconsistency(self, audio_ids: list[str] | None = None) -> SyncResult:
        """Strict repair; records with unrepairable references are reported in errors."""
        audios = await self.audio_repo.list_records(audio_ids)
        result: BatchFixResult = self.adapter.batch_fix_data_inconsistency(
            audios, await self._categories()
        )
        originals: dict[str, AudioCategoryRecord] = {a.id: a for a in audios}
        changed = [record for record in result.fixed if originals.get(record.id) != record]
        updated = await self.audio_repo.update_fields(changed) if changed else 0
        if result.errors:
            logger.warning(
                "Could not fix %d audio records; run cleanup to clear orphaned references",
                len(result.errors),
            )
        return SyncResult(examined=len(audios), updated=updated, errors=result.errors)

    async def cleanup_orphaned_references(self) -> int:
        """Clear category ids that point at deleted categories."""
        cleared = await self.audio_repo.clear_orphaned_references()
        logger.info("Cleared %d orphaned audio category references", cleared)
        return cleared
