"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable

    from audio_catalog.application.dtos.audio import AudioCategoryRecord
    from audio_catalog.application.dtos.category import (
        CategoryQuery,
        CategoryReorder,
        CategoryResult,
        CategoryStats,
    )


class ICategoryRepository(Protocol):
    """Protocol for category repository (DIP)."""

    def on_commit(self, callback: Callable[[], None]) -> None:
        """Run callback after the current unit of work commits (immediately outside one)."""

    async def list_categories(self, query: CategoryQuery) -> list[CategoryResult]:
        """Return categories ordered by level, sort_order, name, filtered by query."""

    async def get_by_id(
        self, category_id: str, include_count: bool = False
    ) -> CategoryResult | None:
        """Return one category, or None."""

    async def get_statistics(self) -> CategoryStats:
        """Return aggregate counters over all categories."""

    async def next_sort_order(self, parent_id: str | None) -> int:
        """Return max(sort_order) + 1 among siblings, or 0 when there are none."""

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
        """Insert a category and return it."""

    async def update_category(
        self, category_id: str, values: dict[str, object]
    ) -> CategoryResult | None:
        """Apply column values to one category; None when it does not exist."""

    async def delete_category(self, category_id: str, detach_audio: bool = False) -> bool:
        """Delete one category (and its subcategories). detach_audio NULLs audio references first."""

    async def reorder(self, items: list[CategoryReorder]) -> int:
        """Set sort_order for each item; return the number of rows updated."""

    async def set_active(self, category_ids: list[str], is_active: bool) -> int:
        """Set is_active on many categories; return the number of rows updated."""

    async def search(
        self,
        term: str,
        *,
        include_inactive: bool = False,
        level: int | None = None,
        limit: int = 50,
    ) -> list[CategoryResult]:
        """Case-insensitive search over name and description."""

    async def is_name_available(
        self, name: str, parent_id: str | None, exclude_id: str | None = None
    ) -> bool:
        """Return True when no sibling under parent_id already uses name."""


class IAudioCategoryRepository(Protocol):
    """Protocol for the category columns of audio records (DIP)."""

    def on_commit(self, callback: Callable[[], None]) -> None:
        """Run callback after the current unit of work commits (immediately outside one)."""

    async def list_records(
        self, audio_ids: list[str] | None = None
    ) -> list[AudioCategoryRecord]:
        """Return category fields of the given audio rows, or of all rows."""

    async def update_fields(self, records: list[AudioCategoryRecord]) -> int:
        """Persist subject, category_id and subcategory_id; return rows updated."""

    async def clear_orphaned_references(self) -> int:
        """NULL category ids that point at no category; return rows updated."""
