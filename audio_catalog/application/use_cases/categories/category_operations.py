"""Category operations: cached reads, validated writes and bulk actions.

Every successful write schedules cache invalidation for the matching
operation; it runs once the repository's transaction commits and is dropped
on rollback. Validation failures carry all collected errors.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from functools import partial
from typing import TYPE_CHECKING, TypeVar

from audio_catalog.application.dtos.category import (
    BatchResult,
    CategoryCreate,
    CategoryOption,
    CategoryPath,
    CategoryQuery,
    CategoryReorder,
    CategoryResult,
    CategorySelection,
    CategoryStats,
    CategoryTreeNode,
    CategoryUpdate,
    CategoryValidationResult,
)
from audio_catalog.application.interfaces.repositories import ICategoryRepository
from audio_catalog.application.services.category_tree import (
    build_tree,
    generate_hierarchical_options,
    generate_options,
    get_path,
)
from audio_catalog.application.services.category_validator import (
    validate_batch_operation,
    validate_category,
    validate_deletion,
    validate_hierarchy_consistency,
    validate_selection,
)
from audio_catalog.core.constants import (
    DEFAULT_COLOR,
    DEFAULT_ICON,
    MAX_SUBCATEGORIES_PER_PARENT,
    SEARCH_RESULT_LIMIT,
)
from audio_catalog.domain.enums import BatchOperation, CacheOperation, CategoryLevel
from audio_catalog.domain.exceptions import (
    CatalogException,
    CategoryDeleteRestrictedException,
    CategoryValidationException,
    ResourceNotFoundException,
    ValidationException,
)

if TYPE_CHECKING:
    from audio_catalog.infrastructure.cache.category_cache import CategoryCacheManager

logger = logging.getLogger(__name__)

_UPDATABLE = ("name", "description", "color", "icon", "sort_order", "is_active", "parent_id")
# Columns that cannot be NULL; an explicit None leaves them unchanged.
_NOT_NULL = frozenset({"name", "sort_order", "is_active"})


def _raise_if_invalid(result: CategoryValidationResult) -> None:
    if not result.is_valid:
        raise CategoryValidationException(
            [e.to_dict() for e in result.errors], result.warnings
        )


def _log_warnings(result: CategoryValidationResult) -> None:
    for warning in result.warnings:
        logger.warning("Category validation warning: %s", warning)


D = TypeVar("D", CategoryCreate, CategoryUpdate)


def _strip_name(data: D) -> D:
    """Trim the name so validation sees the value that will be stored."""
    if data.name is None:
        return data
    return replace(data, name=data.name.strip())


class CategoryService:
    """Use cases over the category repository and the category cache."""

    def __init__(
        self,
        category_repo: ICategoryRepository,
        cache: CategoryCacheManager,
        max_subcategories: int = MAX_SUBCATEGORIES_PER_PARENT,
    ) -> None:
        self.category_repo = category_repo
        self.cache = cache
        self.max_subcategories = max_subcategories

    async def _snapshot(self, include_count: bool = False) -> list[CategoryResult]:
        """All categories, inactive included, read from the repository.

        Never read through the shared cache, so rows written by an uncommitted
        transaction are not cached for other requests.
        """
        return await self.category_repo.list_categories(
            CategoryQuery(include_inactive=True, include_count=include_count)
        )

    def _invalidate(
        self, operation: CacheOperation | str, category_id: str | None = None
    ) -> None:
        self.category_repo.on_commit(
            partial(self.cache.invalidate_cache, operation, category_id)
        )

    # ---- reads ----

    async def list_categories(self, query: CategoryQuery | None = None) -> list[CategoryResult]:
        return await self.cache.get_categories(self.category_repo, query or CategoryQuery())

    async def get_category_tree(
        self, include_count: bool = False, include_inactive: bool = False
    ) -> list[CategoryTreeNode]:
        """Primaries with their subcategories. The inactive variant is built uncached."""
        if include_inactive:
            categories = await self._snapshot(include_count)
            return build_tree(categories, include_inactive=True)
        return await self.cache.get_tree(self.category_repo, include_count)

    async def get_category(self, category_id: str) -> CategoryResult:
        category = await self.cache.get_category(self.category_repo, category_id)
        if category is None:
            raise ResourceNotFoundException("category", category_id)
        return category

    async def get_stats(self) -> CategoryStats:
        return await self.cache.get_stats(self.category_repo)

    async def search_categories(
        self,
        term: str,
        include_inactive: bool = False,
        level: int | None = None,
        limit: int = SEARCH_RESULT_LIMIT,
    ) -> list[CategoryResult]:
        if not term or not term.strip():
            raise ValidationException("Search term is required", "search")
        return await self.category_repo.search(
            term, include_inactive=include_inactive, level=level, limit=limit
        )

    async def get_options(
        self,
        level: int | None = None,
        include_inactive: bool = False,
        hierarchical: bool = False,
    ) -> list[CategoryOption]:
        """Picker options: flat (optionally one level) or nested by primary."""
        if hierarchical:
            tree = await self.get_category_tree(include_inactive=include_inactive)
            return generate_hierarchical_options(tree, include_inactive)
        categories = await self.list_categories(CategoryQuery(include_inactive=include_inactive))
        return generate_options(categories, level, include_inactive)

    async def get_category_path(self, selection: CategorySelection) -> CategoryPath:
        """Resolve a selection to its categories and breadcrumb after validating it."""
        categories = await self._snapshot()
        _raise_if_invalid(validate_selection(selection, categories))
        return get_path(categories, selection.category_id, selection.subcategory_id)

    # ---- checks ----

    async def validate_category(
        self, data: CategoryCreate | CategoryUpdate, current_category_id: str | None = None
    ) -> CategoryValidationResult:
        """Dry run of create or update validation. Never raises for invalid data."""
        return validate_category(
            _strip_name(data),
            await self._snapshot(),
            current_category_id=current_category_id,
            max_subcategories=self.max_subcategories,
        )

    async def check_hierarchy(self) -> CategoryValidationResult:
        """Check every stored category against the hierarchy invariants."""
        categories = await self.category_repo.list_categories(
            CategoryQuery(include_inactive=True)
        )
        return validate_hierarchy_consistency(categories, self.max_subcategories)

    # ---- writes ----

    async def create_category(self, data: CategoryCreate) -> CategoryResult:
        """Create a category; level follows parent_id and sort_order defaults to last."""
        data = _strip_name(data)
        result = validate_category(
            data, await self._snapshot(), max_subcategories=self.max_subcategories
        )
        _raise_if_invalid(result)
        _log_warnings(result)

        sort_order = data.sort_order
        if sort_order is None:
            sort_order = await self.category_repo.next_sort_order(data.parent_id)
        created = await self.category_repo.create_category(
            name=data.name,
            parent_id=data.parent_id,
            level=CategoryLevel.for_parent(data.parent_id),
            sort_order=sort_order,
            description=data.description,
            color=data.color or DEFAULT_COLOR,
            icon=data.icon or DEFAULT_ICON,
            is_active=data.is_active,
        )
        self._invalidate(CacheOperation.CREATE, created.id)
        return created

    async def update_category(self, category_id: str, data: CategoryUpdate) -> CategoryResult:
        """Apply a partial update. A parent change re-derives level and appends to the new siblings."""
        data = _strip_name(data)
        categories = await self._snapshot()
        current = next((c for c in categories if c.id == category_id), None)
        if current is None:
            raise ResourceNotFoundException("category", category_id)

        result = validate_category(
            data,
            categories,
            current_category_id=category_id,
            max_subcategories=self.max_subcategories,
        )
        _raise_if_invalid(result)
        _log_warnings(result)

        values: dict[str, object] = {}
        for name in _UPDATABLE:
            if not data.has(name):
                continue
            value = getattr(data, name)
            if value is None and name in _NOT_NULL:
                continue
            values[name] = value

        if "parent_id" in values and values["parent_id"] != current.parent_id:
            new_parent = data.parent_id
            values["level"] = int(CategoryLevel.for_parent(new_parent))
            if "sort_order" not in values:
                values["sort_order"] = await self.category_repo.next_sort_order(new_parent)
        else:
            values.pop("parent_id", None)

        if not values:
            return current

        updated = await self.category_repo.update_category(category_id, values)
        if updated is None:
            raise ResourceNotFoundException("category", category_id)
        self._invalidate(CacheOperation.UPDATE, category_id)
        return updated

    async def move_category(self, category_id: str, new_parent_id: str | None) -> CategoryResult:
        """Move under a primary, or to the top level when new_parent_id is None."""
        return await self.update_category(
            category_id,
            CategoryUpdate(parent_id=new_parent_id, fields_set=frozenset({"parent_id"})),
        )

    async def delete_category(self, category_id: str, force: bool = False) -> None:
        """Delete one category.

        Without force, a category with subcategories or audio references is
        refused. With force, its subcategories are deleted too and audio
        references are cleared.

        Raises:
            ResourceNotFoundException: unknown id.
            CategoryDeleteRestrictedException: still referenced and not forced.
        """
        categories = await self.category_repo.list_categories(
            CategoryQuery(include_inactive=True, include_count=True)
        )
        category = next((c for c in categories if c.id == category_id), None)
        if category is None:
            raise ResourceNotFoundException("category", category_id)

        if not force and not validate_deletion(category_id, categories).is_valid:
            children = sum(1 for c in categories if c.parent_id == category_id)
            raise CategoryDeleteRestrictedException(
                category_id, children, category.audio_count
            )

        await self.category_repo.delete_category(category_id, detach_audio=force)
        self._invalidate(CacheOperation.DELETE, category_id)

    async def reorder_categories(self, items: Sequence[CategoryReorder]) -> int:
        """Set new sort positions; all ids must exist."""
        if not items:
            raise ValidationException("No categories to reorder", "items")
        known = {c.id for c in await self._snapshot()}
        missing = [item.id for item in items if item.id not in known]
        if missing:
            raise ResourceNotFoundException("category", ", ".join(missing))
        updated = await self.category_repo.reorder(list(items))
        self._invalidate(CacheOperation.REORDER)
        return updated

    async def batch_update_status(
        self, category_ids: Sequence[str], is_active: bool
    ) -> BatchResult:
        """Activate or deactivate many categories. Unknown ids are reported, not raised."""
        operation = BatchOperation.ACTIVATE if is_active else BatchOperation.DEACTIVATE
        categories = await self._snapshot()
        if not category_ids:
            _raise_if_invalid(validate_batch_operation(category_ids, operation, categories))
        known = {c.id for c in categories}
        targets = [i for i in dict.fromkeys(category_ids) if i in known]
        failed = [
            {"id": i, "error": f"category not found: {i}"}
            for i in dict.fromkeys(category_ids)
            if i not in known
        ]
        if targets:
            await self.category_repo.set_active(targets, is_active)
            self._invalidate(f"batch_{operation.value}")
        return BatchResult(succeeded=targets, failed=failed)

    async def batch_move(
        self, category_ids: Sequence[str], target_parent_id: str | None
    ) -> BatchResult:
        """Move many categories under one primary. Validated as a whole before any write."""
        categories = await self._snapshot()
        _raise_if_invalid(
            validate_batch_operation(
                category_ids, BatchOperation.MOVE, categories, target_parent_id
            )
        )
        succeeded: list[str] = []
        failed: list[dict[str, str]] = []
        for category_id in dict.fromkeys(category_ids):
            try:
                await self.move_category(category_id, target_parent_id)
                succeeded.append(category_id)
            except CatalogException as e:
                failed.append({"id": category_id, "error": e.message})
        return BatchResult(succeeded=succeeded, failed=failed)

    async def batch_delete(
        self, category_ids: Sequence[str], force: bool = False, cascade: bool = False
    ) -> BatchResult:
        """Delete many categories, subcategories first, isolating failures per id.

        cascade allows deleting a primary together with its subcategories
        when none of them is used by audio; force also ignores audio usage.
        """
        categories = await self.category_repo.list_categories(
            CategoryQuery(include_inactive=True, include_count=True)
        )
        if not category_ids:
            _raise_if_invalid(
                validate_batch_operation(category_ids, BatchOperation.DELETE, categories)
            )
        by_id = {c.id: c for c in categories}
        ordered = sorted(
            dict.fromkeys(category_ids),
            key=lambda i: -(by_id[i].level if i in by_id else 0),
        )

        succeeded: list[str] = []
        failed: list[dict[str, str]] = []
        deleted: set[str] = set()
        for category_id in ordered:
            category = by_id.get(category_id)
            if category is None:
                failed.append({"id": category_id, "error": f"category not found: {category_id}"})
                continue
            if category_id in deleted:
                succeeded.append(category_id)
                continue
            children = [
                c for c in categories if c.parent_id == category_id and c.id not in deleted
            ]
            if not force:
                audio_in_children = sum(c.audio_count for c in children)
                if category.audio_count or (children and not cascade) or (
                    cascade and audio_in_children
                ):
                    e = CategoryDeleteRestrictedException(
                        category_id, len(children), category.audio_count + audio_in_children
                    )
                    failed.append({"id": category_id, "error": e.message})
                    continue
            await self.category_repo.delete_category(category_id, detach_audio=force)
            deleted.add(category_id)
            deleted.update(c.id for c in children)
            succeeded.append(category_id)

        if succeeded:
            self._invalidate(CacheOperation.DELETE)
        return BatchResult(succeeded=succeeded, failed=failed)

    # ---- cache ----

    async def warmup_cache(self) -> bool:
        return await self.cache.warmup_cache(self.category_repo)
