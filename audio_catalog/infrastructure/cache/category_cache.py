"""Read-through cache for category queries.

Four caches sit in front of the category repository: list (per query),
tree (per include_count), stats, and single category by id. Writes never go
through the cache; the service schedules invalidate_cache() to run once each
write commits.

One CategoryCacheManager is created per process in the app lifespan and
injected into handlers. Concurrent misses on the same key may both query the
database; the last set wins.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from audio_catalog.application.dtos.category import (
    CategoryQuery,
    CategoryResult,
    CategoryStats,
    CategoryTreeNode,
)
from audio_catalog.application.services.category_tree import build_tree
from audio_catalog.core.constants import CACHE_UTILIZATION_WARNING
from audio_catalog.domain.enums import CacheOperation
from audio_catalog.infrastructure.cache.cache_protocol import CacheProtocol
from audio_catalog.infrastructure.cache.keys import list_key, single_key, stats_key, tree_key
from audio_catalog.infrastructure.cache.memory_cache import LRUTTLCache

if TYPE_CHECKING:
    from audio_catalog.application.interfaces.repositories import ICategoryRepository
    from audio_catalog.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheHealth:
    """Result of check_cache_health()."""

    is_healthy: bool
    issues: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


class CategoryCacheManager:
    """Owns the four category caches and their invalidation policy."""

    def __init__(
        self,
        *,
        list_max_size: int = 100,
        list_ttl: float = 300,
        tree_max_size: int = 10,
        tree_ttl: float = 300,
        stats_max_size: int = 5,
        stats_ttl: float = 600,
        single_max_size: int = 500,
        single_ttl: float = 600,
        stats_invalidation_delay: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.categories: LRUTTLCache[list[CategoryResult]] = LRUTTLCache(
            "categories", list_max_size, list_ttl, clock
        )
        self.tree: LRUTTLCache[list[CategoryTreeNode]] = LRUTTLCache(
            "tree", tree_max_size, tree_ttl, clock
        )
        self.stats: LRUTTLCache[CategoryStats] = LRUTTLCache(
            "stats", stats_max_size, stats_ttl, clock
        )
        self.single: LRUTTLCache[CategoryResult] = LRUTTLCache(
            "single_category", single_max_size, single_ttl, clock
        )
        self.stats_invalidation_delay = stats_invalidation_delay
        self._pending_stats_clear: asyncio.TimerHandle | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> CategoryCacheManager:
        return cls(
            list_max_size=settings.cache_list_max_size,
            list_ttl=settings.cache_list_ttl,
            tree_max_size=settings.cache_tree_max_size,
            tree_ttl=settings.cache_tree_ttl,
            stats_max_size=settings.cache_stats_max_size,
            stats_ttl=settings.cache_stats_ttl,
            single_max_size=settings.cache_single_max_size,
            single_ttl=settings.cache_single_ttl,
            stats_invalidation_delay=settings.cache_stats_invalidation_delay,
        )

    def _caches(self) -> tuple[CacheProtocol, ...]:
        return (self.categories, self.tree, self.stats, self.single)

    # ---- read-through ----

    async def get_categories(
        self, source: ICategoryRepository, query: CategoryQuery | None = None
    ) -> list[CategoryResult]:
        """Return the category list for query.

        A miss on a counted query also primes the single-category cache; plain
        lists carry audio_count 0 and never overwrite single entries.
        """
        query = query or CategoryQuery()
        key = list_key(query)
        cached = self.categories.get(key)
        if cached is not None:
            return cached
        categories = await source.list_categories(query)
        self.categories.set(key, categories)
        if query.include_count:
            for category in categories:
                self.set_category(category)
        return categories

    async def get_tree(
        self, source: ICategoryRepository, include_count: bool = False
    ) -> list[CategoryTreeNode]:
        key = tree_key(include_count)
        cached = self.tree.get(key)
        if cached is not None:
            return cached
        categories = await source.list_categories(CategoryQuery(include_count=include_count))
        tree = build_tree(categories)
        self.tree.set(key, tree)
        return tree

    async def get_stats(self, source: ICategoryRepository) -> CategoryStats:
        key = stats_key()
        cached = self.stats.get(key)
        if cached is not None:
            return cached
        stats = await source.get_statistics()
        self.stats.set(key, stats)
        return stats

    async def get_category(
        self, source: ICategoryRepository, category_id: str
    ) -> CategoryResult | None:
        """Return one category (with audio_count) from the single cache, loading it on a miss."""
        cached = self.get_cached_category(category_id)
        if cached is not None:
            return cached
        category = await source.get_by_id(category_id, include_count=True)
        if category is not None:
            self.set_category(category)
        return category

    # ---- single entity ----

    def get_cached_category(self, category_id: str) -> CategoryResult | None:
        return self.single.get(single_key(category_id))

    def set_category(self, category: CategoryResult) -> None:
        self.single.set(single_key(category.id), category)

    def delete_category(self, category_id: str) -> None:
        self.single.delete(single_key(category_id))

    # ---- invalidation ----

    def clear_all(self) -> None:
        for cache in self._caches():
            cache.clear()

    def clear_categories(self) -> None:
        self.categories.clear()

    def clear_tree(self) -> None:
        self.tree.clear()

    def clear_stats(self) -> None:
        self.stats.clear()

    def _clear_stats_later(self) -> None:
        """Clear stats after stats_invalidation_delay on the running loop, else now."""
        if self.stats_invalidation_delay <= 0:
            self.clear_stats()
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.clear_stats()
            return
        if self._pending_stats_clear is not None:
            self._pending_stats_clear.cancel()
        self._pending_stats_clear = loop.call_later(
            self.stats_invalidation_delay, self._run_pending_stats_clear
        )

    def _run_pending_stats_clear(self) -> None:
        self._pending_stats_clear = None
        self.clear_stats()
        logger.debug("Delayed stats cache clear done")

    def invalidate_cache(
        self, operation: CacheOperation | str, category_id: str | None = None
    ) -> None:
        """Drop cached entries affected by a write.

        create: list and tree now, stats after the configured delay.
        update: list, tree and the updated category.
        delete: everything.
        reorder: list and tree only.
        Anything else clears everything.
        """
        try:
            op: CacheOperation | None = CacheOperation(operation)
        except ValueError:
            op = None

        if op is CacheOperation.CREATE:
            self.clear_categories()
            self.clear_tree()
            self._clear_stats_later()
        elif op is CacheOperation.UPDATE:
            self.clear_categories()
            self.clear_tree()
            if category_id:
                self.delete_category(category_id)
        elif op is CacheOperation.REORDER:
            self.clear_categories()
            self.clear_tree()
        else:
            self.clear_all()
        logger.info(
            "Category cache invalidated: operation=%s category_id=%s",
            operation.value if isinstance(operation, CacheOperation) else operation,
            category_id,
        )

    # ---- maintenance ----

    async def warmup_cache(self, source: ICategoryRepository) -> bool:
        """Load list (with counts), tree (with counts) and stats. Failures are logged, not raised."""
        try:
            await self.get_categories(source, CategoryQuery(include_count=True))
            await self.get_tree(source, include_count=True)
            await self.get_stats(source)
        except Exception:
            logger.exception("Category cache warmup failed")
            return False
        logger.info("Category cache warmup complete")
        return True

    async def preload_categories(
        self, source: ICategoryRepository, category_ids: Iterable[str]
    ) -> int:
        """Put the given categories into the single cache; return how many were found."""
        query = CategoryQuery(include_inactive=True, include_count=True)
        by_id = {c.id: c for c in await self.get_categories(source, query)}
        loaded = 0
        for category_id in category_ids:
            category = by_id.get(category_id)
            if category is not None:
                self.set_category(category)
                loaded += 1
        return loaded

    def purge_stale(self) -> int:
        purged = sum(cache.purge_stale() for cache in self._caches())
        if purged:
            logger.info("Purged %d stale category cache entries", purged)
        return purged

    def get_cache_stats(self) -> dict[str, dict[str, Any]]:
        return {cache.name: cache.stats() for cache in self._caches()}

    def check_cache_health(self) -> CacheHealth:
        """Report caches above 90% capacity and an empty list/tree pair (not warmed up)."""
        issues: list[str] = []
        recommendations: list[str] = []
        for cache in self._caches():
            if len(cache) / cache.max_size > CACHE_UTILIZATION_WARNING:
                issues.append(f"{cache.name} cache utilization is above 90%")
                recommendations.append(f"Increase the {cache.name} cache size")
        if len(self.categories) == 0 and len(self.tree) == 0:
            issues.append("Category caches are empty; warmup may not have run")
            recommendations.append("Run a cache warmup")
        return CacheHealth(
            is_healthy=not issues, issues=issues, recommendations=recommendations
        )

    def close(self) -> None:
        """Cancel a pending delayed stats clear (call on shutdown)."""
        if self._pending_stats_clear is not None:
            self._pending_stats_clear.cancel()
            self._pending_stats_clear = None
