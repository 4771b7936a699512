"""Cache: in-process category caches and cache key utilities.

CategoryCacheManager is built from settings in the app lifespan; key
format is in keys.py (DRY).
"""

from audio_catalog.infrastructure.cache.cache_protocol import CacheProtocol
from audio_catalog.infrastructure.cache.category_cache import (
    CacheHealth,
    CategoryCacheManager,
)
from audio_catalog.infrastructure.cache.keys import (
    build_cache_key,
    list_key,
    single_key,
    stats_key,
    tree_key,
)
from audio_catalog.infrastructure.cache.memory_cache import LRUTTLCache

__all__ = [
    "CacheHealth",
    "CacheProtocol",
    "CategoryCacheManager",
    "LRUTTLCache",
    "build_cache_key",
    "list_key",
    "single_key",
    "stats_key",
    "tree_key",
]
