"""In-process LRU cache with a fixed time-to-live per entry.

Entries expire a fixed ttl after they were set; reads never extend that.
When full, the least recently used entry is evicted. Not thread-safe: the
app runs on one event loop and every operation here is synchronous.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


class LRUTTLCache(Generic[V]):
    """Bounded LRU map whose entries expire ttl seconds after set().

    Args:
        name: Label used in logs and stats.
        max_size: Maximum number of entries.
        ttl: Lifetime of an entry in seconds.
        clock: Monotonic time source; injectable for tests.
    """

    def __init__(
        self,
        name: str,
        max_size: int,
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self.name = name
        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, V]] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> V | None:
        entry = self._entries.get(key)
        if entry is None or entry[0] <= self._clock():
            if entry is not None:
                del self._entries[key]
            self.misses += 1
            logger.debug("Cache MISS: %s/%s", self.name, key)
            return None
        self._entries.move_to_end(key)
        self.hits += 1
        logger.debug("Cache HIT: %s/%s", self.name, key)
        return entry[1]

    def set(self, key: str, value: V) -> None:
        self._entries[key] = (self._clock() + self.ttl, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Cache EVICT: %s/%s", self.name, evicted)
        logger.debug("Cache SET: %s/%s (TTL: %ss)", self.name, key, self.ttl)

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def purge_stale(self) -> int:
        now = self._clock()
        stale = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def stats(self) -> dict[str, Any]:
        return {
            "size": len(self._entries),
            "max_size": self.max_size,
            "ttl": self.ttl,
            "hits": self.hits,
            "misses": self.misses,
        }

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(key) if isinstance(key, str) else None
        return entry is not None and entry[0] > self._clock()

    def __len__(self) -> int:
        return len(self._entries)
