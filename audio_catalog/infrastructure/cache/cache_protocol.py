"""Cache protocol for the category cache manager (DIP)."""

from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Protocol for a bounded in-process cache. Used by CategoryCacheManager."""

    name: str
    max_size: int

    def get(self, key: str) -> Any:
        """Return cached value or None when missing or expired."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store value; the cache's TTL starts now."""
        ...

    def delete(self, key: str) -> bool:
        """Remove key; return True if it was present."""
        ...

    def clear(self) -> None:
        """Remove every entry."""
        ...

    def purge_stale(self) -> int:
        """Drop expired entries; return how many were dropped."""
        ...

    def stats(self) -> dict[str, Any]:
        """Return size, capacity, TTL and hit/miss counters."""
        ...

    def __len__(self) -> int: ...
