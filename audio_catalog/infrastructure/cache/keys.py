"""Cache key builders. Single place for key format (DRY).

Parameterized keys are prefix:name:value|name:value with parameters sorted
by name, so parameter order never changes the key. Names, values and ids are
percent-encoded, so separators inside them cannot collide with the key
structure and any id maps to exactly one key.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from audio_catalog.application.dtos.category import CategoryQuery
from audio_catalog.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PARAM_SEP,
    CACHE_PREFIX_LIST,
    CACHE_PREFIX_SINGLE,
    CACHE_PREFIX_STATS,
    CACHE_PREFIX_TREE,
)


def _encode(component: str) -> str:
    """Percent-encode a key component; ':' '|' and '%' never appear raw."""
    return quote(component, safe="")


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def build_cache_key(prefix: str, params: Mapping[str, Any] | None = None) -> str:
    """Return prefix alone, or prefix:k1:v1|k2:v2 with params sorted by name."""
    if not params:
        return prefix
    parts = [
        f"{_encode(name)}{CACHE_KEY_SEP}{_encode(_format_value(params[name]))}"
        for name in sorted(params)
    ]
    return f"{prefix}{CACHE_KEY_SEP}{CACHE_PARAM_SEP.join(parts)}"


def list_key(query: CategoryQuery) -> str:
    """Cache key for a category list query."""
    return build_cache_key(CACHE_PREFIX_LIST, query.cache_params())


def tree_key(include_count: bool) -> str:
    """Cache key for the category tree."""
    return build_cache_key(CACHE_PREFIX_TREE, {"include_count": include_count})


def stats_key() -> str:
    """Cache key for aggregate category statistics."""
    return CACHE_PREFIX_STATS


def single_key(category_id: str) -> str:
    """Cache key for one category by ID."""
    return f"{CACHE_PREFIX_SINGLE}{CACHE_KEY_SEP}{_encode(category_id)}"
