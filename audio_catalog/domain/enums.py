"""Domain enumerations for the audio catalog.

Enums represent fixed sets of domain values (category level, error codes,
cache invalidation operations).
"""

from enum import Enum, IntEnum


class CategoryLevel(IntEnum):
    """Depth of a category in the two-level hierarchy.

    PRIMARY categories have no parent; SECONDARY categories always have a
    PRIMARY parent.
    """

    PRIMARY = 1
    SECONDARY = 2

    @classmethod
    def for_parent(cls, parent_id: str | None) -> "CategoryLevel":
        """Return the level implied by a parent reference."""
        return cls.PRIMARY if parent_id is None else cls.SECONDARY

    @classmethod
    def values(cls) -> list[int]:
        """Return all valid level values."""
        return [level.value for level in cls]


class CategoryErrorCode(str, Enum):
    """Machine-readable codes carried by category validation errors."""

    INVALID_HIERARCHY = "INVALID_HIERARCHY"
    CIRCULAR_REFERENCE = "CIRCULAR_REFERENCE"
    DUPLICATE_NAME = "DUPLICATE_NAME"
    DELETE_RESTRICTED = "DELETE_RESTRICTED"
    DATA_INCONSISTENCY = "DATA_INCONSISTENCY"
    PARENT_NOT_FOUND = "PARENT_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    MAX_DEPTH_EXCEEDED = "MAX_DEPTH_EXCEEDED"
    INVALID_LEVEL = "INVALID_LEVEL"


class CacheOperation(str, Enum):
    """Write operations that drive cache invalidation."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    REORDER = "reorder"


class BatchOperation(str, Enum):
    """Bulk actions accepted by the category batch endpoint."""

    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    DELETE = "delete"
    MOVE = "move"


class CompatibilityAction(str, Enum):
    """Admin actions over legacy subject / relational category data."""

    SYNC = "sync"
    CHECK = "check"
    FIX = "fix"
    CLEANUP = "cleanup"
    REPORT = "report"
