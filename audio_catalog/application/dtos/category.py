"""DTOs for the category hierarchy (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from audio_catalog.core.constants import DEFAULT_COLOR, DEFAULT_ICON
from audio_catalog.domain.enums import CategoryErrorCode, CategoryLevel


@dataclass(frozen=True)
class CategoryResult:
    """Category read-model (result of list, get_by_id, create, etc.).

    audio_count is derived (audio rows referencing the category as primary
    or secondary) and is 0 when the query did not ask for counts.
    """

    id: str
    name: str
    level: int
    parent_id: str | None = None
    description: str | None = None
    color: str | None = DEFAULT_COLOR
    icon: str | None = DEFAULT_ICON
    sort_order: int = 0
    is_active: bool = True
    audio_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_primary(self) -> bool:
        return self.level == CategoryLevel.PRIMARY


@dataclass(frozen=True)
class CategoryTreeNode:
    """A primary category with its secondary categories in display order."""

    category: CategoryResult
    children: list[CategoryResult] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.category.id


@dataclass(frozen=True)
class CategoryOption:
    """Selection option for UI pickers (flat or nested)."""

    label: str
    value: str
    key: str
    title: str
    level: int
    parent_id: str | None = None
    disabled: bool = False
    color: str | None = None
    icon: str | None = None
    children: list["CategoryOption"] | None = None


@dataclass(frozen=True)
class CategoryPath:
    """Resolved category selection with a human-readable breadcrumb."""

    category: CategoryResult | None = None
    subcategory: CategoryResult | None = None
    breadcrumb: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CategoryStats:
    """Aggregate counters over the whole category set."""

    total_categories: int = 0
    level1_count: int = 0
    level2_count: int = 0
    active_count: int = 0
    inactive_count: int = 0
    categories_with_audio: int = 0
    empty_categories_count: int = 0


@dataclass(frozen=True)
class CategorySelection:
    """An audio's position in the hierarchy: a primary and optional secondary id."""

    category_id: str | None = None
    subcategory_id: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.category_id is None and self.subcategory_id is None


@dataclass(frozen=True)
class CategoryError:
    """One validation failure."""

    code: CategoryErrorCode
    message: str
    field: str | None = None
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.field is not None:
            data["field"] = self.field
        if self.details:
            data["details"] = self.details
        return data


@dataclass(frozen=True)
class CategoryValidationResult:
    """Collected validation errors (blocking) and warnings (informational)."""

    errors: list[CategoryError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def error_codes(self) -> list[CategoryErrorCode]:
        return [e.code for e in self.errors]


@dataclass(frozen=True)
class CategoryCreate:
    """Input for creating a category. sort_order None means append after siblings."""

    name: str
    parent_id: str | None = None
    description: str | None = None
    color: str | None = None
    icon: str | None = None
    sort_order: int | None = None
    is_active: bool = True


@dataclass(frozen=True)
class CategoryUpdate:
    """Partial update. fields_set names the fields the caller supplied.

    When fields_set is omitted it is inferred from the non-None values, so an
    explicit move to the root (parent_id=None) must list "parent_id" in
    fields_set.
    """

    name: str | None = None
    description: str | None = None
    color: str | None = None
    icon: str | None = None
    sort_order: int | None = None
    is_active: bool | None = None
    parent_id: str | None = None
    fields_set: frozenset[str] | None = None

    def __post_init__(self) -> None:
        if self.fields_set is None:
            supplied = frozenset(
                name
                for name in (
                    "name",
                    "description",
                    "color",
                    "icon",
                    "sort_order",
                    "is_active",
                    "parent_id",
                )
                if getattr(self, name) is not None
            )
            object.__setattr__(self, "fields_set", supplied)

    def has(self, name: str) -> bool:
        """Return True if the caller supplied this field."""
        return name in (self.fields_set or frozenset())


@dataclass(frozen=True)
class CategoryReorder:
    """New sort position for one category."""

    id: str
    sort_order: int


@dataclass(frozen=True)
class CategoryQuery:
    """Parameters of a category list query (also the list cache key)."""

    include_inactive: bool = False
    include_count: bool = False
    parent_id: str | None = None
    level: int | None = None

    def cache_params(self) -> dict[str, Any]:
        """Return the non-default parameters, used to build the list cache key."""
        params: dict[str, Any] = {}
        if self.include_inactive:
            params["include_inactive"] = True
        if self.include_count:
            params["include_count"] = True
        if self.parent_id is not None:
            params["parent_id"] = self.parent_id
        if self.level is not None:
            params["level"] = self.level
        return params


@dataclass(frozen=True)
class CategoryFilter:
    """In-memory filter over a loaded category list. None means no constraint.

    category_id keeps that category and its subcategories.
    """

    category_id: str | None = None
    subcategory_id: str | None = None
    level: int | None = None
    is_active: bool | None = None
    has_audio: bool | None = None


@dataclass(frozen=True)
class BatchResult:
    """Outcome of a bulk category operation."""

    succeeded: list[str] = field(default_factory=list)
    failed: list[dict[str, str]] = field(default_factory=list)
