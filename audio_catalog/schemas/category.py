"""Category API schemas.

Request models only coerce types and strip markup; hierarchy rules (name
length, color format, parent level, duplicates) are enforced by the
category validator so violations come back as structured 400 errors.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from audio_catalog.domain.enums import BatchOperation
from audio_catalog.shared.utils import clean_text


class _CategoryFields(BaseModel):
    @field_validator("name", "description", check_fields=False)
    @classmethod
    def _strip_markup(cls, value: str | None) -> str | None:
        return clean_text(value)


class CategoryCreateRequest(_CategoryFields):
    """Request body for POST /categories. parent_id makes it a subcategory."""

    name: str
    parent_id: str | None = None
    description: str | None = None
    color: str | None = None
    icon: str | None = Field(default=None, max_length=16)
    sort_order: int | None = Field(default=None, ge=0)
    is_active: bool = True


class CategoryUpdateRequest(_CategoryFields):
    """Request body for PATCH (partial). An explicit parent_id null moves to the top level."""

    name: str | None = None
    parent_id: str | None = None
    description: str | None = None
    color: str | None = None
    icon: str | None = Field(default=None, max_length=16)
    sort_order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class CategoryValidateRequest(CategoryUpdateRequest):
    """Dry-run body. With category_id it is validated as an update of that category."""

    category_id: str | None = None


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    level: int
    parent_id: str | None
    description: str | None
    color: str | None
    icon: str | None
    sort_order: int
    is_active: bool
    audio_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategoryTreeNodeResponse(CategoryResponse):
    """A primary category with its subcategories."""

    children: list[CategoryResponse] = Field(default_factory=list)


class CategoryListResponse(BaseModel):
    """GET /categories: categories (flat) or tree (tree), never both."""

    format: Literal["flat", "tree"]
    total: int
    categories: list[CategoryResponse] | None = None
    tree: list[CategoryTreeNodeResponse] | None = None


class CategoryReorderItem(BaseModel):
    id: str
    sort_order: int = Field(..., ge=0)


class CategoryReorderRequest(BaseModel):
    items: list[CategoryReorderItem]


class CategoryReorderResponse(BaseModel):
    updated: int


class CategoryMoveRequest(BaseModel):
    """Target primary for a move; null moves the category to the top level."""

    parent_id: str | None = None


class CategoryBatchRequest(BaseModel):
    """Bulk action over many categories. target_parent_id is used by move only."""

    operation: BatchOperation
    category_ids: list[str]
    target_parent_id: str | None = None
    force: bool = False
    cascade: bool = False


class BatchResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    succeeded: list[str]
    failed: list[dict[str, str]]


class ValidationResultResponse(BaseModel):
    is_valid: bool
    errors: list[dict[str, Any]]
    warnings: list[str]


class CategoryStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_categories: int
    level1_count: int
    level2_count: int
    active_count: int
    inactive_count: int
    categories_with_audio: int
    empty_categories_count: int


class CategoryOptionResponse(BaseModel):
    """Picker option; children is set for hierarchical options only."""

    model_config = ConfigDict(from_attributes=True)

    label: str
    value: str
    key: str
    title: str
    level: int
    parent_id: str | None = None
    disabled: bool = False
    color: str | None = None
    icon: str | None = None
    children: list["CategoryOptionResponse"] | None = None


class CategoryPathResponse(BaseModel):
    category: CategoryResponse | None
    subcategory: CategoryResponse | None
    breadcrumb: list[str]
    path: str


class CacheHealthResponse(BaseModel):
    is_healthy: bool
    issues: list[str]
    recommendations: list[str]
    stats: dict[str, dict[str, Any]]


class CacheWarmupResponse(BaseModel):
    success: bool
