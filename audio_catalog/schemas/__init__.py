"""Pydantic request/response schemas for the API."""

from audio_catalog.schemas.category import (
    BatchResultResponse,
    CategoryCreateRequest,
    CategoryListResponse,
    CategoryResponse,
    CategoryTreeNodeResponse,
    CategoryUpdateRequest,
)
from audio_catalog.schemas.compatibility import (
    CompatibilityActionResponse,
    CompatibilityReportResponse,
    CompatibilityRequest,
)
from audio_catalog.schemas.health import HealthResponse

__all__ = [
    "BatchResultResponse",
    "CategoryCreateRequest",
    "CategoryListResponse",
    "CategoryResponse",
    "CategoryTreeNodeResponse",
    "CategoryUpdateRequest",
    "CompatibilityActionResponse",
    "CompatibilityReportResponse",
    "CompatibilityRequest",
    "HealthResponse",
]
