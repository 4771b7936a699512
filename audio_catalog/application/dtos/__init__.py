"""Application DTOs (no ORM dependency)."""

from audio_catalog.application.dtos.audio import (
    AudioCategoryRecord,
    AudioIssues,
    BatchFixResult,
    CategoryReference,
    CompatibilityReport,
    ConsistencyResult,
    LegacySubjectView,
    RelationalCategoryRef,
    SyncedFields,
)
from audio_catalog.application.dtos.category import (
    BatchResult,
    CategoryCreate,
    CategoryError,
    CategoryFilter,
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

__all__ = [
    "AudioCategoryRecord",
    "AudioIssues",
    "BatchFixResult",
    "BatchResult",
    "CategoryCreate",
    "CategoryError",
    "CategoryFilter",
    "CategoryOption",
    "CategoryPath",
    "CategoryQuery",
    "CategoryReference",
    "CategoryReorder",
    "CategoryResult",
    "CategorySelection",
    "CategoryStats",
    "CategoryTreeNode",
    "CategoryUpdate",
    "CategoryValidationResult",
    "CompatibilityReport",
    "ConsistencyResult",
    "LegacySubjectView",
    "RelationalCategoryRef",
    "SyncedFields",
]
