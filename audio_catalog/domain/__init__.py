"""Domain layer: enums and exceptions for the category hierarchy.

No dependencies on infrastructure or presentation.
"""

from audio_catalog.domain.enums import (
    BatchOperation,
    CacheOperation,
    CategoryErrorCode,
    CategoryLevel,
    CompatibilityAction,
)
from audio_catalog.domain.exceptions import (
    CatalogException,
    CategoryDeleteRestrictedException,
    CategoryValidationException,
    DataInconsistencyException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    "BatchOperation",
    "CacheOperation",
    "CatalogException",
    "CategoryDeleteRestrictedException",
    "CategoryErrorCode",
    "CategoryLevel",
    "CategoryValidationException",
    "CompatibilityAction",
    "DataInconsistencyException",
    "ResourceNotFoundException",
    "ValidationException",
]
