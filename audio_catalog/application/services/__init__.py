"""Application services: pure category validation, tree building and legacy compatibility."""

from audio_catalog.application.services import category_tree, category_validator
from audio_catalog.application.services.category_compatibility import (
    CategoryCompatibilityAdapter,
    reference_of,
)

__all__ = [
    "CategoryCompatibilityAdapter",
    "category_tree",
    "category_validator",
    "reference_of",
]
