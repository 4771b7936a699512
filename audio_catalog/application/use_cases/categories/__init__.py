"""Category use cases: cached reads, validated writes, bulk actions."""

from audio_catalog.application.use_cases.categories.category_operations import (
    CategoryService,
)

__all__ = [
    "CategoryService",
]
