"""Persistence repositories. Re-exports for dependency injection."""

from audio_catalog.infrastructure.persistence.repositories.audio_repo import (
    AudioCategoryRepository,
)
from audio_catalog.infrastructure.persistence.repositories.base import BaseRepository
from audio_catalog.infrastructure.persistence.repositories.category_repo import (
    CategoryRepository,
)

__all__ = [
    "AudioCategoryRepository",
    "BaseRepository",
    "CategoryRepository",
]
