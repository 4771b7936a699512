"""ORM models. Import from here so both tables are registered on Base.metadata."""

from audio_catalog.infrastructure.persistence.models.audio import Audio
from audio_catalog.infrastructure.persistence.models.category import Category
from audio_catalog.infrastructure.persistence.models.mixins import CatalogModel

__all__ = [
    "Audio",
    "CatalogModel",
    "Category",
]
