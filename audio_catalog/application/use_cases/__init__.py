"""Application use cases: one entry point per workflow."""

from audio_catalog.application.use_cases.categories import CategoryService
from audio_catalog.application.use_cases.compatibility import DataSyncService, SyncResult

__all__ = [
    "CategoryService",
    "DataSyncService",
    "SyncResult",
]
