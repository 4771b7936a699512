"""Compatibility use cases: legacy subject / relational reference repair."""

from audio_catalog.application.use_cases.compatibility.data_sync import (
    DataSyncService,
    SyncResult,
)

__all__ = [
    "DataSyncService",
    "SyncResult",
]
