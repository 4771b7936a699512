"""Application interfaces (ports): repository protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from audio_catalog.infrastructure.
"""

from audio_catalog.application.interfaces.repositories import (
    IAudioCategoryRepository,
    ICategoryRepository,
)

__all__ = [
    "IAudioCategoryRepository",
    "ICategoryRepository",
]
