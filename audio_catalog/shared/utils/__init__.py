"""Shared utilities: id generation and text cleaning."""

from audio_catalog.shared.utils.generators import generate_cuid
from audio_catalog.shared.utils.sanitization import clean_text

__all__ = [
    "clean_text",
    "generate_cuid",
]
