"""Shared helpers used by persistence, API schemas and startup. No business logic."""

from audio_catalog.shared.utils import clean_text, generate_cuid

__all__ = [
    "clean_text",
    "generate_cuid",
]
