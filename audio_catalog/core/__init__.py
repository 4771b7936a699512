"""Core: settings, constants and application bootstrap."""

from audio_catalog.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
