"""Application lifespan: startup and shutdown wiring.

Startup builds the process-wide CategoryCacheManager on app.state and
optionally warms it. Shutdown cancels pending cache work and disposes the
database engine.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from audio_catalog.core.config import get_settings
from audio_catalog.infrastructure.cache import CategoryCacheManager
from audio_catalog.shared.logging import setup_logging

logger = logging.getLogger(__name__)


async def _warmup(cache: CategoryCacheManager) -> None:
    from audio_catalog.infrastructure.persistence.database import get_session_factory
    from audio_catalog.infrastructure.persistence.repositories import CategoryRepository

    async with get_session_factory()() as session:
        await cache.warmup_cache(CategoryRepository(session))


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    cache = CategoryCacheManager.from_settings(settings)
    app.state.category_cache = cache
    if settings.cache_warmup_on_startup:
        await _warmup(cache)

    yield

    # ---- Shutdown ----
    cache.close()
    logger.info("Category cache closed")

    from audio_catalog.infrastructure.persistence.database import dispose_engine

    await dispose_engine()
