"""Presentation-layer dependency injection (composition root).

Builds repositories, the category service and the data sync service from a
request-scoped session. Routes depend on these, never on infrastructure
directly. Read routes get a plain session; write routes a transactional one
(commit on success, rollback on error).
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from audio_catalog.application.services.category_compatibility import (
    CategoryCompatibilityAdapter,
)
from audio_catalog.application.use_cases.categories import CategoryService
from audio_catalog.application.use_cases.compatibility import DataSyncService
from audio_catalog.core.config import get_settings
from audio_catalog.infrastructure.cache import CategoryCacheManager
from audio_catalog.infrastructure.persistence.database import get_db, get_db_transactional
from audio_catalog.infrastructure.persistence.repositories import (
    AudioCategoryRepository,
    CategoryRepository,
)


def get_category_cache(request: Request) -> CategoryCacheManager:
    """Process-wide cache from app.state (created in the lifespan, or here on first use)."""
    cache = getattr(request.app.state, "category_cache", None)
    if cache is None:
        cache = CategoryCacheManager.from_settings(get_settings())
        request.app.state.category_cache = cache
    return cache


def get_compatibility_adapter() -> CategoryCompatibilityAdapter:
    settings = get_settings()
    return CategoryCompatibilityAdapter(
        fuzzy_match=settings.subject_fuzzy_match,
        uncategorized_label=settings.uncategorized_label,
    )


async def get_category_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CategoryRepository:
    return CategoryRepository(db)


async def get_category_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> CategoryRepository:
    return CategoryRepository(db)


async def get_audio_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AudioCategoryRepository:
    return AudioCategoryRepository(db)


async def get_audio_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> AudioCategoryRepository:
    return AudioCategoryRepository(db)


async def get_category_service(
    repo: Annotated[CategoryRepository, Depends(get_category_repo)],
    cache: Annotated[CategoryCacheManager, Depends(get_category_cache)],
) -> CategoryService:
    """Category service for read routes."""
    return CategoryService(repo, cache, get_settings().max_subcategories_per_parent)


async def get_category_service_for_write(
    repo: Annotated[CategoryRepository, Depends(get_category_repo_for_write)],
    cache: Annotated[CategoryCacheManager, Depends(get_category_cache)],
) -> CategoryService:
    """Category service for write routes (one transaction per request)."""
    return CategoryService(repo, cache, get_settings().max_subcategories_per_parent)


async def get_data_sync_service(
    audio_repo: Annotated[AudioCategoryRepository, Depends(get_audio_repo)],
    category_repo: Annotated[CategoryRepository, Depends(get_category_repo)],
    adapter: Annotated[CategoryCompatibilityAdapter, Depends(get_compatibility_adapter)],
) -> DataSyncService:
    """Data sync service for read-only checks and reports."""
    return DataSyncService(audio_repo, category_repo, adapter)


async def get_data_sync_service_for_write(
    audio_repo: Annotated[AudioCategoryRepository, Depends(get_audio_repo_for_write)],
    category_repo: Annotated[CategoryRepository, Depends(get_category_repo_for_write)],
    adapter: Annotated[CategoryCompatibilityAdapter, Depends(get_compatibility_adapter)],
) -> DataSyncService:
    """Data sync service for repairs; audio and category repos share the request transaction."""
    return DataSyncService(audio_repo, category_repo, adapter)
