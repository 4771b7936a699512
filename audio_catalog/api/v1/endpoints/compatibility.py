"""Compatibility API: check and repair legacy subject / relational category data."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Request

from audio_catalog.api.v1.dependencies import (
    get_category_cache,
    get_data_sync_service,
    get_data_sync_service_for_write,
)
from audio_catalog.application.use_cases.compatibility import DataSyncService
from audio_catalog.core.limiter import limit_admin
from audio_catalog.domain.enums import CompatibilityAction
from audio_catalog.infrastructure.cache import CategoryCacheManager
from audio_catalog.schemas.compatibility import (
    CompatibilityActionResponse,
    CompatibilityReportResponse,
    CompatibilityRequest,
)

router = APIRouter()

SyncService = Annotated[DataSyncService, Depends(get_data_sync_service)]
WriteSyncService = Annotated[DataSyncService, Depends(get_data_sync_service_for_write)]


@router.get("", response_model=CompatibilityActionResponse)
async def get_compatibility_status(
    service: SyncService,
    action: Literal["check", "report"] = "check",
):
    """Read-only consistency check or migration report."""
    if action == "report":
        report = await service.generate_report()
    else:
        report = await service.check_data_consistency()
    return CompatibilityActionResponse(
        action=CompatibilityAction(action),
        report=CompatibilityReportResponse.model_validate(report),
    )


@router.post("", response_model=CompatibilityActionResponse)
@limit_admin
async def run_compatibility_action(
    request: Request,
    body: CompatibilityRequest,
    service: WriteSyncService,
    cache: Annotated[CategoryCacheManager, Depends(get_category_cache)],
):
    """Run sync, check, fix, cleanup or report over audio category fields."""
    action = body.action
    if action in (CompatibilityAction.CHECK, CompatibilityAction.REPORT):
        report = (
            await service.generate_report()
            if action == CompatibilityAction.REPORT
            else await service.check_data_consistency()
        )
        return CompatibilityActionResponse(
            action=action, report=CompatibilityReportResponse.model_validate(report)
        )

    if action == CompatibilityAction.CLEANUP:
        cleared = await service.cleanup_orphaned_references()
        response = CompatibilityActionResponse(action=action, cleared=cleared)
    else:
        if action == CompatibilityAction.SYNC:
            result = await service.sync_audio_fields(body.audio_ids)
        else:
            result = await service.fix_data_inconsistency(body.audio_ids)
        response = CompatibilityActionResponse(
            action=action,
            examined=result.examined,
            updated=result.updated,
            errors=result.errors,
        )
    # audio counts in cached lists and stats are stale once the repair commits
    service.after_commit(cache.clear_all)
    return response
