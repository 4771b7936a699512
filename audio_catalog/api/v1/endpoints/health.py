"""Health check endpoint. No dependencies; used for liveness probes."""

from fastapi import APIRouter

from audio_catalog.core.config import get_settings
from audio_catalog.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return ok status with the service name and version."""
    settings = get_settings()
    return HealthResponse(service=settings.app_name, version=settings.app_version)
