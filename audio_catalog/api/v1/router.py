"""API v1 router aggregation."""

from fastapi import APIRouter

from audio_catalog.api.v1.endpoints import categories, compatibility, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(
    compatibility.router, prefix="/compatibility", tags=["compatibility"]
)
