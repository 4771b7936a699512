"""Health check API schemas."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """GET /health body: liveness plus the running service name and version."""

    status: str = "ok"
    service: str
    version: str
