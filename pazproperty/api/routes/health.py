"""Health check endpoint."""

import os

from fastapi import APIRouter

from pazproperty.api.models.health import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return health status and the configured storage backend."""
    storage = "sqlalchemy" if os.environ.get("DATABASE_URL") else "memory"
    return HealthResponse(status="healthy", storage=storage)
