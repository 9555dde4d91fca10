"""Health check response models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Health status string (e.g., "healthy").
        storage: Persistence backend in use ("sqlalchemy" or "memory").
    """

    status: str
    storage: str
