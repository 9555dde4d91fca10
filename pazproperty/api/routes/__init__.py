"""API routers."""

from pazproperty.api.routes.declarations import router as declarations_router
from pazproperty.api.routes.health import router as health_router
from pazproperty.api.routes.metrics import router as metrics_router
from pazproperty.api.routes.providers import router as providers_router

__all__: list[str] = [
    "declarations_router",
    "health_router",
    "metrics_router",
    "providers_router",
]
