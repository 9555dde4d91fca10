"""FastAPI application entry point for the PazProperty declarations API.

Run with:
    uvicorn pazproperty.api.main:app
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from pazproperty import __version__
from pazproperty.api.middleware import LoggingMiddleware, MetricsMiddleware
from pazproperty.api.routes import (
    declarations_router,
    health_router,
    metrics_router,
    providers_router,
)
from pazproperty.bootstrap.logging import configure_structlog


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_structlog()
    if os.environ.get("DATABASE_URL"):
        from pazproperty.bootstrap.database import close_database_engine, init_database

        await init_database()
        yield
        await close_database_engine()
    else:
        yield


def create_app() -> FastAPI:
    application = FastAPI(
        title="PazProperty Declarations API",
        description="Maintenance declaration lifecycle and provider directory",
        version=__version__,
        lifespan=lifespan,
    )
    # Last added runs first: logging sets the correlation id before metrics
    application.add_middleware(MetricsMiddleware)
    application.add_middleware(LoggingMiddleware)

    application.include_router(health_router)
    application.include_router(metrics_router)
    application.include_router(declarations_router)
    application.include_router(providers_router)
    return application


app = create_app()
