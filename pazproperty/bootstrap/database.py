"""Database engine and session factory bootstrap (SQLAlchemy async).

Environment Variables:
- DATABASE_URL: Connection string. ``postgresql://`` and ``postgres://``
  URLs are rewritten to ``postgresql+asyncpg://``; other SQLAlchemy async
  URLs (e.g. ``sqlite+aiosqlite://``) are used as given.
- SQLALCHEMY_ECHO: Echo SQL statements when "1", "true" or "yes".
- DATABASE_AUTO_CREATE_SCHEMA: Create missing tables at startup.

Usage:
    from pazproperty.bootstrap.database import get_session_factory

    session_factory = get_session_factory()
    async with session_factory() as session:
        ...
"""

from __future__ import annotations

import os

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from structlog import get_logger

from pazproperty.infrastructure.adapters.persistence.tables import create_schema

logger = get_logger()

_session_factory: async_sessionmaker[AsyncSession] | None = None
_engine: AsyncEngine | None = None

_TRUTHY = ("1", "true", "yes")


def get_database_url() -> str:
    """Get the async connection URL from the environment.

    Raises:
        ValueError: If DATABASE_URL is not set.
    """
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise ValueError("DATABASE_URL environment variable not set")

    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif "://" not in url:
        url = f"postgresql+asyncpg://{url}"
    return url


def mask_password(url: str) -> str:
    """Hide the password part of a connection URL for logging."""
    if "@" not in url:
        return url
    credentials, host = url.rsplit("@", 1)
    scheme, _, userinfo = credentials.partition("://")
    if ":" not in userinfo:
        return url
    user = userinfo.split(":", 1)[0]
    return f"{scheme}://{user}:***@{host}"


def get_engine() -> AsyncEngine:
    """Get the singleton async engine."""
    global _engine
    if _engine is None:
        url = get_database_url()
        logger.bind(component="database_bootstrap").info(
            "creating_database_engine", url=mask_password(url)
        )
        kwargs: dict[str, object] = {
            "echo": os.environ.get("SQLALCHEMY_ECHO", "").lower() in _TRUTHY,
        }
        if url.startswith("postgresql"):
            kwargs["pool_pre_ping"] = True
        _engine = create_async_engine(url, **kwargs)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the singleton session factory.

    Raises:
        ValueError: If DATABASE_URL is not configured.
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.bind(component="database_bootstrap").info(
            "database_session_factory_created"
        )
    return _session_factory


async def init_database() -> None:
    """Create tables when DATABASE_AUTO_CREATE_SCHEMA is enabled."""
    if os.environ.get("DATABASE_AUTO_CREATE_SCHEMA", "").lower() in _TRUTHY:
        await create_schema(get_engine())
        logger.bind(component="database_bootstrap").info("database_schema_created")


def reset_database_bootstrap() -> None:
    """Reset database singletons for testing."""
    global _session_factory, _engine
    _session_factory = None
    _engine = None


async def close_database_engine() -> None:
    """Dispose of the engine (graceful shutdown)."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
