"""Integration test configuration: SQLAlchemy repositories on SQLite.

Each test gets a fresh database file under ``tmp_path`` with the schema
created from the table metadata. The same repositories run against
PostgreSQL (asyncpg) in deployment; only the URL differs.

Usage:
    @pytest.mark.integration
    async def test_example(sql_declarations: SqlDeclarationRepository) -> None:
        ...
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pazproperty.application.services.declaration_store import DeclarationStore
from pazproperty.application.services.provider_directory import ProviderDirectory
from pazproperty.application.services.transition_engine import TransitionEngine
from pazproperty.config.declaration_config import TEST_DECLARATION_ENGINE_CONFIG
from pazproperty.infrastructure.adapters.persistence import (
    SqlDeclarationRepository,
    SqlHistoryActionRepository,
    SqlNotificationLogRepository,
    SqlProviderRepository,
    create_schema,
)
from pazproperty.infrastructure.monitoring.metrics import MetricsCollector
from pazproperty.infrastructure.stubs import NotificationPortStub
from tests.helpers import make_provider


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'pazproperty.db'}"


@pytest.fixture
async def db_engine(sqlite_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Async engine with the schema created; disposed after the test."""
    engine = create_async_engine(sqlite_url, echo=False)
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def sql_declarations(
    session_factory: async_sessionmaker[AsyncSession],
) -> SqlDeclarationRepository:
    return SqlDeclarationRepository(session_factory)


@pytest.fixture
async def sql_providers(
    session_factory: async_sessionmaker[AsyncSession],
) -> SqlProviderRepository:
    """Provider repository seeded with a plumber and an electrician."""
    repository = SqlProviderRepository(session_factory)
    await repository.save(make_provider())
    await repository.save(
        make_provider(
            "p-elec",
            company_name="Elec Services",
            manager_name="Nadia Benali",
            work_category="electrical",
            email="nadia@elec-services.fr",
        )
    )
    return repository


@pytest.fixture
def sql_history(
    session_factory: async_sessionmaker[AsyncSession],
) -> SqlHistoryActionRepository:
    return SqlHistoryActionRepository(session_factory)


@pytest.fixture
def sql_notification_log(
    session_factory: async_sessionmaker[AsyncSession],
) -> SqlNotificationLogRepository:
    return SqlNotificationLogRepository(session_factory)


@pytest.fixture
def sql_store(sql_declarations: SqlDeclarationRepository) -> DeclarationStore:
    return DeclarationStore(sql_declarations)


@pytest.fixture
def sql_directory(sql_providers: SqlProviderRepository) -> ProviderDirectory:
    return ProviderDirectory(sql_providers)


@pytest.fixture
def sql_engine(
    sql_store: DeclarationStore,
    sql_directory: ProviderDirectory,
    sql_history: SqlHistoryActionRepository,
    sql_notification_log: SqlNotificationLogRepository,
    notifier: NotificationPortStub,
    metrics: MetricsCollector,
) -> TransitionEngine:
    """Transition engine on the SQL repositories with the recording notifier."""
    return TransitionEngine(
        store=sql_store,
        providers=sql_directory,
        history=sql_history,
        notification_log=sql_notification_log,
        notifier=notifier,
        config=TEST_DECLARATION_ENGINE_CONFIG,
        metrics=metrics,
    )
