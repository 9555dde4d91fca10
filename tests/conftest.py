"""
Pytest configuration and shared fixtures for PazProperty tests.

Testing Standards:
- Async tests run in pytest-asyncio auto mode (configured in pyproject.toml)
- Services are exercised against the in-memory stubs
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from pazproperty.application.services.declaration_store import DeclarationStore
from pazproperty.application.services.provider_directory import ProviderDirectory
from pazproperty.application.services.transition_engine import TransitionEngine
from pazproperty.config.declaration_config import TEST_DECLARATION_ENGINE_CONFIG
from pazproperty.infrastructure.monitoring.metrics import MetricsCollector
from pazproperty.infrastructure.stubs import (
    DeclarationRepositoryStub,
    HistoryActionRepositoryStub,
    NotificationLogRepositoryStub,
    NotificationPortStub,
    ProviderRepositoryStub,
)
from tests.helpers import FakeClock, make_provider


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from pazproperty import __version__

    return __version__


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def declaration_repository() -> DeclarationRepositoryStub:
    return DeclarationRepositoryStub()


@pytest.fixture
def provider_repository() -> ProviderRepositoryStub:
    """Provider stub seeded with an active plumber and an active electrician."""
    repo = ProviderRepositoryStub()
    repo.add(make_provider())
    repo.add(
        make_provider(
            "p-elec",
            company_name="Elec Services",
            manager_name="Nadia Roux",
            work_category="electrical",
            email="nadia@elec-services.fr",
        )
    )
    return repo


@pytest.fixture
def history_repository() -> HistoryActionRepositoryStub:
    return HistoryActionRepositoryStub()


@pytest.fixture
def notification_log() -> NotificationLogRepositoryStub:
    return NotificationLogRepositoryStub()


@pytest.fixture
def notifier() -> NotificationPortStub:
    return NotificationPortStub()


@pytest.fixture
def metrics() -> MetricsCollector:
    """Collector on a private registry so counts start at zero."""
    return MetricsCollector(registry=CollectorRegistry())


@pytest.fixture
def store(declaration_repository: DeclarationRepositoryStub) -> DeclarationStore:
    return DeclarationStore(declaration_repository)


@pytest.fixture
def directory(provider_repository: ProviderRepositoryStub) -> ProviderDirectory:
    return ProviderDirectory(provider_repository)


@pytest.fixture
def engine(
    store: DeclarationStore,
    directory: ProviderDirectory,
    history_repository: HistoryActionRepositoryStub,
    notification_log: NotificationLogRepositoryStub,
    notifier: NotificationPortStub,
    metrics: MetricsCollector,
) -> TransitionEngine:
    return TransitionEngine(
        store=store,
        providers=directory,
        history=history_repository,
        notification_log=notification_log,
        notifier=notifier,
        config=TEST_DECLARATION_ENGINE_CONFIG,
        metrics=metrics,
    )
