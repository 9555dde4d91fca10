"""Fixtures for API tests: the application wired to in-memory services."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from pazproperty.api.dependencies.declarations import (
    get_declaration_store,
    get_identity_provider,
    get_provider_directory,
    get_transition_engine,
    reset_declaration_dependencies,
)
from pazproperty.api.main import create_app
from pazproperty.application.services.declaration_store import DeclarationStore
from pazproperty.application.services.provider_directory import ProviderDirectory
from pazproperty.application.services.transition_engine import TransitionEngine
from pazproperty.infrastructure.monitoring.metrics import reset_metrics_collector
from pazproperty.infrastructure.stubs import IdentityProviderStub
from tests.helpers import TOKENS


@pytest.fixture
def identity_provider() -> IdentityProviderStub:
    return IdentityProviderStub(TOKENS)


@pytest.fixture
def app(
    store: DeclarationStore,
    directory: ProviderDirectory,
    engine: TransitionEngine,
    identity_provider: IdentityProviderStub,
    monkeypatch: pytest.MonkeyPatch,
) -> Iterator[FastAPI]:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    reset_metrics_collector()
    application = create_app()
    application.dependency_overrides[get_declaration_store] = lambda: store
    application.dependency_overrides[get_provider_directory] = lambda: directory
    application.dependency_overrides[get_transition_engine] = lambda: engine
    application.dependency_overrides[get_identity_provider] = lambda: identity_provider
    yield application
    application.dependency_overrides.clear()
    reset_declaration_dependencies()


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
