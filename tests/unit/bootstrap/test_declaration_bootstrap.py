"""Unit tests for port selection in the declarations bootstrap."""

from collections.abc import Iterator

import pytest

from pazproperty.bootstrap import declarations as bootstrap
from pazproperty.domain.models.identity import Role
from pazproperty.infrastructure.adapters.notification import WebhookNotificationAdapter
from pazproperty.infrastructure.stubs import (
    DeclarationRepositoryStub,
    IdentityProviderStub,
    NotificationPortStub,
)


@pytest.fixture(autouse=True)
def clean_bootstrap(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("DATABASE_URL", "NOTIFICATION_WEBHOOK_URL", "IDENTITY_TOKENS"):
        monkeypatch.delenv(name, raising=False)
    bootstrap.reset_declaration_bootstrap()
    yield
    bootstrap.reset_declaration_bootstrap()


class TestDeclarationBootstrap:
    def test_in_memory_without_database_url(self) -> None:
        repositories = bootstrap.get_repositories()
        assert isinstance(repositories.declarations, DeclarationRepositoryStub)
        assert bootstrap.get_repositories() is repositories

    def test_recording_stub_without_webhook(self) -> None:
        assert isinstance(bootstrap.get_notification_port(), NotificationPortStub)

    def test_webhook_adapter_when_configured(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("NOTIFICATION_WEBHOOK_URL", "https://notify.example.com/hook")
        assert isinstance(bootstrap.get_notification_port(), WebhookNotificationAdapter)

    async def test_identity_tokens_from_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("IDENTITY_TOKENS", "tok:alice:admin")
        provider = bootstrap.get_identity_provider()

        assert isinstance(provider, IdentityProviderStub)
        assert (await provider.resolve("tok")).role == Role.ADMIN
        assert (await provider.resolve("other")).role == Role.UNAUTHENTICATED
