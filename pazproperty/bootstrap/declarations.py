"""Bootstrap wiring for the declarations ports.

Persistence: SQLAlchemy repositories when DATABASE_URL is set, otherwise
in-memory stubs (data does not survive a restart).

Notifications: webhook adapter when NOTIFICATION_WEBHOOK_URL is set,
otherwise the recording stub.

Identity: static token table from IDENTITY_TOKENS.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from structlog import get_logger

from pazproperty.application.ports.declaration_repository import (
    DeclarationRepositoryProtocol,
)
from pazproperty.application.ports.history_action_repository import (
    HistoryActionRepositoryProtocol,
)
from pazproperty.application.ports.identity_provider import IdentityProviderProtocol
from pazproperty.application.ports.notification_log_repository import (
    NotificationLogRepositoryProtocol,
)
from pazproperty.application.ports.notification_port import NotificationPortProtocol
from pazproperty.application.ports.provider_repository import (
    ProviderRepositoryProtocol,
)
from pazproperty.config.declaration_config import NotificationConfig
from pazproperty.infrastructure.adapters.notification import WebhookNotificationAdapter
from pazproperty.infrastructure.stubs import (
    DeclarationRepositoryStub,
    HistoryActionRepositoryStub,
    IdentityProviderStub,
    NotificationLogRepositoryStub,
    NotificationPortStub,
    ProviderRepositoryStub,
)

logger = get_logger()


@dataclass(frozen=True)
class Repositories:
    """The persistence ports, all from the same backend."""

    declarations: DeclarationRepositoryProtocol
    providers: ProviderRepositoryProtocol
    history: HistoryActionRepositoryProtocol
    notification_log: NotificationLogRepositoryProtocol


_repositories: Repositories | None = None
_notification_port: NotificationPortProtocol | None = None
_identity_provider: IdentityProviderProtocol | None = None


def _build_repositories() -> Repositories:
    if os.environ.get("DATABASE_URL"):
        from pazproperty.bootstrap.database import get_session_factory
        from pazproperty.infrastructure.adapters.persistence import (
            SqlDeclarationRepository,
            SqlHistoryActionRepository,
            SqlNotificationLogRepository,
            SqlProviderRepository,
        )

        session_factory = get_session_factory()
        logger.info("declaration_repositories_initialized", repository_type="SQLAlchemy")
        return Repositories(
            declarations=SqlDeclarationRepository(session_factory),
            providers=SqlProviderRepository(session_factory),
            history=SqlHistoryActionRepository(session_factory),
            notification_log=SqlNotificationLogRepository(session_factory),
        )

    logger.warning(
        "declaration_repositories_initialized",
        repository_type="InMemoryStub",
        message="DATABASE_URL not set - using in-memory stubs (data will not persist)",
    )
    return Repositories(
        declarations=DeclarationRepositoryStub(),
        providers=ProviderRepositoryStub(),
        history=HistoryActionRepositoryStub(),
        notification_log=NotificationLogRepositoryStub(),
    )


def get_repositories() -> Repositories:
    global _repositories
    if _repositories is None:
        _repositories = _build_repositories()
    return _repositories


def get_notification_port() -> NotificationPortProtocol:
    """Webhook adapter if configured, otherwise the recording stub."""
    global _notification_port
    if _notification_port is None:
        config = NotificationConfig.from_environment()
        if config.enabled:
            _notification_port = WebhookNotificationAdapter(config)
            logger.info(
                "notification_port_initialized",
                port_type="Webhook",
                signed=config.secret is not None,
            )
        else:
            _notification_port = NotificationPortStub()
            logger.warning(
                "notification_port_initialized",
                port_type="Stub",
                message="NOTIFICATION_WEBHOOK_URL not set - notifications are recorded only",
            )
    return _notification_port


def get_identity_provider() -> IdentityProviderProtocol:
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = IdentityProviderStub.from_environment()
    return _identity_provider


def reset_declaration_bootstrap() -> None:
    """Reset port singletons (testing cleanup)."""
    global _repositories, _notification_port, _identity_provider
    _repositories = None
    _notification_port = None
    _identity_provider = None
