"""Ports consumed by the declarations core.

Each port is a typing.Protocol; infrastructure provides in-memory stubs and
SQLAlchemy / HTTP adapters implementing them.
"""

from pazproperty.application.ports.declaration_repository import (
    DeclarationFilter,
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

__all__: list[str] = [
    "DeclarationFilter",
    "DeclarationRepositoryProtocol",
    "HistoryActionRepositoryProtocol",
    "IdentityProviderProtocol",
    "NotificationLogRepositoryProtocol",
    "NotificationPortProtocol",
    "ProviderRepositoryProtocol",
]
