"""In-memory stub implementations of the application ports.

Used when no DATABASE_URL / NOTIFICATION_WEBHOOK_URL is configured and as
test fixtures. Not suitable for production use.
"""

from pazproperty.infrastructure.stubs.declaration_repository_stub import (
    DeclarationRepositoryStub,
)
from pazproperty.infrastructure.stubs.history_action_repository_stub import (
    HistoryActionRepositoryStub,
)
from pazproperty.infrastructure.stubs.identity_provider_stub import (
    IdentityProviderStub,
)
from pazproperty.infrastructure.stubs.notification_log_repository_stub import (
    NotificationLogRepositoryStub,
)
from pazproperty.infrastructure.stubs.notification_port_stub import (
    NotificationPortStub,
    SentNotification,
)
from pazproperty.infrastructure.stubs.provider_repository_stub import (
    ProviderRepositoryStub,
)

__all__: list[str] = [
    "DeclarationRepositoryStub",
    "HistoryActionRepositoryStub",
    "IdentityProviderStub",
    "NotificationLogRepositoryStub",
    "NotificationPortStub",
    "ProviderRepositoryStub",
    "SentNotification",
]
