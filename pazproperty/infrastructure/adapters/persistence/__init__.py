"""SQLAlchemy persistence adapters (PostgreSQL via asyncpg, SQLite in tests)."""

from pazproperty.infrastructure.adapters.persistence.declaration_repository import (
    SqlDeclarationRepository,
)
from pazproperty.infrastructure.adapters.persistence.history_action_repository import (
    SqlHistoryActionRepository,
)
from pazproperty.infrastructure.adapters.persistence.notification_log_repository import (
    SqlNotificationLogRepository,
)
from pazproperty.infrastructure.adapters.persistence.provider_repository import (
    SqlProviderRepository,
)
from pazproperty.infrastructure.adapters.persistence.tables import (
    create_schema,
    metadata,
)

__all__: list[str] = [
    "SqlDeclarationRepository",
    "SqlHistoryActionRepository",
    "SqlNotificationLogRepository",
    "SqlProviderRepository",
    "create_schema",
    "metadata",
]
