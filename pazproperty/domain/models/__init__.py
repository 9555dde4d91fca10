"""Domain models for PazProperty declarations.

Immutable value objects describing declarations, providers, audit entries,
notifications and caller identities. No infrastructure dependencies.
"""

from pazproperty.domain.models.declaration import (
    Attachment,
    AttachmentType,
    Declaration,
    IssueType,
    UrgencyLevel,
)
from pazproperty.domain.models.declaration_status import (
    STATUS_TRANSITION_GRAPH,
    TERMINAL_STATES,
    DeclarationStatus,
    all_states,
    is_valid_transition,
)
from pazproperty.domain.models.history_action import HistoryAction
from pazproperty.domain.models.identity import CallerIdentity, Role
from pazproperty.domain.models.notification import (
    NotificationEventType,
    NotificationRecord,
    Recipient,
    RecipientRole,
)
from pazproperty.domain.models.provider import Provider

__all__: list[str] = [
    "Attachment",
    "AttachmentType",
    "CallerIdentity",
    "Declaration",
    "DeclarationStatus",
    "HistoryAction",
    "IssueType",
    "NotificationEventType",
    "NotificationRecord",
    "Provider",
    "Recipient",
    "RecipientRole",
    "Role",
    "STATUS_TRANSITION_GRAPH",
    "TERMINAL_STATES",
    "UrgencyLevel",
    "all_states",
    "is_valid_transition",
]
