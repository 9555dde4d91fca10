"""Notification domain models.

Event types emitted on declaration transitions, the recipient value object
and the notification log record kept for every dispatch attempt.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


class NotificationEventType(Enum):
    """Status-change communications sent to stakeholders."""

    RECEIVED = "received"
    PROVIDER_ASSIGNED = "provider_assigned"
    APPOINTMENT_SCHEDULED = "appointment_scheduled"
    QUOTE_READY = "quote_ready"
    IN_REPAIR = "in_repair"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


class RecipientRole(Enum):
    """Which stakeholder a recipient address belongs to."""

    REPORTER = "reporter"
    PROVIDER = "provider"
    ADMIN = "admin"


@dataclass(frozen=True, eq=True)
class Recipient:
    """A notification recipient.

    Attributes:
        role: Stakeholder role.
        address: Email address (or phone for SMS channels).
    """

    role: RecipientRole
    address: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "address": self.address}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class NotificationRecord:
    """Log entry for one notification dispatch attempt.

    Attributes:
        id: Unique identifier.
        declaration_id: Declaration the notification is about.
        event_type: Event that triggered the notification.
        recipients: Recipients the dispatch was addressed to.
        delivered: Whether the port reported success.
        error: Failure description (nullable).
        sent_at: When the dispatch was attempted (UTC).
    """

    id: str
    declaration_id: str
    event_type: NotificationEventType
    recipients: tuple[Recipient, ...]
    delivered: bool
    error: str | None = None
    sent_at: datetime = field(default_factory=_utc_now)

    @classmethod
    def create(
        cls,
        declaration_id: str,
        event_type: NotificationEventType,
        recipients: tuple[Recipient, ...],
        delivered: bool,
        error: str | None = None,
    ) -> NotificationRecord:
        return cls(
            id=str(uuid4()),
            declaration_id=declaration_id,
            event_type=event_type,
            recipients=recipients,
            delivered=delivered,
            error=error,
        )
