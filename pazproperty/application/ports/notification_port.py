"""Notification port.

Boundary to whatever actually delivers status-change communications
(email relay, webhook, SMS gateway).

Rules for implementations:
1. Return False on delivery failure; raising is tolerated but discouraged
2. Callers bound every call with a timeout; implementations should not retry
   for longer than their own configured budget
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from pazproperty.domain.models.notification import NotificationEventType, Recipient


class NotificationPortProtocol(Protocol):
    """Protocol for sending status-change notifications."""

    async def send(
        self,
        event_type: NotificationEventType,
        recipients: frozenset[Recipient],
        payload: Mapping[str, Any],
    ) -> bool:
        """Send a notification.

        Args:
            event_type: Which status-change event this is.
            recipients: Addresses to notify.
            payload: Event details (declaration id, statuses, dates, ...).

        Returns:
            True if delivery succeeded, False otherwise.
        """
        ...
