"""Notification delivery errors.

NotificationDeliveryFailedError is non-fatal: the transition engine never
raises it to callers. It is returned as a warning on the transition result
because the status change it relates to has already been committed.
"""

from __future__ import annotations

from pazproperty.domain.exceptions import PazPropertyError


class NotificationDeliveryFailedError(PazPropertyError):
    """A status-change notification could not be delivered.

    Attributes:
        declaration_id: Declaration the notification was about.
        event_type: Notification event type value.
        cause: Short description of the failure (timeout, port error, ...).
    """

    code = "notification_delivery_failed"

    def __init__(self, declaration_id: str, event_type: str, cause: str) -> None:
        self.declaration_id = declaration_id
        self.event_type = event_type
        self.cause = cause
        super().__init__(
            f"Notification '{event_type}' for declaration {declaration_id} "
            f"was not delivered: {cause}"
        )
