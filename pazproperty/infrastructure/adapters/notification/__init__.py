"""Notification delivery adapters."""

from pazproperty.infrastructure.adapters.notification.webhook_notification_adapter import (
    SIGNATURE_HEADER,
    WebhookNotificationAdapter,
)

__all__: list[str] = ["SIGNATURE_HEADER", "WebhookNotificationAdapter"]
