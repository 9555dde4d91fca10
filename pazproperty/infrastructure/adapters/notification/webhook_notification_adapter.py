"""Webhook implementation of the notification port.

Posts each status-change notification as JSON to the configured dispatcher
(email relay, SMS gateway, ...). When a secret is configured the body is
signed with HMAC-SHA256 in the ``X-PazProperty-Signature`` header.

Delivery:
- 2xx: delivered
- 4xx: rejected, not retried
- 5xx or transport error: retried up to ``retries`` more times with
  exponential backoff
"""

from __future__ import annotations

import asyncio
import hashlib
import hmac
import json
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import httpx
import structlog

from pazproperty.application.ports.notification_port import NotificationPortProtocol
from pazproperty.config.declaration_config import NotificationConfig
from pazproperty.domain.models.notification import NotificationEventType, Recipient

log = structlog.get_logger()

SIGNATURE_HEADER = "X-PazProperty-Signature"


def sign_body(secret: str, body: bytes) -> str:
    """Return the signature header value for ``body``."""
    digest = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


class WebhookNotificationAdapter(NotificationPortProtocol):
    """Sends notifications to an HTTP dispatcher with httpx."""

    def __init__(
        self,
        config: NotificationConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        backoff_seconds: float = 0.5,
    ) -> None:
        """Create the adapter.

        Args:
            config: Webhook settings; ``webhook_url`` must be set.
            transport: Optional httpx transport (tests use MockTransport).
            backoff_seconds: Base delay between attempts.
        """
        if config.webhook_url is None:
            raise ValueError("WebhookNotificationAdapter requires a webhook_url")
        self._config = config
        self._url = config.webhook_url
        self._transport = transport
        self._backoff_seconds = backoff_seconds

    def _encode(
        self,
        event_type: NotificationEventType,
        recipients: frozenset[Recipient],
        payload: Mapping[str, Any],
    ) -> bytes:
        body = {
            "event_type": event_type.value,
            "recipients": sorted(
                (r.to_dict() for r in recipients),
                key=lambda r: (r["role"], r["address"]),
            ),
            "payload": dict(payload),
            "emitted_at": datetime.now(timezone.utc).isoformat(),
        }
        return json.dumps(body, default=str, sort_keys=True).encode()

    async def send(
        self,
        event_type: NotificationEventType,
        recipients: frozenset[Recipient],
        payload: Mapping[str, Any],
    ) -> bool:
        body = self._encode(event_type, recipients, payload)
        headers = {"Content-Type": "application/json"}
        if self._config.secret:
            headers[SIGNATURE_HEADER] = sign_body(self._config.secret, body)

        attempts = self._config.retries + 1
        async with httpx.AsyncClient(
            transport=self._transport, timeout=self._config.timeout_seconds
        ) as client:
            for attempt in range(attempts):
                try:
                    response = await client.post(self._url, content=body, headers=headers)
                except httpx.HTTPError as exc:
                    log.warning(
                        "webhook_delivery_error",
                        event_type=event_type.value,
                        error=str(exc),
                        attempt=attempt + 1,
                    )
                else:
                    if response.status_code < 300:
                        log.info(
                            "webhook_delivered",
                            event_type=event_type.value,
                            status_code=response.status_code,
                            attempt=attempt + 1,
                        )
                        return True
                    log.warning(
                        "webhook_delivery_failed",
                        event_type=event_type.value,
                        status_code=response.status_code,
                        attempt=attempt + 1,
                    )
                    if response.status_code < 500:
                        return False

                if attempt < attempts - 1:
                    await asyncio.sleep(self._backoff_seconds * 2**attempt)

        log.error(
            "webhook_delivery_exhausted",
            event_type=event_type.value,
            attempts=attempts,
        )
        return False
