"""Unit tests for WebhookNotificationAdapter using httpx.MockTransport."""

from __future__ import annotations

import hashlib
import hmac
import json

import httpx
import pytest

from pazproperty.config.declaration_config import NotificationConfig
from pazproperty.domain.models.notification import (
    NotificationEventType,
    Recipient,
    RecipientRole,
)
from pazproperty.infrastructure.adapters.notification import (
    WebhookNotificationAdapter,
)
from pazproperty.infrastructure.adapters.notification.webhook_notification_adapter import (
    SIGNATURE_HEADER,
    sign_body,
)

URL = "https://dispatch.example.com/hooks/declarations"
RECIPIENTS = frozenset(
    {
        Recipient(RecipientRole.REPORTER, "jean.dupont@example.com"),
        Recipient(RecipientRole.ADMIN, "admin@example.com"),
    }
)


def _adapter(
    handler, *, retries: int = 1, secret: str | None = None
) -> WebhookNotificationAdapter:
    config = NotificationConfig(webhook_url=URL, retries=retries, secret=secret)
    return WebhookNotificationAdapter(
        config, transport=httpx.MockTransport(handler), backoff_seconds=0
    )


class TestWebhookNotificationAdapter:
    def test_requires_url(self) -> None:
        with pytest.raises(ValueError):
            WebhookNotificationAdapter(NotificationConfig())

    async def test_delivered_on_2xx(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(202)

        delivered = await _adapter(handler).send(
            NotificationEventType.RECEIVED, RECIPIENTS, {"declaration_id": "d-1"}
        )
        assert delivered
        (request,) = requests
        assert str(request.url) == URL
        body = json.loads(request.content)
        assert body["event_type"] == "received"
        assert body["payload"] == {"declaration_id": "d-1"}
        assert body["recipients"] == [
            {"role": "admin", "address": "admin@example.com"},
            {"role": "reporter", "address": "jean.dupont@example.com"},
        ]
        assert SIGNATURE_HEADER not in request.headers

    async def test_signed_when_secret_configured(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200)

        await _adapter(handler, secret="s3cret").send(
            NotificationEventType.RESOLVED, RECIPIENTS, {}
        )
        request = requests[0]
        expected = hmac.new(b"s3cret", request.content, hashlib.sha256).hexdigest()
        assert request.headers[SIGNATURE_HEADER] == f"sha256={expected}"
        assert sign_body("s3cret", request.content) == f"sha256={expected}"

    async def test_client_error_not_retried(self) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(422)

        assert not await _adapter(handler, retries=3).send(
            NotificationEventType.RECEIVED, RECIPIENTS, {}
        )
        assert calls == 1

    async def test_server_error_retried_then_delivered(self) -> None:
        statuses = iter([503, 200])

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(next(statuses))

        assert await _adapter(handler, retries=1).send(
            NotificationEventType.RECEIVED, RECIPIENTS, {}
        )

    async def test_transport_errors_exhaust_retries(self) -> None:
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            raise httpx.ConnectError("connection refused", request=request)

        assert not await _adapter(handler, retries=2).send(
            NotificationEventType.RECEIVED, RECIPIENTS, {}
        )
        assert calls == 3
