"""Notification port stub for development and testing.

Records every send instead of delivering it. Failure, exception and delay
can be configured to exercise the engine's best-effort delivery handling.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from pazproperty.application.ports.notification_port import NotificationPortProtocol
from pazproperty.domain.models.notification import NotificationEventType, Recipient

logger = structlog.get_logger()


@dataclass(frozen=True)
class SentNotification:
    """A notification captured by the stub."""

    event_type: NotificationEventType
    recipients: frozenset[Recipient]
    payload: dict[str, Any]


class NotificationPortStub(NotificationPortProtocol):
    """In-memory notification dispatcher.

    Usage:
        port = NotificationPortStub()
        port.set_should_fail(True)     # send() returns False
        port.set_error(RuntimeError()) # send() raises
        port.set_delay(10.0)           # send() sleeps before answering
    """

    def __init__(self) -> None:
        self.sent: list[SentNotification] = []
        self._should_fail = False
        self._error: Exception | None = None
        self._delay_seconds = 0.0

    async def send(
        self,
        event_type: NotificationEventType,
        recipients: frozenset[Recipient],
        payload: Mapping[str, Any],
    ) -> bool:
        if self._delay_seconds:
            await asyncio.sleep(self._delay_seconds)
        if self._error is not None:
            raise self._error
        if self._should_fail:
            return False

        self.sent.append(
            SentNotification(
                event_type=event_type,
                recipients=recipients,
                payload=dict(payload),
            )
        )
        logger.debug(
            "stub_notification_sent",
            event_type=event_type.value,
            recipient_count=len(recipients),
        )
        return True

    # Test helpers

    def set_should_fail(self, should_fail: bool) -> None:
        self._should_fail = should_fail

    def set_error(self, error: Exception | None) -> None:
        self._error = error

    def set_delay(self, seconds: float) -> None:
        self._delay_seconds = seconds

    def events(self) -> list[NotificationEventType]:
        return [n.event_type for n in self.sent]

    def clear(self) -> None:
        self.sent.clear()
        self._should_fail = False
        self._error = None
        self._delay_seconds = 0.0
