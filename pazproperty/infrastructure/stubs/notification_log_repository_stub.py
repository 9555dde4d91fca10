"""Notification log repository stub implementation."""

from __future__ import annotations

from pazproperty.application.ports.notification_log_repository import (
    NotificationLogRepositoryProtocol,
)
from pazproperty.domain.models.notification import NotificationRecord


class NotificationLogRepositoryStub(NotificationLogRepositoryProtocol):
    """In-memory notification log."""

    def __init__(self) -> None:
        self._records: list[NotificationRecord] = []

    async def append(self, record: NotificationRecord) -> None:
        self._records.append(record)

    async def list_for_declaration(
        self, declaration_id: str
    ) -> list[NotificationRecord]:
        matching = [r for r in self._records if r.declaration_id == declaration_id]
        return list(reversed(matching))

    def all(self) -> list[NotificationRecord]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()
