"""Notification log repository port (append-only)."""

from __future__ import annotations

from typing import Protocol

from pazproperty.domain.models.notification import NotificationRecord


class NotificationLogRepositoryProtocol(Protocol):
    """Protocol for recording notification dispatch attempts."""

    async def append(self, record: NotificationRecord) -> None:
        """Record one dispatch attempt."""
        ...

    async def list_for_declaration(
        self, declaration_id: str
    ) -> list[NotificationRecord]:
        """Records for a declaration, newest first."""
        ...
