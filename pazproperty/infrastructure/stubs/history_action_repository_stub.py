"""History action repository stub implementation.

Supports failure injection so callers can exercise audit-failure handling.
"""

from __future__ import annotations

import asyncio

from pazproperty.application.ports.history_action_repository import (
    HistoryActionRepositoryProtocol,
)
from pazproperty.domain.models.history_action import HistoryAction


class HistoryActionRepositoryStub(HistoryActionRepositoryProtocol):
    """In-memory, append-only audit trail.

    Usage:
        repo = HistoryActionRepositoryStub()
        repo.set_available(False)  # next appends raise ConnectionError
    """

    def __init__(self) -> None:
        self._actions: list[HistoryAction] = []
        self._ids: set[str] = set()
        self._available = True
        self._lock = asyncio.Lock()

    async def append(self, action: HistoryAction) -> None:
        async with self._lock:
            if not self._available:
                raise ConnectionError("History store unavailable")
            if action.id in self._ids:
                raise ValueError(f"History action already exists: {action.id}")
            self._ids.add(action.id)
            self._actions.append(action)

    async def list_for_declaration(self, declaration_id: str) -> list[HistoryAction]:
        # Insertion order is creation order
        return [a for a in self._actions if a.declaration_id == declaration_id]

    # Test helpers

    def set_available(self, available: bool) -> None:
        self._available = available

    def all(self) -> list[HistoryAction]:
        return list(self._actions)

    def clear(self) -> None:
        self._actions.clear()
        self._ids.clear()
