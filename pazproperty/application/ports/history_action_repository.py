"""History action repository port.

Append-only: there is deliberately no update or delete operation.
"""

from __future__ import annotations

from typing import Protocol

from pazproperty.domain.models.history_action import HistoryAction


class HistoryActionRepositoryProtocol(Protocol):
    """Protocol for the declaration audit trail."""

    async def append(self, action: HistoryAction) -> None:
        """Append an entry.

        Raises:
            ValueError: If action.id already exists.
        """
        ...

    async def list_for_declaration(self, declaration_id: str) -> list[HistoryAction]:
        """Entries for a declaration, oldest first."""
        ...
