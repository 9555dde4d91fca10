"""Declaration repository port.

Abstract interface for declaration persistence. Implementations may use
PostgreSQL (SQLAlchemy), in-memory storage or other backends.

Rules for implementations:
1. FAIL LOUD - raise DeclarationNotFoundError for unknown ids on writes
2. ATTACHMENTS ARE APPENDED - add/remove never rewrite the whole record
3. CAS FOR LIFECYCLE - update_lifecycle() compares the version column and
   bumps it; it is the only path that writes lifecycle fields
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from pazproperty.domain.models.declaration import (
    Attachment,
    Declaration,
    UrgencyLevel,
)
from pazproperty.domain.models.declaration_status import DeclarationStatus


@dataclass(frozen=True)
class DeclarationFilter:
    """Optional filters for listing declarations.

    Attributes:
        status: Only declarations in this status.
        provider_id: Only declarations assigned to this provider.
        urgency: Only declarations with this urgency.
    """

    status: DeclarationStatus | None = None
    provider_id: str | None = None
    urgency: UrgencyLevel | None = None

    def matches(self, declaration: Declaration) -> bool:
        if self.status is not None and declaration.status != self.status:
            return False
        if self.provider_id is not None and declaration.provider_id != self.provider_id:
            return False
        if self.urgency is not None and declaration.urgency != self.urgency:
            return False
        return True


class DeclarationRepositoryProtocol(Protocol):
    """Protocol for declaration storage operations.

    Methods:
        save: Store a new declaration
        get: Retrieve a declaration by id
        list: List declarations, newest submission first
        update_fields: Merge descriptive fields
        update_lifecycle: Compare-and-swap lifecycle fields
        add_attachment: Append an attachment
        remove_attachment: Remove an attachment by id
    """

    async def save(self, declaration: Declaration) -> None:
        """Save a new declaration.

        Raises:
            ValueError: If declaration.id already exists.
        """
        ...

    async def get(self, declaration_id: str) -> Declaration | None:
        """Retrieve a declaration by id, None if absent."""
        ...

    async def list(
        self, declaration_filter: DeclarationFilter | None = None
    ) -> list[Declaration]:
        """List declarations ordered by submitted_at descending."""
        ...

    async def update_fields(
        self, declaration_id: str, fields: Mapping[str, Any]
    ) -> Declaration:
        """Merge descriptive fields into a declaration.

        Raises:
            DeclarationNotFoundError: If the declaration doesn't exist.
        """
        ...

    async def update_lifecycle(
        self,
        declaration_id: str,
        expected_version: int,
        changes: Mapping[str, Any],
    ) -> Declaration:
        """Atomically write lifecycle fields if the version still matches.

        Implementation Notes:
        - PostgreSQL: UPDATE ... WHERE id = :id AND version = :expected
        - Verify row count = 1 for success; the new version is expected + 1

        Raises:
            DeclarationNotFoundError: If the declaration doesn't exist.
            ConcurrentModificationError: If the stored version differs.
        """
        ...

    async def add_attachment(
        self, declaration_id: str, attachment: Attachment
    ) -> Declaration:
        """Append an attachment to the declaration's ordered list.

        Raises:
            DeclarationNotFoundError: If the declaration doesn't exist.
            ValidationError: If the declaration already has an attachment
                with this id.
        """
        ...

    async def remove_attachment(self, declaration_id: str, attachment_id: str) -> bool:
        """Remove an attachment; False when it was not attached.

        Raises:
            DeclarationNotFoundError: If the declaration doesn't exist.
        """
        ...
