"""Declaration repository stub implementation.

In-memory implementation of DeclarationRepositoryProtocol for development
and testing. Writes run under a single asyncio.Lock, which gives the same
read-compare-write atomicity as PostgreSQL's
``UPDATE ... WHERE version = :expected``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from pazproperty.application.ports.declaration_repository import (
    DeclarationFilter,
    DeclarationRepositoryProtocol,
)
from pazproperty.domain.errors.declaration import ConcurrentModificationError
from pazproperty.domain.errors.not_found import DeclarationNotFoundError
from pazproperty.domain.errors.validation import ValidationError
from pazproperty.domain.models.declaration import Attachment, Declaration


class DeclarationRepositoryStub(DeclarationRepositoryProtocol):
    """In-memory stub implementation of DeclarationRepositoryProtocol.

    Attributes:
        _declarations: Dictionary mapping declaration id to Declaration.
    """

    def __init__(self) -> None:
        self._declarations: dict[str, Declaration] = {}
        self._write_lock = asyncio.Lock()

    async def save(self, declaration: Declaration) -> None:
        async with self._write_lock:
            if declaration.id in self._declarations:
                raise ValueError(f"Declaration already exists: {declaration.id}")
            self._declarations[declaration.id] = declaration

    async def get(self, declaration_id: str) -> Declaration | None:
        return self._declarations.get(declaration_id)

    async def list(
        self, declaration_filter: DeclarationFilter | None = None
    ) -> list[Declaration]:
        matching = [
            d
            for d in self._declarations.values()
            if declaration_filter is None or declaration_filter.matches(d)
        ]
        matching.sort(key=lambda d: d.submitted_at, reverse=True)
        return matching

    async def update_fields(
        self, declaration_id: str, fields: Mapping[str, Any]
    ) -> Declaration:
        async with self._write_lock:
            current = self._require(declaration_id)
            updated = replace(current, **dict(fields))
            self._declarations[declaration_id] = updated
            return updated

    async def update_lifecycle(
        self,
        declaration_id: str,
        expected_version: int,
        changes: Mapping[str, Any],
    ) -> Declaration:
        """Compare-and-swap lifecycle write.

        Raises:
            DeclarationNotFoundError: If the declaration doesn't exist.
            ConcurrentModificationError: If the stored version differs.
        """
        async with self._write_lock:
            current = self._require(declaration_id)
            if current.version != expected_version:
                raise ConcurrentModificationError(
                    declaration_id=declaration_id,
                    expected_version=expected_version,
                )
            updated = replace(current, **dict(changes), version=expected_version + 1)
            self._declarations[declaration_id] = updated
            return updated

    async def add_attachment(
        self, declaration_id: str, attachment: Attachment
    ) -> Declaration:
        async with self._write_lock:
            current = self._require(declaration_id)
            if current.find_attachment(attachment.id) is not None:
                raise ValidationError("duplicate_attachment", ["id"])
            updated = replace(current, attachments=current.attachments + (attachment,))
            self._declarations[declaration_id] = updated
            return updated

    async def remove_attachment(self, declaration_id: str, attachment_id: str) -> bool:
        async with self._write_lock:
            current = self._require(declaration_id)
            remaining = tuple(a for a in current.attachments if a.id != attachment_id)
            if len(remaining) == len(current.attachments):
                return False
            self._declarations[declaration_id] = replace(
                current, attachments=remaining
            )
            return True

    def _require(self, declaration_id: str) -> Declaration:
        declaration = self._declarations.get(declaration_id)
        if declaration is None:
            raise DeclarationNotFoundError(declaration_id)
        return declaration

    # Test helpers

    def clear(self) -> None:
        """Clear all stored declarations (for test isolation)."""
        self._declarations.clear()

    def count(self) -> int:
        return len(self._declarations)
