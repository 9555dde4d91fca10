"""SQLAlchemy implementation of DeclarationRepositoryProtocol.

Lifecycle commits are a single conditional statement:

    UPDATE declarations SET ..., version = :expected + 1
    WHERE id = :id AND version = :expected

A row count of zero means the declaration is missing or another writer
committed first.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pazproperty.application.ports.declaration_repository import (
    DeclarationFilter,
    DeclarationRepositoryProtocol,
)
from pazproperty.domain.errors.declaration import ConcurrentModificationError
from pazproperty.domain.errors.not_found import DeclarationNotFoundError
from pazproperty.domain.errors.validation import ValidationError
from pazproperty.domain.models.declaration import (
    Attachment,
    AttachmentType,
    Declaration,
    IssueType,
    UrgencyLevel,
)
from pazproperty.domain.models.declaration_status import DeclarationStatus
from pazproperty.infrastructure.adapters.persistence.tables import (
    as_utc,
    declaration_attachments,
    declarations,
    to_db_values,
)

_TIMESTAMP_COLUMNS = (
    "submitted_at",
    "provider_assigned_at",
    "appointment_at",
    "resolved_at",
)


def _to_attachment(row: RowMapping) -> Attachment:
    return Attachment(
        id=row["id"],
        url=row["url"],
        file_type=AttachmentType(row["file_type"]),
        uploaded_by=row["uploaded_by"],
        uploaded_at=as_utc(row["uploaded_at"]),
    )


def _to_declaration(row: RowMapping, attachments: Iterable[Attachment]) -> Declaration:
    values = dict(row)
    for column in _TIMESTAMP_COLUMNS:
        values[column] = as_utc(values[column])
    values["status"] = DeclarationStatus(values["status"])
    values["issue_type"] = IssueType(values["issue_type"])
    values["urgency"] = UrgencyLevel(values["urgency"])
    if values["quote_amount"] is not None:
        values["quote_amount"] = Decimal(str(values["quote_amount"]))
    return Declaration(**values, attachments=tuple(attachments))


class SqlDeclarationRepository(DeclarationRepositoryProtocol):
    """Declaration storage on ``declarations`` and ``declaration_attachments``."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def save(self, declaration: Declaration) -> None:
        row = {
            column.name: getattr(declaration, column.name)
            for column in declarations.columns
        }
        async with self._session_factory() as session:
            try:
                await session.execute(insert(declarations).values(**to_db_values(row)))
                for position, attachment in enumerate(declaration.attachments):
                    await session.execute(
                        self._attachment_insert(declaration.id, attachment, position)
                    )
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise ValueError(
                    f"Declaration already exists: {declaration.id}"
                ) from None

    async def get(self, declaration_id: str) -> Declaration | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(declarations).where(declarations.c.id == declaration_id)
            )
            row = result.mappings().first()
            if row is None:
                return None
            attachments = await self._load_attachments(session, [declaration_id])
        return _to_declaration(row, attachments[declaration_id])

    async def list(
        self, declaration_filter: DeclarationFilter | None = None
    ) -> list[Declaration]:
        query = select(declarations).order_by(declarations.c.submitted_at.desc())
        if declaration_filter is not None:
            if declaration_filter.status is not None:
                query = query.where(
                    declarations.c.status == declaration_filter.status.value
                )
            if declaration_filter.provider_id is not None:
                query = query.where(
                    declarations.c.provider_id == declaration_filter.provider_id
                )
            if declaration_filter.urgency is not None:
                query = query.where(
                    declarations.c.urgency == declaration_filter.urgency.value
                )
        async with self._session_factory() as session:
            rows = (await session.execute(query)).mappings().all()
            attachments = await self._load_attachments(
                session, [row["id"] for row in rows]
            )
        return [_to_declaration(row, attachments[row["id"]]) for row in rows]

    async def update_fields(
        self, declaration_id: str, fields: Mapping[str, Any]
    ) -> Declaration:
        async with self._session_factory() as session:
            result = await session.execute(
                update(declarations)
                .where(declarations.c.id == declaration_id)
                .values(**to_db_values(dict(fields)))
            )
            await session.commit()
        if result.rowcount == 0:
            raise DeclarationNotFoundError(declaration_id)
        return await self._require(declaration_id)

    async def update_lifecycle(
        self,
        declaration_id: str,
        expected_version: int,
        changes: Mapping[str, Any],
    ) -> Declaration:
        async with self._session_factory() as session:
            result = await session.execute(
                update(declarations)
                .where(
                    declarations.c.id == declaration_id,
                    declarations.c.version == expected_version,
                )
                .values(**to_db_values(dict(changes)), version=expected_version + 1)
            )
            await session.commit()
        if result.rowcount == 0:
            if await self.get(declaration_id) is None:
                raise DeclarationNotFoundError(declaration_id)
            raise ConcurrentModificationError(
                declaration_id=declaration_id,
                expected_version=expected_version,
            )
        return await self._require(declaration_id)

    async def add_attachment(
        self, declaration_id: str, attachment: Attachment
    ) -> Declaration:
        async with self._session_factory() as session:
            exists = await session.scalar(
                select(declarations.c.id).where(declarations.c.id == declaration_id)
            )
            if exists is None:
                raise DeclarationNotFoundError(declaration_id)
            position = await session.scalar(
                select(
                    func.coalesce(func.max(declaration_attachments.c.position), -1) + 1
                ).where(declaration_attachments.c.declaration_id == declaration_id)
            )
            try:
                await session.execute(
                    self._attachment_insert(declaration_id, attachment, position)
                )
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise ValidationError("duplicate_attachment", ["id"]) from None
        return await self._require(declaration_id)

    async def remove_attachment(self, declaration_id: str, attachment_id: str) -> bool:
        async with self._session_factory() as session:
            exists = await session.scalar(
                select(declarations.c.id).where(declarations.c.id == declaration_id)
            )
            if exists is None:
                raise DeclarationNotFoundError(declaration_id)
            result = await session.execute(
                delete(declaration_attachments).where(
                    declaration_attachments.c.declaration_id == declaration_id,
                    declaration_attachments.c.id == attachment_id,
                )
            )
            await session.commit()
        return result.rowcount > 0

    @staticmethod
    def _attachment_insert(declaration_id: str, attachment: Attachment, position: int):
        return insert(declaration_attachments).values(
            declaration_id=declaration_id,
            id=attachment.id,
            position=position,
            url=attachment.url,
            file_type=attachment.file_type.value,
            uploaded_by=attachment.uploaded_by,
            uploaded_at=attachment.uploaded_at,
        )

    @staticmethod
    async def _load_attachments(
        session: AsyncSession, declaration_ids: list[str]
    ) -> dict[str, list[Attachment]]:
        grouped: dict[str, list[Attachment]] = defaultdict(list)
        if not declaration_ids:
            return grouped
        result = await session.execute(
            select(declaration_attachments)
            .where(declaration_attachments.c.declaration_id.in_(declaration_ids))
            .order_by(declaration_attachments.c.position)
        )
        for row in result.mappings():
            grouped[row["declaration_id"]].append(_to_attachment(row))
        return grouped

    async def _require(self, declaration_id: str) -> Declaration:
        declaration = await self.get(declaration_id)
        if declaration is None:
            raise DeclarationNotFoundError(declaration_id)
        return declaration
