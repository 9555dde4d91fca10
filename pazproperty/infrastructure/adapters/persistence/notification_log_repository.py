"""SQLAlchemy implementation of NotificationLogRepositoryProtocol."""

from __future__ import annotations

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pazproperty.application.ports.notification_log_repository import (
    NotificationLogRepositoryProtocol,
)
from pazproperty.domain.models.notification import (
    NotificationEventType,
    NotificationRecord,
    Recipient,
    RecipientRole,
)
from pazproperty.infrastructure.adapters.persistence.tables import (
    as_utc,
    notification_log,
)


class SqlNotificationLogRepository(NotificationLogRepositoryProtocol):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def append(self, record: NotificationRecord) -> None:
        async with self._session_factory() as session:
            await session.execute(
                insert(notification_log).values(
                    id=record.id,
                    declaration_id=record.declaration_id,
                    event_type=record.event_type.value,
                    recipients=[r.to_dict() for r in record.recipients],
                    delivered=record.delivered,
                    error=record.error,
                    sent_at=record.sent_at,
                )
            )
            await session.commit()

    async def list_for_declaration(
        self, declaration_id: str
    ) -> list[NotificationRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(notification_log)
                .where(notification_log.c.declaration_id == declaration_id)
                .order_by(notification_log.c.sent_at.desc())
            )
            return [
                NotificationRecord(
                    id=row["id"],
                    declaration_id=row["declaration_id"],
                    event_type=NotificationEventType(row["event_type"]),
                    recipients=tuple(
                        Recipient(RecipientRole(r["role"]), r["address"])
                        for r in row["recipients"]
                    ),
                    delivered=row["delivered"],
                    error=row["error"],
                    sent_at=as_utc(row["sent_at"]),
                )
                for row in result.mappings()
            ]
