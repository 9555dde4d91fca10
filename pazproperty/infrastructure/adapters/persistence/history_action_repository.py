"""SQLAlchemy implementation of HistoryActionRepositoryProtocol (insert-only)."""

from __future__ import annotations

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pazproperty.application.ports.history_action_repository import (
    HistoryActionRepositoryProtocol,
)
from pazproperty.domain.models.history_action import HistoryAction
from pazproperty.infrastructure.adapters.persistence.tables import (
    as_utc,
    history_actions,
)


class SqlHistoryActionRepository(HistoryActionRepositoryProtocol):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def append(self, action: HistoryAction) -> None:
        async with self._session_factory() as session:
            try:
                await session.execute(
                    insert(history_actions).values(
                        id=action.id,
                        declaration_id=action.declaration_id,
                        action=action.action,
                        created_at=action.created_at,
                        actor_id=action.actor_id,
                        notes=action.notes,
                    )
                )
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise ValueError(f"History action already exists: {action.id}") from None

    async def list_for_declaration(self, declaration_id: str) -> list[HistoryAction]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(history_actions)
                .where(history_actions.c.declaration_id == declaration_id)
                .order_by(history_actions.c.created_at, history_actions.c.id)
            )
            return [
                HistoryAction(
                    id=row["id"],
                    declaration_id=row["declaration_id"],
                    action=row["action"],
                    created_at=as_utc(row["created_at"]),
                    actor_id=row["actor_id"],
                    notes=row["notes"],
                )
                for row in result.mappings()
            ]
