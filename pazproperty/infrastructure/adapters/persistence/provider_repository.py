"""SQLAlchemy implementation of ProviderRepositoryProtocol."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import insert, select, update
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pazproperty.application.ports.provider_repository import (
    ProviderRepositoryProtocol,
)
from pazproperty.domain.errors.not_found import ProviderNotFoundError
from pazproperty.domain.models.provider import Provider
from pazproperty.infrastructure.adapters.persistence.tables import as_utc, providers


def _to_provider(row: RowMapping) -> Provider:
    values = dict(row)
    values["created_at"] = as_utc(values["created_at"])
    values["archived_at"] = as_utc(values["archived_at"])
    return Provider(**values)


class SqlProviderRepository(ProviderRepositoryProtocol):
    """Provider storage on the ``providers`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def save(self, provider: Provider) -> None:
        async with self._session_factory() as session:
            try:
                await session.execute(
                    insert(providers).values(
                        id=provider.id,
                        company_name=provider.company_name,
                        manager_name=provider.manager_name,
                        work_category=provider.work_category,
                        email=provider.email,
                        phone=provider.phone,
                        address=provider.address,
                        city=provider.city,
                        postal_code=provider.postal_code,
                        tax_id=provider.tax_id,
                        created_at=provider.created_at,
                        archived_at=provider.archived_at,
                    )
                )
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise ValueError(f"Provider already exists: {provider.id}") from None

    async def get(self, provider_id: str) -> Provider | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(providers).where(providers.c.id == provider_id)
            )
            row = result.mappings().first()
        return _to_provider(row) if row is not None else None

    async def list(self, archived: bool) -> list[Provider]:
        condition = (
            providers.c.archived_at.is_not(None)
            if archived
            else providers.c.archived_at.is_(None)
        )
        async with self._session_factory() as session:
            result = await session.execute(select(providers).where(condition))
            return [_to_provider(row) for row in result.mappings()]

    async def update_fields(
        self, provider_id: str, fields: Mapping[str, Any]
    ) -> Provider:
        await self._update(provider_id, dict(fields))
        return await self._require(provider_id)

    async def set_archived_at(
        self, provider_id: str, archived_at: datetime | None
    ) -> Provider:
        await self._update(provider_id, {"archived_at": archived_at})
        return await self._require(provider_id)

    async def _update(self, provider_id: str, values: dict[str, Any]) -> None:
        async with self._session_factory() as session:
            result = await session.execute(
                update(providers).where(providers.c.id == provider_id).values(**values)
            )
            await session.commit()
        if result.rowcount == 0:
            raise ProviderNotFoundError(provider_id)

    async def _require(self, provider_id: str) -> Provider:
        provider = await self.get(provider_id)
        if provider is None:
            raise ProviderNotFoundError(provider_id)
        return provider
