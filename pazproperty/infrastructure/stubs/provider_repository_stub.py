"""Provider repository stub implementation."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any

from pazproperty.application.ports.provider_repository import (
    ProviderRepositoryProtocol,
)
from pazproperty.domain.errors.not_found import ProviderNotFoundError
from pazproperty.domain.models.provider import Provider


class ProviderRepositoryStub(ProviderRepositoryProtocol):
    """In-memory stub implementation of ProviderRepositoryProtocol.

    Usage:
        repo = ProviderRepositoryStub()
        repo.add(Provider(id="p1", company_name="Acme", ...))
    """

    def __init__(self) -> None:
        self._providers: dict[str, Provider] = {}
        self._write_lock = asyncio.Lock()

    async def save(self, provider: Provider) -> None:
        async with self._write_lock:
            if provider.id in self._providers:
                raise ValueError(f"Provider already exists: {provider.id}")
            self._providers[provider.id] = provider

    async def get(self, provider_id: str) -> Provider | None:
        return self._providers.get(provider_id)

    async def list(self, archived: bool) -> list[Provider]:
        return [p for p in self._providers.values() if p.is_archived == archived]

    async def update_fields(
        self, provider_id: str, fields: Mapping[str, Any]
    ) -> Provider:
        async with self._write_lock:
            current = self._require(provider_id)
            updated = replace(current, **dict(fields))
            self._providers[provider_id] = updated
            return updated

    async def set_archived_at(
        self, provider_id: str, archived_at: datetime | None
    ) -> Provider:
        async with self._write_lock:
            current = self._require(provider_id)
            updated = replace(current, archived_at=archived_at)
            self._providers[provider_id] = updated
            return updated

    def _require(self, provider_id: str) -> Provider:
        provider = self._providers.get(provider_id)
        if provider is None:
            raise ProviderNotFoundError(provider_id)
        return provider

    # Test helpers

    def add(self, provider: Provider) -> None:
        """Seed a provider synchronously (for fixtures)."""
        self._providers[provider.id] = provider

    def clear(self) -> None:
        self._providers.clear()
