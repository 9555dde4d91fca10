"""Provider repository port."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Protocol

from pazproperty.domain.models.provider import Provider


class ProviderRepositoryProtocol(Protocol):
    """Protocol for provider storage operations.

    Providers are never deleted: archival is a nullable timestamp.
    """

    async def save(self, provider: Provider) -> None:
        """Store a new provider.

        Raises:
            ValueError: If provider.id already exists.
        """
        ...

    async def get(self, provider_id: str) -> Provider | None:
        """Retrieve a provider by id, None if absent."""
        ...

    async def list(self, archived: bool) -> list[Provider]:
        """List archived or active providers (order unspecified)."""
        ...

    async def update_fields(
        self, provider_id: str, fields: Mapping[str, Any]
    ) -> Provider:
        """Merge editable fields into a provider.

        Raises:
            ProviderNotFoundError: If the provider doesn't exist.
        """
        ...

    async def set_archived_at(
        self, provider_id: str, archived_at: datetime | None
    ) -> Provider:
        """Set or clear the archival timestamp.

        Raises:
            ProviderNotFoundError: If the provider doesn't exist.
        """
        ...
