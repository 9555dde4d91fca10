"""Provider directory service.

Read/write model of service providers: lookup, registration, edits,
soft-delete (archive/restore) and the assignability rule used by the
transition engine.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pazproperty.application.ports.provider_repository import (
    ProviderRepositoryProtocol,
)
from pazproperty.application.services.base import LoggingMixin
from pazproperty.domain.errors.declaration import ForbiddenFieldMutationError
from pazproperty.domain.errors.not_found import ProviderNotFoundError
from pazproperty.domain.errors.provider import ProviderNotAssignableError
from pazproperty.domain.errors.validation import ValidationError
from pazproperty.domain.models.provider import (
    PROVIDER_EDITABLE_FIELDS,
    PROVIDER_REQUIRED_FIELDS,
    Provider,
)

# Never writable through update()
_PROVIDER_PROTECTED_FIELDS: frozenset[str] = frozenset(
    {"id", "created_at", "archived_at"}
)


def _clean(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _validate_email(fields: Mapping[str, Any]) -> None:
    email = fields.get("email")
    if email is not None and "@" not in email:
        raise ValidationError("invalid_email", ["email"])


class ProviderDirectory(LoggingMixin):
    """Service over the provider repository."""

    def __init__(self, repository: ProviderRepositoryProtocol) -> None:
        self._repository = repository
        self._init_logger(component="providers")

    async def list_active(self) -> list[Provider]:
        """Non-archived providers ordered by work category then company name."""
        providers = await self._repository.list(archived=False)
        return sorted(providers, key=Provider.sort_key)

    async def list_archived(self) -> list[Provider]:
        providers = await self._repository.list(archived=True)
        return sorted(providers, key=Provider.sort_key)

    async def get_by_id(self, provider_id: str) -> Provider:
        """Get a provider.

        Raises:
            ProviderNotFoundError: If the id is unknown.
        """
        provider = await self._repository.get(provider_id)
        if provider is None:
            raise ProviderNotFoundError(provider_id)
        return provider

    async def create(self, payload: Mapping[str, Any]) -> Provider:
        """Register a provider.

        Raises:
            ValidationError: If required fields are missing or unknown
                fields are supplied.
        """
        fields = {k: _clean(v) for k, v in payload.items()}
        unknown = [k for k in fields if k not in PROVIDER_EDITABLE_FIELDS]
        if unknown:
            raise ValidationError("unknown_fields", sorted(unknown))
        missing = [f for f in PROVIDER_REQUIRED_FIELDS if not fields.get(f)]
        if missing:
            raise ValidationError.missing_fields(missing)
        _validate_email(fields)

        provider = Provider(id=str(uuid4()), **fields)
        await self._repository.save(provider)

        log = self._log_operation("create", provider_id=provider.id)
        log.info("provider_created", work_category=provider.work_category)
        return provider

    async def update(self, provider_id: str, fields: Mapping[str, Any]) -> Provider:
        """Merge descriptive fields into a provider.

        Raises:
            ProviderNotFoundError: If the id is unknown.
            ForbiddenFieldMutationError: If id, created_at or archived_at
                are present.
            ValidationError: On unknown fields or blanked required fields.
        """
        forbidden = _PROVIDER_PROTECTED_FIELDS & fields.keys()
        if forbidden:
            raise ForbiddenFieldMutationError(forbidden)
        cleaned = {k: _clean(v) for k, v in fields.items()}
        unknown = [k for k in cleaned if k not in PROVIDER_EDITABLE_FIELDS]
        if unknown:
            raise ValidationError("unknown_fields", sorted(unknown))
        blanked = [f for f in PROVIDER_REQUIRED_FIELDS if f in cleaned and not cleaned[f]]
        if blanked:
            raise ValidationError("empty_fields", blanked)
        _validate_email(cleaned)

        current = await self.get_by_id(provider_id)
        if not cleaned:
            return current
        updated = await self._repository.update_fields(provider_id, cleaned)
        self._log_operation("update", provider_id=provider_id).info(
            "provider_updated", fields=sorted(cleaned)
        )
        return updated

    async def archive(self, provider_id: str) -> Provider:
        """Soft-delete a provider. Archiving twice keeps the first timestamp.

        Raises:
            ProviderNotFoundError: If the id is unknown.
        """
        provider = await self.get_by_id(provider_id)
        if provider.is_archived:
            return provider
        archived = await self._repository.set_archived_at(
            provider_id, datetime.now(timezone.utc)
        )
        self._log_operation("archive", provider_id=provider_id).info(
            "provider_archived"
        )
        return archived

    async def restore(self, provider_id: str) -> Provider:
        """Clear the archival timestamp.

        Raises:
            ProviderNotFoundError: If the id is unknown.
        """
        provider = await self.get_by_id(provider_id)
        if not provider.is_archived:
            return provider
        restored = await self._repository.set_archived_at(provider_id, None)
        self._log_operation("restore", provider_id=provider_id).info(
            "provider_restored"
        )
        return restored

    async def assignable(self, provider_id: str) -> bool:
        """True if the provider exists and is not archived."""
        provider = await self._repository.get(provider_id)
        return provider is not None and not provider.is_archived

    async def ensure_assignable(self, provider_id: str) -> Provider:
        """Return the provider or raise ProviderNotAssignableError."""
        provider = await self._repository.get(provider_id)
        if provider is None:
            raise ProviderNotAssignableError(provider_id)
        if provider.is_archived:
            raise ProviderNotAssignableError(provider_id, archived=True)
        return provider
