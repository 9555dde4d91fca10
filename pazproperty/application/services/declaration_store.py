"""Declaration store service.

Persistence primitives for declarations and their attachments. The only
business rule enforced here is the lifecycle-field guard: ``update()``
refuses status and the other lifecycle fields, which may only be written
through ``commit_lifecycle()`` by the transition engine.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any
from uuid import uuid4

from pazproperty.application.ports.declaration_repository import (
    DeclarationFilter,
    DeclarationRepositoryProtocol,
)
from pazproperty.application.services.base import LoggingMixin
from pazproperty.domain.errors.declaration import ForbiddenFieldMutationError
from pazproperty.domain.errors.not_found import DeclarationNotFoundError
from pazproperty.domain.errors.validation import ValidationError
from pazproperty.domain.models.declaration import (
    DESCRIPTIVE_FIELDS,
    IMMUTABLE_FIELDS,
    LIFECYCLE_FIELDS,
    Attachment,
    Declaration,
    IssueType,
    UrgencyLevel,
)

REQUIRED_FIELDS: tuple[str, ...] = (
    "name",
    "property",
    "city",
    "postal_code",
    "issue_type",
    "description",
    "urgency",
)

# Incoming key -> model field
FIELD_ALIASES: dict[str, str] = {
    "postalCode": "postal_code",
    "issueType": "issue_type",
    "externalRef": "external_ref",
}

# Legacy name of provider_id
_LEGACY_LIFECYCLE_FIELDS: frozenset[str] = frozenset({"prestador_id"})

_ENUM_FIELDS: dict[str, type[Enum]] = {
    "issue_type": IssueType,
    "urgency": UrgencyLevel,
}


def _normalize(payload: Mapping[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for key, value in payload.items():
        if isinstance(value, str):
            value = value.strip()
        normalized[FIELD_ALIASES.get(key, key)] = value
    return normalized


def _forbidden_fields(fields: Mapping[str, Any]) -> set[str]:
    return set(fields) & (LIFECYCLE_FIELDS | IMMUTABLE_FIELDS | _LEGACY_LIFECYCLE_FIELDS)


def _coerce_enums(fields: dict[str, Any]) -> None:
    """Convert enumerated fields in place, raising on values outside the set."""
    invalid = []
    for name, enum_type in _ENUM_FIELDS.items():
        if name not in fields or isinstance(fields[name], enum_type):
            continue
        try:
            fields[name] = enum_type(fields[name])
        except ValueError:
            invalid.append(name)
    if invalid:
        raise ValidationError("invalid_values", invalid)


def _check_email(fields: Mapping[str, Any]) -> None:
    email = fields.get("email")
    if email and "@" not in email:
        raise ValidationError("invalid_email", ["email"])


class DeclarationStore(LoggingMixin):
    """Storage service for declarations."""

    def __init__(self, repository: DeclarationRepositoryProtocol) -> None:
        self._repository = repository
        self._init_logger(component="declarations")

    async def create(self, payload: Mapping[str, Any]) -> Declaration:
        """Create a declaration in status New.

        Args:
            payload: Descriptive fields. ``postalCode`` and ``issueType`` are
                accepted as aliases.

        Raises:
            ForbiddenFieldMutationError: If lifecycle fields are supplied.
            ValidationError: If required fields are missing or empty, fields
                are unknown, or enumerated values are invalid.
        """
        fields = _normalize(payload)
        forbidden = _forbidden_fields(fields)
        if forbidden:
            raise ForbiddenFieldMutationError(forbidden)
        unknown = [k for k in fields if k not in DESCRIPTIVE_FIELDS]
        if unknown:
            raise ValidationError("unknown_fields", sorted(unknown))

        missing = [f for f in REQUIRED_FIELDS if not fields.get(f)]
        if missing:
            raise ValidationError.missing_fields(missing)
        _coerce_enums(fields)
        _check_email(fields)

        # Contact fields are optional; store None rather than ""
        for optional in ("email", "phone", "external_ref"):
            if optional in fields and not fields[optional]:
                fields[optional] = None

        declaration = Declaration(id=str(uuid4()), **fields)
        await self._repository.save(declaration)

        log = self._log_operation("create", declaration_id=declaration.id)
        log.info(
            "declaration_created",
            issue_type=declaration.issue_type.value,
            urgency=declaration.urgency.value,
        )
        return declaration

    async def get(self, declaration_id: str) -> Declaration:
        """Get a declaration.

        Raises:
            DeclarationNotFoundError: If the id is unknown.
        """
        declaration = await self._repository.get(declaration_id)
        if declaration is None:
            raise DeclarationNotFoundError(declaration_id)
        return declaration

    async def update(
        self, declaration_id: str, fields: Mapping[str, Any]
    ) -> Declaration:
        """Merge descriptive fields.

        Raises:
            ForbiddenFieldMutationError: If the payload contains status or any
                other lifecycle or identity field.
            ValidationError: On unknown fields, blanked required fields or
                invalid enumerated values.
            DeclarationNotFoundError: If the id is unknown.
        """
        normalized = _normalize(fields)
        forbidden = _forbidden_fields(normalized)
        if forbidden:
            self._log_operation("update", declaration_id=declaration_id).warning(
                "lifecycle_write_rejected", fields=sorted(forbidden)
            )
            raise ForbiddenFieldMutationError(forbidden)
        unknown = [k for k in normalized if k not in DESCRIPTIVE_FIELDS]
        if unknown:
            raise ValidationError("unknown_fields", sorted(unknown))
        blanked = [f for f in REQUIRED_FIELDS if f in normalized and not normalized[f]]
        if blanked:
            raise ValidationError("empty_fields", blanked)
        _coerce_enums(normalized)
        _check_email(normalized)

        if not normalized:
            return await self.get(declaration_id)
        updated = await self._repository.update_fields(declaration_id, normalized)
        self._log_operation("update", declaration_id=declaration_id).info(
            "declaration_updated", fields=sorted(normalized)
        )
        return updated

    async def add_attachment(
        self, declaration_id: str, attachment: Attachment
    ) -> Declaration:
        """Append an attachment.

        Raises:
            DeclarationNotFoundError: If the id is unknown.
            ValidationError: If an attachment with the same id exists.
        """
        declaration = await self.get(declaration_id)
        if declaration.find_attachment(attachment.id) is not None:
            raise ValidationError("duplicate_attachment", ["id"])
        updated = await self._repository.add_attachment(declaration_id, attachment)
        self._log_operation("add_attachment", declaration_id=declaration_id).info(
            "attachment_added",
            attachment_id=attachment.id,
            file_type=attachment.file_type.value,
        )
        return updated

    async def remove_attachment(self, declaration_id: str, attachment_id: str) -> bool:
        """Remove an attachment; False if it was not attached.

        Raises:
            DeclarationNotFoundError: If the id is unknown.
        """
        removed = await self._repository.remove_attachment(declaration_id, attachment_id)
        if removed:
            self._log_operation(
                "remove_attachment", declaration_id=declaration_id
            ).info("attachment_removed", attachment_id=attachment_id)
        return removed

    async def list(
        self, declaration_filter: DeclarationFilter | None = None
    ) -> list[Declaration]:
        """List declarations, most recent submission first."""
        return await self._repository.list(declaration_filter)

    async def commit_lifecycle(
        self,
        declaration_id: str,
        expected_version: int,
        changes: Mapping[str, Any],
    ) -> Declaration:
        """Write lifecycle fields with a version compare-and-swap.

        Reserved for the transition engine.

        Raises:
            ValueError: If ``changes`` contains non-lifecycle fields or
                ``version``.
            ConcurrentModificationError: If the version moved on.
            DeclarationNotFoundError: If the id is unknown.
        """
        illegal = set(changes) - (LIFECYCLE_FIELDS - {"version"})
        if illegal:
            raise ValueError(
                f"commit_lifecycle only writes lifecycle fields, got {sorted(illegal)}"
            )
        return await self._repository.update_lifecycle(
            declaration_id, expected_version, changes
        )
