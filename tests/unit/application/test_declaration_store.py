"""Unit tests for DeclarationStore.

The store persists descriptive fields and attachments; lifecycle fields are
refused on every path except commit_lifecycle().
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from pazproperty.application.ports.declaration_repository import DeclarationFilter
from pazproperty.application.services.declaration_store import DeclarationStore
from pazproperty.domain.errors import (
    ConcurrentModificationError,
    DeclarationNotFoundError,
    ForbiddenFieldMutationError,
    ValidationError,
)
from pazproperty.domain.models.declaration import (
    Attachment,
    AttachmentType,
    IssueType,
    UrgencyLevel,
)
from pazproperty.domain.models.declaration_status import DeclarationStatus
from tests.helpers import declaration_payload


def _attachment(attachment_id: str = "a-1") -> Attachment:
    return Attachment(
        id=attachment_id,
        url=f"https://files.example.com/{attachment_id}.jpg",
        file_type=AttachmentType.IMAGE,
        uploaded_by="tenant-1",
    )


class TestCreate:
    async def test_create_starts_new(self, store: DeclarationStore) -> None:
        declaration = await store.create(declaration_payload())
        assert declaration.status == DeclarationStatus.NEW
        assert declaration.version == 0
        assert declaration.issue_type == IssueType.PLUMBING
        assert declaration.urgency == UrgencyLevel.HIGH
        assert declaration.provider_id is None
        assert (await store.get(declaration.id)) == declaration

    async def test_create_generates_distinct_ids(self, store: DeclarationStore) -> None:
        first = await store.create(declaration_payload())
        second = await store.create(declaration_payload())
        assert first.id != second.id

    async def test_create_accepts_camel_case_aliases(
        self, store: DeclarationStore
    ) -> None:
        payload = declaration_payload()
        payload["postalCode"] = payload.pop("postal_code")
        payload["issueType"] = payload.pop("issue_type")
        declaration = await store.create(payload)
        assert declaration.postal_code == "75011"

    async def test_create_contact_is_optional(self, store: DeclarationStore) -> None:
        declaration = await store.create(declaration_payload(email="", phone=None))
        assert declaration.email is None
        assert declaration.phone is None

    async def test_create_missing_fields(self, store: DeclarationStore) -> None:
        payload = declaration_payload()
        del payload["city"]
        payload["description"] = "   "
        with pytest.raises(ValidationError) as exc_info:
            await store.create(payload)
        assert exc_info.value.reason == "missing_fields"
        assert exc_info.value.fields == ["city", "description"]

    async def test_create_refuses_status(self, store: DeclarationStore) -> None:
        with pytest.raises(ForbiddenFieldMutationError) as exc_info:
            await store.create(declaration_payload(status="Resolved"))
        assert exc_info.value.fields == ["status"]

    async def test_create_invalid_enum(self, store: DeclarationStore) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await store.create(declaration_payload(urgency="whenever"))
        assert exc_info.value.reason == "invalid_values"
        assert exc_info.value.fields == ["urgency"]

    async def test_create_unknown_field(self, store: DeclarationStore) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await store.create(declaration_payload(floor=3))
        assert exc_info.value.reason == "unknown_fields"


class TestUpdate:
    async def test_update_descriptive_fields(self, store: DeclarationStore) -> None:
        declaration = await store.create(declaration_payload())
        updated = await store.update(
            declaration.id, {"description": "Leak got worse", "urgency": "emergency"}
        )
        assert updated.description == "Leak got worse"
        assert updated.urgency == UrgencyLevel.EMERGENCY
        assert updated.version == declaration.version

    @pytest.mark.parametrize(
        "field", ["status", "provider_id", "prestador_id", "appointment_at", "version"]
    )
    async def test_update_refuses_lifecycle_fields(
        self, store: DeclarationStore, field: str
    ) -> None:
        declaration = await store.create(declaration_payload())
        with pytest.raises(ForbiddenFieldMutationError):
            await store.update(declaration.id, {field: "x", "city": "Lyon"})
        unchanged = await store.get(declaration.id)
        assert unchanged.city == "Paris"
        assert unchanged.status == DeclarationStatus.NEW

    async def test_update_refuses_identity_fields(self, store: DeclarationStore) -> None:
        declaration = await store.create(declaration_payload())
        with pytest.raises(ForbiddenFieldMutationError):
            await store.update(declaration.id, {"id": "other"})

    async def test_update_blank_required_field(self, store: DeclarationStore) -> None:
        declaration = await store.create(declaration_payload())
        with pytest.raises(ValidationError) as exc_info:
            await store.update(declaration.id, {"name": ""})
        assert exc_info.value.reason == "empty_fields"

    async def test_update_unknown_declaration(self, store: DeclarationStore) -> None:
        with pytest.raises(DeclarationNotFoundError):
            await store.update("missing", {"city": "Lyon"})

    async def test_empty_update_returns_current(self, store: DeclarationStore) -> None:
        declaration = await store.create(declaration_payload())
        assert await store.update(declaration.id, {}) == declaration


class TestAttachments:
    async def test_add_preserves_order(self, store: DeclarationStore) -> None:
        declaration = await store.create(declaration_payload())
        await store.add_attachment(declaration.id, _attachment("a-1"))
        updated = await store.add_attachment(declaration.id, _attachment("a-2"))
        assert [a.id for a in updated.attachments] == ["a-1", "a-2"]
        assert updated.version == declaration.version

    async def test_duplicate_attachment_rejected(self, store: DeclarationStore) -> None:
        declaration = await store.create(declaration_payload())
        await store.add_attachment(declaration.id, _attachment())
        with pytest.raises(ValidationError) as exc_info:
            await store.add_attachment(declaration.id, _attachment())
        assert exc_info.value.reason == "duplicate_attachment"

    async def test_remove_attachment(self, store: DeclarationStore) -> None:
        declaration = await store.create(declaration_payload())
        await store.add_attachment(declaration.id, _attachment("a-1"))
        await store.add_attachment(declaration.id, _attachment("a-2"))
        assert await store.remove_attachment(declaration.id, "a-1")
        assert not await store.remove_attachment(declaration.id, "a-1")
        remaining = await store.get(declaration.id)
        assert [a.id for a in remaining.attachments] == ["a-2"]

    async def test_attachment_on_unknown_declaration(
        self, store: DeclarationStore
    ) -> None:
        with pytest.raises(DeclarationNotFoundError):
            await store.add_attachment("missing", _attachment())
        with pytest.raises(DeclarationNotFoundError):
            await store.remove_attachment("missing", "a-1")


class TestList:
    async def test_newest_first(self, store: DeclarationStore) -> None:
        for name in ("First", "Second", "Third"):
            await store.create(declaration_payload(name=name))
        listed = await store.list()
        submitted = [d.submitted_at for d in listed]
        assert len(listed) == 3
        assert submitted == sorted(submitted, reverse=True)

    async def test_filter_by_urgency_and_status(self, store: DeclarationStore) -> None:
        low = await store.create(declaration_payload(urgency="low"))
        await store.create(declaration_payload(urgency="high"))
        result = await store.list(
            DeclarationFilter(status=DeclarationStatus.NEW, urgency=UrgencyLevel.LOW)
        )
        assert [d.id for d in result] == [low.id]

    async def test_filter_by_provider(self, store: DeclarationStore) -> None:
        declaration = await store.create(declaration_payload())
        await store.commit_lifecycle(declaration.id, 0, {"provider_id": "p-plumb"})
        await store.create(declaration_payload())
        result = await store.list(DeclarationFilter(provider_id="p-plumb"))
        assert [d.id for d in result] == [declaration.id]


class TestCommitLifecycle:
    async def test_commit_bumps_version(self, store: DeclarationStore) -> None:
        declaration = await store.create(declaration_payload())
        updated = await store.commit_lifecycle(
            declaration.id,
            0,
            {"status": DeclarationStatus.TRANSMITTED, "quote_amount": Decimal("10")},
        )
        assert updated.status == DeclarationStatus.TRANSMITTED
        assert updated.version == 1

    async def test_stale_version_conflicts(self, store: DeclarationStore) -> None:
        declaration = await store.create(declaration_payload())
        await store.commit_lifecycle(
            declaration.id, 0, {"status": DeclarationStatus.TRANSMITTED}
        )
        with pytest.raises(ConcurrentModificationError) as exc_info:
            await store.commit_lifecycle(
                declaration.id, 0, {"status": DeclarationStatus.CANCELLED}
            )
        assert exc_info.value.expected_version == 0
        assert (await store.get(declaration.id)).status == DeclarationStatus.TRANSMITTED

    async def test_refuses_descriptive_fields(self, store: DeclarationStore) -> None:
        declaration = await store.create(declaration_payload())
        with pytest.raises(ValueError, match="lifecycle fields"):
            await store.commit_lifecycle(declaration.id, 0, {"city": "Lyon"})
        with pytest.raises(ValueError):
            await store.commit_lifecycle(declaration.id, 0, {"version": 5})
