"""Declaration domain model.

A declaration is one reported property issue requiring an intervention.
Instances are frozen; every change produces a new instance via
``dataclasses.replace`` so that repositories can hand out values without
exposing shared mutable state.

Lifecycle fields (status, provider_id, appointment_at, resolved_at, ...)
are only ever changed by the transition engine. Descriptive fields may be
updated through the declaration store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from pazproperty.domain.models.declaration_status import DeclarationStatus


class IssueType(Enum):
    """Closed set of issue categories a tenant can report."""

    PLUMBING = "plumbing"
    ELECTRICAL = "electrical"
    APPLIANCE = "appliance"
    HEATING = "heating"
    STRUCTURAL = "structural"
    PEST = "pest"
    OTHER = "other"


class UrgencyLevel(Enum):
    """Urgency levels, from least to most urgent."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EMERGENCY = "emergency"


class AttachmentType(Enum):
    """Declared type of an uploaded media file."""

    IMAGE = "image"
    VIDEO = "video"
    QUOTE_DOCUMENT = "quote_document"


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Attachment:
    """A media file reference attached to a declaration.

    Attributes:
        id: Attachment identifier (unique within its declaration).
        url: Storage URL of the file.
        file_type: Declared type (image, video, quote document).
        uploaded_by: Identity of the uploader (user id or "anonymous").
        uploaded_at: Upload timestamp (UTC).
    """

    id: str
    url: str
    file_type: AttachmentType
    uploaded_by: str
    uploaded_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        if not self.url.strip():
            raise ValueError("Attachment url cannot be empty")


# Fields that only the transition engine may write
LIFECYCLE_FIELDS: frozenset[str] = frozenset(
    {
        "status",
        "provider_id",
        "provider_assigned_at",
        "appointment_at",
        "meeting_notes",
        "quote_amount",
        "quote_approved",
        "quote_rejection_reason",
        "resolved_at",
        "version",
    }
)

# Fields that are never writable after creation
IMMUTABLE_FIELDS: frozenset[str] = frozenset({"id", "submitted_at", "attachments"})

# Descriptive fields the declaration store may update
DESCRIPTIVE_FIELDS: tuple[str, ...] = (
    "name",
    "email",
    "phone",
    "property",
    "city",
    "postal_code",
    "issue_type",
    "description",
    "urgency",
    "external_ref",
)


@dataclass(frozen=True, eq=True)
class Declaration:
    """A maintenance declaration submitted by a tenant.

    Attributes:
        id: Unique identifier (UUID4 text).
        name: Reporter name.
        property: Property address.
        city: City of the property.
        postal_code: Postal code of the property.
        issue_type: Issue category.
        description: Free-text description of the problem.
        urgency: Urgency level.
        email: Reporter email (nullable).
        phone: Reporter phone (nullable).
        status: Current lifecycle state.
        submitted_at: Submission timestamp (UTC).
        provider_id: Assigned provider reference (nullable).
        provider_assigned_at: When the provider was assigned (nullable).
        appointment_at: Diagnostic appointment (nullable).
        meeting_notes: Notes captured when the meeting was planned (nullable).
        quote_amount: Quote received from the provider (nullable).
        quote_approved: Administrator decision on the quote (nullable until
            decided).
        quote_rejection_reason: Why the quote was rejected (nullable).
        resolved_at: When the declaration reached Resolved (nullable).
        external_ref: Opaque external-sync reference (nullable).
        attachments: Ordered attachment list, owned by the declaration.
        version: Lifecycle version, bumped by every lifecycle write.
    """

    id: str
    name: str
    property: str
    city: str
    postal_code: str
    issue_type: IssueType
    description: str
    urgency: UrgencyLevel
    email: str | None = None
    phone: str | None = None
    status: DeclarationStatus = field(default=DeclarationStatus.NEW)
    submitted_at: datetime = field(default_factory=_utc_now)
    provider_id: str | None = None
    provider_assigned_at: datetime | None = None
    appointment_at: datetime | None = None
    meeting_notes: str | None = None
    quote_amount: Decimal | None = None
    quote_approved: bool | None = None
    quote_rejection_reason: str | None = None
    resolved_at: datetime | None = None
    external_ref: str | None = None
    attachments: tuple[Attachment, ...] = ()
    version: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.status, DeclarationStatus):
            raise ValueError(f"Invalid declaration status: {self.status!r}")

    @property
    def is_closed(self) -> bool:
        """True once the declaration reached a terminal state."""
        return self.status.is_terminal()

    def has_future_appointment(self, now: datetime | None = None) -> bool:
        """Check whether an appointment is set and still ahead of ``now``."""
        if self.appointment_at is None:
            return False
        return self.appointment_at > (now or _utc_now())

    def find_attachment(self, attachment_id: str) -> Attachment | None:
        """Return the attachment with ``attachment_id`` if present."""
        for attachment in self.attachments:
            if attachment.id == attachment_id:
                return attachment
        return None
