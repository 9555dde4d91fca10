"""Declaration API request/response models.

Request models accept the camelCase names used by the web client
(``postalCode``, ``issueType``, ``targetStatus``, ``providerId``,
``whenISO``) as well as snake_case. Create and update bodies allow extra
keys so that the declaration store, not the schema layer, reports
forbidden lifecycle fields and missing values with domain error codes.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from pazproperty.domain.errors.notification import NotificationDeliveryFailedError
from pazproperty.domain.models.declaration import Attachment, Declaration
from pazproperty.domain.models.history_action import HistoryAction
from pazproperty.domain.models.notification import NotificationRecord

# ISO 8601 with Z suffix
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class DeclarationFieldsRequest(BaseModel):
    """Descriptive declaration fields, all optional at the schema level."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    property: str | None = None
    city: str | None = None
    postal_code: str | None = Field(default=None, alias="postalCode")
    issue_type: str | None = Field(default=None, alias="issueType")
    description: str | None = None
    urgency: str | None = None
    external_ref: str | None = Field(default=None, alias="externalRef")

    def to_fields(self) -> dict[str, Any]:
        """Fields explicitly sent by the client, extras included."""
        return self.model_dump(exclude_unset=True)


class TransitionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target_status: str = Field(alias="targetStatus")
    context: dict[str, Any] | None = None


class AssignProviderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    provider_id: str = Field(alias="providerId", min_length=1)


class ScheduleAppointmentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    when_iso: str = Field(alias="whenISO", min_length=1)


class AddAttachmentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(min_length=1)
    file_type: str = Field(alias="fileType")
    id: str | None = None


class AnnotateRequest(BaseModel):
    action: str
    notes: str | None = None


class AttachmentResponse(BaseModel):
    id: str
    url: str
    file_type: str
    uploaded_by: str
    uploaded_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, attachment: Attachment) -> "AttachmentResponse":
        return cls(
            id=attachment.id,
            url=attachment.url,
            file_type=attachment.file_type.value,
            uploaded_by=attachment.uploaded_by,
            uploaded_at=attachment.uploaded_at,
        )


class DeclarationResponse(BaseModel):
    """A declaration as returned by the API."""

    id: str
    name: str
    email: str | None
    phone: str | None
    property: str
    city: str
    postal_code: str
    issue_type: str
    description: str
    urgency: str
    status: str
    submitted_at: DateTimeWithZ
    provider_id: str | None
    provider_assigned_at: DateTimeWithZ | None
    appointment_at: DateTimeWithZ | None
    meeting_notes: str | None
    quote_amount: str | None
    quote_approved: bool | None
    quote_rejection_reason: str | None
    resolved_at: DateTimeWithZ | None
    external_ref: str | None
    attachments: list[AttachmentResponse]
    version: int

    @classmethod
    def from_domain(cls, declaration: Declaration) -> "DeclarationResponse":
        return cls(
            id=declaration.id,
            name=declaration.name,
            email=declaration.email,
            phone=declaration.phone,
            property=declaration.property,
            city=declaration.city,
            postal_code=declaration.postal_code,
            issue_type=declaration.issue_type.value,
            description=declaration.description,
            urgency=declaration.urgency.value,
            status=declaration.status.value,
            submitted_at=declaration.submitted_at,
            provider_id=declaration.provider_id,
            provider_assigned_at=declaration.provider_assigned_at,
            appointment_at=declaration.appointment_at,
            meeting_notes=declaration.meeting_notes,
            quote_amount=(
                str(declaration.quote_amount)
                if declaration.quote_amount is not None
                else None
            ),
            quote_approved=declaration.quote_approved,
            quote_rejection_reason=declaration.quote_rejection_reason,
            resolved_at=declaration.resolved_at,
            external_ref=declaration.external_ref,
            attachments=[AttachmentResponse.from_domain(a) for a in declaration.attachments],
            version=declaration.version,
        )


class HistoryActionResponse(BaseModel):
    id: str
    declaration_id: str
    action: str
    created_at: DateTimeWithZ
    actor_id: str | None
    notes: str | None

    @classmethod
    def from_domain(cls, action: HistoryAction) -> "HistoryActionResponse":
        return cls(
            id=action.id,
            declaration_id=action.declaration_id,
            action=action.action,
            created_at=action.created_at,
            actor_id=action.actor_id,
            notes=action.notes,
        )


class TransitionWarning(BaseModel):
    """A non-fatal problem reported alongside a committed transition."""

    code: str
    detail: str
    event_type: str

    @classmethod
    def from_domain(cls, warning: NotificationDeliveryFailedError) -> "TransitionWarning":
        return cls(code=warning.code, detail=warning.message, event_type=warning.event_type)


class TransitionResponse(BaseModel):
    declaration: DeclarationResponse
    history_action: HistoryActionResponse
    notification_delivered: bool
    warnings: list[TransitionWarning]


class RecipientResponse(BaseModel):
    role: str
    address: str


class NotificationRecordResponse(BaseModel):
    id: str
    declaration_id: str
    event_type: str
    recipients: list[RecipientResponse]
    delivered: bool
    error: str | None
    sent_at: DateTimeWithZ

    @classmethod
    def from_domain(cls, record: NotificationRecord) -> "NotificationRecordResponse":
        return cls(
            id=record.id,
            declaration_id=record.declaration_id,
            event_type=record.event_type.value,
            recipients=[RecipientResponse(**r.to_dict()) for r in record.recipients],
            delivered=record.delivered,
            error=record.error,
            sent_at=record.sent_at,
        )
