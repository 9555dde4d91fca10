"""Declaration API routes.

Creation is open to any caller (tenants may report without an account).
Every other operation needs an authenticated caller; lifecycle rules and
per-role restrictions are enforced by the transition engine.
"""

from uuid import uuid4

from fastapi import APIRouter, Depends, Query, Request, Response

from pazproperty.api.auth.identity import get_caller_identity
from pazproperty.api.dependencies.declarations import (
    get_declaration_store,
    get_transition_engine,
)
from pazproperty.api.errors import to_http_exception
from pazproperty.api.models.declaration import (
    AddAttachmentRequest,
    AnnotateRequest,
    AssignProviderRequest,
    DeclarationFieldsRequest,
    DeclarationResponse,
    HistoryActionResponse,
    NotificationRecordResponse,
    ScheduleAppointmentRequest,
    TransitionRequest,
    TransitionResponse,
    TransitionWarning,
)
from pazproperty.application.ports.declaration_repository import DeclarationFilter
from pazproperty.application.services.access import (
    require_admin,
    require_authenticated,
)
from pazproperty.application.services.declaration_store import DeclarationStore
from pazproperty.application.services.transition_engine import (
    TransitionContext,
    TransitionEngine,
)
from pazproperty.domain.errors.not_found import NotFoundError
from pazproperty.domain.errors.validation import ValidationError
from pazproperty.domain.exceptions import PazPropertyError
from pazproperty.domain.models.declaration import (
    Attachment,
    AttachmentType,
    UrgencyLevel,
)
from pazproperty.domain.models.declaration_status import DeclarationStatus
from pazproperty.domain.models.identity import CallerIdentity

router = APIRouter(prefix="/declarations", tags=["declarations"])

_ERROR_RESPONSES = {
    400: {"description": "Invalid input"},
    401: {"description": "Authentication required"},
    403: {"description": "Role not permitted"},
    404: {"description": "Declaration or provider not found"},
    409: {"description": "Transition not permitted in the current state"},
    422: {"description": "Lifecycle field mutation attempted"},
}


def _build_filter(
    status: str | None, provider_id: str | None, urgency: str | None
) -> DeclarationFilter:
    invalid = []
    parsed_status = parsed_urgency = None
    if status:
        try:
            parsed_status = DeclarationStatus.parse(status)
        except ValueError:
            invalid.append("status")
    if urgency:
        try:
            parsed_urgency = UrgencyLevel(urgency)
        except ValueError:
            invalid.append("urgency")
    if invalid:
        raise ValidationError("invalid_values", invalid)
    return DeclarationFilter(
        status=parsed_status,
        provider_id=provider_id or None,
        urgency=parsed_urgency,
    )


@router.post(
    "",
    response_model=DeclarationResponse,
    status_code=201,
    responses=_ERROR_RESPONSES,
    summary="Submit a maintenance declaration",
)
async def create_declaration(
    body: DeclarationFieldsRequest,
    request: Request,
    store: DeclarationStore = Depends(get_declaration_store),
) -> DeclarationResponse:
    try:
        declaration = await store.create(body.to_fields())
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return DeclarationResponse.from_domain(declaration)


@router.get(
    "",
    response_model=list[DeclarationResponse],
    responses=_ERROR_RESPONSES,
    summary="List declarations, most recent first",
)
async def list_declarations(
    request: Request,
    status: str | None = Query(default=None),
    provider_id: str | None = Query(default=None, alias="providerId"),
    urgency: str | None = Query(default=None),
    store: DeclarationStore = Depends(get_declaration_store),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> list[DeclarationResponse]:
    try:
        require_authenticated(caller, "list declarations")
        declarations = await store.list(_build_filter(status, provider_id, urgency))
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return [DeclarationResponse.from_domain(d) for d in declarations]


@router.get(
    "/{declaration_id}",
    response_model=DeclarationResponse,
    responses=_ERROR_RESPONSES,
)
async def get_declaration(
    declaration_id: str,
    request: Request,
    store: DeclarationStore = Depends(get_declaration_store),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> DeclarationResponse:
    try:
        require_authenticated(caller, "read declarations")
        declaration = await store.get(declaration_id)
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return DeclarationResponse.from_domain(declaration)


@router.patch(
    "/{declaration_id}",
    response_model=DeclarationResponse,
    responses=_ERROR_RESPONSES,
    summary="Edit descriptive fields (status changes are refused)",
)
async def update_declaration(
    declaration_id: str,
    body: DeclarationFieldsRequest,
    request: Request,
    store: DeclarationStore = Depends(get_declaration_store),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> DeclarationResponse:
    try:
        require_admin(caller, "edit declarations")
        declaration = await store.update(declaration_id, body.to_fields())
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return DeclarationResponse.from_domain(declaration)


@router.post(
    "/{declaration_id}/transition",
    response_model=TransitionResponse,
    responses=_ERROR_RESPONSES,
    summary="Move a declaration to another status",
)
async def transition_declaration(
    declaration_id: str,
    body: TransitionRequest,
    request: Request,
    engine: TransitionEngine = Depends(get_transition_engine),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> TransitionResponse:
    try:
        result = await engine.transition(
            declaration_id,
            body.target_status,
            TransitionContext.from_mapping(body.context),
            actor=caller,
        )
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return TransitionResponse(
        declaration=DeclarationResponse.from_domain(result.declaration),
        history_action=HistoryActionResponse.from_domain(result.history_action),
        notification_delivered=result.notification_delivered,
        warnings=[TransitionWarning.from_domain(w) for w in result.warnings],
    )


@router.post(
    "/{declaration_id}/assign",
    response_model=DeclarationResponse,
    responses=_ERROR_RESPONSES,
    summary="Assign a provider (administrators only)",
)
async def assign_provider(
    declaration_id: str,
    body: AssignProviderRequest,
    request: Request,
    engine: TransitionEngine = Depends(get_transition_engine),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> DeclarationResponse:
    try:
        declaration = await engine.assign_provider(
            declaration_id, body.provider_id, actor=caller
        )
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return DeclarationResponse.from_domain(declaration)


@router.post(
    "/{declaration_id}/schedule",
    response_model=DeclarationResponse,
    responses=_ERROR_RESPONSES,
    summary="Set the diagnostic appointment",
)
async def schedule_appointment(
    declaration_id: str,
    body: ScheduleAppointmentRequest,
    request: Request,
    engine: TransitionEngine = Depends(get_transition_engine),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> DeclarationResponse:
    try:
        declaration = await engine.schedule_appointment(
            declaration_id, body.when_iso, actor=caller
        )
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return DeclarationResponse.from_domain(declaration)


@router.post(
    "/{declaration_id}/attachments",
    response_model=DeclarationResponse,
    status_code=201,
    responses=_ERROR_RESPONSES,
)
async def add_attachment(
    declaration_id: str,
    body: AddAttachmentRequest,
    request: Request,
    store: DeclarationStore = Depends(get_declaration_store),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> DeclarationResponse:
    try:
        require_authenticated(caller, "upload attachments")
        if not body.url.strip():
            raise ValidationError("empty_fields", ["url"])
        try:
            file_type = AttachmentType(body.file_type)
        except ValueError:
            raise ValidationError("invalid_values", ["file_type"]) from None
        attachment = Attachment(
            id=body.id or str(uuid4()),
            url=body.url,
            file_type=file_type,
            uploaded_by=caller.user_id,
        )
        declaration = await store.add_attachment(declaration_id, attachment)
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return DeclarationResponse.from_domain(declaration)


@router.delete(
    "/{declaration_id}/attachments/{attachment_id}",
    status_code=204,
    responses={**_ERROR_RESPONSES, 404: {"description": "Not attached"}},
)
async def remove_attachment(
    declaration_id: str,
    attachment_id: str,
    request: Request,
    store: DeclarationStore = Depends(get_declaration_store),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> Response:
    try:
        require_admin(caller, "remove attachments")
        removed = await store.remove_attachment(declaration_id, attachment_id)
        if not removed:
            raise NotFoundError("attachment", attachment_id)
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return Response(status_code=204)


@router.get(
    "/{declaration_id}/history",
    response_model=list[HistoryActionResponse],
    responses=_ERROR_RESPONSES,
    summary="Audit trail, oldest first",
)
async def get_history(
    declaration_id: str,
    request: Request,
    engine: TransitionEngine = Depends(get_transition_engine),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> list[HistoryActionResponse]:
    try:
        require_authenticated(caller, "read history")
        actions = await engine.history(declaration_id)
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return [HistoryActionResponse.from_domain(a) for a in actions]


@router.post(
    "/{declaration_id}/history",
    response_model=HistoryActionResponse,
    status_code=201,
    responses=_ERROR_RESPONSES,
    summary="Record a manual audit entry",
)
async def annotate(
    declaration_id: str,
    body: AnnotateRequest,
    request: Request,
    engine: TransitionEngine = Depends(get_transition_engine),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> HistoryActionResponse:
    try:
        action = await engine.annotate(
            declaration_id, body.action, body.notes, actor=caller
        )
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return HistoryActionResponse.from_domain(action)


@router.get(
    "/{declaration_id}/notifications",
    response_model=list[NotificationRecordResponse],
    responses=_ERROR_RESPONSES,
    summary="Notification log, newest first (administrators only)",
)
async def get_notifications(
    declaration_id: str,
    request: Request,
    engine: TransitionEngine = Depends(get_transition_engine),
    caller: CallerIdentity = Depends(get_caller_identity),
) -> list[NotificationRecordResponse]:
    try:
        require_admin(caller, "read the notification log")
        records = await engine.notifications(declaration_id)
    except PazPropertyError as exc:
        raise to_http_exception(exc, request) from None
    return [NotificationRecordResponse.from_domain(r) for r in records]
