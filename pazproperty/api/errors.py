"""RFC 7807 problem details for domain errors.

Status mapping:
    400 ValidationError
    401 PermissionDeniedError (unauthenticated caller)
    403 PermissionDeniedError
    404 NotFoundError
    409 InvalidTransitionError, PreconditionNotMetError,
        ProviderNotAssignableError, ConcurrentModificationError
    422 ForbiddenFieldMutationError
"""

from typing import Any

from fastapi import HTTPException, Request

from pazproperty.domain.errors import (
    ConcurrentModificationError,
    ForbiddenFieldMutationError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    PreconditionNotMetError,
    ProviderNotAssignableError,
    ValidationError,
)
from pazproperty.domain.exceptions import PazPropertyError

ERROR_TYPE_BASE = "https://pazproperty.io/errors/"

_CONFLICT_ERRORS = (
    InvalidTransitionError,
    PreconditionNotMetError,
    ProviderNotAssignableError,
    ConcurrentModificationError,
)


def status_for(exc: PazPropertyError) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, PermissionDeniedError):
        return 403 if exc.authenticated else 401
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, _CONFLICT_ERRORS):
        return 409
    if isinstance(exc, ForbiddenFieldMutationError):
        return 422
    return 400


def problem_detail(exc: PazPropertyError, request: Request) -> dict[str, Any]:
    """Build the problem document for ``exc``."""
    status = status_for(exc)
    detail: dict[str, Any] = {
        "type": ERROR_TYPE_BASE + exc.code.replace("_", "-"),
        "title": exc.code.replace("_", " ").capitalize(),
        "status": status,
        "detail": exc.message,
        "instance": str(request.url),
        "code": exc.code,
    }
    if isinstance(exc, (ValidationError, ForbiddenFieldMutationError)):
        detail["fields"] = list(exc.fields)
    if isinstance(exc, ValidationError):
        detail["reason"] = exc.reason
    if isinstance(exc, PreconditionNotMetError):
        detail["reason"] = exc.reason
    if isinstance(exc, InvalidTransitionError):
        detail["from_status"] = exc.from_status.value
        detail["to_status"] = exc.to_status.value
        detail["allowed_transitions"] = [s.value for s in exc.allowed_transitions]
    return detail


def to_http_exception(exc: PazPropertyError, request: Request) -> HTTPException:
    """Translate a domain error into an HTTPException carrying problem details."""
    status = status_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return HTTPException(
        status_code=status, detail=problem_detail(exc, request), headers=headers
    )
