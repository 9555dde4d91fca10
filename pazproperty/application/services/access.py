"""Role rules shared by the transition engine and the HTTP layer."""

from __future__ import annotations

from pazproperty.domain.errors.authorization import PermissionDeniedError
from pazproperty.domain.models.declaration import Declaration
from pazproperty.domain.models.identity import CallerIdentity


def require_authenticated(actor: CallerIdentity, operation: str) -> None:
    """Reject unauthenticated callers."""
    if not actor.is_authenticated:
        raise PermissionDeniedError(operation, actor.role.value, authenticated=False)


def require_admin(actor: CallerIdentity, operation: str) -> None:
    """Reject callers that are not administrators."""
    require_authenticated(actor, operation)
    if not actor.is_admin:
        raise PermissionDeniedError(operation, actor.role.value)


def is_assigned_provider(actor: CallerIdentity, declaration: Declaration) -> bool:
    acting = actor.acting_provider_id
    return acting is not None and acting == declaration.provider_id


def require_admin_or_assigned_provider(
    actor: CallerIdentity, declaration: Declaration, operation: str
) -> None:
    """Allow administrators and the provider assigned to the declaration."""
    require_authenticated(actor, operation)
    if actor.is_admin or is_assigned_provider(actor, declaration):
        return
    raise PermissionDeniedError(operation, actor.role.value)
