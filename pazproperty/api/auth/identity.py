"""Caller identity dependency.

Reads ``Authorization: Bearer <token>`` and resolves it through the identity
port. A missing or non-Bearer header resolves to the anonymous identity;
each operation decides whether that is acceptable.
"""

from typing import Annotated

import structlog
from fastapi import Depends, Header

from pazproperty.api.dependencies.declarations import get_identity_provider
from pazproperty.application.ports.identity_provider import IdentityProviderProtocol
from pazproperty.domain.models.identity import CallerIdentity

logger = structlog.get_logger(__name__)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_caller_identity(
    authorization: Annotated[
        str | None,
        Header(description="Bearer token identifying the caller."),
    ] = None,
    identity_provider: IdentityProviderProtocol = Depends(get_identity_provider),
) -> CallerIdentity:
    """Resolve the caller of the current request."""
    identity = await identity_provider.resolve(_bearer_token(authorization))
    logger.debug(
        "caller_identity_resolved",
        user_id=identity.user_id,
        role=identity.role.value,
    )
    return identity
