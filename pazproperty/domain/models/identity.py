"""Caller identity value object consumed from the identity provider."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    """Roles recognised by the declarations core."""

    ADMIN = "admin"
    PROVIDER = "provider"
    CUSTOMER = "customer"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True, eq=True)
class CallerIdentity:
    """Authenticated identity of a caller.

    Attributes:
        user_id: Identifier of the user account.
        role: Role granted to the account.
        provider_id: Provider record a provider account acts for.
                     Defaults to user_id for provider accounts.
    """

    user_id: str
    role: Role
    provider_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_authenticated(self) -> bool:
        return self.role != Role.UNAUTHENTICATED

    @property
    def acting_provider_id(self) -> str | None:
        """Provider id this identity acts for, if it is a provider account."""
        if self.role != Role.PROVIDER:
            return None
        return self.provider_id or self.user_id


ANONYMOUS = CallerIdentity(user_id="anonymous", role=Role.UNAUTHENTICATED)

# Identity used for internal calls that are not driven by a user request
SYSTEM_ACTOR = CallerIdentity(user_id="system", role=Role.ADMIN)
