"""Identity provider stub backed by a static token table.

Tokens are seeded programmatically or from the IDENTITY_TOKENS environment
variable, formatted as comma-separated ``token:user_id:role[:provider_id]``
entries, e.g. ``admintok:alice:admin,provtok:bob:provider:p-42``.
"""

from __future__ import annotations

import os

from pazproperty.application.ports.identity_provider import IdentityProviderProtocol
from pazproperty.domain.models.identity import ANONYMOUS, CallerIdentity, Role

IDENTITY_TOKENS_ENV = "IDENTITY_TOKENS"


def parse_identity_tokens(raw: str) -> dict[str, CallerIdentity]:
    """Parse an IDENTITY_TOKENS value.

    Raises:
        ValueError: If an entry is malformed or names an unknown role.
    """
    identities: dict[str, CallerIdentity] = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        parts = entry.split(":")
        if len(parts) not in (3, 4):
            raise ValueError(
                f"Invalid identity token entry {entry!r}; "
                "expected token:user_id:role[:provider_id]"
            )
        token, user_id, role_value = parts[0], parts[1], parts[2]
        try:
            role = Role(role_value)
        except ValueError:
            raise ValueError(
                f"Unknown role {role_value!r} in identity token entry"
            ) from None
        identities[token] = CallerIdentity(
            user_id=user_id,
            role=role,
            provider_id=parts[3] if len(parts) == 4 else None,
        )
    return identities


class IdentityProviderStub(IdentityProviderProtocol):
    """Static token table implementing IdentityProviderProtocol."""

    def __init__(self, identities: dict[str, CallerIdentity] | None = None) -> None:
        self._identities: dict[str, CallerIdentity] = dict(identities or {})

    @classmethod
    def from_environment(cls) -> IdentityProviderStub:
        return cls(parse_identity_tokens(os.environ.get(IDENTITY_TOKENS_ENV, "")))

    async def resolve(self, token: str | None) -> CallerIdentity:
        if not token:
            return ANONYMOUS
        return self._identities.get(token, ANONYMOUS)

    def register(self, token: str, identity: CallerIdentity) -> None:
        self._identities[token] = identity
