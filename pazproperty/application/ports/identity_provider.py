"""Identity provider port.

Authentication happens elsewhere; the core only resolves a caller token to
an identity and a role.
"""

from __future__ import annotations

from typing import Protocol

from pazproperty.domain.models.identity import CallerIdentity


class IdentityProviderProtocol(Protocol):
    """Protocol for resolving caller tokens."""

    async def resolve(self, token: str | None) -> CallerIdentity:
        """Resolve a caller token.

        Returns:
            The caller identity. Unknown or missing tokens resolve to an
            identity with role UNAUTHENTICATED; this method does not raise
            for them.
        """
        ...
