"""Provider directory errors."""

from __future__ import annotations

from pazproperty.domain.exceptions import PazPropertyError


class ProviderNotAssignableError(PazPropertyError):
    """Raised when assigning a provider that is archived or unknown.

    Attributes:
        provider_id: The provider that was requested.
        archived: True if the provider exists but is archived.
    """

    code = "provider_not_assignable"

    def __init__(self, provider_id: str, archived: bool = False) -> None:
        self.provider_id = provider_id
        self.archived = archived
        state = "archived" if archived else "unknown"
        super().__init__(f"Provider {provider_id} is not assignable ({state})")
