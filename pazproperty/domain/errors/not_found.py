"""Not-found errors for referenced entities."""

from __future__ import annotations

from pazproperty.domain.exceptions import PazPropertyError


class NotFoundError(PazPropertyError):
    """Raised when a referenced entity does not exist.

    Attributes:
        entity: Kind of entity ("declaration", "provider", ...).
        entity_id: The identifier that was looked up.
    """

    code = "not_found"

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} not found: {entity_id}")


class DeclarationNotFoundError(NotFoundError):
    """Raised when a declaration id is unknown."""

    code = "declaration_not_found"

    def __init__(self, declaration_id: str) -> None:
        super().__init__("declaration", declaration_id)


class ProviderNotFoundError(NotFoundError):
    """Raised when a provider id is unknown."""

    code = "provider_not_found"

    def __init__(self, provider_id: str) -> None:
        super().__init__("provider", provider_id)
