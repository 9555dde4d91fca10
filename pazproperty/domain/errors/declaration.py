"""Declaration store errors."""

from __future__ import annotations

from collections.abc import Iterable

from pazproperty.domain.exceptions import PazPropertyError


class ForbiddenFieldMutationError(PazPropertyError):
    """Raised when a caller tries to write a field outside its allowed path.

    Lifecycle fields (status, provider, appointment, ...) can only be changed
    through the transition engine; identity fields never change.

    Attributes:
        fields: The forbidden field names found in the payload.
    """

    code = "forbidden_field_mutation"

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = sorted(fields)
        super().__init__(
            f"Fields cannot be modified through this operation: {', '.join(self.fields)}. "
            "Status changes must go through the transition engine."
        )


class ConcurrentModificationError(PazPropertyError):
    """Raised when a lifecycle compare-and-swap finds a newer version.

    This is recoverable: the caller should reload the declaration and decide
    whether the operation still applies.

    Attributes:
        declaration_id: Declaration being modified.
        expected_version: Version the writer based its change on.
    """

    code = "concurrent_modification"

    def __init__(self, declaration_id: str, expected_version: int) -> None:
        self.declaration_id = declaration_id
        self.expected_version = expected_version
        super().__init__(
            f"Concurrent modification detected for declaration {declaration_id}: "
            f"expected version {expected_version}"
        )
