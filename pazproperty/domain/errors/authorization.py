"""Authorization errors raised on role checks."""

from __future__ import annotations

from pazproperty.domain.exceptions import PazPropertyError


class PermissionDeniedError(PazPropertyError):
    """Raised when the caller's role does not permit an operation.

    Attributes:
        operation: Name of the attempted operation.
        role: Role of the caller.
        authenticated: Whether the caller was authenticated at all.
    """

    code = "permission_denied"

    def __init__(self, operation: str, role: str, authenticated: bool = True) -> None:
        self.operation = operation
        self.role = role
        self.authenticated = authenticated
        super().__init__(f"Role '{role}' is not permitted to {operation}")
