"""Input validation errors.

Raised when a caller supplies malformed or missing input. These are
recoverable: the caller can correct the input and retry.
"""

from __future__ import annotations

from collections.abc import Sequence

from pazproperty.domain.exceptions import PazPropertyError


class ValidationError(PazPropertyError):
    """Raised when input is missing, empty or malformed.

    Attributes:
        reason: Short machine-readable reason (e.g. "missing_fields").
        fields: Names of the offending fields, in the order they were checked.
    """

    code = "validation_error"

    def __init__(
        self,
        reason: str,
        fields: Sequence[str] = (),
        message: str | None = None,
    ) -> None:
        """Initialize validation error.

        Args:
            reason: Machine-readable reason.
            fields: Offending field names.
            message: Optional human message (derived from reason/fields otherwise).
        """
        self.reason = reason
        self.fields = list(fields)
        if message is None:
            message = reason
            if self.fields:
                message = f"{reason}: {', '.join(self.fields)}"
        super().__init__(message)

    @classmethod
    def missing_fields(cls, fields: Sequence[str]) -> ValidationError:
        return cls(
            "missing_fields",
            fields,
            message=f"Missing required fields: {', '.join(fields)}",
        )
