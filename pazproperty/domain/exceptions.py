"""Base exception classes for the PazProperty domain layer."""


class PazPropertyError(Exception):
    """Base exception for all domain errors.

    Every domain error carries a stable machine-readable ``code`` alongside
    the human-readable message, so the API layer can surface both.

    Attributes:
        code: Machine-readable error code (snake_case).
    """

    code: str = "domain_error"

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)

    @property
    def message(self) -> str:
        """Human-readable message."""
        return str(self)
