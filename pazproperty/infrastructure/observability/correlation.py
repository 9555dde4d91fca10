"""Correlation id management using contextvars.

A correlation id is set once per HTTP request by the logging middleware and
is then visible to every service log line emitted while handling it,
including across awaits.
"""

from contextvars import ContextVar
from typing import Any
from uuid import uuid4

# Empty string means "no request context"
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Generate a new correlation id (UUID4)."""
    return str(uuid4())


def get_correlation_id() -> str:
    """Get the current correlation id, or an empty string if none is set."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation id for the current context."""
    _correlation_id.set(correlation_id)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding correlation_id to every log entry."""
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
