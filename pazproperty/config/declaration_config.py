"""Declaration lifecycle configuration.

Environment Variables (Engine):
- DECLARATION_NOTIFICATION_TIMEOUT_SECONDS: Upper bound on one notification
  dispatch (default: 5.0)
- DECLARATION_TRANSITION_MAX_RETRIES: Reload-and-revalidate attempts after a
  version conflict (default: 3)
- ADMIN_NOTIFICATION_EMAILS: Comma-separated administrator addresses

Environment Variables (Notification):
- NOTIFICATION_WEBHOOK_URL: Dispatcher endpoint; unset means the in-memory stub
- NOTIFICATION_WEBHOOK_TIMEOUT_SECONDS: HTTP timeout per attempt (default: 3.0)
- NOTIFICATION_WEBHOOK_RETRIES: Extra attempts on transport errors / 5xx
  (default: 1)
- NOTIFICATION_WEBHOOK_SECRET: HMAC-SHA256 signing key (optional)
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _get_int_env(key: str, default: int) -> int:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_list_env(key: str) -> tuple[str, ...]:
    """Split a comma-separated variable, dropping blank items."""
    raw = os.environ.get(key, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class DeclarationEngineConfig:
    """Configuration for the transition engine.

    Attributes:
        notification_timeout_seconds: Upper bound on a single notification
            dispatch. A timeout is reported as a non-fatal warning.
        max_retries: How many times a transition reloads and re-validates
            after losing a version compare-and-swap.
        admin_emails: Administrator recipients for admin notifications.
    """

    notification_timeout_seconds: float = 5.0
    max_retries: int = 3
    admin_emails: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.notification_timeout_seconds <= 0:
            raise ValueError(
                "notification_timeout_seconds must be positive, "
                f"got {self.notification_timeout_seconds}"
            )
        if self.max_retries < 0:
            raise ValueError(
                f"max_retries must be non-negative, got {self.max_retries}"
            )

    @classmethod
    def from_environment(cls) -> "DeclarationEngineConfig":
        return cls(
            notification_timeout_seconds=_get_float_env(
                "DECLARATION_NOTIFICATION_TIMEOUT_SECONDS", 5.0
            ),
            max_retries=_get_int_env("DECLARATION_TRANSITION_MAX_RETRIES", 3),
            admin_emails=_get_list_env("ADMIN_NOTIFICATION_EMAILS"),
        )


@dataclass(frozen=True)
class NotificationConfig:
    """Configuration for webhook notification delivery.

    Attributes:
        webhook_url: Dispatcher endpoint; None selects the in-memory stub.
        timeout_seconds: HTTP timeout per attempt.
        retries: Additional attempts after a transport error or 5xx.
        secret: HMAC signing key; when set each request carries an
            ``X-PazProperty-Signature`` header.
    """

    webhook_url: str | None = None
    timeout_seconds: float = 3.0
    retries: int = 1
    secret: str | None = None

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}"
            )
        if self.retries < 0:
            raise ValueError(f"retries must be non-negative, got {self.retries}")
        if self.webhook_url is not None and not self.webhook_url.startswith(
            ("http://", "https://")
        ):
            raise ValueError(f"webhook_url must be http(s), got {self.webhook_url!r}")

    @property
    def enabled(self) -> bool:
        return self.webhook_url is not None

    @classmethod
    def from_environment(cls) -> "NotificationConfig":
        return cls(
            webhook_url=os.environ.get("NOTIFICATION_WEBHOOK_URL") or None,
            timeout_seconds=_get_float_env("NOTIFICATION_WEBHOOK_TIMEOUT_SECONDS", 3.0),
            retries=_get_int_env("NOTIFICATION_WEBHOOK_RETRIES", 1),
            secret=os.environ.get("NOTIFICATION_WEBHOOK_SECRET") or None,
        )


DEFAULT_DECLARATION_ENGINE_CONFIG = DeclarationEngineConfig()

# Short timeout so notification-timeout tests finish quickly
TEST_DECLARATION_ENGINE_CONFIG = DeclarationEngineConfig(
    notification_timeout_seconds=0.2,
    max_retries=3,
    admin_emails=("admin@pazproperty.test",),
)
