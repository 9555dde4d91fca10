"""Test helpers for PazProperty tests.

Helpers:
    FakeClock: Controllable clock for the transition engine
    make_provider / declaration_payload: Test data factories
    TOKENS / *_HEADERS: Bearer tokens for API tests

Usage:
    from tests.helpers import FakeClock, declaration_payload
"""

from tests.helpers.factories import (
    ADMIN,
    CUSTOMER,
    OTHER_PROVIDER_USER,
    PROVIDER_USER,
    declaration_payload,
    in_days,
    make_provider,
)
from tests.helpers.fake_clock import FakeClock
from tests.helpers.metrics import counter_value
from tests.helpers.tokens import (
    ADMIN_HEADERS,
    CUSTOMER_HEADERS,
    OTHER_PROVIDER_HEADERS,
    PROVIDER_HEADERS,
    TOKENS,
    bearer,
)

__all__ = [
    "ADMIN",
    "ADMIN_HEADERS",
    "CUSTOMER",
    "CUSTOMER_HEADERS",
    "FakeClock",
    "OTHER_PROVIDER_HEADERS",
    "OTHER_PROVIDER_USER",
    "PROVIDER_HEADERS",
    "PROVIDER_USER",
    "TOKENS",
    "bearer",
    "counter_value",
    "declaration_payload",
    "in_days",
    "make_provider",
]
