"""Configuration for the declarations service.

Available Configurations:
- DeclarationEngineConfig: transition engine timeouts, retries, admin recipients
- NotificationConfig: webhook notification delivery
"""

from pazproperty.config.declaration_config import (
    DEFAULT_DECLARATION_ENGINE_CONFIG,
    TEST_DECLARATION_ENGINE_CONFIG,
    DeclarationEngineConfig,
    NotificationConfig,
)

__all__ = [
    "DeclarationEngineConfig",
    "NotificationConfig",
    "DEFAULT_DECLARATION_ENGINE_CONFIG",
    "TEST_DECLARATION_ENGINE_CONFIG",
]
