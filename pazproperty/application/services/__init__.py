"""Application services: provider directory, declaration store and the
transition engine."""

from pazproperty.application.services.declaration_store import DeclarationStore
from pazproperty.application.services.provider_directory import ProviderDirectory
from pazproperty.application.services.transition_engine import (
    TransitionContext,
    TransitionEngine,
    TransitionResult,
)

__all__: list[str] = [
    "DeclarationStore",
    "ProviderDirectory",
    "TransitionContext",
    "TransitionEngine",
    "TransitionResult",
]
