"""FastAPI dependency providers."""

from pazproperty.api.dependencies.declarations import (
    get_declaration_store,
    get_engine_config,
    get_identity_provider,
    get_provider_directory,
    get_transition_engine,
    reset_declaration_dependencies,
)

__all__: list[str] = [
    "get_declaration_store",
    "get_engine_config",
    "get_identity_provider",
    "get_provider_directory",
    "get_transition_engine",
    "reset_declaration_dependencies",
]
