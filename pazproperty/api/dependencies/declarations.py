"""Declaration API dependencies.

Services are singletons built on the ports selected by
``pazproperty.bootstrap.declarations``. Tests replace them through
``app.dependency_overrides`` and call ``reset_declaration_dependencies()``.
"""

from pazproperty.application.ports.identity_provider import IdentityProviderProtocol
from pazproperty.application.services.declaration_store import DeclarationStore
from pazproperty.application.services.provider_directory import ProviderDirectory
from pazproperty.application.services.transition_engine import TransitionEngine
from pazproperty.bootstrap import declarations as bootstrap
from pazproperty.config.declaration_config import DeclarationEngineConfig

_engine_config: DeclarationEngineConfig | None = None
_declaration_store: DeclarationStore | None = None
_provider_directory: ProviderDirectory | None = None
_transition_engine: TransitionEngine | None = None


def get_engine_config() -> DeclarationEngineConfig:
    global _engine_config
    if _engine_config is None:
        _engine_config = DeclarationEngineConfig.from_environment()
    return _engine_config


def get_declaration_store() -> DeclarationStore:
    global _declaration_store
    if _declaration_store is None:
        _declaration_store = DeclarationStore(bootstrap.get_repositories().declarations)
    return _declaration_store


def get_provider_directory() -> ProviderDirectory:
    global _provider_directory
    if _provider_directory is None:
        _provider_directory = ProviderDirectory(bootstrap.get_repositories().providers)
    return _provider_directory


def get_transition_engine() -> TransitionEngine:
    """Get the transition engine.

    There must be exactly one per process: it owns the per-declaration locks.
    """
    global _transition_engine
    if _transition_engine is None:
        repositories = bootstrap.get_repositories()
        _transition_engine = TransitionEngine(
            store=get_declaration_store(),
            providers=get_provider_directory(),
            history=repositories.history,
            notification_log=repositories.notification_log,
            notifier=bootstrap.get_notification_port(),
            config=get_engine_config(),
        )
    return _transition_engine


def get_identity_provider() -> IdentityProviderProtocol:
    return bootstrap.get_identity_provider()


def reset_declaration_dependencies() -> None:
    """Reset all singletons (testing cleanup)."""
    global _engine_config, _declaration_store, _provider_directory
    global _transition_engine
    _engine_config = None
    _declaration_store = None
    _provider_directory = None
    _transition_engine = None
    bootstrap.reset_declaration_bootstrap()
