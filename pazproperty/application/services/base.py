"""Base service logging mixin.

Usage:
    from pazproperty.application.services.base import LoggingMixin

    class MyService(LoggingMixin):
        def __init__(self, dependency: SomePort) -> None:
            self._dependency = dependency
            self._init_logger()

        async def do_something(self) -> None:
            log = self._log_operation("do_something", item_id="123")
            log.info("operation_started")
"""

import structlog

from pazproperty.infrastructure.observability.correlation import get_correlation_id


class LoggingMixin:
    """Mixin providing structured logging for services.

    The logger is bound with the service class name and a component label.
    Each operation logger additionally carries the operation name and the
    request correlation id.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "declarations") -> None:
        """Initialize the logger with service name binding.

        Should be called in __init__ after setting up dependencies.
        """
        self._log = structlog.get_logger().bind(
            service=self.__class__.__name__,
            component=component,
        )

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Create an operation-scoped logger with correlation id.

        Example:
            log = self._log_operation("assign_provider", declaration_id=d_id)
            log.info("assignment_started")
        """
        return self._log.bind(
            operation=operation,
            correlation_id=get_correlation_id(),
            **context,
        )
