"""HTTP middleware: correlation-aware request logging and metrics."""

from pazproperty.api.middleware.logging_middleware import (
    CORRELATION_HEADER,
    LoggingMiddleware,
)
from pazproperty.api.middleware.metrics_middleware import MetricsMiddleware

__all__: list[str] = ["CORRELATION_HEADER", "LoggingMiddleware", "MetricsMiddleware"]
