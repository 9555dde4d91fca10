"""Prometheus metrics infrastructure.

Operational metrics only: HTTP traffic, committed and rejected lifecycle
transitions, and notification delivery failures.

Labels: service, environment on every series.
"""

import os
import threading

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

_collector_lock = threading.Lock()

# Request duration buckets, 10ms to 10s
DEFAULT_HISTOGRAM_BUCKETS = (0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)


class MetricsCollector:
    """Collects and manages Prometheus metrics.

    Attributes:
        http_request_duration_seconds: Histogram for request latency.
        http_requests_total: Counter for all HTTP requests.
        http_requests_failed_total: Counter for 4xx/5xx responses.
        declaration_transitions_total: Committed transitions by target status.
        declaration_transition_rejections_total: Rejected lifecycle operations
            by error code.
        notification_delivery_failures_total: Failed or timed-out
            notifications by event type.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize the collector.

        Args:
            registry: Optional custom registry for testing isolation.
        """
        self._registry = registry or CollectorRegistry()
        self.histogram_buckets = DEFAULT_HISTOGRAM_BUCKETS

        self._environment = os.environ.get("ENVIRONMENT", "development")
        self._service_name = os.environ.get("SERVICE_NAME", "pazproperty-api")

        self.http_request_duration_seconds = Histogram(
            name="http_request_duration_seconds",
            documentation="HTTP request duration in seconds",
            labelnames=["service", "environment", "method", "endpoint"],
            buckets=self.histogram_buckets,
            registry=self._registry,
        )

        self.http_requests_total = Counter(
            name="http_requests_total",
            documentation="Total HTTP requests",
            labelnames=["service", "environment", "method", "endpoint", "status"],
            registry=self._registry,
        )

        self.http_requests_failed_total = Counter(
            name="http_requests_failed_total",
            documentation="Total failed HTTP requests (4xx, 5xx)",
            labelnames=[
                "service",
                "environment",
                "method",
                "endpoint",
                "status",
                "error_type",
            ],
            registry=self._registry,
        )

        self.declaration_transitions_total = Counter(
            name="declaration_transitions_total",
            documentation="Committed declaration status transitions",
            labelnames=["service", "environment", "to_status"],
            registry=self._registry,
        )

        self.declaration_transition_rejections_total = Counter(
            name="declaration_transition_rejections_total",
            documentation="Rejected declaration lifecycle operations",
            labelnames=["service", "environment", "code"],
            registry=self._registry,
        )

        self.notification_delivery_failures_total = Counter(
            name="notification_delivery_failures_total",
            documentation="Notifications that failed or timed out",
            labelnames=["service", "environment", "event_type"],
            registry=self._registry,
        )

    def observe_request_duration(
        self, method: str, endpoint: str, duration: float
    ) -> None:
        """Record a request duration observation."""
        self.http_request_duration_seconds.labels(
            service=self._service_name,
            environment=self._environment,
            method=method,
            endpoint=endpoint,
        ).observe(duration)

    def increment_requests(self, method: str, endpoint: str, status: str) -> None:
        self.http_requests_total.labels(
            service=self._service_name,
            environment=self._environment,
            method=method,
            endpoint=endpoint,
            status=status,
        ).inc()

    def increment_failed_requests(
        self, method: str, endpoint: str, status: str, error_type: str = "http_error"
    ) -> None:
        """Increment failed requests counter.

        Args:
            method: HTTP method.
            endpoint: Request endpoint.
            status: HTTP status code as string (4xx or 5xx).
            error_type: client_error, server_error, ...
        """
        self.http_requests_failed_total.labels(
            service=self._service_name,
            environment=self._environment,
            method=method,
            endpoint=endpoint,
            status=status,
            error_type=error_type,
        ).inc()

    def increment_transitions(self, to_status: str) -> None:
        self.declaration_transitions_total.labels(
            service=self._service_name,
            environment=self._environment,
            to_status=to_status,
        ).inc()

    def increment_transition_rejections(self, code: str) -> None:
        self.declaration_transition_rejections_total.labels(
            service=self._service_name,
            environment=self._environment,
            code=code,
        ).inc()

    def increment_notification_failures(self, event_type: str) -> None:
        self.notification_delivery_failures_total.labels(
            service=self._service_name,
            environment=self._environment,
            event_type=event_type,
        ).inc()

    def get_registry(self) -> CollectorRegistry:
        return self._registry


_metrics_collector: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get the singleton MetricsCollector instance (thread-safe)."""
    global _metrics_collector
    if _metrics_collector is None:
        with _collector_lock:
            if _metrics_collector is None:
                _metrics_collector = MetricsCollector()
    return _metrics_collector


def generate_metrics() -> bytes:
    """Generate Prometheus metrics in exposition format."""
    return generate_latest(get_metrics_collector().get_registry())


def reset_metrics_collector() -> None:
    """Reset the singleton collector (for testing only)."""
    global _metrics_collector
    with _collector_lock:
        _metrics_collector = None
