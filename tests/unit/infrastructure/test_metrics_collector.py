"""Unit tests for the Prometheus metrics collector."""

from prometheus_client import CollectorRegistry

from pazproperty.infrastructure.monitoring.metrics import (
    MetricsCollector,
    generate_metrics,
    get_metrics_collector,
    reset_metrics_collector,
)
from tests.helpers import counter_value


class TestMetricsCollector:
    def test_domain_counters(self) -> None:
        metrics = MetricsCollector(registry=CollectorRegistry())
        metrics.increment_transitions("Resolved")
        metrics.increment_transitions("Resolved")
        metrics.increment_transition_rejections("invalid_transition")
        metrics.increment_notification_failures("quote_ready")

        assert counter_value(
            metrics, "declaration_transitions_total", to_status="Resolved"
        ) == 2.0
        assert counter_value(
            metrics,
            "declaration_transition_rejections_total",
            code="invalid_transition",
        ) == 1.0
        assert counter_value(
            metrics, "notification_delivery_failures_total", event_type="quote_ready"
        ) == 1.0

    def test_service_label(self, monkeypatch) -> None:
        monkeypatch.setenv("SERVICE_NAME", "pazproperty-test")
        metrics = MetricsCollector(registry=CollectorRegistry())
        metrics.increment_requests("GET", "/health", "200")
        assert counter_value(
            metrics, "http_requests_total", service="pazproperty-test"
        ) == 1.0

    def test_singleton_and_reset(self) -> None:
        reset_metrics_collector()
        first = get_metrics_collector()
        assert get_metrics_collector() is first
        reset_metrics_collector()
        assert get_metrics_collector() is not first

    def test_exposition_format(self) -> None:
        reset_metrics_collector()
        get_metrics_collector().increment_transitions("Transmitted")
        output = generate_metrics().decode()
        assert "declaration_transitions_total" in output
        assert 'to_status="Transmitted"' in output
