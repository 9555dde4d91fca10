"""Unit tests for the logging and metrics middleware."""

from fastapi.testclient import TestClient

from pazproperty.api.middleware.logging_middleware import CORRELATION_HEADER
from pazproperty.infrastructure.monitoring.metrics import get_metrics_collector
from tests.helpers import ADMIN_HEADERS, counter_value


class TestLoggingMiddleware:
    def test_generates_correlation_id(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.headers[CORRELATION_HEADER]

    def test_distinct_requests_get_distinct_ids(self, client: TestClient) -> None:
        first = client.get("/health").headers[CORRELATION_HEADER]
        second = client.get("/health").headers[CORRELATION_HEADER]
        assert first != second


class TestMetricsMiddleware:
    def test_endpoint_label_is_route_template(self, client: TestClient) -> None:
        client.get("/declarations/unknown-1", headers=ADMIN_HEADERS)
        client.get("/declarations/unknown-2", headers=ADMIN_HEADERS)

        collector = get_metrics_collector()
        assert (
            counter_value(
                collector,
                "http_requests_total",
                endpoint="/declarations/{declaration_id}",
                status="404",
            )
            == 2
        )

    def test_failures_counted(self, client: TestClient) -> None:
        client.get("/providers")

        collector = get_metrics_collector()
        assert (
            counter_value(collector, "http_requests_failed_total", endpoint="/providers")
            == 1
        )
