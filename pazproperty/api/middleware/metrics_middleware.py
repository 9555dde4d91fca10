"""Metrics middleware recording HTTP request metrics to Prometheus."""

import time
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from pazproperty.infrastructure.monitoring.metrics import get_metrics_collector

_CLIENT_ERROR_TYPES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    409: "conflict",
    422: "unprocessable",
}


def _classify_error_type(status_code: int) -> str:
    if 400 <= status_code < 500:
        return _CLIENT_ERROR_TYPES.get(status_code, "client_error")
    if status_code >= 500:
        return "internal_error" if status_code == 500 else "server_error"
    return "unknown"


def _endpoint_label(request: Request) -> str:
    """Route template (``/declarations/{declaration_id}``) to bound cardinality."""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or request.url.path


class MetricsMiddleware(BaseHTTPMiddleware):
    """Records request duration, totals and 4xx/5xx failures."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        method = request.method
        endpoint = _endpoint_label(request)
        status = str(response.status_code)

        collector = get_metrics_collector()
        collector.observe_request_duration(
            method=method, endpoint=endpoint, duration=duration
        )
        collector.increment_requests(method=method, endpoint=endpoint, status=status)
        if response.status_code >= 400:
            collector.increment_failed_requests(
                method=method,
                endpoint=endpoint,
                status=status,
                error_type=_classify_error_type(response.status_code),
            )
        return response
