"""
HTTP middleware for correlation IDs and Prometheus request metrics.
"""
import time
from dataclasses import dataclass

from fastapi import Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from shared.observability.logging_config import bind_context, clear_context
from shared.observability.tracing import (
    CORRELATION_HEADER,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


@dataclass
class HttpMetrics:
    """Prometheus request metrics for one service."""
    requests_total: Counter
    request_duration_seconds: Histogram


def create_http_metrics(prefix: str) -> HttpMetrics:
    """
    Register request counters for a service.

    Call once per process per prefix; prometheus_client rejects duplicate
    metric names on the default registry.
    """
    return HttpMetrics(
        requests_total=Counter(
            f"{prefix}_requests_total",
            f"Total {prefix} API requests",
            ["endpoint", "method", "status"],
        ),
        request_duration_seconds=Histogram(
            f"{prefix}_request_duration_seconds",
            f"{prefix} request duration in seconds",
            ["endpoint"],
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
        ),
    )


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Binds a correlation ID to the request's logging context.

    Honours an incoming ``x-correlation-id`` header and echoes the ID back
    on the response.
    """

    async def dispatch(self, request: Request, call_next):
        incoming = request.headers.get(CORRELATION_HEADER)
        if incoming:
            set_correlation_id(incoming)
        correlation_id = get_correlation_id()
        bind_context(correlation_id=correlation_id, path=request.url.path)
        try:
            response = await call_next(request)
        finally:
            clear_context()
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class RequestMetricsMiddleware(BaseHTTPMiddleware):
    """Record request count and duration for all endpoints."""

    def __init__(self, app, metrics: HttpMetrics):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next):
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        endpoint = request.url.path
        self.metrics.requests_total.labels(
            endpoint=endpoint,
            method=request.method,
            status=response.status_code,
        ).inc()
        self.metrics.request_duration_seconds.labels(endpoint=endpoint).observe(duration)

        return response


async def prometheus_metrics():
    """Prometheus text exposition of the default registry."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
