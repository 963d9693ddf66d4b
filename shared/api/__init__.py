"""FastAPI plumbing shared by the hash and config services."""
from .errors import register_error_handlers, error_response
from .middleware import (
    CorrelationIdMiddleware,
    RequestMetricsMiddleware,
    HttpMetrics,
    create_http_metrics,
    prometheus_metrics,
)

__all__ = [
    "register_error_handlers",
    "error_response",
    "CorrelationIdMiddleware",
    "RequestMetricsMiddleware",
    "HttpMetrics",
    "create_http_metrics",
    "prometheus_metrics",
]
