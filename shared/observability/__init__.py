"""
Observability for the repository hash services: structlog logging,
OpenTelemetry tracing with correlation IDs, and fetch/hash metrics.

Usage:
    from shared.observability import setup_observability

    setup_observability(service_name="hash_service")
"""
from .setup import setup_observability, shutdown_observability
from .metrics import (
    create_fetch_metrics,
    create_hash_metrics,
    get_fetch_metrics,
    get_hash_metrics,
    FetchMetrics,
    HashMetrics,
)
from .tracing import (
    CORRELATION_HEADER,
    create_span,
    inject_context,
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
    add_span_attributes,
    record_exception,
)
from .logging_config import (
    configure_logging,
    bind_context,
    clear_context,
)

__all__ = [
    # Setup
    "setup_observability",
    "shutdown_observability",
    # Metrics
    "create_fetch_metrics",
    "create_hash_metrics",
    "get_fetch_metrics",
    "get_hash_metrics",
    "FetchMetrics",
    "HashMetrics",
    # Tracing
    "CORRELATION_HEADER",
    "create_span",
    "inject_context",
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "add_span_attributes",
    "record_exception",
    # Logging
    "configure_logging",
    "bind_context",
    "clear_context",
]
