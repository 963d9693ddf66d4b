"""
Tracing for the hash and config services.

One tracer per process, a correlation ID that follows a request across
both services (``x-correlation-id``), and helpers the hashing engine uses
to annotate its span.
"""
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional

from opentelemetry import trace
from opentelemetry.trace import Span, StatusCode, Tracer
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

TRACER_NAME = "repo_hash"
TRACER_VERSION = "1.0.0"
CORRELATION_HEADER = "x-correlation-id"

_correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
_propagator = TraceContextTextMapPropagator()
_tracer: Optional[Tracer] = None


def _get_tracer() -> Tracer:
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME, TRACER_VERSION)
    return _tracer


def get_correlation_id() -> str:
    """Return the request's correlation ID, minting one on first use."""
    cid = _correlation_id_var.get()
    if cid is None:
        cid = str(uuid.uuid4())
        _correlation_id_var.set(cid)
    return cid


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    _correlation_id_var.set(None)


@contextmanager
def create_span(name: str, **attributes: Any) -> Iterator[Span]:
    """
    Open an internal span tagged with the correlation ID.

    Usage:
        with create_span("hash_files", file_count=3):
            ...
    """
    attributes["correlation_id"] = get_correlation_id()
    with _get_tracer().start_as_current_span(name, attributes=attributes) as span:
        yield span


def inject_context(headers: Dict[str, str]) -> Dict[str, str]:
    """Add W3C trace headers and the correlation ID to outgoing request headers."""
    _propagator.inject(headers)
    headers[CORRELATION_HEADER] = get_correlation_id()
    return headers


def get_current_span() -> Span:
    return trace.get_current_span()


def add_span_attributes(**attributes: Any) -> None:
    span = get_current_span()
    if span.is_recording():
        span.set_attributes(attributes)


def record_exception(exception: Exception) -> None:
    """Mark the current span failed with ``exception``."""
    span = get_current_span()
    if span.is_recording():
        span.record_exception(exception)
        span.set_status(StatusCode.ERROR, str(exception))
