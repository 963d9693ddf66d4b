"""
Structured logging for the hash and config services.

Modules log through ``logging.getLogger(__name__)``; the root handler
renders every record through structlog, adding the service name, the
request's correlation ID and, inside a span, the trace and span IDs.
"""
import logging
import sys

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

from .tracing import get_correlation_id, get_current_span


def configure_logging(service_name: str, log_level: str = "INFO", json_output: bool = True) -> None:
    """
    Route the root logger through structlog.

    Args:
        service_name: Value of the ``service`` field on every entry
        log_level: Root logging level name
        json_output: JSON lines (True) or colored console output (False)
    """
    def add_service(logger, method_name, event_dict):
        event_dict["service"] = service_name
        return event_dict

    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_service,
        _add_request_ids,
        structlog.processors.format_exc_info,
    ]
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=pre_chain,
    ))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # aiohttp logs every client connection at DEBUG
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("opentelemetry").setLevel(logging.WARNING)


def _add_request_ids(logger, method_name, event_dict):
    event_dict.setdefault("correlation_id", get_correlation_id())

    ctx = get_current_span().get_span_context()
    if ctx.is_valid:
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def bind_context(**kwargs) -> None:
    """Attach fields to every log entry for the rest of the request."""
    bind_contextvars(**kwargs)


def clear_context() -> None:
    clear_contextvars()
