"""
Process-wide observability for the hash and config services.

``setup_observability`` runs from each service's lifespan. Logging is always
configured; OTLP trace and metric export is installed unless
``ENABLE_OBSERVABILITY`` is ``false``.
"""
import logging
import os
from typing import List, Optional

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .logging_config import configure_logging

logger = logging.getLogger(__name__)

METRIC_EXPORT_INTERVAL_MS = 30000

_providers: List = []
_initialized = False


def setup_observability(
    service_name: str,
    service_version: str = "1.0.0",
    otlp_endpoint: Optional[str] = None,
    log_level: str = "INFO",
    json_logs: bool = True,
) -> None:
    """Configure logging and, when enabled, OTLP export. Repeat calls are no-ops."""
    global _initialized
    if _initialized:
        return
    _initialized = True

    configure_logging(service_name, log_level=log_level, json_output=json_logs)

    if os.getenv("ENABLE_OBSERVABILITY", "true").lower() != "true":
        logger.info("OTLP export disabled")
        return

    endpoint = otlp_endpoint or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317")
    resource = Resource.create({SERVICE_NAME: service_name, SERVICE_VERSION: service_version})

    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True))
    )
    trace.set_tracer_provider(tracer_provider)

    reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=endpoint, insecure=True),
        export_interval_millis=METRIC_EXPORT_INTERVAL_MS,
    )
    meter_provider = MeterProvider(resource=resource, metric_readers=[reader])
    metrics.set_meter_provider(meter_provider)

    _providers.extend([tracer_provider, meter_provider])
    logger.info(f"Exporting traces and metrics for {service_name} to {endpoint}")


def shutdown_observability() -> None:
    """Flush and stop the exporters installed by ``setup_observability``."""
    global _initialized
    while _providers:
        _providers.pop().shutdown()
    _initialized = False
