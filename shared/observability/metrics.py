"""
Custom Metrics - Content fetches and aggregate hashing.

Provides pre-configured OpenTelemetry instruments:
- Fetch counters by outcome and fetch latency
- Hash request counters by outcome and files-per-request histogram
"""
from dataclasses import dataclass
from typing import Optional
import time

from opentelemetry import metrics
from opentelemetry.metrics import Meter, Counter, Histogram

# Module-level meter cache
_meter: Optional[Meter] = None
_fetch_metrics: Optional["FetchMetrics"] = None
_hash_metrics: Optional["HashMetrics"] = None


def get_meter(name: str = "repo_hash") -> Meter:
    """Get or create the meter for this application."""
    global _meter
    if _meter is None:
        _meter = metrics.get_meter(name, "1.0.0")
    return _meter


@dataclass
class FetchMetrics:
    """Metrics for raw-content fetches."""

    # Fetch count by outcome (ok, not_found, failed)
    fetches_total: Counter

    # Fetch duration histogram
    fetch_duration_ms: Histogram

    def record(self, outcome: str, started_at: float) -> None:
        self.fetches_total.add(1, {"outcome": outcome})
        self.fetch_duration_ms.record(
            (time.perf_counter() - started_at) * 1000, {"outcome": outcome}
        )


@dataclass
class HashMetrics:
    """Metrics for aggregate hash requests."""

    # Hash requests by outcome (ok or the error class name)
    hash_requests_total: Counter

    # Number of files per hash request
    files_per_request: Histogram

    def record(self, outcome: str, file_count: int) -> None:
        self.hash_requests_total.add(1, {"outcome": outcome})
        self.files_per_request.record(file_count)


def create_fetch_metrics(meter: Optional[Meter] = None) -> FetchMetrics:
    """
    Create metrics for content fetches.

    Returns:
        FetchMetrics dataclass with configured metric instruments
    """
    m = meter or get_meter()

    fetches_total = m.create_counter(
        name="repository_fetches_total",
        description="Total number of raw-content fetches",
        unit="1",
    )

    fetch_duration_ms = m.create_histogram(
        name="repository_fetch_duration_ms",
        description="Raw-content fetch duration in milliseconds",
        unit="ms",
    )

    return FetchMetrics(
        fetches_total=fetches_total,
        fetch_duration_ms=fetch_duration_ms,
    )


def create_hash_metrics(meter: Optional[Meter] = None) -> HashMetrics:
    """
    Create metrics for aggregate hashing.

    Returns:
        HashMetrics dataclass with configured metric instruments
    """
    m = meter or get_meter()

    hash_requests_total = m.create_counter(
        name="hash_requests_total",
        description="Total number of aggregate hash requests",
        unit="1",
    )

    files_per_request = m.create_histogram(
        name="hash_files_per_request",
        description="Number of files per hash request",
        unit="1",
    )

    return HashMetrics(
        hash_requests_total=hash_requests_total,
        files_per_request=files_per_request,
    )


def get_fetch_metrics() -> FetchMetrics:
    """Return the process-wide fetch metrics, creating them on first use."""
    global _fetch_metrics
    if _fetch_metrics is None:
        _fetch_metrics = create_fetch_metrics()
    return _fetch_metrics


def get_hash_metrics() -> HashMetrics:
    """Return the process-wide hash metrics, creating them on first use."""
    global _hash_metrics
    if _hash_metrics is None:
        _hash_metrics = create_hash_metrics()
    return _hash_metrics
