"""Prometheus metrics for index builds and searches."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


INDEX_BUILD_LATENCY = Histogram(
    "cercami_index_build_seconds",
    "Time spent building an index from a corpus",
    ["backend"],
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

SEARCH_LATENCY = Histogram(
    "cercami_search_latency_seconds",
    "Search query latency",
    ["backend"],
    buckets=(0.00001, 0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1),
)

SEARCH_COUNT = Counter(
    "cercami_searches_total",
    "Total searches by outcome",
    ["backend", "outcome"],
)

INDEX_TERM_COUNT = Gauge(
    "cercami_index_term_count",
    "Distinct terms in the published index",
    ["backend"],
)

INDEX_DOCUMENT_COUNT = Gauge(
    "cercami_index_document_count",
    "Documents in the published index",
    ["backend"],
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()
