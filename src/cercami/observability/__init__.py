"""Observability module for structured logging, tracing, and metrics."""

from cercami.observability.context import get_trace_context, trace_context
from cercami.observability.logging import JsonFormatter, configure_logging
from cercami.observability.metrics import (
    INDEX_BUILD_LATENCY,
    INDEX_DOCUMENT_COUNT,
    INDEX_TERM_COUNT,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    get_metrics,
    track_latency,
)
from cercami.observability.tracing import (
    configure_trace_exporter,
    create_span,
    get_tracer,
    init_tracing,
    set_tracing_enabled,
    traced,
)


__all__ = [
    "INDEX_BUILD_LATENCY",
    "INDEX_DOCUMENT_COUNT",
    "INDEX_TERM_COUNT",
    "SEARCH_COUNT",
    "SEARCH_LATENCY",
    "JsonFormatter",
    "configure_logging",
    "configure_trace_exporter",
    "create_span",
    "get_metrics",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "set_tracing_enabled",
    "trace_context",
    "track_latency",
    "traced",
]
