"""OpenTelemetry tracing for the build and search phases."""

from __future__ import annotations

from contextlib import contextmanager, nullcontext
import logging
import sys
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor
from opentelemetry.trace import SpanKind, Status, StatusCode

from cercami.observability.context import bind_span, trace_context


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.trace import Span, Tracer

logger = logging.getLogger(__name__)

_tracer_holder: dict[str, Any] = {"tracer": None, "provider": None, "exporter": None, "enabled": False}


def init_tracing(
    service_name: str = "cercami",
    resource_attributes: dict[str, str] | None = None,
) -> TracerProvider:
    """Initialize OpenTelemetry tracing once per process and return the provider."""
    existing = _tracer_holder["provider"]
    if isinstance(existing, TracerProvider):
        return existing
    attributes = {"service.name": service_name}
    if resource_attributes:
        attributes.update(resource_attributes)
    resource = Resource.create(attributes)
    provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(provider)
    _tracer_holder["provider"] = provider
    _tracer_holder["tracer"] = provider.get_tracer(__name__)
    logger.debug("Tracing initialized for service: %s", service_name)
    return provider


def configure_trace_exporter(exporter: str, provider: TracerProvider | None = None) -> None:
    """Attach a span exporter to the tracer provider, at most once per process.

    ``console`` writes each finished span as JSON to stderr. ``none`` keeps
    spans in process for whatever processors callers attach themselves.
    """
    if exporter == "none":
        return
    if exporter != "console":
        raise ValueError(f"Unknown trace exporter '{exporter}'")
    if _tracer_holder["exporter"] is not None:
        return

    active_provider = provider or _tracer_holder["provider"] or init_tracing()
    active_provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
    _tracer_holder["exporter"] = exporter
    logger.debug("Span export enabled (%s)", exporter)


def set_tracing_enabled(enabled: bool) -> None:
    """Turn span creation on or off for subsequent ``traced`` calls."""
    _tracer_holder["enabled"] = enabled


def get_tracer() -> Tracer:
    """Get the configured tracer, falling back to the global provider."""
    if _tracer_holder["tracer"] is None:
        _tracer_holder["tracer"] = trace.get_tracer(__name__)
    return _tracer_holder["tracer"]


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
) -> Generator[Span, None, None]:
    """Create a traced span with context propagation."""
    tracer = get_tracer()
    with tracer.start_as_current_span(name, kind=kind, record_exception=False, set_status_on_exception=False) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)

        ctx = span.get_span_context()
        token = bind_span(format(ctx.trace_id, "032x"), format(ctx.span_id, "016x"))

        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.record_exception(exc)
            raise
        finally:
            trace_context.reset(token)


def traced(name: str, attributes: dict[str, Any] | None = None):
    """Return ``create_span(...)`` when tracing is enabled, else a null context."""
    if not _tracer_holder["enabled"]:
        return nullcontext(None)
    return create_span(name, attributes=attributes)
