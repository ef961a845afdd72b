"""Context propagation for trace correlation in log records."""

from __future__ import annotations

from contextvars import ContextVar, Token
from uuid import uuid4


trace_context: ContextVar[dict | None] = ContextVar("trace_context", default=None)


def generate_trace_id() -> str:
    """Generate a 32-char hex trace ID."""
    return uuid4().hex


def generate_span_id() -> str:
    """Generate a 16-char hex span ID."""
    return uuid4().hex[:16]


def get_trace_context() -> dict:
    """Get current trace context with trace_id and span_id.

    Outside any span a run-wide pair of ids is generated once so log lines
    from the same execution context still correlate.
    """
    ctx = trace_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"trace_id": generate_trace_id(), "span_id": generate_span_id()}
        trace_context.set(ctx)
    return ctx


def bind_span(trace_id: str, span_id: str) -> Token:
    """Point the context at an active span; pass the token to ``trace_context.reset``."""
    ctx = trace_context.get() or {}
    return trace_context.set({**ctx, "trace_id": trace_id, "span_id": span_id})
