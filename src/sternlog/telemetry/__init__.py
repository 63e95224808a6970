"""
sternlog telemetry - trace context storage and log correlation.

Components:
    - span_context: SpanContext value type
    - context_store: TTL-bounded store of span context per execution context
    - mixin: per-record trace field injection and OpenTelemetry lookup
"""

from .context_store import (
    TraceContextEntry,
    TraceContextStore,
    clear_trace_context,
    destroy_trace_context_store,
    get_default_store,
    get_trace_context,
    get_trace_context_stats,
    set_trace_context,
)
from .mixin import (
    TraceContextProcessor,
    create_trace_mixin,
    current_context_id,
    get_active_otel_context,
)
from .span_context import SpanContext

__all__ = [
    "SpanContext",
    "TraceContextEntry",
    "TraceContextStore",
    "TraceContextProcessor",
    "clear_trace_context",
    "create_trace_mixin",
    "current_context_id",
    "destroy_trace_context_store",
    "get_active_otel_context",
    "get_default_store",
    "get_trace_context",
    "get_trace_context_stats",
    "set_trace_context",
]
