"""
Trace-context injection into log records.

A mixin is a zero-argument callable returning the fields to merge into each
record. ``TraceContextProcessor`` adapts a mixin to the structlog processor
protocol so it runs once per emitted event.

Correlation modes:
    - manual: the application stores span context per execution context
      (``SternLogger.set_trace_context``) and the mixin reads it back
    - auto: an active-span provider (for example ``get_active_otel_context``)
      is queried first; if it raises, the manual store is used instead
"""

import asyncio
import os
import threading
from typing import Any, Callable, Dict, MutableMapping, Optional

from opentelemetry import trace

from sternlog.telemetry.context_store import TraceContextStore, get_default_store
from sternlog.telemetry.span_context import SpanContext

TraceMixin = Callable[[], Dict[str, Any]]
ActiveContextProvider = Callable[[], Optional[SpanContext]]


def current_context_id() -> str:
    """
    Identify the current execution context.

    Combines the process id and thread ident, plus the id of the running
    asyncio task when called from inside one.
    """
    context_id = f"{os.getpid()}-{threading.get_ident()}"
    try:
        task = asyncio.current_task()
    except RuntimeError:
        task = None
    if task is not None:
        context_id = f"{context_id}-{id(task)}"
    return context_id


def get_active_otel_context() -> Optional[SpanContext]:
    """Return the active OpenTelemetry span as a ``SpanContext``, if any."""
    try:
        span_context = trace.get_current_span().get_span_context()
        if not span_context.is_valid:
            return None

        trace_state = span_context.trace_state.to_header() or None
        return SpanContext(
            trace_id=format(span_context.trace_id, "032x"),
            span_id=format(span_context.span_id, "016x"),
            trace_flags=format(int(span_context.trace_flags), "02x"),
            trace_state=trace_state,
        )
    except Exception:
        # OpenTelemetry not initialized or misconfigured
        return None


def create_trace_mixin(
    get_current_context_id: Callable[[], str],
    get_active_context: Optional[ActiveContextProvider] = None,
    store: Optional[TraceContextStore] = None,
) -> TraceMixin:
    """
    Create a mixin that returns trace fields for the current context.

    Args:
        get_current_context_id: Returns the execution-context id used as the
            store key
        get_active_context: Optional active-span provider; any exception it
            raises falls back to the store
        store: Trace context store, defaults to the module-level store

    Returns:
        Callable producing ``trace_id``/``span_id`` and, when non-empty,
        ``trace_flags``/``trace_state``; an empty dict without context.
    """
    context_store = store if store is not None else get_default_store()

    def mixin() -> Dict[str, Any]:
        if get_active_context is not None:
            try:
                span_context = get_active_context()
            except Exception:
                span_context = context_store.get(get_current_context_id())
        else:
            span_context = context_store.get(get_current_context_id())

        if span_context is None:
            return {}

        fields: Dict[str, Any] = {
            "trace_id": span_context.trace_id,
            "span_id": span_context.span_id,
        }
        if span_context.trace_flags:
            fields["trace_flags"] = span_context.trace_flags
        if span_context.trace_state:
            fields["trace_state"] = span_context.trace_state
        return fields

    return mixin


class TraceContextProcessor:
    """structlog processor merging mixin fields; call-site fields win."""

    def __init__(self, mixin: TraceMixin):
        self.mixin = mixin

    def __call__(
        self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        for key, value in self.mixin().items():
            event_dict.setdefault(key, value)
        return event_dict
