"""
Bounded, TTL-expiring storage of trace context per execution context.

Entries expire two ways: lazily when ``get`` finds a stale entry, and through
a periodic sweep that removes entries nobody reads again. The sweep runs on a
daemon thread so it never keeps the interpreter alive.

Example:
    >>> store = TraceContextStore(max_size=100, ttl_ms=60_000)
    >>> store.set("1234-5678", SpanContext(trace_id="t1", span_id="s1"))
    >>> store.get("1234-5678").trace_id
    't1'
    >>> store.destroy()
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from sternlog.core.constants import (
    DEFAULT_TRACE_CONTEXT_CLEANUP_INTERVAL_MS,
    DEFAULT_TRACE_CONTEXT_MAX_SIZE,
    DEFAULT_TRACE_CONTEXT_TTL_MS,
    MILLISECONDS_PER_SECOND,
)
from sternlog.telemetry.span_context import SpanContext


@dataclass
class TraceContextEntry:
    """Stored span context with its creation and last-read times (ms)."""

    context: SpanContext
    timestamp: float
    last_accessed: float


class TraceContextStore:
    """
    Map of execution-context id to span context with size and TTL limits.

    Args:
        max_size: Maximum number of stored entries
        ttl_ms: Age after which an entry is considered expired
        cleanup_interval_ms: Period of the background expiry sweep
        clock: Monotonic clock returning seconds, injectable for tests

    The store never raises; callers validate span context before ``set``.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_TRACE_CONTEXT_MAX_SIZE,
        ttl_ms: float = DEFAULT_TRACE_CONTEXT_TTL_MS,
        cleanup_interval_ms: float = DEFAULT_TRACE_CONTEXT_CLEANUP_INTERVAL_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_size = max_size
        self.ttl_ms = ttl_ms
        self.cleanup_interval_ms = cleanup_interval_ms
        self._clock = clock
        self._contexts: Dict[str, TraceContextEntry] = {}
        self._lock = threading.RLock()
        self._stop_event: Optional[threading.Event] = None
        self._sweeper: Optional[threading.Thread] = None
        self._start_sweeper()

    def _now(self) -> float:
        return self._clock() * MILLISECONDS_PER_SECOND

    def set(self, context_id: str, context: SpanContext) -> None:
        """Store ``context`` for ``context_id``, evicting one entry if full."""
        self._start_sweeper()
        now = self._now()
        with self._lock:
            if len(self._contexts) >= self.max_size:
                self._evict_oldest()
            self._contexts[context_id] = TraceContextEntry(
                context=context, timestamp=now, last_accessed=now
            )

    def get(self, context_id: str) -> Optional[SpanContext]:
        """Return the live context for ``context_id`` or None."""
        with self._lock:
            entry = self._contexts.get(context_id)
            if entry is None:
                return None

            now = self._now()
            if now - entry.timestamp > self.ttl_ms:
                del self._contexts[context_id]
                return None

            entry.last_accessed = now
            return entry.context

    def clear(self, context_id: str) -> None:
        with self._lock:
            self._contexts.pop(context_id, None)

    def clear_all(self) -> None:
        with self._lock:
            self._contexts.clear()

    def size(self) -> int:
        """Raw entry count, including expired entries not yet swept."""
        with self._lock:
            return len(self._contexts)

    def stats(self) -> Dict[str, int]:
        return {"size": self.size()}

    def sweep(self) -> int:
        """Remove every expired entry and return how many were removed."""
        now = self._now()
        with self._lock:
            expired = [
                key
                for key, entry in self._contexts.items()
                if now - entry.timestamp > self.ttl_ms
            ]
            for key in expired:
                del self._contexts[key]
        return len(expired)

    def destroy(self) -> None:
        """Stop the sweep and drop all entries. Safe to call repeatedly."""
        self._stop_sweeper()
        self.clear_all()

    def is_sweeping(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_alive()

    def _evict_oldest(self) -> None:
        # Caller holds the lock
        if not self._contexts:
            return
        oldest_key = min(
            self._contexts, key=lambda key: self._contexts[key].last_accessed
        )
        del self._contexts[oldest_key]

    def _start_sweeper(self) -> None:
        with self._lock:
            if self.is_sweeping():
                return
            stop_event = threading.Event()
            self._stop_event = stop_event
            self._sweeper = threading.Thread(
                target=self._sweep_loop,
                args=(stop_event,),
                name="sternlog-trace-context-sweep",
                daemon=True,
            )
            self._sweeper.start()

    def _stop_sweeper(self) -> None:
        with self._lock:
            stop_event, sweeper = self._stop_event, self._sweeper
            self._stop_event = None
            self._sweeper = None
        if stop_event is not None:
            stop_event.set()
        if sweeper is not None and sweeper is not threading.current_thread():
            sweeper.join(timeout=1)

    def _sweep_loop(self, stop_event: threading.Event) -> None:
        interval = self.cleanup_interval_ms / MILLISECONDS_PER_SECOND
        while not stop_event.wait(timeout=interval):
            self.sweep()


# Default store backing the module-level helpers
_default_store: Optional[TraceContextStore] = None


def get_default_store() -> TraceContextStore:
    global _default_store
    if _default_store is None:
        _default_store = TraceContextStore()
    return _default_store


def set_trace_context(context_id: str, context: SpanContext) -> None:
    get_default_store().set(context_id, context)


def get_trace_context(context_id: str) -> Optional[SpanContext]:
    return get_default_store().get(context_id)


def clear_trace_context(context_id: str) -> None:
    get_default_store().clear(context_id)


def get_trace_context_stats() -> Dict[str, int]:
    return get_default_store().stats()


def destroy_trace_context_store() -> None:
    """Stop the default store's sweep and clear it (shutdown and tests)."""
    if _default_store is not None:
        _default_store.destroy()
