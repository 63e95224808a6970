"""
Unit tests for the trace context store
"""

import threading
import time

from sternlog.telemetry import context_store as context_store_module
from sternlog.telemetry.context_store import TraceContextStore
from sternlog.telemetry.span_context import SpanContext


def make_context(n: int) -> SpanContext:
    return SpanContext(trace_id=f"trace-{n}", span_id=f"span-{n}")


class TestTraceContextStore:
    """Test TTL, capacity and lifecycle behaviour"""

    def test_set_and_get(self, store, span_context):
        store.set("ctx-1", span_context)
        assert store.get("ctx-1") == span_context
        assert store.size() == 1

    def test_get_missing_returns_none(self, store):
        assert store.get("missing") is None

    def test_set_overwrites_existing(self, store):
        store.set("ctx-1", make_context(1))
        store.set("ctx-1", make_context(2))
        assert store.get("ctx-1").trace_id == "trace-2"
        assert store.size() == 1

    def test_contexts_are_isolated_per_id(self, store):
        store.set("a", make_context(1))
        store.set("b", make_context(2))
        assert store.get("a").trace_id == "trace-1"
        assert store.get("b").trace_id == "trace-2"

    def test_entry_alive_at_exact_ttl(self, store, clock, span_context):
        store.set("ctx-1", span_context)
        clock.advance_ms(1000)
        assert store.get("ctx-1") == span_context

    def test_expired_entry_removed_on_get(self, store, clock, span_context):
        store.set("ctx-1", span_context)
        clock.advance_ms(1001)
        assert store.get("ctx-1") is None
        assert store.size() == 0

    def test_get_does_not_extend_ttl(self, store, clock, span_context):
        store.set("ctx-1", span_context)
        clock.advance_ms(600)
        assert store.get("ctx-1") is not None
        clock.advance_ms(600)
        assert store.get("ctx-1") is None

    def test_set_resets_ttl(self, store, clock, span_context):
        store.set("ctx-1", span_context)
        clock.advance_ms(900)
        store.set("ctx-1", span_context)
        clock.advance_ms(900)
        assert store.get("ctx-1") == span_context

    def test_evicts_least_recently_accessed(self, store, clock):
        store.set("a", make_context(1))
        clock.advance_ms(1)
        store.set("b", make_context(2))
        clock.advance_ms(1)
        store.set("c", make_context(3))
        clock.advance_ms(1)
        # Reading "a" makes "b" the least recently accessed
        store.get("a")
        clock.advance_ms(1)

        store.set("d", make_context(4))

        assert store.size() == 3
        assert store.get("b") is None
        assert store.get("a") is not None
        assert store.get("c") is not None
        assert store.get("d") is not None

    def test_overwrite_when_full_evicts_another_entry(self, store, clock):
        store.set("a", make_context(1))
        clock.advance_ms(1)
        store.set("b", make_context(2))
        clock.advance_ms(1)
        store.set("c", make_context(3))
        clock.advance_ms(1)
        store.get("a")
        clock.advance_ms(1)

        store.set("c", make_context(30))

        assert store.size() == 2
        assert store.get("b") is None
        assert store.get("a") is not None
        assert store.get("c") == make_context(30)

    def test_overwrite_of_oldest_entry_when_full(self, store, clock):
        store.set("a", make_context(1))
        clock.advance_ms(1)
        store.set("b", make_context(2))
        clock.advance_ms(1)
        store.set("c", make_context(3))
        clock.advance_ms(1)

        store.set("a", make_context(10))

        assert store.size() == 3
        assert store.get("a") == make_context(10)
        assert store.get("b") is not None

    def test_size_never_exceeds_max(self, store, clock):
        for n in range(20):
            store.set(f"ctx-{n}", make_context(n))
            clock.advance_ms(1)
            assert store.size() <= 3

        assert store.get("ctx-19") is not None

    def test_sweep_removes_only_expired(self, store, clock):
        store.set("old", make_context(1))
        clock.advance_ms(800)
        store.set("new", make_context(2))
        clock.advance_ms(300)

        assert store.sweep() == 1
        assert store.size() == 1
        assert store.get("new") is not None

    def test_clear(self, store, span_context):
        store.set("ctx-1", span_context)
        store.clear("ctx-1")
        store.clear("never-set")
        assert store.get("ctx-1") is None

    def test_clear_all_and_stats(self, store):
        store.set("a", make_context(1))
        store.set("b", make_context(2))
        assert store.stats() == {"size": 2}
        store.clear_all()
        assert store.stats() == {"size": 0}

    def test_size_counts_unswept_expired_entries(self, store, clock):
        store.set("a", make_context(1))
        clock.advance_ms(5000)
        assert store.size() == 1


class TestStoreLifecycle:
    """Test the background sweep and destroy"""

    def test_sweeper_is_daemon_thread(self, store):
        assert store.is_sweeping()
        sweepers = [
            t
            for t in threading.enumerate()
            if t.name == "sternlog-trace-context-sweep"
        ]
        assert sweepers
        assert all(t.daemon for t in sweepers)

    def test_destroy_is_idempotent(self, store, span_context):
        store.set("ctx-1", span_context)
        store.destroy()
        store.destroy()
        assert store.size() == 0
        assert not store.is_sweeping()

    def test_set_after_destroy_restarts_sweep(self, store, span_context):
        store.destroy()
        store.set("ctx-1", span_context)
        assert store.is_sweeping()
        assert store.get("ctx-1") == span_context

    def test_periodic_sweep_removes_expired(self, clock, span_context):
        store = TraceContextStore(
            max_size=10, ttl_ms=100, cleanup_interval_ms=10, clock=clock
        )
        try:
            store.set("ctx-1", span_context)
            clock.advance_ms(500)

            deadline = time.monotonic() + 5
            while store.size() and time.monotonic() < deadline:
                time.sleep(0.01)

            assert store.size() == 0
        finally:
            store.destroy()


class TestDefaultStoreHelpers:
    """Test the module-level helpers backed by the default store"""

    def test_helpers_round_trip(self, span_context):
        try:
            context_store_module.set_trace_context("helper-ctx", span_context)
            assert context_store_module.get_trace_context("helper-ctx") == span_context
            assert context_store_module.get_trace_context_stats()["size"] >= 1

            context_store_module.clear_trace_context("helper-ctx")
            assert context_store_module.get_trace_context("helper-ctx") is None
        finally:
            context_store_module.destroy_trace_context_store()

    def test_default_store_is_shared(self):
        try:
            first = context_store_module.get_default_store()
            assert context_store_module.get_default_store() is first
        finally:
            context_store_module.destroy_trace_context_store()
