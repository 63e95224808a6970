"""
Pytest configuration and fixtures for sternlog tests
"""

import json
from typing import Any, Dict, List

import pytest
from structlog.testing import CapturingLogger

from sternlog.core.config.settings import Settings
from sternlog.filtering.namespace import NamespaceFilter
from sternlog.logger import LogManager
from sternlog.telemetry.context_store import TraceContextStore
from sternlog.telemetry.span_context import SpanContext


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000


def decode_records(sink: CapturingLogger) -> List[Dict[str, Any]]:
    """Decode every JSON record captured by ``sink``."""
    return [json.loads(call.args[0]) for call in sink.calls]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock):
    """Trace context store on a fake clock; destroyed after the test"""
    store = TraceContextStore(max_size=3, ttl_ms=1000, clock=clock)
    yield store
    store.destroy()


@pytest.fixture
def span_context() -> SpanContext:
    return SpanContext(
        trace_id="4bf92f3577b34da6a3ce929d0e0e4736",
        span_id="00f067aa0ba902b7",
        trace_flags="01",
    )


@pytest.fixture
def test_settings() -> Settings:
    """Settings independent of the process environment"""
    return Settings(
        _env_file=None,
        LOG_LEVEL="trace",
        LOG_FORMAT="json",
        LOG_NAMESPACES="*",
        DEFAULT_SERVICE="test-service",
        ENVIRONMENT="testing",
    )


@pytest.fixture
def sink() -> CapturingLogger:
    return CapturingLogger()


@pytest.fixture
def manager(test_settings, store, sink):
    """LogManager writing to a capturing sink with a fixed context id"""
    manager = LogManager(
        settings=test_settings,
        store=store,
        namespace_filter=NamespaceFilter(),
        context_id_provider=lambda: "ctx-1",
        sink=sink,
    )
    yield manager
    manager.shutdown()


@pytest.fixture
def records(sink):
    """Callable returning the decoded records captured so far"""
    return lambda: decode_records(sink)
