"""
Unit tests for the log metrics collector
"""

import pytest

from sternlog.utils.metrics import LogMetricsCollector, get_global_metrics_collector


@pytest.fixture
def collector():
    return LogMetricsCollector()


class TestLogMetricsCollector:
    def test_counts_levels_per_service(self, collector):
        collector.increment_level("info", "api")
        collector.increment_level("info", "api")
        collector.increment_level("info", "worker")
        collector.increment_level("error", "api")

        assert collector.get_level_count("info") == 3
        assert collector.get_service_level_count("api", "info") == 2
        assert collector.get_service_level_count("worker", "error") == 0

    def test_get_metrics_snapshot(self, collector):
        collector.increment_level("warn", "api")
        collector.increment_error("TimeoutError", "api")

        metrics = collector.get_metrics()
        assert metrics["levels"] == {"warn": 1}
        assert metrics["service_levels"] == {"api:warn": 1}
        assert metrics["errors"] == {"api:TimeoutError": 1}
        assert metrics["last_update"] is not None

    def test_prometheus_exposition(self, collector):
        collector.increment_level("info", "api")
        collector.increment_error("ValueError", "api")

        text = collector.prometheus_metrics()
        assert 'log_level_total{level="info"} 1.0' in text
        assert 'log_service_level_total{level="info",service="api"} 1.0' in text
        assert 'log_errors_total{error_type="ValueError",service="api"} 1.0' in text

    def test_reset(self, collector):
        collector.increment_level("info", "api")
        collector.increment_error("ValueError", "api")
        collector.reset()

        assert collector.get_level_count("info") == 0
        assert collector.get_metrics()["errors"] == {}

    def test_collectors_are_independent(self, collector):
        other = LogMetricsCollector()
        collector.increment_level("info", "api")
        assert other.get_level_count("info") == 0


class TestProcessor:
    def test_counts_record_level_and_service(self, collector):
        event_dict = {"event": "hi", "level": "warn", "service": "api"}
        assert collector.processor(None, "warning", event_dict) is event_dict
        assert collector.get_service_level_count("api", "warn") == 1

    def test_falls_back_to_method_name(self, collector):
        collector.processor(None, "critical", {"event": "down"})
        assert collector.get_service_level_count("unknown", "fatal") == 1

    @pytest.mark.parametrize(
        "err",
        [KeyError("k"), {"type": "KeyError", "message": "'k'"}],
    )
    def test_counts_error_type(self, collector, err):
        collector.processor(
            None,
            "error",
            {"event": "failed", "level": "error", "service": "api", "err": err},
        )
        assert collector.get_error_count("api", "KeyError") == 1

    def test_errors_only_counted_at_error_level(self, collector):
        collector.processor(
            None,
            "critical",
            {"level": "fatal", "service": "api", "err": {"type": "KeyError"}},
        )
        assert collector.get_metrics()["errors"] == {}


def test_global_collector_is_shared():
    assert get_global_metrics_collector() is get_global_metrics_collector()
