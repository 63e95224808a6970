"""
Prometheus counters for emitted log records.

``LogMetricsCollector`` counts records per level, per service and level, and
errors per service and error type. Its ``processor`` is a structlog
processor, so counting happens for every record a logger actually emits.
Each collector owns a ``CollectorRegistry``; expose it with
``prometheus_metrics()`` from a service's ``/metrics`` handler.

Example:
    >>> collector = LogMetricsCollector()
    >>> collector.increment_level("info", "api")
    >>> collector.get_level_count("info")
    1
"""

import threading
from datetime import datetime, timezone
from typing import Any, Dict, MutableMapping, Optional

from prometheus_client import CollectorRegistry, Counter, generate_latest

from sternlog.core.constants import LEVEL_ALIASES


class LogMetricsCollector:
    """Per-level, per-service and per-error-type record counters."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.level_total = Counter(
            "log_level_total",
            "Total log records by level",
            ["level"],
            registry=self.registry,
        )
        self.service_level_total = Counter(
            "log_service_level_total",
            "Total log records by service and level",
            ["service", "level"],
            registry=self.registry,
        )
        self.errors_total = Counter(
            "log_errors_total",
            "Total logged errors by service and error type",
            ["service", "error_type"],
            registry=self.registry,
        )
        self.last_update = datetime.now(timezone.utc)
        self._lock = threading.Lock()

    def increment_level(self, level: str, service: str) -> None:
        self.level_total.labels(level=level).inc()
        self.service_level_total.labels(service=service, level=level).inc()
        self._touch()

    def increment_error(self, error_type: str, service: str) -> None:
        self.errors_total.labels(service=service, error_type=error_type).inc()
        self._touch()

    def get_level_count(self, level: str) -> int:
        return self._sample("log_level_total", {"level": level})

    def get_service_level_count(self, service: str, level: str) -> int:
        return self._sample(
            "log_service_level_total", {"service": service, "level": level}
        )

    def get_error_count(self, service: str, error_type: str) -> int:
        return self._sample(
            "log_errors_total", {"service": service, "error_type": error_type}
        )

    def get_metrics(self) -> Dict[str, Any]:
        """
        Snapshot of every counter.

        Returns:
            Dict with ``levels`` keyed by level, ``service_levels`` keyed by
            ``service:level``, ``errors`` keyed by ``service:error_type`` and
            the ``last_update`` time
        """
        return {
            "levels": self._counts(self.level_total, ("level",)),
            "service_levels": self._counts(
                self.service_level_total, ("service", "level")
            ),
            "errors": self._counts(self.errors_total, ("service", "error_type")),
            "last_update": self.last_update,
        }

    def prometheus_metrics(self) -> str:
        """Counters in the Prometheus text exposition format."""
        return generate_latest(self.registry).decode("utf-8")

    def reset(self) -> None:
        self.level_total.clear()
        self.service_level_total.clear()
        self.errors_total.clear()
        self._touch()

    def processor(
        self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        """
        structlog processor counting the record in ``event_dict``.

        Error types are read from ``err`` as serialized by ``ErrorSerializer``
        or from a raw exception. Only ``error`` records count as errors.
        """
        level = str(event_dict.get("level") or method_name)
        level = LEVEL_ALIASES.get(level, level)
        service = str(event_dict.get("service", "unknown"))
        self.increment_level(level, service)

        if level == "error":
            error_type = _error_type(event_dict.get("err"))
            if error_type is not None:
                self.increment_error(error_type, service)
        return event_dict

    def _touch(self) -> None:
        with self._lock:
            self.last_update = datetime.now(timezone.utc)

    def _sample(self, name: str, labels: Dict[str, str]) -> int:
        return int(self.registry.get_sample_value(name, labels) or 0)

    @staticmethod
    def _counts(counter: Counter, label_names: tuple) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for metric in counter.collect():
            for sample in metric.samples:
                if not sample.name.endswith("_total"):
                    continue
                key = ":".join(sample.labels[name] for name in label_names)
                counts[key] = int(sample.value)
        return counts


def _error_type(err: Any) -> Optional[str]:
    if isinstance(err, BaseException):
        return type(err).__name__
    if isinstance(err, dict) and err.get("type"):
        return str(err["type"])
    return None


_global_collector: Optional[LogMetricsCollector] = None
_global_lock = threading.Lock()


def get_global_metrics_collector() -> LogMetricsCollector:
    """Process-wide collector, created on first use."""
    global _global_collector
    with _global_lock:
        if _global_collector is None:
            _global_collector = LogMetricsCollector()
        return _global_collector
