"""
Loggers and the composition root that builds them.

``LogManager`` owns every piece of shared state: the trace context store,
the namespace filter with its active configuration, the base logger and the
logger component loggers derive from. Applications normally create one
manager at startup and hand component loggers to the rest of the code.

Classes:
    BaseLogger: Interface shared by real and no-op loggers
    SternLogger: structlog-backed logger with pino severity levels
    NoOpLogger: Null-object logger returned for disabled namespaces
    LogManager: Builds loggers from settings and namespace configuration

Example:
    >>> manager = LogManager()
    >>> manager.set_namespace_config("voice:*")
    >>> log = manager.create_component_logger(
    ...     {"component": "voice", "layer": "orchestrator"}
    ... )
    >>> log.info("Call started", call_id="c-1")
    >>> manager.create_component_logger({"component": "http"}) is NOOP_LOGGER
    True
"""

import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Mapping, Optional

import structlog

from sternlog.core.config.settings import LoggerOptions, Settings
from sternlog.core.config.settings import settings as default_settings
from sternlog.core.constants import (
    SEVERITY_LEVELS,
    SILENT_LEVEL,
    STDLIB_METHODS,
    normalize_level,
)
from sternlog.core.exceptions import ConfigurationError
from sternlog.core.logging.logger import (
    SternBoundLogger,
    build_processors,
    setup_handlers,
)
from sternlog.filtering.metadata import MetadataLike
from sternlog.filtering.namespace import (
    NamespaceConfig,
    NamespaceFilter,
    build_namespace,
    is_namespace_enabled,
)
from sternlog.telemetry.context_store import TraceContextStore
from sternlog.telemetry.mixin import (
    ActiveContextProvider,
    create_trace_mixin,
    current_context_id,
    get_active_otel_context,
)
from sternlog.telemetry.span_context import SpanContext
from sternlog.utils.metrics import LogMetricsCollector, get_global_metrics_collector
from sternlog.utils.validation import (
    validate_message,
    validate_service_metadata,
    validate_span_context,
)


class BaseLogger(ABC):
    """Logging interface: six severity methods, child loggers, trace context."""

    @property
    @abstractmethod
    def level(self) -> str:
        pass

    @abstractmethod
    def is_level_enabled(self, level: str) -> bool:
        pass

    @abstractmethod
    def trace(self, event: Any, /, **fields: Any) -> None:
        pass

    @abstractmethod
    def debug(self, event: Any, /, **fields: Any) -> None:
        pass

    @abstractmethod
    def info(self, event: Any, /, **fields: Any) -> None:
        pass

    @abstractmethod
    def warn(self, event: Any, /, **fields: Any) -> None:
        pass

    @abstractmethod
    def error(self, event: Any, /, **fields: Any) -> None:
        pass

    @abstractmethod
    def fatal(self, event: Any, /, **fields: Any) -> None:
        pass

    @abstractmethod
    def child(
        self, bindings: Optional[Mapping[str, Any]] = None, /, **extra: Any
    ) -> "BaseLogger":
        pass

    @abstractmethod
    def set_trace_context(self, context: Any) -> None:
        pass

    @abstractmethod
    def get_trace_context(self) -> Optional[SpanContext]:
        pass

    @abstractmethod
    def clear_trace_context(self) -> None:
        pass


class SternLogger(BaseLogger):
    """
    Logger backed by a structlog bound logger.

    Severity follows the pino scale: a call is emitted only when its level is
    at or above the logger's level, and ``silent`` emits nothing. Trace
    context helpers store span context in ``store`` keyed by the id returned
    from ``context_id_provider``.

    Args:
        bound: ``SternBoundLogger`` carrying base fields and bindings
        level: Minimum severity name
        store: Trace context store shared with the logger's mixin
        context_id_provider: Returns the current execution-context id
    """

    def __init__(
        self,
        bound: Any,
        level: str,
        store: TraceContextStore,
        context_id_provider: Callable[[], str] = current_context_id,
    ):
        self._bound = bound
        self._level = normalize_level(level)
        self._store = store
        self._context_id_provider = context_id_provider

    @property
    def level(self) -> str:
        return self._level

    @property
    def bindings(self) -> dict:
        """Fields bound to this logger, base fields included."""
        return dict(structlog.get_context(self._bound))

    def is_level_enabled(self, level: str) -> bool:
        level = normalize_level(level)
        if self._level == SILENT_LEVEL or level == SILENT_LEVEL:
            return False
        return SEVERITY_LEVELS[level] >= SEVERITY_LEVELS[self._level]

    def _log(self, level: str, event: Any, fields: dict) -> None:
        if not self.is_level_enabled(level):
            return
        self._bound.emit(
            STDLIB_METHODS[level], validate_message(event), {**fields, "level": level}
        )

    def trace(self, event: Any, /, **fields: Any) -> None:
        self._log("trace", event, fields)

    def debug(self, event: Any, /, **fields: Any) -> None:
        self._log("debug", event, fields)

    def info(self, event: Any, /, **fields: Any) -> None:
        self._log("info", event, fields)

    def warn(self, event: Any, /, **fields: Any) -> None:
        self._log("warn", event, fields)

    warning = warn

    def error(self, event: Any, /, **fields: Any) -> None:
        self._log("error", event, fields)

    def fatal(self, event: Any, /, **fields: Any) -> None:
        self._log("fatal", event, fields)

    def child(
        self, bindings: Optional[Mapping[str, Any]] = None, /, **extra: Any
    ) -> "SternLogger":
        """
        Return a logger sharing level and store with extra bound fields.

        Fields may be passed as a mapping, as keywords, or both; keywords win.
        """
        return SternLogger(
            self._bound.bind_fields({**(bindings or {}), **extra}),
            self._level,
            self._store,
            self._context_id_provider,
        )

    def set_trace_context(self, context: Any) -> None:
        """
        Store span context for the current execution context.

        Raises:
            InvalidTraceContextError: If ``context`` lacks a trace or span id
        """
        span_context = validate_span_context(context)
        self._store.set(self._context_id_provider(), span_context)

    def get_trace_context(self) -> Optional[SpanContext]:
        return self._store.get(self._context_id_provider())

    def clear_trace_context(self) -> None:
        self._store.clear(self._context_id_provider())


class NoOpLogger(BaseLogger):
    """Logger that discards everything; ``child`` returns the same instance."""

    @property
    def level(self) -> str:
        return SILENT_LEVEL

    def is_level_enabled(self, level: str) -> bool:
        return False

    def trace(self, event: Any, /, **fields: Any) -> None:
        pass

    def debug(self, event: Any, /, **fields: Any) -> None:
        pass

    def info(self, event: Any, /, **fields: Any) -> None:
        pass

    def warn(self, event: Any, /, **fields: Any) -> None:
        pass

    warning = warn

    def error(self, event: Any, /, **fields: Any) -> None:
        pass

    def fatal(self, event: Any, /, **fields: Any) -> None:
        pass

    def child(
        self, bindings: Optional[Mapping[str, Any]] = None, /, **extra: Any
    ) -> "NoOpLogger":
        return self

    def set_trace_context(self, context: Any) -> None:
        pass

    def get_trace_context(self) -> Optional[SpanContext]:
        return None

    def clear_trace_context(self) -> None:
        pass


NOOP_LOGGER = NoOpLogger()

_sink_ids = itertools.count(1)


class LogManager:
    """
    Composition root for sternlog loggers.

    Args:
        settings: Base settings, defaults to the environment-loaded settings
        store: Trace context store; one sized from ``settings`` is created
            when omitted
        namespace_filter: Pattern parser owning the compiled-pattern cache
        context_id_provider: Returns the current execution-context id
        sink: Object receiving rendered records (anything with stdlib-style
            ``debug``/``info``/``warning``/``error``/``critical`` methods).
            When omitted, each built logger gets its own standard-library
            logger, named ``LOGGER_NAME`` plus a sequence number, so loggers
            built later never change the level or output of earlier ones.
        metrics: Collector counting emitted records when ``METRICS_ENABLED``
            is set; the process-wide collector is used when omitted

    Attributes:
        base_logger: Logger built from ``settings`` at construction
        logger: Most recently initialized logger
        current_logger: Parent of component loggers
        metrics: Active metrics collector, ``None`` until metrics are enabled
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[TraceContextStore] = None,
        namespace_filter: Optional[NamespaceFilter] = None,
        context_id_provider: Callable[[], str] = current_context_id,
        sink: Optional[Any] = None,
        metrics: Optional[LogMetricsCollector] = None,
    ):
        self.settings = settings or default_settings
        self.store = store or TraceContextStore(
            max_size=self.settings.TRACE_CONTEXT_MAX_SIZE,
            ttl_ms=self.settings.TRACE_CONTEXT_TTL_MS,
            cleanup_interval_ms=self.settings.TRACE_CONTEXT_CLEANUP_INTERVAL_MS,
        )
        self.namespace_filter = namespace_filter or NamespaceFilter()
        self.context_id_provider = context_id_provider
        self._sink = sink
        self.metrics = metrics
        self._stdlib_loggers: List[logging.Logger] = []

        self._namespace_config = self.namespace_filter.parse(
            self.settings.LOG_NAMESPACES
        )
        self.base_logger = self._build_logger(self.settings)
        self.logger: SternLogger = self.base_logger
        self.current_logger: SternLogger = self.base_logger

    def _active_context_provider(
        self, settings: Settings, options: Optional[LoggerOptions]
    ) -> Optional[ActiveContextProvider]:
        if not settings.TELEMETRY_ENABLED:
            return None
        if settings.TELEMETRY_AUTO_INJECT:
            return get_active_otel_context
        if options is not None and options.get_active_context is not None:
            return options.get_active_context
        return None

    def _metrics_collector(self, settings: Settings) -> Optional[LogMetricsCollector]:
        if not settings.METRICS_ENABLED:
            return None
        if self.metrics is None:
            self.metrics = get_global_metrics_collector()
        return self.metrics

    def _stdlib_sink(self, settings: Settings) -> logging.Logger:
        name = f"{settings.LOGGER_NAME}.{next(_sink_ids)}"
        stdlib_logger = setup_handlers(settings, name)
        self._stdlib_loggers.append(stdlib_logger)
        return stdlib_logger

    def _build_logger(
        self, settings: Settings, options: Optional[LoggerOptions] = None
    ) -> SternLogger:
        mixin = create_trace_mixin(
            self.context_id_provider,
            self._active_context_provider(settings, options),
            self.store,
        )
        metrics = self._metrics_collector(settings)
        sink = self._sink if self._sink is not None else self._stdlib_sink(settings)
        bound = structlog.wrap_logger(
            sink,
            processors=build_processors(settings, mixin, metrics),
            wrapper_class=SternBoundLogger,
            context_class=dict,
            service=settings.DEFAULT_SERVICE,
            env=settings.ENVIRONMENT,
        ).bind()
        return SternLogger(
            bound, settings.LOG_LEVEL, self.store, self.context_id_provider
        )

    def init_logger(self, options: Optional[LoggerOptions] = None) -> SternLogger:
        """
        Build a logger from the settings overridden by ``options``.

        The new logger becomes ``self.logger``. If output cannot be
        configured, the failure is logged with the previous logger and that
        logger is returned instead.
        """
        settings = options.apply_to(self.settings) if options else self.settings
        try:
            new_logger = self._build_logger(settings, options)
        except ConfigurationError as e:
            self.logger.error(
                "Failed to initialize logger", err=e, error_code=e.error_code
            )
            return self.logger

        self.logger = new_logger
        return new_logger

    def init_logger_with_namespaces(
        self, options: Optional[LoggerOptions] = None
    ) -> SternLogger:
        """Like ``init_logger``, also applying namespaces and re-parenting."""
        if options is not None and options.namespaces is not None:
            self.set_namespace_config(options.namespaces)

        new_logger = self.init_logger(options)
        self.current_logger = new_logger
        return new_logger

    def set_namespace_config(self, patterns: str) -> None:
        self._namespace_config = self.namespace_filter.parse(patterns)

    def get_namespace_config(self) -> NamespaceConfig:
        return self._namespace_config

    def create_component_logger(self, metadata: MetadataLike) -> BaseLogger:
        """
        Create a logger for one component.

        Returns ``NOOP_LOGGER`` when the component's namespace is disabled,
        otherwise a child of ``current_logger`` bound with the metadata and
        its ``namespace``.
        """
        fields = validate_service_metadata(metadata)
        namespace = build_namespace(fields)

        if not is_namespace_enabled(namespace, self._namespace_config):
            return NOOP_LOGGER

        return self.current_logger.child({**fields, "namespace": namespace})

    def shutdown(self) -> None:
        """Stop the trace context sweep, drop stored contexts and close sinks."""
        self.store.destroy()
        for stdlib_logger in self._stdlib_loggers:
            for handler in stdlib_logger.handlers:
                handler.flush()
                handler.close()
