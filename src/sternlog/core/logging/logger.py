"""
Structured logging plumbing for sternlog.

This module owns the pieces every sternlog logger is assembled from: the
structlog processor chain and the standard-library handlers that receive the
rendered records. ``SternLogger`` instances use them directly; applications
that prefer plain ``structlog.get_logger`` can call ``setup_logging`` once to
configure structlog globally with the same chain.

Key Features:
    - JSON output for log aggregation, console rendering for humans
    - Trace context injection through a per-record processor
    - Exception serialization for ``err``/``error`` fields
    - Redaction of sensitive keys and optional Prometheus record counters
    - Rich console output when pretty printing is enabled
    - Optional file output

Functions:
    build_processors(settings, mixin, metrics): Processor chain for one logger
    setup_handlers(settings, name): Configure a stdlib logger used as a sink
    setup_logging(settings): Configure structlog globally
    get_logger(name): Logger for sternlog's own diagnostics

Example:
    >>> from sternlog.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Store created", max_size=10000)
"""

import logging
import sys
from pathlib import Path
from typing import Any, List, Mapping, Optional

import structlog
from rich.console import Console
from rich.logging import RichHandler

from sternlog.core.config.settings import Settings
from sternlog.core.config.settings import settings as default_settings
from sternlog.core.constants import STDLIB_LEVELS
from sternlog.core.exceptions import ConfigurationError
from sternlog.telemetry.mixin import TraceContextProcessor, TraceMixin
from sternlog.utils.error_handler import ErrorSerializer
from sternlog.utils.metrics import LogMetricsCollector
from sternlog.utils.redaction import RedactionProcessor, parse_redact_keys


class SternBoundLogger(structlog.BoundLoggerBase):
    """
    Bound logger taking record fields as a mapping.

    ``structlog.BoundLogger`` receives fields as keyword arguments, so a
    field named ``event`` or ``self`` cannot be passed through it. Here the
    message always wins over an ``event`` field.
    """

    def bind_fields(self, fields: Mapping[str, Any]) -> "SternBoundLogger":
        context = self._context.__class__(self._context)
        context.update(fields)
        return self.__class__(self._logger, self._processors, context)

    def emit(self, method_name: str, event: str, fields: Mapping[str, Any]) -> Any:
        try:
            args, kw = self._process_event(method_name, event, dict(fields))
        except structlog.DropEvent:
            return None
        return getattr(self._logger, method_name)(*args, **kw)


def build_processors(
    settings: Settings,
    mixin: Optional[TraceMixin] = None,
    metrics: Optional[LogMetricsCollector] = None,
) -> List[Any]:
    """
    Build the structlog processor chain for a logger.

    Args:
        settings: Settings providing the output format and redaction keys
        mixin: Optional trace mixin merged into every record
        metrics: Optional collector counting every emitted record

    Returns:
        List of processors ending in a JSON or console renderer
    """
    processors: List[Any] = [ErrorSerializer()]
    if mixin is not None:
        processors.append(TraceContextProcessor(mixin))
    processors.append(
        RedactionProcessor(
            parse_redact_keys(settings.LOG_REDACT_KEYS),
            remove=settings.LOG_REDACT_REMOVE,
        )
    )
    if metrics is not None:
        processors.append(metrics.processor)
    processors.extend(
        [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]
    )

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    return processors


def setup_handlers(settings: Settings, name: Optional[str] = None) -> logging.Logger:
    """
    Configure the standard-library logger that receives rendered records.

    Existing handlers on the logger are closed and replaced, so calling this
    again with the same name reconfigures output in place. Loggers needing
    independent output pass a distinct ``name``.

    Args:
        settings: Settings providing level, pretty printing and file path
        name: Standard-library logger name, defaults to ``LOGGER_NAME``

    Raises:
        ConfigurationError: If the log file cannot be opened
    """
    handlers: List[logging.Handler] = []
    level = STDLIB_LEVELS[settings.LOG_LEVEL]

    if settings.LOG_PRETTY_PRINT:
        rich_handler = RichHandler(
            console=Console(),
            show_time=False,
            show_level=False,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        handlers.append(rich_handler)
    else:
        handlers.append(logging.StreamHandler(sys.stdout))

    if settings.LOG_FILE_PATH:
        file_path = Path(settings.LOG_FILE_PATH)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(file_path))
        except OSError as e:
            for handler in handlers:
                handler.close()
            raise ConfigurationError(
                "Logger initialization failed",
                details={"log_file_path": str(file_path)},
                cause=e,
            ) from e

    stdlib_logger = logging.getLogger(name or settings.LOGGER_NAME)
    for handler in list(stdlib_logger.handlers):
        stdlib_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter("%(message)s")
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        stdlib_logger.addHandler(handler)

    stdlib_logger.setLevel(level)
    stdlib_logger.propagate = False
    return stdlib_logger


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structlog globally with the sternlog processor chain.

    Loggers obtained from ``structlog.get_logger`` afterwards route through
    the standard-library logger tree, so records from modules named
    ``sternlog.*`` reach the handlers installed by ``setup_handlers``.

    Example:
        >>> from sternlog.core.logging import setup_logging
        >>> setup_logging()  # Call once at application startup
    """
    settings = settings or default_settings
    chain = build_processors(settings)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        *chain,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    setup_handlers(settings)


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger for sternlog's own diagnostics.

    Configures logging with the default settings on first use.

    Args:
        name: Logger name, typically ``__name__`` of the calling module
    """
    if not structlog.is_configured():
        setup_logging()
    return structlog.get_logger(name)
