"""
sternlog - Structured logging with trace correlation and namespace filtering

sternlog builds structlog-backed loggers that speak the pino severity scale,
carry base service metadata on every record, and correlate log lines with
distributed traces. Component loggers are filtered by namespace so noisy
subsystems can be silenced without touching code.

Key Features:
    - JSON or console output with rich pretty printing and file output
    - Trace context per execution context with TTL expiry and bounded size
    - Automatic trace correlation from the active OpenTelemetry span
    - Namespace filtering (``LOG_NAMESPACES=voice:*,twilio:*``) with a
      zero-cost no-op logger for disabled components
    - Exception serialization and process-level exception hooks

Modules:
    core: Configuration, constants, exceptions and logging plumbing
    telemetry: Span context, trace context store and trace mixin
    filtering: Service metadata and namespace patterns
    utils: Validation, error serialization and process hooks
    cli: Command-line tools for inspecting configuration

Example:
    >>> from sternlog import LogManager
    >>> manager = LogManager()
    >>> log = manager.create_component_logger({"component": "payment"})
    >>> log.set_trace_context({"trace_id": "abc", "span_id": "def"})
    >>> log.info("Charge created", amount=42)
"""

__version__ = "0.1.0"
__description__ = (
    "Structured logging with trace context correlation and namespace-based "
    "filtering of component loggers."
)

from sternlog.core.config.settings import LoggerOptions, Settings
from sternlog.core.exceptions import (
    ConfigurationError,
    InvalidTraceContextError,
    SternLogError,
)
from sternlog.filtering import ServiceMetadata
from sternlog.logger import NOOP_LOGGER, BaseLogger, LogManager, NoOpLogger, SternLogger
from sternlog.telemetry import SpanContext, TraceContextStore

__all__ = [
    "BaseLogger",
    "ConfigurationError",
    "InvalidTraceContextError",
    "LogManager",
    "LoggerOptions",
    "NOOP_LOGGER",
    "NoOpLogger",
    "ServiceMetadata",
    "Settings",
    "SpanContext",
    "SternLogError",
    "SternLogger",
    "TraceContextStore",
]
