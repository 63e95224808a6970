"""
Default values shared across sternlog.

Severity numbers follow the pino scale so that levels compare the same way
regardless of which engine renders the record. Applications override the
defaults through environment variables (see ``sternlog.core.config``).
"""

import logging

DEFAULT_LOG_LEVEL = "info"
DEFAULT_LOG_FORMAT = "json"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_SERVICE_NAME = "app"
DEFAULT_LOGGER_NAME = "sternlog"
DEFAULT_NAMESPACES = "*"

SEVERITY_LEVELS = {
    "trace": 10,
    "debug": 20,
    "info": 30,
    "warn": 40,
    "error": 50,
    "fatal": 60,
}

SILENT_LEVEL = "silent"

# Accepted spellings from the stdlib world
LEVEL_ALIASES = {
    "warning": "warn",
    "critical": "fatal",
}

# Standard-library method used to hand a rendered record to the sink
STDLIB_METHODS = {
    "trace": "debug",
    "debug": "debug",
    "info": "info",
    "warn": "warning",
    "error": "error",
    "fatal": "critical",
}

STDLIB_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    SILENT_LEVEL: logging.CRITICAL + 10,
}

MILLISECONDS_PER_SECOND = 1000
SECONDS_PER_MINUTE = 60

DEFAULT_TRACE_CONTEXT_MAX_SIZE = 10000
DEFAULT_TRACE_CONTEXT_TTL_MS = 5 * SECONDS_PER_MINUTE * MILLISECONDS_PER_SECOND
DEFAULT_TRACE_CONTEXT_CLEANUP_INTERVAL_MS = (
    1 * SECONDS_PER_MINUTE * MILLISECONDS_PER_SECOND
)

MAX_MESSAGE_LENGTH = 10000
MAX_STRING_FIELD_LENGTH = 1000
MAX_CONTEXT_FIELDS = 50
TRUNCATION_SUFFIX = "... [truncated]"

KNOWN_SERVICE_FIELDS = (
    "service",
    "component",
    "operation",
    "layer",
    "domain",
    "integration",
)


def normalize_level(level: str) -> str:
    """Return the canonical severity name for ``level`` (case-insensitive)."""
    name = level.strip().lower()
    name = LEVEL_ALIASES.get(name, name)
    if name != SILENT_LEVEL and name not in SEVERITY_LEVELS:
        raise ValueError(
            f"Unknown log level '{level}'. Expected one of: "
            f"{', '.join([*SEVERITY_LEVELS, SILENT_LEVEL])}"
        )
    return name
