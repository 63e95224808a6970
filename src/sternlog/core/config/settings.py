"""
Configuration management for sternlog.

Settings are loaded with pydantic-settings from environment variables (and an
optional ``.env`` file). Field names match the environment variable names.

Classes:
    Settings: Process-wide defaults for every logger built by sternlog
    LoggerOptions: Per-call overrides accepted by ``LogManager.init_logger``

Environment Variables:
    LOG_LEVEL: Minimum severity (trace/debug/info/warn/error/fatal/silent)
    LOG_FORMAT: Renderer for records (json/console)
    LOG_FILE_PATH: Optional file output path
    LOG_PRETTY_PRINT: Use rich console output instead of plain stdout
    LOG_NAMESPACES: Comma-separated namespace glob patterns
    LOG_REDACT_KEYS: Comma-separated keys masked in addition to the defaults
    LOG_REDACT_REMOVE: Drop sensitive keys instead of masking them
    METRICS_ENABLED: Count emitted records with Prometheus counters
    DEFAULT_SERVICE: Value of the ``service`` field on every record
    ENVIRONMENT: Value of the ``env`` field on every record
    TRACE_CONTEXT_MAX_SIZE: Maximum stored trace contexts
    TRACE_CONTEXT_TTL_MS: Trace context lifetime in milliseconds
    TRACE_CONTEXT_CLEANUP_INTERVAL_MS: Expiry sweep period in milliseconds

Example:
    >>> from sternlog.core.config.settings import Settings
    >>> settings = Settings(LOG_NAMESPACES="voice:*")
    >>> settings.LOG_LEVEL
    'info'
"""

from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sternlog.core.constants import (
    DEFAULT_ENVIRONMENT,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOGGER_NAME,
    DEFAULT_NAMESPACES,
    DEFAULT_SERVICE_NAME,
    DEFAULT_TRACE_CONTEXT_CLEANUP_INTERVAL_MS,
    DEFAULT_TRACE_CONTEXT_MAX_SIZE,
    DEFAULT_TRACE_CONTEXT_TTL_MS,
    normalize_level,
)

VALID_LOG_FORMATS = ("json", "console")


def _validate_format(v: str) -> str:
    fmt = v.strip().lower()
    if fmt not in VALID_LOG_FORMATS:
        raise ValueError(f"LOG_FORMAT must be one of: {list(VALID_LOG_FORMATS)}")
    return fmt


class Settings(BaseSettings):
    """
    Logger settings with environment variable support.

    Attributes:
        LOG_LEVEL: Minimum severity emitted by loggers
        LOG_FORMAT: ``json`` for aggregation, ``console`` for humans
        LOG_FILE_PATH: Optional path of an additional file handler
        LOG_PRETTY_PRINT: Route output through a rich console handler
        LOG_NAMESPACES: Namespace patterns for component loggers
        LOG_REDACT_KEYS: Extra sensitive keys, comma-separated
        LOG_REDACT_REMOVE: Remove sensitive keys rather than masking them
        METRICS_ENABLED: Count emitted records in a metrics collector
        LOGGER_NAME: Name of the standard-library logger used as the sink
        DEFAULT_SERVICE: Service name bound to every record
        ENVIRONMENT: Deployment environment bound to every record
        TELEMETRY_ENABLED: Enable active-span trace correlation
        TELEMETRY_AUTO_INJECT: Read the active OpenTelemetry span per record
        TRACE_CONTEXT_MAX_SIZE: Capacity of the trace context store
        TRACE_CONTEXT_TTL_MS: Lifetime of a stored trace context
        TRACE_CONTEXT_CLEANUP_INTERVAL_MS: Period of the expiry sweep
    """

    # Output
    LOG_LEVEL: str = DEFAULT_LOG_LEVEL
    LOG_FORMAT: str = DEFAULT_LOG_FORMAT
    LOG_FILE_PATH: Optional[str] = None
    LOG_PRETTY_PRINT: bool = False
    LOG_NAMESPACES: str = DEFAULT_NAMESPACES
    LOGGER_NAME: str = DEFAULT_LOGGER_NAME
    LOG_REDACT_KEYS: str = ""
    LOG_REDACT_REMOVE: bool = False
    METRICS_ENABLED: bool = False

    # Base record fields
    DEFAULT_SERVICE: str = DEFAULT_SERVICE_NAME
    ENVIRONMENT: str = DEFAULT_ENVIRONMENT

    # Telemetry
    TELEMETRY_ENABLED: bool = False
    TELEMETRY_AUTO_INJECT: bool = False
    TRACE_CONTEXT_MAX_SIZE: int = Field(default=DEFAULT_TRACE_CONTEXT_MAX_SIZE, ge=1)
    TRACE_CONTEXT_TTL_MS: int = Field(default=DEFAULT_TRACE_CONTEXT_TTL_MS, gt=0)
    TRACE_CONTEXT_CLEANUP_INTERVAL_MS: int = Field(
        default=DEFAULT_TRACE_CONTEXT_CLEANUP_INTERVAL_MS, gt=0
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize the log level to its canonical pino-style name.

        ``WARNING`` and ``CRITICAL`` are accepted for familiarity with the
        standard library and map to ``warn`` and ``fatal``.

        Raises:
            ValueError: If the level is not recognised
        """
        return normalize_level(v)

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        return _validate_format(v)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


class LoggerOptions(BaseModel):
    """
    Overrides applied on top of ``Settings`` when initializing a logger.

    Every field is optional; ``None`` means "use the setting".
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    level: Optional[str] = None
    default_service: Optional[str] = None
    environment: Optional[str] = None
    log_format: Optional[str] = None
    log_file_path: Optional[str] = None
    pretty_print: Optional[bool] = None
    namespaces: Optional[str] = None
    telemetry_enabled: Optional[bool] = None
    auto_inject: Optional[bool] = None
    get_active_context: Optional[Callable[[], Any]] = None
    redact_keys: Optional[List[str]] = None
    redact_remove: Optional[bool] = None
    metrics_enabled: Optional[bool] = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: Optional[str]) -> Optional[str]:
        return normalize_level(v) if v is not None else v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: Optional[str]) -> Optional[str]:
        return _validate_format(v) if v is not None else v

    def apply_to(self, settings: Settings) -> Settings:
        """Return a copy of ``settings`` with these overrides applied."""
        updates = {
            "LOG_LEVEL": self.level,
            "DEFAULT_SERVICE": self.default_service,
            "ENVIRONMENT": self.environment,
            "LOG_FORMAT": self.log_format,
            "LOG_FILE_PATH": self.log_file_path,
            "LOG_PRETTY_PRINT": self.pretty_print,
            "LOG_NAMESPACES": self.namespaces,
            "TELEMETRY_ENABLED": self.telemetry_enabled,
            "TELEMETRY_AUTO_INJECT": self.auto_inject,
            "LOG_REDACT_KEYS": (
                ",".join(self.redact_keys) if self.redact_keys is not None else None
            ),
            "LOG_REDACT_REMOVE": self.redact_remove,
            "METRICS_ENABLED": self.metrics_enabled,
        }
        return settings.model_copy(
            update={k: v for k, v in updates.items() if v is not None}
        )


settings = Settings()
