"""
Exception hierarchy for sternlog.

The logging layer itself is designed to degrade silently rather than fail,
so these exceptions surface only at configuration boundaries: building
handlers or validating caller-supplied trace context.

Exception Hierarchy:
    SternLogError (base)
    ├── ConfigurationError: Logger or handler setup failed
    └── InvalidTraceContextError: Caller supplied malformed span context

Example:
    >>> try:
    ...     logger.set_trace_context({"trace_id": ""})
    ... except InvalidTraceContextError as e:
    ...     print(e.error_code, e.details)
"""

from typing import Any, Dict, Optional


class SternLogError(Exception):
    """
    Base exception class for all sternlog errors.

    Attributes:
        message (str): Human-readable error description
        error_code (str): Machine-readable error identifier, defaults to
            the class name
        details (Dict[str, Any]): Additional contextual information
        cause (Optional[BaseException]): Underlying error, if any

    Example:
        >>> raise ConfigurationError(
        ...     "Failed to open log file",
        ...     error_code="CONFIG_LOG_FILE",
        ...     details={"path": "/var/log/app.log"},
        ... )
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class ConfigurationError(SternLogError):
    """
    Raised when logger configuration or handler setup fails.

    Common scenarios:
        - Log file path cannot be created or opened
        - Unknown log level or output format
    """

    pass


class InvalidTraceContextError(SternLogError):
    """Raised when a span context is missing its trace or span identifier."""

    pass

