"""
Helpers shared by the logger layer: input validation, error serialization,
redaction, record metrics and process-level exception hooks.
"""

from .error_handler import (
    ErrorSerializer,
    normalize_error,
    serialize_error,
)
from .metrics import LogMetricsCollector, get_global_metrics_collector
from .process_handlers import register_process_handlers, unregister_process_handlers
from .redaction import RedactionProcessor, mask_sensitive_data
from .validation import (
    validate_message,
    validate_service_metadata,
    validate_span_context,
)

__all__ = [
    "ErrorSerializer",
    "LogMetricsCollector",
    "RedactionProcessor",
    "get_global_metrics_collector",
    "mask_sensitive_data",
    "normalize_error",
    "register_process_handlers",
    "serialize_error",
    "unregister_process_handlers",
    "validate_message",
    "validate_service_metadata",
    "validate_span_context",
]
