"""
Input validation and size limits for logger metadata.

Component metadata comes from application code and ends up bound to every
record a component logger emits, so it is normalized once when the logger is
created: known identification fields become bounded strings, extra keys are
capped in number, and values are reduced to JSON-friendly shapes.
"""

import json
import re
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from sternlog.core.constants import (
    KNOWN_SERVICE_FIELDS,
    MAX_CONTEXT_FIELDS,
    MAX_MESSAGE_LENGTH,
    MAX_STRING_FIELD_LENGTH,
    TRUNCATION_SUFFIX,
)
from sternlog.core.exceptions import InvalidTraceContextError
from sternlog.filtering.metadata import MetadataLike, metadata_fields
from sternlog.telemetry.span_context import SpanContext

MAX_ARRAY_LENGTH = 100

_RESERVED_KEYS = {"__proto__", "constructor", "prototype", "__class__", "__dict__"}
_NUMERIC_KEY = re.compile(r"^\d+$")


def validate_message(message: Any) -> str:
    """Convert ``message`` to a string and truncate it to the message limit."""
    if message is None:
        return ""
    text = str(message)
    if len(text) > MAX_MESSAGE_LENGTH:
        return text[:MAX_MESSAGE_LENGTH] + TRUNCATION_SUFFIX
    return text


def validate_span_context(context: Any) -> SpanContext:
    """
    Coerce ``context`` into a ``SpanContext``.

    Accepts a ``SpanContext`` or a mapping using either snake_case or
    camelCase keys.

    Raises:
        InvalidTraceContextError: If the value is not a mapping or lacks a
            non-empty trace or span identifier
    """
    if isinstance(context, SpanContext):
        return context
    if not isinstance(context, Mapping):
        raise InvalidTraceContextError(
            "Invalid trace context provided",
            details={"type": type(context).__name__},
        )
    try:
        return SpanContext.model_validate(dict(context))
    except ValidationError as e:
        raise InvalidTraceContextError(
            "Trace context must have trace_id and span_id",
            details={"errors": e.errors(include_url=False)},
            cause=e,
        ) from e


def is_valid_span_context(context: Any) -> bool:
    try:
        validate_span_context(context)
    except InvalidTraceContextError:
        return False
    return True


def is_valid_key(key: Any) -> bool:
    if not isinstance(key, str):
        return False
    if not key or len(key) > MAX_STRING_FIELD_LENGTH:
        return False
    if key in _RESERVED_KEYS:
        return False
    return not _NUMERIC_KEY.match(key)


def _validate_field_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    if len(text) <= MAX_STRING_FIELD_LENGTH:
        return text
    return None


def sanitize_value(value: Any) -> Any:
    """Reduce ``value`` to a bounded, JSON-friendly representation."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        if len(value) <= MAX_STRING_FIELD_LENGTH:
            return value
        return value[:MAX_STRING_FIELD_LENGTH] + TRUNCATION_SUFFIX
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if value == value and abs(value) != float("inf") else None
    if isinstance(value, (list, tuple)):
        return [sanitize_value(item) for item in value[:MAX_ARRAY_LENGTH]]
    if isinstance(value, Mapping):
        try:
            encoded = json.dumps(value, default=str)
        except (TypeError, ValueError):
            return "[object]"
        if len(encoded) <= MAX_STRING_FIELD_LENGTH:
            return json.loads(encoded)
        return "[object]"
    return str(value)[:MAX_STRING_FIELD_LENGTH]


def validate_service_metadata(metadata: Optional[MetadataLike]) -> Dict[str, Any]:
    """
    Validate service metadata and apply size limits.

    Returns:
        Plain dict of fields safe to bind to a logger. Known identification
        fields come first; at most ``MAX_CONTEXT_FIELDS`` fields are kept.
    """
    fields = metadata_fields(metadata)
    validated: Dict[str, Any] = {}

    for name in KNOWN_SERVICE_FIELDS:
        if name in fields and len(validated) < MAX_CONTEXT_FIELDS:
            value = _validate_field_value(fields[name])
            if value is not None:
                validated[name] = value

    span_context = fields.get("span_context")
    if span_context is not None and is_valid_span_context(span_context):
        validated["span_context"] = validate_span_context(span_context).model_dump(
            exclude_none=True
        )

    for key, value in fields.items():
        if len(validated) >= MAX_CONTEXT_FIELDS:
            break
        if key in KNOWN_SERVICE_FIELDS or key == "span_context":
            continue
        if is_valid_key(key):
            validated[key] = sanitize_value(value)

    return validated
