"""
Error normalization and serialization for log records.
"""

import json
import traceback
from typing import Any, Dict, Mapping, MutableMapping

ERROR_KEYS = ("err", "error")
MAX_CAUSE_DEPTH = 10


def normalize_error(error: Any) -> BaseException:
    """Return ``error`` as an exception instance."""
    if isinstance(error, BaseException):
        return error
    if isinstance(error, str):
        return Exception(error)
    return Exception(f"Unknown error: {json.dumps(error, default=str)}")


def serialize_error(err: Any, _depth: int = 0) -> Dict[str, Any]:
    """
    Serialize an exception (or error-like value) into a plain dict.

    Exceptions produce ``type``, ``message``, ``stack`` and a recursively
    serialized ``cause`` when chained. Mappings are read for ``name``,
    ``message``, ``stack`` and ``cause``. Anything else becomes a message.
    """
    if err is None:
        return {}

    if isinstance(err, BaseException):
        serialized: Dict[str, Any] = {
            "type": type(err).__name__,
            "message": str(err),
        }
        if err.__traceback__ is not None:
            serialized["stack"] = "".join(
                traceback.format_exception(type(err), err, err.__traceback__)
            )
        cause = err.__cause__ or err.__context__
        if cause is not None and _depth < MAX_CAUSE_DEPTH:
            serialized["cause"] = serialize_error(cause, _depth + 1)
        return serialized

    if isinstance(err, Mapping):
        serialized = {
            "type": err.get("name", "Error"),
            "message": err.get("message", str(err)),
        }
        if err.get("stack") is not None:
            serialized["stack"] = err["stack"]
        if err.get("cause") is not None and _depth < MAX_CAUSE_DEPTH:
            serialized["cause"] = serialize_error(err["cause"], _depth + 1)
        return serialized

    return {"type": "Error", "message": str(err)}


class ErrorSerializer:
    """structlog processor serializing values under the ``err``/``error`` keys."""

    def __init__(self, keys=ERROR_KEYS):
        self.keys = tuple(keys)

    def __call__(
        self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        for key in self.keys:
            value = event_dict.get(key)
            if isinstance(value, BaseException):
                event_dict[key] = serialize_error(value)
        return event_dict
