"""
Key-based redaction of sensitive record fields.

Values stored under a sensitive key are replaced with a censor string, or
removed, before the record is rendered. Keys are matched at the top level of
the record and one level down inside mapping values, so both
``password=...`` and ``user={"password": ...}`` are masked.
"""

from typing import Any, Dict, FrozenSet, Iterable, Mapping, MutableMapping, Optional

REDACTED = "[REDACTED]"

DEFAULT_REDACT_KEYS: FrozenSet[str] = frozenset(
    {
        "password",
        "creditCard",
        "credit_card",
        "auth",
        "authorization",
        "cookie",
        "token",
        "apiKey",
        "api_key",
        "secret",
        "ssn",
    }
)


def parse_redact_keys(value: Optional[str]) -> FrozenSet[str]:
    """Split a comma-separated key list, dropping blanks."""
    if not value:
        return frozenset()
    return frozenset(key.strip() for key in value.split(",") if key.strip())


def create_redaction_keys(custom_keys: Optional[Iterable[str]] = None) -> FrozenSet[str]:
    """Merge ``custom_keys`` with the default sensitive keys."""
    return DEFAULT_REDACT_KEYS | frozenset(custom_keys or ())


def mask_sensitive_data(
    data: Mapping[str, Any],
    keys: FrozenSet[str] = DEFAULT_REDACT_KEYS,
    censor: str = REDACTED,
    remove: bool = False,
) -> Dict[str, Any]:
    """
    Return a copy of ``data`` with sensitive keys masked.

    Args:
        data: Mapping to mask; left unmodified
        keys: Keys whose values are sensitive
        censor: Replacement value
        remove: Drop sensitive keys instead of replacing their values

    Example:
        >>> mask_sensitive_data({"user": "u-1", "auth": {"token": "abc"}})
        {'user': 'u-1', 'auth': '[REDACTED]'}
    """
    masked = _mask_level(data, keys, censor, remove)
    for key, value in masked.items():
        if isinstance(value, Mapping):
            masked[key] = _mask_level(value, keys, censor, remove)
    return masked


def _mask_level(
    data: Mapping[str, Any], keys: FrozenSet[str], censor: str, remove: bool
) -> Dict[str, Any]:
    masked: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in keys:
            masked[key] = value
        elif not remove:
            masked[key] = censor
    return masked


class RedactionProcessor:
    """
    structlog processor masking sensitive keys of every record.

    Args:
        keys: Extra sensitive keys, merged with ``DEFAULT_REDACT_KEYS``
        censor: Replacement value
        remove: Drop sensitive keys instead of replacing their values
    """

    def __init__(
        self,
        keys: Optional[Iterable[str]] = None,
        censor: str = REDACTED,
        remove: bool = False,
    ):
        self.keys = create_redaction_keys(keys)
        self.censor = censor
        self.remove = remove

    def __call__(
        self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        return mask_sensitive_data(event_dict, self.keys, self.censor, self.remove)
