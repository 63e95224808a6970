"""
Namespace-based log filtering.

Component loggers are identified by a namespace such as
``voice:orchestrator`` built from their service metadata. A comma-separated
list of glob patterns decides which namespaces produce output:

    LOG_NAMESPACES=voice:*              only voice logs
    LOG_NAMESPACES=voice:*,twilio:*     voice and twilio logs
    LOG_NAMESPACES=*                    everything (default)

``*`` matches any sequence of characters; every other character is literal.
Patterns must match the whole namespace.
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Pattern, Tuple

from sternlog.filtering.metadata import MetadataLike, metadata_fields

MATCH_ALL_PATTERN = "*"


@dataclass(frozen=True)
class NamespaceConfig:
    """
    Compiled namespace patterns.

    Attributes:
        patterns: Trimmed source pattern string
        matchers: Compiled matchers; empty means every namespace is enabled
    """

    patterns: str
    matchers: Tuple[Pattern[str], ...] = ()


def compile_pattern(pattern: str) -> Pattern[str]:
    """Compile one glob pattern into a full-match regular expression."""
    escaped = re.escape(pattern).replace(r"\*", ".*")
    return re.compile(f"^{escaped}$", re.DOTALL)


class NamespaceFilter:
    """
    Owner of the compiled-pattern cache.

    Parsing the same pattern string twice returns the same
    ``NamespaceConfig`` instance until ``clear_cache`` is called.
    """

    def __init__(self):
        self._cache: Dict[str, NamespaceConfig] = {}

    def parse(self, patterns: str) -> NamespaceConfig:
        """
        Parse a comma-separated pattern string into a ``NamespaceConfig``.

        Example:
            >>> config = NamespaceFilter().parse("voice:*,http:request")
            >>> [m.pattern for m in config.matchers]
            ['^voice:.*$', '^http:request$']
        """
        cached = self._cache.get(patterns)
        if cached is not None:
            return cached

        trimmed = patterns.strip()
        if trimmed in ("", MATCH_ALL_PATTERN):
            config = NamespaceConfig(patterns=trimmed)
        else:
            segments = (segment.strip() for segment in trimmed.split(","))
            config = NamespaceConfig(
                patterns=trimmed,
                matchers=tuple(
                    compile_pattern(segment) for segment in segments if segment
                ),
            )

        self._cache[patterns] = config
        return config

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_size(self) -> int:
        return len(self._cache)


def is_namespace_enabled(namespace: str, config: NamespaceConfig) -> bool:
    """
    Check whether ``namespace`` passes ``config``.

    An empty matcher list enables everything, including the empty namespace.
    Otherwise at least one pattern must match the whole namespace.
    """
    if not config.matchers:
        return True
    return any(matcher.fullmatch(namespace) for matcher in config.matchers)


def build_namespace(metadata: Optional[MetadataLike]) -> str:
    """
    Build a namespace string from service metadata.

    Parts, in order, each omitted when empty:
        1. ``component``, else ``service``
        2. ``layer``, else ``operation``, else ``domain``
        3. ``integration``

    Example:
        >>> build_namespace({"component": "voice", "layer": "orchestrator"})
        'voice:orchestrator'
        >>> build_namespace({"service": "api"})
        'api'
    """
    fields = metadata_fields(metadata)

    def first(*names: str) -> Optional[str]:
        for name in names:
            value = fields.get(name)
            if isinstance(value, str) and value:
                return value
        return None

    parts = (
        first("component", "service"),
        first("layer", "operation", "domain"),
        first("integration"),
    )
    return ":".join(part for part in parts if part)


_default_filter = NamespaceFilter()


def get_default_filter() -> NamespaceFilter:
    return _default_filter


def parse_namespace_patterns(patterns: str) -> NamespaceConfig:
    return _default_filter.parse(patterns)


def clear_namespace_cache() -> None:
    """Drop every cached config of the default filter."""
    _default_filter.clear_cache()
