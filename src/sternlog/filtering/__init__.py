"""
sternlog filtering - namespace patterns for component loggers.
"""

from .metadata import ServiceMetadata
from .namespace import (
    NamespaceConfig,
    NamespaceFilter,
    build_namespace,
    clear_namespace_cache,
    get_default_filter,
    is_namespace_enabled,
    parse_namespace_patterns,
)

__all__ = [
    "NamespaceConfig",
    "NamespaceFilter",
    "ServiceMetadata",
    "build_namespace",
    "clear_namespace_cache",
    "get_default_filter",
    "is_namespace_enabled",
    "parse_namespace_patterns",
]
