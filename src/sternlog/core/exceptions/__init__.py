"""
sternlog exceptions.
"""

from .custom_exceptions import (
    ConfigurationError,
    InvalidTraceContextError,
    SternLogError,
)

__all__ = [
    "SternLogError",
    "ConfigurationError",
    "InvalidTraceContextError",
]
