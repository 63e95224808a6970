"""
sternlog configuration.
"""

from .settings import LoggerOptions, Settings

__all__ = ["Settings", "LoggerOptions"]
