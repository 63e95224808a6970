"""
sternlog logging plumbing.

Builds the structlog processor chain and the standard-library handlers that
every ``SternLogger`` writes through, and exposes ``get_logger`` for the
package's own diagnostics.

Output Formats:
    - JSON: Structured format for log aggregation systems
    - Console: Human-readable key/value rendering
    - Rich: Console output routed through rich when pretty printing

Example:
    >>> from sternlog.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.warning("Logger initialization failed", error_code="ConfigurationError")
"""

from .logger import (
    SternBoundLogger,
    build_processors,
    get_logger,
    setup_handlers,
    setup_logging,
)

__all__ = [
    "SternBoundLogger",
    "build_processors",
    "get_logger",
    "setup_handlers",
    "setup_logging",
]
