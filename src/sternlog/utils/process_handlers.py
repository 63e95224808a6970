"""
Process-level hooks that route uncaught exceptions through a logger.

Both ``sys.excepthook`` (main thread) and ``threading.excepthook`` (worker
threads) are wrapped. The exception is logged at ``fatal`` and the previous
hook still runs, so default tracebacks and other installed hooks keep
working.
"""

import sys
import threading
from typing import Any, Optional

from sternlog.utils.error_handler import normalize_error

_previous_excepthook: Optional[Any] = None
_previous_threading_excepthook: Optional[Any] = None


def register_process_handlers(logger: Any) -> None:
    """
    Install exception hooks that log through ``logger``.

    Calling it again replaces the logger but keeps the originally saved
    hooks, so ``unregister_process_handlers`` always restores the state
    from before the first registration.
    """
    global _previous_excepthook, _previous_threading_excepthook

    if _previous_excepthook is None:
        _previous_excepthook = sys.excepthook
    if _previous_threading_excepthook is None:
        _previous_threading_excepthook = threading.excepthook

    previous_excepthook = _previous_excepthook
    previous_threading_excepthook = _previous_threading_excepthook

    def excepthook(exc_type, exc_value, exc_traceback):
        if not issubclass(exc_type, KeyboardInterrupt):
            logger.fatal("Uncaught exception", err=_exception(exc_type, exc_value))
        previous_excepthook(exc_type, exc_value, exc_traceback)

    def threading_excepthook(args):
        if args.exc_type is not SystemExit:
            logger.fatal(
                "Uncaught exception in thread",
                err=_exception(args.exc_type, args.exc_value),
                thread=args.thread.name if args.thread is not None else None,
            )
        previous_threading_excepthook(args)

    sys.excepthook = excepthook
    threading.excepthook = threading_excepthook


def _exception(exc_type: Any, exc_value: Any) -> BaseException:
    # threading.excepthook may receive exc_value=None
    return normalize_error(exc_value if exc_value is not None else exc_type.__name__)


def unregister_process_handlers() -> None:
    """Restore the hooks saved by ``register_process_handlers``."""
    global _previous_excepthook, _previous_threading_excepthook

    if _previous_excepthook is not None:
        sys.excepthook = _previous_excepthook
        _previous_excepthook = None
    if _previous_threading_excepthook is not None:
        threading.excepthook = _previous_threading_excepthook
        _previous_threading_excepthook = None
