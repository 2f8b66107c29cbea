"""
Pipeline logging context.

LogContext tags every record logged inside it with where the pipeline is:
the phase (header, body, save), the measurement, the input source, and the
cruise. Contexts nest; leaving a block restores the enclosing context.
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

# Context keys in display order
CONTEXT_KEYS = ('phase', 'measurement', 'source', 'cruise')

_context: Dict[str, Any] = {}
_context_lock = threading.RLock()


def current_context() -> Dict[str, Any]:
    """Return a copy of the active context."""
    with _context_lock:
        return dict(_context)


def reset_context() -> None:
    """Drop every context value."""
    with _context_lock:
        _context.clear()


@contextmanager
def LogContext(
    phase: str,
    measurement: Optional[str] = None,
    source: Optional[str] = None,
    cruise: Optional[str] = None,
) -> Generator[None, None, None]:
    """
    Attach pipeline context to all logs within the block.

    ``phase`` always replaces the enclosing phase; the other values are only
    set when given, so an inner block inherits the outer measurement and
    source.

    Usage:
        with LogContext(phase="save", measurement="par"):
            save_data(...)
    """
    values = {'phase': phase, 'measurement': measurement, 'source': source, 'cruise': cruise}
    with _context_lock:
        saved = dict(_context)
        _context.update({key: value for key, value in values.items() if value is not None})
    try:
        yield
    finally:
        with _context_lock:
            _context.clear()
            _context.update(saved)


__all__ = [
    "CONTEXT_KEYS",
    "LogContext",
    "current_context",
    "reset_context",
]
