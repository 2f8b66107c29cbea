"""
Log formatters.

Both formatters surface the same pipeline details: the active LogContext,
and the error code plus the offending line and column that log_exception()
and log_validation_result() attach to a record. StructuredFormatter writes
them as JSON for log files; ConsoleFormatter appends them to a one-line
message for stderr.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from .context import CONTEXT_KEYS, current_context

# Fields promoted out of extra_fields, in display order
LOCATION_KEYS = ('error_code', 'line', 'column')


def _split_extra(record: logging.LogRecord):
    """Return (location, other) dicts from the record's extra_fields."""
    extra = dict(getattr(record, 'extra_fields', None) or {})
    location = {key: extra.pop(key) for key in LOCATION_KEYS if key in extra}
    return location, extra


class StructuredFormatter(logging.Formatter):
    """
    JSON lines for file logs.

    Each entry has ``timestamp``, ``level``, ``logger`` and ``message``, then
    ``context`` (the LogContext values), the location fields (``error_code``,
    ``line``, ``column``) at top level so log files can be filtered on them,
    ``extra`` for anything else, and ``exception`` when a traceback was
    captured.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = current_context()
        if context:
            entry["context"] = context

        location, extra = _split_extra(record)
        entry.update(location)
        if extra:
            entry["extra"] = extra

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """
    One-line human-readable output:

        HH:MM:SS LEVEL    logger: message [phase=save, measurement=par] (code=VAL_001, line=9, column=speed)
    """

    COLORS = {
        'DEBUG': '\033[2m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[1;31m',
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).strftime("%H:%M:%S")
        line = f"{timestamp} {record.levelname:<8} {record.name.rsplit('.', 1)[-1]}: {record.getMessage()}"

        context = current_context()
        shown = [f"{key}={context[key]}" for key in CONTEXT_KEYS if context.get(key)]
        if shown:
            line += f" [{', '.join(shown)}]"

        location, _ = _split_extra(record)
        if location:
            line += " (" + ", ".join(
                f"{'code' if key == 'error_code' else key}={value}" for key, value in location.items()
            ) + ")"

        color = self.COLORS.get(record.levelname) if self.use_colors else None
        if color:
            line = f"{color}{line}{self.RESET}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


__all__ = [
    "ConsoleFormatter",
    "LOCATION_KEYS",
    "StructuredFormatter",
]
