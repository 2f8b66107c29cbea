"""
Logging utility functions.

Provides helper functions for structured logging with context,
exception handling, and validation result logging.
"""

import logging
import sys
from typing import Any, Dict, Optional, Union

from .config import LogLevel, _get_logging_level
from .error_codes import ErrorCode


def log_with_context(
    logger: logging.Logger,
    level: Union[int, LogLevel],
    message: str,
    error_code: Optional[ErrorCode] = None,
    **kwargs: Any,
) -> None:
    """
    Log a message with additional context fields.

    Args:
        logger: Logger instance.
        level: Logging level (e.g., logging.INFO or "INFO").
        message: Log message.
        error_code: Optional error code for structured error tracking.
        **kwargs: Additional context fields to include.
    """
    if isinstance(level, str):
        level = _get_logging_level(level)
    if not logger.isEnabledFor(level):
        return

    record = logger.makeRecord(
        logger.name, level, '', 0, message, (), None
    )

    extra_fields = dict(kwargs)
    if error_code is not None:
        extra_fields['error_code'] = error_code.code
        extra_fields['error_category'] = error_code.category

    record.extra_fields = extra_fields
    logger.handle(record)


def log_exception(
    logger: logging.Logger,
    message: str,
    exc: Optional[BaseException] = None,
    error_code: Optional[ErrorCode] = None,
    include_traceback: bool = True,
    **kwargs: Any,
) -> None:
    """
    Log an exception with consistent traceback formatting.

    When ``error_code`` is omitted and the exception carries one (every
    TimeSeriesCopError does), that code is used. The ``line`` and ``column``
    of a TimeSeriesCopError's data are logged as fields too.

    Args:
        logger: Logger instance.
        message: Log message describing the error context.
        exc: Exception instance (uses sys.exc_info() if None).
        error_code: Optional error code for structured error tracking.
        include_traceback: Whether to include full traceback.
        **kwargs: Additional context fields to include.
    """
    extra_fields = dict(kwargs)

    if exc is None:
        exc_info = sys.exc_info()
        exc = exc_info[1]
    else:
        exc_info = (type(exc), exc, exc.__traceback__)

    if exc is not None:
        extra_fields['exception_type'] = type(exc).__name__
        extra_fields['exception_message'] = str(exc)

        data = getattr(exc, 'data', None)
        if isinstance(data, dict):
            for key in ('line', 'column'):
                if key in data:
                    extra_fields.setdefault(key, data[key])

    if error_code is None:
        error_code = getattr(exc, 'error_code', None)
    if error_code is not None:
        extra_fields['error_code'] = error_code.code
        extra_fields['error_category'] = error_code.category

    record = logger.makeRecord(
        logger.name, logging.ERROR, '', 0, message, (),
        exc_info if include_traceback else None
    )
    record.extra_fields = extra_fields
    logger.handle(record)


def log_validation_result(
    logger: logging.Logger,
    result: Any,  # ValidationResult from tscop.validation.result
    include_details: bool = True,
) -> None:
    """
    Log a ValidationResult with appropriate log levels.

    A rejected value is an error. Degradations recorded in lax mode are
    warnings; a clean result is logged at DEBUG so that large imports stay
    quiet. The result's metadata (e.g. strict) is logged with it.

    Args:
        logger: Logger instance to use.
        result: ValidationResult object.
        include_details: Whether to include the first few issues.
    """
    warning_count = result.warning_count
    error_count = len(result.errors)

    if error_count:
        summary = f"Validation failed: {error_count} error(s), {warning_count} warning(s)"
        level = logging.ERROR
    elif warning_count:
        summary = f"Validation passed with {warning_count} value(s) replaced by null"
        level = logging.WARNING
    else:
        summary = "Validation passed successfully"
        level = logging.DEBUG

    extra: Dict[str, Any] = {
        'records': result.records,
        'error_count': error_count,
        'warning_count': warning_count,
        **result.metadata,
    }
    if result.errors:
        extra['line'] = result.errors[0].line
        extra['column'] = result.errors[0].column
    if include_details and result.errors:
        extra['errors'] = [str(e) for e in result.errors[:10]]
    if include_details and result.warnings:
        extra['warnings'] = [str(w) for w in result.warnings[:10]]

    log_with_context(
        logger, level, summary,
        error_code=ErrorCode.VALUE_INVALID if error_count else (ErrorCode.VALUE_DEGRADED if warning_count else None),
        **extra
    )


# Public exports
__all__ = [
    "log_with_context",
    "log_exception",
    "log_validation_result",
]
