"""
Error taxonomy for the text-to-line-protocol pipeline.

Every fatal condition raised by tscop is a TimeSeriesCopError. Callers that
only want a single human-readable diagnostic can catch the base class and
print ``str(err)``; the subclasses carry structured details for logging.
"""

from typing import Any, Optional

from .logging.error_codes import ErrorCode


class TimeSeriesCopError(Exception):
    """Base class for all tscop errors."""

    default_code = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str = 'Unknown Time Series Cop error',
        data: Optional[Any] = None,
        error_code: Optional[ErrorCode] = None,
    ):
        super().__init__(message)
        self.message = message
        self.data = data
        self.error_code = error_code or self.default_code

    def __str__(self) -> str:
        return self.message


class SchemaError(TimeSeriesCopError):
    """A schema contains an unrecognized type tag."""

    default_code = ErrorCode.SCHEMA_INVALID_TYPE

    def __init__(self, type_name: Any):
        super().__init__(f"Invalid type '{type_name}'", data={'type': type_name})
        self.type_name = type_name


class StructureError(TimeSeriesCopError):
    """A record or header does not have the expected shape."""

    default_code = ErrorCode.STRUCTURE_COLUMN_COUNT


class ValueValidationError(TimeSeriesCopError):
    """A value failed strict type validation."""

    default_code = ErrorCode.VALUE_INVALID

    def __init__(self, reason: str, line: int, column: str, value: Any, type_name: str):
        super().__init__(
            f"{reason} on line {line}. column={column}, value={value}, type={type_name}",
            data={'line': line, 'column': column, 'value': value, 'type': type_name},
        )
        self.reason = reason
        self.line = line
        self.column = column
        self.value = value
        self.type_name = type_name


class EncodingError(TimeSeriesCopError):
    """A document cannot be turned into a line protocol record."""

    default_code = ErrorCode.ENCODING_MISSING_TIME


class OrderError(EncodingError):
    """A record's timestamp is earlier than the previous record's."""

    default_code = ErrorCode.ENCODING_ORDER


class SinkError(TimeSeriesCopError):
    """Writing a batch (or the follow-up query) to a sink failed."""

    default_code = ErrorCode.SINK_WRITE_FAILED


class ConfigError(TimeSeriesCopError):
    """Options or settings are invalid."""

    default_code = ErrorCode.CONFIG_INVALID


__all__ = [
    'TimeSeriesCopError',
    'SchemaError',
    'StructureError',
    'ValueValidationError',
    'EncodingError',
    'OrderError',
    'SinkError',
    'ConfigError',
]
