"""
Typed document -> line protocol encoder.

For each document the encoder walks the schema in order: category columns
become tags, the time column becomes the timestamp, and every other column
becomes a field rendered as a wire literal. Null values are left out. A point
always has at least one field: when none remain, ``influxMissingData=true``
is added.

By default the encoder also requires timestamps to be non-decreasing. Sources
whose logs are written newest-first can turn that check off.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

import pandas as pd

from ..errors import ConfigError, EncodingError, OrderError
from ..text.fields import Record
from ..validation.schema import FieldType, require_schema, validate_measurement, MEASUREMENT_REGEX
from ..validation.values import parse_iso8601
from .format import (
    EncodedRecord,
    MISSING_DATA_FIELD,
    MISSING_DATA_LITERAL,
    format_float,
    format_integer,
    format_record,
    quote_text,
)

logger = logging.getLogger(__name__)


def _format_text(value: Any) -> Optional[str]:
    return quote_text(str(value))


def _format_boolean(value: Any) -> Optional[str]:
    if isinstance(value, str):
        upper = value.strip().upper()
        return upper if upper in ('TRUE', 'FALSE') else None
    return 'TRUE' if value else 'FALSE'


FIELD_FORMATTERS: Dict[FieldType, Callable[[Any], Optional[str]]] = {
    FieldType.TEXT: _format_text,
    FieldType.INTEGER: format_integer,
    FieldType.FLOAT: format_float,
    FieldType.BOOLEAN: _format_boolean,
}


def is_null(value: Any) -> bool:
    """True for None, NaN, and NaT."""
    if value is None:
        return True
    return pd.api.types.is_scalar(value) and bool(pd.isna(value))


def to_nanoseconds(value: Any) -> int:
    """
    Convert a time value to integer nanoseconds since the epoch.

    Accepts pandas Timestamps, datetimes (naive values are UTC), ISO-8601
    strings, and numbers of epoch milliseconds.

    Raises:
        EncodingError: If the value cannot be read as a time.
    """
    if isinstance(value, bool):
        raise EncodingError(f"Invalid time value {value!r}")
    if isinstance(value, (int, float)):
        return int(round(value * 1_000_000))
    if isinstance(value, str):
        ts = parse_iso8601(value)
        if ts is None:
            raise EncodingError(f"Invalid time value {value!r}")
        return ts.value
    if isinstance(value, (pd.Timestamp, datetime)):
        ts = pd.Timestamp(value)
        if ts.tz is None:
            ts = ts.tz_localize('UTC')
        return ts.value
    raise EncodingError(f"Invalid time value {value!r}")


class LineProtocolEncoder:
    """
    Stage turning Records with typed documents into EncodedRecords.

    Each encoder owns its previous-timestamp cursor; do not share one
    instance between independent sources.

    Example:
        >>> encoder = LineProtocolEncoder('par', {'time': 'time', 'par': 'float'})
        >>> for point in encoder(records):
        ...     out.write(point.to_line())
    """

    def __init__(self, measurement: str, schema: Mapping[str, Any], ensure_sorted: bool = True):
        if not validate_measurement(measurement):
            raise ConfigError(
                f"Invalid measurement name {measurement!r}. Must match regex {MEASUREMENT_REGEX.pattern}"
            )
        self.measurement = measurement
        self.schema = require_schema(schema)
        self.ensure_sorted = ensure_sorted
        self.previous_ns: Optional[int] = None
        self._plan: List[Tuple[str, FieldType, Optional[Callable[[Any], Optional[str]]]]] = [
            (column, field_type, FIELD_FORMATTERS.get(field_type))
            for column, field_type in self.schema.items()
        ]
        logger.debug(f"Encoder for {measurement}: {len(self._plan)} column(s), ensure_sorted={ensure_sorted}")

    def encode(self, record: Record) -> EncodedRecord:
        """
        Encode one record.

        Raises:
            EncodingError: If the document has no time value.
            OrderError: If ordering is enforced and the time is earlier than
                the previous record's.
        """
        doc = record.doc or {}
        tags: Dict[str, str] = {}
        fields: Dict[str, str] = {}
        timestamp_ns: Optional[int] = None

        for column, field_type, formatter in self._plan:
            if column not in doc:
                continue
            value = doc[column]
            if is_null(value):
                continue
            if field_type is FieldType.CATEGORY:
                tag = str(value)
                if tag:
                    tags[column] = tag
            elif field_type is FieldType.TIME:
                timestamp_ns = to_nanoseconds(value)
            else:
                literal = formatter(value)
                if literal is not None:
                    fields[column] = literal

        if not fields:
            fields[MISSING_DATA_FIELD] = MISSING_DATA_LITERAL

        if timestamp_ns is None:
            raise EncodingError(f"time value missing from line {record.line_number}")
        if self.ensure_sorted and self.previous_ns is not None and timestamp_ns < self.previous_ns:
            raise OrderError(
                f"records not in ascending chronological order near line {record.line_number}",
                data={'line': record.line_number, 'timestamp_ns': timestamp_ns, 'previous_ns': self.previous_ns},
            )
        self.previous_ns = timestamp_ns

        return EncodedRecord(
            measurement=self.measurement,
            timestamp_ns=timestamp_ns,
            tags=tags,
            fields=fields,
            line_index=record.line_index,
        )

    def __call__(self, records: Iterable[Record]) -> Iterator[EncodedRecord]:
        for record in records:
            yield self.encode(record)


def doc_to_line_protocol(
    measurement: str,
    schema: Mapping[str, Any],
    ensure_sorted: bool = True,
) -> LineProtocolEncoder:
    """
    Create a stage encoding typed documents as line protocol points.

    Args:
        measurement: Measurement name (``^[A-Za-z0-9_-]+$``).
        schema: Column -> type for every column to include in the output.
        ensure_sorted: Raise OrderError on a decreasing timestamp.

    Raises:
        SchemaError: Immediately, if the schema contains an unknown type.
        ConfigError: Immediately, if the measurement name is invalid.
    """
    return LineProtocolEncoder(measurement, schema, ensure_sorted=ensure_sorted)


def to_lines(points: Iterable[EncodedRecord]) -> Iterator[str]:
    """Render points as newline-terminated line protocol strings."""
    for point in points:
        yield format_record(point)


__all__ = [
    'FIELD_FORMATTERS',
    'LineProtocolEncoder',
    'doc_to_line_protocol',
    'is_null',
    'to_lines',
    'to_nanoseconds',
]
