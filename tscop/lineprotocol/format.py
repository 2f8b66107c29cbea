"""
Line protocol wire format.

    measurement[,tag=value...] field=value[,field=value...] timestamp_ns

Tags and fields keep the order they were added in. Field values are stored
as wire literals (``10i``, ``6.0``, ``"some notes"``, ``TRUE``), so a record
can be written without knowing its schema.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..errors import EncodingError

MISSING_DATA_FIELD = 'influxMissingData'
MISSING_DATA_LITERAL = 'true'


@dataclass
class EncodedRecord:
    """One line protocol point."""
    measurement: str
    timestamp_ns: int
    tags: Dict[str, str] = field(default_factory=dict)
    fields: Dict[str, str] = field(default_factory=dict)
    line_index: Optional[int] = None

    def to_line(self) -> str:
        """Render as a newline-terminated line protocol string."""
        return format_record(self)


# -----------------------------------------------------------------------------
# Escaping
# -----------------------------------------------------------------------------

def escape_measurement(name: str) -> str:
    return name.replace(',', r'\,').replace(' ', r'\ ')


def escape_key(key: str) -> str:
    """Escape a tag key, tag value, or field key."""
    return str(key).replace('\\', '\\\\').replace(',', r'\,').replace('=', r'\=').replace(' ', r'\ ')


def quote_text(text: Optional[str]) -> Optional[str]:
    """
    Double-quote a string field value.

    Embedded double quotes and backslashes are backslash-escaped. A value that
    is already wrapped in double quotes is returned unchanged. Empty values
    return None so they can be omitted.
    """
    if not text:
        return None
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return text
    return '"' + text.replace('\\', '\\\\').replace('"', '\\"') + '"'


def format_integer(value: int) -> str:
    return f"{int(value)}i"


def format_float(value: float) -> str:
    number = float(value)
    if not math.isfinite(number):
        raise EncodingError(f"Line protocol has no literal for float value {number!r}")
    return repr(number)


def format_boolean(value: bool) -> str:
    return 'TRUE' if value else 'FALSE'


def format_record(record: EncodedRecord) -> str:
    """
    Render an EncodedRecord as one line of line protocol.

    Empty tag values are left out because the wire format does not allow
    them.
    """
    parts = [escape_measurement(record.measurement)]
    parts.extend(
        f"{escape_key(k)}={escape_key(v)}"
        for k, v in record.tags.items()
        if v != ''
    )
    key = ','.join(parts)
    fields = ','.join(f"{escape_key(k)}={v}" for k, v in record.fields.items())
    return f"{key} {fields} {record.timestamp_ns}\n"


# -----------------------------------------------------------------------------
# Parsing
# -----------------------------------------------------------------------------

def _split_unescaped(text: str, sep: str, respect_quotes: bool = False, maxsplit: int = -1) -> List[str]:
    """Split on ``sep`` where it is not backslash-escaped (or quoted)."""
    parts = []
    current = []
    escaped = False
    quoted = False
    for ch in text:
        if escaped:
            current.append(ch)
            escaped = False
        elif ch == '\\':
            current.append(ch)
            escaped = True
        elif respect_quotes and ch == '"':
            current.append(ch)
            quoted = not quoted
        elif ch == sep and not quoted and maxsplit != 0:
            parts.append(''.join(current))
            current = []
            maxsplit -= 1
        else:
            current.append(ch)
    parts.append(''.join(current))
    return parts


def _unescape(text: str) -> str:
    out = []
    escaped = False
    for ch in text:
        if escaped:
            if ch not in ', =\\':
                out.append('\\')
            out.append(ch)
            escaped = False
        elif ch == '\\':
            escaped = True
        else:
            out.append(ch)
    if escaped:
        out.append('\\')
    return ''.join(out)


def parse_line(line: str) -> EncodedRecord:
    """
    Parse one line of line protocol back into an EncodedRecord.

    Field values are returned as wire literals, exactly as written.

    Raises:
        ValueError: If the line is not well-formed line protocol.
    """
    line = line.rstrip('\r\n')
    sections = _split_unescaped(line, ' ', respect_quotes=True)
    if len(sections) != 3:
        raise ValueError(f"Expected 3 space-separated sections, found {len(sections)}: {line!r}")
    key, field_section, timestamp = sections

    key_parts = _split_unescaped(key, ',')
    measurement = _unescape(key_parts[0])
    if not measurement:
        raise ValueError(f"Missing measurement: {line!r}")

    tags: Dict[str, str] = {}
    for part in key_parts[1:]:
        pair = _split_unescaped(part, '=', maxsplit=1)
        if len(pair) != 2:
            raise ValueError(f"Malformed tag {part!r}")
        tags[_unescape(pair[0])] = _unescape(pair[1])

    fields: Dict[str, str] = {}
    for part in _split_unescaped(field_section, ',', respect_quotes=True):
        pair = _split_unescaped(part, '=', maxsplit=1)
        if len(pair) != 2 or not pair[1]:
            raise ValueError(f"Malformed field {part!r}")
        fields[_unescape(pair[0])] = pair[1]

    try:
        timestamp_ns = int(timestamp)
    except ValueError:
        raise ValueError(f"Invalid timestamp {timestamp!r}") from None

    return EncodedRecord(measurement, timestamp_ns, tags, fields)


__all__ = [
    'EncodedRecord',
    'MISSING_DATA_FIELD',
    'MISSING_DATA_LITERAL',
    'escape_key',
    'escape_measurement',
    'format_boolean',
    'format_float',
    'format_integer',
    'format_record',
    'parse_line',
    'quote_text',
]
