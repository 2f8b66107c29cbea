"""
Line protocol encoding.
"""

from .format import (
    EncodedRecord,
    MISSING_DATA_FIELD,
    MISSING_DATA_LITERAL,
    escape_key,
    escape_measurement,
    format_record,
    parse_line,
    quote_text,
)
from .encoder import (
    LineProtocolEncoder,
    doc_to_line_protocol,
    is_null,
    to_lines,
    to_nanoseconds,
)

__all__ = [
    'EncodedRecord',
    'MISSING_DATA_FIELD',
    'MISSING_DATA_LITERAL',
    'escape_key',
    'escape_measurement',
    'format_record',
    'parse_line',
    'quote_text',
    'LineProtocolEncoder',
    'doc_to_line_protocol',
    'is_null',
    'to_lines',
    'to_nanoseconds',
]
