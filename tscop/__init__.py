"""
Time Series Cop: streaming validation of delimited text logs and conversion
to InfluxDB line protocol.

    raw text -> lines -> fields -> document -> typed document -> points -> sink
"""

__version__ = '0.1.0'

from .errors import (
    TimeSeriesCopError,
    SchemaError,
    StructureError,
    ValueValidationError,
    EncodingError,
    OrderError,
    SinkError,
    ConfigError,
)
from .pipeline import Pipeline
from .text import Line, Record, line_stream, field_stream
from .validation import (
    FieldType,
    validate_schema,
    validate_measurement,
    fields_to_doc,
    validate_doc,
)
from .lineprotocol import EncodedRecord, doc_to_line_protocol, parse_line, to_lines
from .sinks import batch_records, save_data, SaveResult
from .standard import (
    StandardHeader,
    get_standard_header,
    validate_standard_header,
    parse_standard_body,
    parse_standard_file,
)

__all__ = [
    '__version__',
    'TimeSeriesCopError',
    'SchemaError',
    'StructureError',
    'ValueValidationError',
    'EncodingError',
    'OrderError',
    'SinkError',
    'ConfigError',
    'Pipeline',
    'Line',
    'Record',
    'line_stream',
    'field_stream',
    'FieldType',
    'validate_schema',
    'validate_measurement',
    'fields_to_doc',
    'validate_doc',
    'EncodedRecord',
    'doc_to_line_protocol',
    'parse_line',
    'to_lines',
    'batch_records',
    'save_data',
    'SaveResult',
    'StandardHeader',
    'get_standard_header',
    'validate_standard_header',
    'parse_standard_body',
    'parse_standard_file',
]
