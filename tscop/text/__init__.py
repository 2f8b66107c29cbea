"""
Text tokenizers: raw character stream -> lines -> fields.
"""

from .lines import Line, line_stream, split_lines
from .fields import (
    Record,
    WHITESPACE,
    field_stream,
    split_delimited,
    split_on_whitespace,
)

__all__ = [
    'Line',
    'line_stream',
    'split_lines',
    'Record',
    'WHITESPACE',
    'field_stream',
    'split_delimited',
    'split_on_whitespace',
]
