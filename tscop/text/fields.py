"""
Field tokenizer.

Wraps the line tokenizer and splits each line into an ordered list of string
fields, either on a literal delimiter (with basic CSV quoting) or on runs of
whitespace.
"""

import csv
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from ..errors import StructureError
from .lines import TextSource, line_stream

logger = logging.getLogger(__name__)

# Special delimiter value selecting whitespace splitting
WHITESPACE = 'whitespace'


@dataclass
class Record:
    """
    A line split into fields, as it travels through the pipeline.

    ``doc`` holds the current document (raw strings after fields_to_doc,
    typed values after validate_doc). ``orig_doc`` keeps the raw mapping
    once validation has replaced ``doc``.
    """
    text: str
    line_index: int
    fields: List[str]
    record_index: int
    doc: Optional[Dict[str, Any]] = None
    orig_doc: Optional[Dict[str, str]] = None

    @property
    def line_number(self) -> int:
        """One-based line number for diagnostics."""
        return self.line_index + 1


def split_on_whitespace(text: str) -> List[str]:
    """
    Split on whitespace.

    Leading and trailing whitespace is ignored. Quoted fields containing
    whitespace are not supported.
    """
    return text.split()


def split_delimited(text: str, delimiter: str) -> List[str]:
    """
    Split a line on a literal delimiter.

    Single-character delimiters go through the csv module, so double-quoted
    fields may contain the delimiter. Longer delimiters are split literally.
    """
    if not text:
        return []
    if len(delimiter) != 1:
        return text.split(delimiter)
    try:
        return next(csv.reader([text], delimiter=delimiter), [])
    except csv.Error as e:
        raise StructureError(f"Could not split line: {e}") from e


def field_stream(
    stream: TextSource = None,
    start: int = 0,
    end: Optional[int] = None,
    drop_internal_blank: bool = True,
    drop_final_blank: bool = True,
    delimiter: str = '\t',
) -> Iterator[Record]:
    """
    Create a lazy stream of Records with their line text split into fields.

    Args:
        stream: Text source accepted by line_stream().
        start: Index of first line to process (inclusive).
        end: Index of line to stop processing (exclusive).
        drop_internal_blank: Drop blank lines followed by a non-blank line.
        drop_final_blank: Drop blank lines at the end of the window.
        delimiter: Field separator, or 'whitespace' to split on whitespace.

    Yields:
        Records. Blank lines produce an empty field list. ``record_index``
        counts emitted records only, starting at 0.
    """
    if not delimiter:
        raise ValueError("delimiter must be a non-empty string")

    if delimiter == WHITESPACE:
        splitter = split_on_whitespace
    else:
        def splitter(text: str) -> List[str]:
            return split_delimited(text, delimiter)

    lines = line_stream(
        stream,
        start=start,
        end=end,
        drop_internal_blank=drop_internal_blank,
        drop_final_blank=drop_final_blank,
    )
    for record_index, line in enumerate(lines):
        try:
            fields = splitter(line.text)
        except StructureError as e:
            raise StructureError(f"{e} on line {line.line_index + 1}") from e
        yield Record(
            text=line.text,
            line_index=line.line_index,
            fields=fields,
            record_index=record_index,
        )


__all__ = [
    'Record',
    'WHITESPACE',
    'field_stream',
    'split_delimited',
    'split_on_whitespace',
]
