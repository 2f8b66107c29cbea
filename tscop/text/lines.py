"""
Line tokenizer.

Turns a character stream into a lazy sequence of Line objects. Line endings
(CRLF, CR, LF) are normalized and stripped from the text. Blank lines are
dropped or kept according to two independent policies: internal blanks
(followed by a non-blank line) and final blanks (at the end of the window).
"""

import codecs
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Union

logger = logging.getLogger(__name__)

_EOL = re.compile(r'\r\n|\r|\n')

# Read size used when the input is a file-like object
READ_CHUNK_SIZE = 64 * 1024

TextSource = Union[str, bytes, Iterable[Union[str, bytes]]]


@dataclass(frozen=True)
class Line:
    """One physical line of input with its terminator removed."""
    text: str
    line_index: int


def _iter_chunks(stream: TextSource) -> Iterator[str]:
    """Yield text chunks from a string, a file-like object, or an iterable of chunks."""
    if stream is None:
        return
    if isinstance(stream, (str, bytes)):
        chunks: Iterable = [stream]
    elif hasattr(stream, 'read'):
        chunks = iter(lambda: stream.read(READ_CHUNK_SIZE), stream.read(0))
    else:
        chunks = stream

    decoder = None
    for chunk in chunks:
        if isinstance(chunk, bytes):
            if decoder is None:
                decoder = codecs.getincrementaldecoder('utf-8')()
            chunk = decoder.decode(chunk)
        if chunk:
            yield chunk
    if decoder is not None:
        tail = decoder.decode(b'', final=True)
        if tail:
            yield tail


def split_lines(stream: TextSource) -> Iterator[str]:
    """
    Split a chunked character stream into line texts.

    A CRLF pair split across two chunks counts as one terminator. The empty
    segment after a trailing terminator is not produced.
    """
    pending = ''
    after_cr = False
    for chunk in _iter_chunks(stream):
        if after_cr and chunk.startswith('\n'):
            chunk = chunk[1:]
            if not chunk:
                after_cr = False
                continue
        after_cr = chunk.endswith('\r')
        parts = _EOL.split(pending + chunk)
        pending = parts.pop()
        yield from parts
    if pending:
        yield pending


def line_stream(
    stream: TextSource = None,
    start: int = 0,
    end: Optional[int] = None,
    drop_internal_blank: bool = True,
    drop_final_blank: bool = True,
) -> Iterator[Line]:
    """
    Create a lazy stream of Line objects from a text source.

    Args:
        stream: String, bytes, file-like object, or iterable of string/bytes chunks.
        start: Index of first line to process (inclusive).
        end: Index of line to stop processing (exclusive), None for no limit.
        drop_internal_blank: Drop blank lines that are followed by a non-blank line.
        drop_final_blank: Drop blank lines at the end of the window.

    Yields:
        Line objects. ``line_index`` counts every physical line, blank or not.

    Example:
        >>> [l.text for l in line_stream(['line1\\n', '\\n', 'line3\\n'])]
        ['line1', 'line3']
    """
    if start < 0:
        raise ValueError(f"start must be >= 0, got {start}")
    if end is not None and end < start:
        raise ValueError(f"end ({end}) must be >= start ({start})")

    blanks: List[Line] = []
    dropped = 0
    for line_index, text in enumerate(split_lines(stream)):
        if end is not None and line_index >= end:
            break
        if line_index < start:
            continue

        line = Line(text, line_index)
        if not text:
            blanks.append(line)
            continue

        if drop_internal_blank:
            dropped += len(blanks)
        else:
            yield from blanks
        blanks.clear()
        yield line

    if drop_final_blank:
        dropped += len(blanks)
    else:
        yield from blanks

    if dropped:
        logger.debug(f"Dropped {dropped} blank line(s)")


__all__ = ['Line', 'line_stream', 'split_lines']
