"""
Line protocol file sink.
"""

import logging
from typing import IO, Sequence

from ..errors import SinkError
from ..lineprotocol.format import EncodedRecord, format_record
from .base import Sink

logger = logging.getLogger(__name__)


class LineProtocolFileSink(Sink):
    """
    Write batches as newline-terminated line protocol to a text stream.

    Accepts text streams and binary streams; binary streams receive UTF-8.
    The stream is flushed on close but never closed, since the caller owns it.
    """

    def __init__(self, outstream: IO):
        self.outstream = outstream
        self.lines_written = 0

    def write_batch(self, batch: Sequence[EncodedRecord]) -> None:
        text = ''.join(format_record(record) for record in batch)
        try:
            if _is_binary(self.outstream):
                self.outstream.write(text.encode('utf-8'))
            else:
                self.outstream.write(text)
        except (OSError, ValueError) as e:
            raise SinkError(f"Failed to write line protocol: {e}") from e
        self.lines_written += len(batch)
        logger.debug(f"Wrote batch of {len(batch)} line(s)")

    def close(self) -> None:
        flush = getattr(self.outstream, 'flush', None)
        if flush is not None:
            flush()


def _is_binary(stream: IO) -> bool:
    mode = getattr(stream, 'mode', None)
    if isinstance(mode, str):
        return 'b' in mode
    return not hasattr(stream, 'encoding') and hasattr(stream, 'getbuffer')


__all__ = ['LineProtocolFileSink']
