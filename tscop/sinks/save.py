"""
Encode, batch, and write typed records to a file or a database.
"""

import logging
from dataclasses import dataclass
from typing import IO, Any, Iterable, Mapping, NamedTuple, Optional

from ..errors import ConfigError, TimeSeriesCopError
from ..lineprotocol.encoder import LineProtocolEncoder
from ..logging.context import LogContext
from ..logging.utils import log_exception
from ..text.fields import Record
from ..validation.schema import MEASUREMENT_REGEX, validate_measurement
from .base import Sink
from .batching import DEFAULT_BATCH_SIZE, batch_records
from .file import LineProtocolFileSink
from .influx import InfluxDBSink

logger = logging.getLogger(__name__)


@dataclass
class SinkOptions:
    """
    Destination options for save_data.

    Exactly one destination kind is allowed: a file stream, or a
    host/database pair.
    """
    measurement: str
    outstream: Optional[IO] = None
    host: Optional[str] = None
    database: Optional[str] = None
    batch_size: int = DEFAULT_BATCH_SIZE
    token: Optional[str] = None
    downsample_query: Optional[str] = None

    def __post_init__(self):
        if not self.measurement or not validate_measurement(self.measurement):
            raise ConfigError(
                f"Invalid measurement name {self.measurement!r}. "
                f"Must match regex {MEASUREMENT_REGEX.pattern}"
            )
        has_db = bool(self.host) or bool(self.database)
        if self.outstream is not None and has_db:
            raise ConfigError("outstream is incompatible with host/database")
        if has_db and not (self.host and self.database):
            raise ConfigError("host and database must be given together")
        if self.outstream is None and not has_db:
            raise ConfigError("Either outstream or host/database is required")
        if not isinstance(self.batch_size, int) or isinstance(self.batch_size, bool) or self.batch_size <= 0:
            raise ConfigError(f"batch_size must be a positive integer, got {self.batch_size!r}")

    @property
    def to_database(self) -> bool:
        return self.outstream is None


class SaveResult(NamedTuple):
    """Outcome of a successful save."""
    count: int
    batches: int

    @property
    def message(self) -> str:
        return f"Success. Wrote {self.count} points."


def _open_sink(options: SinkOptions, client: Optional[Any]) -> Sink:
    if options.to_database:
        return InfluxDBSink(
            options.host,
            options.database,
            token=options.token,
            downsample_query=options.downsample_query,
            client=client,
        )
    return LineProtocolFileSink(options.outstream)


def save_data(
    records: Iterable[Record],
    measurement: str,
    schema: Mapping[str, Any],
    outstream: Optional[IO] = None,
    host: Optional[str] = None,
    database: Optional[str] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    ensure_sorted: bool = True,
    token: Optional[str] = None,
    downsample_query: Optional[str] = None,
    client: Optional[Any] = None,
) -> SaveResult:
    """
    Encode records as line protocol and write them in sorted batches.

    Processing stops at the first error. Batches already written stay
    written.

    Args:
        records: Records carrying typed documents (after validate_doc).
        measurement: Measurement name.
        schema: Column -> type for every column to write.
        outstream: File-like target for line protocol text.
        host: InfluxDB host (requires ``database``).
        database: InfluxDB database (requires ``host``).
        batch_size: Points per batch.
        ensure_sorted: Reject decreasing timestamps while encoding.
        token: InfluxDB authentication token.
        downsample_query: InfluxQL statement to run after each batch.
        client: Pre-built InfluxDB client (mainly for tests).

    Returns:
        SaveResult with the number of points and batches written.

    Raises:
        ConfigError: For invalid options, before anything is read.
        TimeSeriesCopError: Any validation, encoding, or sink error.
    """
    options = SinkOptions(
        measurement=measurement,
        outstream=outstream,
        host=host,
        database=database,
        batch_size=batch_size,
        token=token,
        downsample_query=downsample_query,
    )
    encoder = LineProtocolEncoder(measurement, schema, ensure_sorted=ensure_sorted)

    count = 0
    batches = 0
    with LogContext(phase='save', measurement=measurement):
        sink = _open_sink(options, client)
        try:
            for batch in batch_records(encoder(records), options.batch_size):
                sink.write_batch(batch)
                count += len(batch)
                batches += 1
        except TimeSeriesCopError as e:
            log_exception(logger, f"Save stopped after {count} point(s)", e, include_traceback=False)
            raise
        finally:
            sink.close()

    logger.info(f"Wrote {count} point(s) in {batches} batch(es) for {measurement}")
    return SaveResult(count, batches)


__all__ = ['SaveResult', 'SinkOptions', 'save_data']
