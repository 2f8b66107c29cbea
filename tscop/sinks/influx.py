"""
InfluxDB sink.

Batches are sent as line protocol strings at nanosecond precision through
influxdb_client_3. When a downsampling query is configured it runs after
every successful batch, so large imports with small batch sizes fire it
often.
"""

import logging
from typing import Any, Optional, Sequence

from influxdb_client_3 import InfluxDBClient3

from ..errors import SinkError
from ..logging.error_codes import ErrorCode
from ..lineprotocol.format import EncodedRecord, format_record
from .base import Sink

logger = logging.getLogger(__name__)


class InfluxDBSink(Sink):
    """
    Write batches to an InfluxDB database.

    Args:
        host: InfluxDB host or URL.
        database: Database (bucket) name.
        token: Optional authentication token.
        downsample_query: Optional InfluxQL statement run after each batch.
        client: Pre-built client. When given, host/token are not used to
            construct one and the sink does not close it.
    """

    def __init__(
        self,
        host: str,
        database: str,
        token: Optional[str] = None,
        downsample_query: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        self.host = host
        self.database = database
        self.downsample_query = downsample_query
        self.batches_written = 0
        self._owns_client = client is None
        if client is None:
            try:
                client = InfluxDBClient3(host=host, database=database, token=token)
            except Exception as e:
                raise SinkError(f"Failed to create InfluxDB client for {host}: {e}") from e
            logger.info(f"InfluxDB client created for {host}, database {database}")
        self.client = client

    def write_batch(self, batch: Sequence[EncodedRecord]) -> None:
        if not batch:
            return
        lines = [format_record(record).rstrip('\n') for record in batch]
        try:
            self.client.write(record=lines, write_precision='ns')
        except Exception as e:
            raise SinkError(
                f"Failed to write {len(lines)} point(s) to {self.database}: {e}",
                data={'database': self.database, 'points': len(lines)},
            ) from e
        self.batches_written += 1
        logger.debug(f"Wrote {len(lines)} point(s) to {self.database}")

        if self.downsample_query:
            try:
                self.client.query(query=self.downsample_query, language='influxql')
            except Exception as e:
                raise SinkError(
                    f"Downsampling query failed after batch {self.batches_written}: {e}",
                    data={'query': self.downsample_query},
                    error_code=ErrorCode.SINK_QUERY_FAILED,
                ) from e

    def close(self) -> None:
        if self._owns_client:
            self.client.close()


__all__ = ['InfluxDBSink']
