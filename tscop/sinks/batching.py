"""
Fixed-size batching of encoded records.
"""

from typing import Iterable, Iterator, List

from ..errors import ConfigError
from ..lineprotocol.format import EncodedRecord

DEFAULT_BATCH_SIZE = 10000


def batch_records(
    records: Iterable[EncodedRecord],
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> Iterator[List[EncodedRecord]]:
    """
    Group records into batches of ``batch_size`` and sort each by timestamp.

    The sort is stable, so records sharing a timestamp keep their input
    order. Ordering across batches is not changed. The last batch may be
    shorter; no empty batch is produced.

    Raises:
        ConfigError: If ``batch_size`` is not a positive integer.
    """
    if not isinstance(batch_size, int) or isinstance(batch_size, bool) or batch_size <= 0:
        raise ConfigError(f"batch_size must be a positive integer, got {batch_size!r}")

    batch: List[EncodedRecord] = []
    for record in records:
        batch.append(record)
        if len(batch) >= batch_size:
            yield sorted(batch, key=lambda r: r.timestamp_ns)
            batch = []
    if batch:
        yield sorted(batch, key=lambda r: r.timestamp_ns)


__all__ = ['DEFAULT_BATCH_SIZE', 'batch_records']
