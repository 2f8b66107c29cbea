"""
Sink boundary: batching, file and InfluxDB writers, and save_data.
"""

from .batching import DEFAULT_BATCH_SIZE, batch_records
from .base import Sink
from .file import LineProtocolFileSink
from .influx import InfluxDBSink
from .save import SaveResult, SinkOptions, save_data

__all__ = [
    'DEFAULT_BATCH_SIZE',
    'batch_records',
    'Sink',
    'LineProtocolFileSink',
    'InfluxDBSink',
    'SaveResult',
    'SinkOptions',
    'save_data',
]
