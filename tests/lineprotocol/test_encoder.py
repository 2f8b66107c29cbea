"""
Tests for the line protocol encoder.

Tests for:
- doc_to_line_protocol() / LineProtocolEncoder
- to_nanoseconds()
- to_lines()
"""

# Standard library imports
import sys
from datetime import datetime, timezone
from pathlib import Path

# Third-party imports
import pytest
import numpy as np
import pandas as pd

# Local imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from tscop.errors import ConfigError, EncodingError, OrderError, SchemaError
from tscop.lineprotocol import (
    MISSING_DATA_FIELD,
    doc_to_line_protocol,
    parse_line,
    to_lines,
    to_nanoseconds,
)
from tscop.logging import ErrorCode


TS = '2017-05-06T19:52:57.601Z'
TS_NS = 1494100377601000000


def encode(measurement, schema, docs, make_record, ensure_sorted=True):
    stage = doc_to_line_protocol(measurement, schema, ensure_sorted=ensure_sorted)
    records = [make_record(doc, line_index=i, record_index=i) for i, doc in enumerate(docs)]
    return list(to_lines(stage(records)))


class TestScenarios:
    """End-to-end encoding of typed documents."""

    @pytest.mark.unit
    def test_full_document(self, scenario_schema, make_record):
        """All six types encode in schema order."""
        doc = {
            'cruise': 'cruise', 'speed': 6.0, 'distance': 10, 'notes': 'some notes',
            'group': 'A', 'flag': 'TRUE', 'time': pd.Timestamp(TS),
        }
        lines = encode('measurement', scenario_schema, [doc], make_record)
        assert lines == [
            'measurement,group=A,cruise=cruise '
            'speed=6.0,distance=10i,notes="some notes",flag=TRUE 1494100377601000000\n'
        ]

    @pytest.mark.unit
    def test_missing_data_sentinel(self, scenario_schema, make_record):
        """A document with no field values gets influxMissingData=true."""
        doc = {'time': pd.Timestamp(TS), 'cruise': 'cruise', 'speed': None, 'notes': None}
        lines = encode('measurement', scenario_schema, [doc], make_record)
        assert lines == [f'measurement,cruise=cruise influxMissingData=true {TS_NS}\n']

    @pytest.mark.unit
    def test_time_and_categories_only(self, make_record):
        """Tags alone do not count as fields."""
        stage = doc_to_line_protocol('m', {'time': 'time', 'a': 'category', 'b': 'category'})
        point = stage.encode(make_record({'time': TS, 'a': 'x', 'b': 'y'}))
        assert point.fields == {MISSING_DATA_FIELD: 'true'}
        assert point.tags == {'a': 'x', 'b': 'y'}

    @pytest.mark.unit
    def test_out_of_order_raises(self, make_record):
        """Decreasing timestamps fail when ordering is enforced."""
        schema = {'time': 'time', 'v': 'integer'}
        docs = [{'time': '2017-05-06T00:00:01Z', 'v': 1}, {'time': '2017-05-06T00:00:00Z', 'v': 2}]
        with pytest.raises(OrderError, match='near line 2') as exc_info:
            encode('m', schema, docs, make_record)
        assert exc_info.value.error_code is ErrorCode.ENCODING_ORDER

    @pytest.mark.unit
    def test_out_of_order_allowed(self, make_record):
        """Ordering can be turned off."""
        schema = {'time': 'time', 'v': 'integer'}
        docs = [{'time': '2017-05-06T00:00:01Z', 'v': 1}, {'time': '2017-05-06T00:00:00Z', 'v': 2}]
        assert len(encode('m', schema, docs, make_record, ensure_sorted=False)) == 2

    @pytest.mark.unit
    def test_equal_timestamps_allowed(self, make_record):
        schema = {'time': 'time', 'v': 'integer'}
        docs = [{'time': TS, 'v': 1}, {'time': TS, 'v': 2}]
        assert len(encode('m', schema, docs, make_record)) == 2


class TestEncoder:
    """Tests for LineProtocolEncoder details."""

    @pytest.mark.unit
    def test_missing_time(self, make_record):
        stage = doc_to_line_protocol('m', {'time': 'time', 'v': 'float'})
        with pytest.raises(EncodingError, match='time value missing from line 4'):
            stage.encode(make_record({'v': 1.0}, line_index=3))

    @pytest.mark.unit
    def test_nulls_skipped(self, make_record):
        """None, NaN and NaT values are left out."""
        stage = doc_to_line_protocol('m', {'time': 'time', 'a': 'float', 'b': 'float', 'c': 'integer'})
        point = stage.encode(make_record({'time': TS, 'a': float('nan'), 'b': 2.5, 'c': None}))
        assert point.fields == {'b': '2.5'}

    @pytest.mark.unit
    def test_numpy_values(self, make_record):
        stage = doc_to_line_protocol('m', {'time': 'time', 'n': 'integer', 'f': 'float', 'ok': 'boolean'})
        point = stage.encode(make_record({'time': TS, 'n': np.int64(3), 'f': np.float64(1.25), 'ok': False}))
        assert point.fields == {'n': '3i', 'f': '1.25', 'ok': 'FALSE'}

    @pytest.mark.unit
    def test_columns_outside_schema_ignored(self, make_record):
        stage = doc_to_line_protocol('m', {'time': 'time', 'v': 'float'})
        point = stage.encode(make_record({'time': TS, 'v': 1.0, 'extra': 'x'}))
        assert point.fields == {'v': '1.0'}

    @pytest.mark.unit
    def test_round_trip(self, make_record):
        """Parsing an encoded line recovers measurement, tags and fields."""
        stage = doc_to_line_protocol('par', {'time': 'time', 'cruise': 'category', 'par': 'float'})
        point = stage.encode(make_record({'time': TS, 'cruise': 'KOK1606', 'par': 12.5}))
        parsed = parse_line(point.to_line())
        assert parsed.measurement == 'par'
        assert parsed.tags == {'cruise': 'KOK1606'}
        assert parsed.fields == {'par': '12.5'}
        assert parsed.timestamp_ns == TS_NS

    @pytest.mark.unit
    def test_cursor_is_per_instance(self, make_record):
        """Independent encoders do not share ordering state."""
        schema = {'time': 'time', 'v': 'integer'}
        first = doc_to_line_protocol('m', schema)
        second = doc_to_line_protocol('m', schema)
        first.encode(make_record({'time': '2017-05-07T00:00:00Z', 'v': 1}))
        second.encode(make_record({'time': '2017-05-06T00:00:00Z', 'v': 1}))

    @pytest.mark.unit
    def test_invalid_schema(self):
        with pytest.raises(SchemaError):
            doc_to_line_protocol('m', {'time': 'time', 'v': 'number'})

    @pytest.mark.unit
    def test_invalid_measurement(self):
        with pytest.raises(ConfigError, match='Invalid measurement name'):
            doc_to_line_protocol('bad name', {'time': 'time'})


class TestToNanoseconds:
    """Tests for to_nanoseconds() function."""

    @pytest.mark.unit
    def test_timestamp_and_string(self):
        assert to_nanoseconds(pd.Timestamp(TS)) == TS_NS
        assert to_nanoseconds(TS) == TS_NS

    @pytest.mark.unit
    def test_naive_datetime_is_utc(self):
        assert to_nanoseconds(datetime(2017, 5, 6, 19, 52, 57, 601000)) == TS_NS
        assert to_nanoseconds(datetime(2017, 5, 6, 19, 52, 57, 601000, tzinfo=timezone.utc)) == TS_NS

    @pytest.mark.unit
    def test_epoch_milliseconds(self):
        assert to_nanoseconds(1494100377601) == TS_NS

    @pytest.mark.unit
    @pytest.mark.parametrize('value', ['yesterday', True, object()])
    def test_invalid(self, value):
        with pytest.raises(EncodingError):
            to_nanoseconds(value)
