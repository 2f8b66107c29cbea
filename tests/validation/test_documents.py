"""
Tests for document construction and validation stages.

Tests for:
- fields_to_doc()
- validate_doc() / DocumentValidator
"""

# Standard library imports
import logging
import sys
from pathlib import Path

# Third-party imports
import pytest
import pandas as pd

# Local imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from tscop.errors import SchemaError, StructureError, ValueValidationError
from tscop.pipeline import Pipeline
from tscop.text import field_stream
from tscop.validation import fields_to_doc, validate_doc


HEADERS = ['time', 'speed', 'flag']
SCHEMA = {'time': 'time', 'speed': 'float', 'flag': 'boolean'}


def docs(text, headers=HEADERS, strict=True):
    return Pipeline(field_stream(text, delimiter=',')).through(fields_to_doc(headers, strict=strict))


class TestFieldsToDoc:
    """Tests for fields_to_doc() function."""

    @pytest.mark.unit
    def test_zips_headers(self):
        """Fields are keyed by header in order."""
        records = list(docs('2017-05-06,1.5,TRUE\n'))
        assert records[0].doc == {'time': '2017-05-06', 'speed': '1.5', 'flag': 'TRUE'}

    @pytest.mark.unit
    def test_column_count_mismatch(self):
        """A mismatch raises StructureError naming the line."""
        with pytest.raises(StructureError) as exc_info:
            list(docs('2017-05-06,1.5,TRUE\n2017-05-06,1.5\n'))
        assert str(exc_info.value) == 'Column count (2) does not match header count (3) on line 2'

    @pytest.mark.unit
    def test_mismatch_dropped_when_not_strict(self):
        """Mismatched records are skipped in permissive mode."""
        records = list(docs('a,b,c\na,b\nd,e,f\n', strict=False))
        assert [r.doc['time'] for r in records] == ['a', 'd']


class TestValidateDoc:
    """Tests for validate_doc() / DocumentValidator."""

    @pytest.mark.unit
    def test_typed_document(self):
        """Values are converted to their schema types."""
        records = list(docs('2017-05-06T19:52:57.601Z,6.0,true\n').through(validate_doc(SCHEMA, strict=True)))
        doc = records[0].doc
        assert doc['time'] == pd.Timestamp('2017-05-06T19:52:57.601Z')
        assert doc['speed'] == 6.0
        assert doc['flag'] is True

    @pytest.mark.unit
    def test_orig_doc_kept_separately(self):
        """The raw mapping is kept under orig_doc as a separate object."""
        record = next(iter(docs('2017-05-06,NA,TRUE\n').through(validate_doc(SCHEMA))))
        assert record.orig_doc == {'time': '2017-05-06', 'speed': 'NA', 'flag': 'TRUE'}
        assert record.doc['speed'] is None
        assert record.orig_doc is not record.doc

    @pytest.mark.unit
    def test_strict_error_message(self):
        """Strict failures name the line, column, value and type."""
        stage = validate_doc(SCHEMA, strict=True)
        with pytest.raises(ValueValidationError) as exc_info:
            list(docs('2017-05-06,1.0,TRUE\n2017-05-06,abc,TRUE\n').through(stage))
        err = exc_info.value
        assert str(err) == 'Not a float on line 2. column=speed, value=abc, type=float'
        assert (err.line, err.column, err.value) == (2, 'speed', 'abc')
        assert stage.result.passed is False

    @pytest.mark.unit
    def test_float_overflow(self):
        """Floats beyond double range are rejected, or nulled in lax mode."""
        with pytest.raises(ValueValidationError, match='Float out of range on line 1'):
            list(docs('2017-05-06,1e400,TRUE\n').through(validate_doc(SCHEMA, strict=True)))
        record = next(iter(docs('2017-05-06,1e400,TRUE\n').through(validate_doc(SCHEMA))))
        assert record.doc['speed'] is None

    @pytest.mark.unit
    def test_strict_failure_logged(self, caplog):
        """The validation summary is logged when a strict error stops the stream."""
        caplog.set_level(logging.DEBUG, logger='tscop')
        with pytest.raises(ValueValidationError):
            list(docs('2017-05-06,abc,TRUE\n').through(validate_doc(SCHEMA, strict=True)))
        (record,) = [r for r in caplog.records if r.name == 'tscop.validation.documents']
        assert record.levelno == logging.ERROR
        assert record.getMessage() == 'Validation failed: 1 error(s), 0 warning(s)'
        assert record.extra_fields['error_code'] == 'VAL_001'
        assert record.extra_fields['strict'] is True
        assert record.extra_fields['errors'] == ['Not a float on line 1. column=speed, value=abc, type=float']

    @pytest.mark.unit
    def test_lax_records_degradations(self):
        """Lax mode nulls bad values and counts them per column."""
        stage = validate_doc(SCHEMA, strict=False)
        records = list(docs('2017-05-06,abc,maybe\n2017-05-07,x,TRUE\n').through(stage))
        assert [r.doc['speed'] for r in records] == [None, None]
        assert records[0].doc['flag'] is None
        assert stage.result.warning_count == 3
        assert stage.result.degraded_columns == {'speed': 2, 'flag': 1}
        assert stage.result.records == 2

    @pytest.mark.unit
    def test_lax_time_still_fails(self):
        """A bad time is fatal in lax mode too."""
        with pytest.raises(ValueValidationError, match='Invalid ISO8601 timestamp on line 1'):
            list(docs('not-a-time,1.0,TRUE\n').through(validate_doc(SCHEMA, strict=False)))

    @pytest.mark.unit
    def test_only_schema_columns_kept(self):
        """Columns outside the schema are dropped; absent schema columns are omitted."""
        stage = validate_doc({'time': 'time', 'speed': 'float', 'depth': 'float'})
        record = next(iter(docs('2017-05-06,1.0,TRUE\n').through(stage)))
        assert set(record.doc) == {'time', 'speed'}

    @pytest.mark.unit
    def test_invalid_schema_fails_immediately(self):
        """Construction fails before any input is read."""
        with pytest.raises(SchemaError, match="Invalid type 'floaty'"):
            validate_doc({'speed': 'floaty'})
