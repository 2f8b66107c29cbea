"""
Tests for the tscop logging package.
"""

# Standard library imports
import json
import logging
import sys
from pathlib import Path

# Third-party imports
import pytest

# Local imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tscop.errors import OrderError, SchemaError, ValueValidationError
from tscop.logging import (
    ConsoleFormatter,
    ErrorCode,
    LogContext,
    StructuredFormatter,
    configure_logging,
    current_context,
    get_logger,
    log_exception,
    log_validation_result,
    log_with_context,
    shutdown_logging,
)
from tscop.validation import ValidationIssue, ValidationResult, ValidationSeverity


@pytest.fixture
def tscop_caplog(caplog):
    caplog.set_level(logging.DEBUG, logger='tscop')
    return caplog


class TestConfigureLogging:
    """Tests for configure_logging() and get_logger()."""

    @pytest.mark.unit
    def test_get_logger_namespace(self):
        assert get_logger('sinks').name == 'tscop.sinks'
        assert get_logger('tscop.standard').name == 'tscop.standard'

    @pytest.mark.unit
    def test_invalid_level(self):
        with pytest.raises(ValueError, match='Invalid log level'):
            configure_logging(level='LOUD')

    @pytest.mark.integration
    def test_structured_file_log(self, tmp_path):
        """File logs are JSON lines carrying the current context."""
        configure_logging(level='DEBUG', console=False, file=True, log_dir=tmp_path)
        try:
            with LogContext(phase='encode', measurement='par'):
                get_logger('lineprotocol').info('encoding')
        finally:
            shutdown_logging()
        (log_file,) = tmp_path.glob('tscop_*.log')
        entry = json.loads(log_file.read_text(encoding='utf-8').splitlines()[-1])
        assert entry['message'] == 'encoding'
        assert entry['logger'] == 'tscop.lineprotocol'
        assert entry['context'] == {'phase': 'encode', 'measurement': 'par'}


class TestLogContext:
    """Tests for LogContext."""

    @pytest.mark.unit
    def test_nested_context_restored(self):
        with LogContext(phase='header', source='par.tsv'):
            with LogContext(phase='body', cruise='KOK1606'):
                assert current_context().get('phase') == 'body'
                assert current_context().get('source') == 'par.tsv'
            assert current_context().get('phase') == 'header'
            assert current_context().get('cruise') is None
        assert current_context().get('phase') is None


class TestLogHelpers:
    """Tests for log_with_context(), log_exception() and log_validation_result()."""

    @pytest.mark.unit
    def test_log_with_context(self, tscop_caplog):
        logger = get_logger('test')
        log_with_context(logger, 'INFO', 'hello', error_code=ErrorCode.SINK_WRITE_FAILED, batch=3)
        record = tscop_caplog.records[-1]
        assert record.extra_fields == {'batch': 3, 'error_code': 'SNK_001', 'error_category': 'sink'}

    @pytest.mark.unit
    def test_log_exception_uses_error_code(self, tscop_caplog):
        log_exception(get_logger('test'), 'schema failed', SchemaError('bad'), include_traceback=False)
        record = tscop_caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.extra_fields['error_code'] == 'SCH_001'
        assert record.extra_fields['exception_message'] == "Invalid type 'bad'"

    @pytest.mark.unit
    def test_log_validation_result_warnings(self, tscop_caplog):
        result = ValidationResult(records=2)
        result.add_warning(ValidationIssue(ValidationSeverity.WARNING, 'Not a float', 3, 'speed', 'x', 'float'))
        log_validation_result(get_logger('test'), result)
        record = tscop_caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.extra_fields['error_code'] == ErrorCode.VALUE_DEGRADED.code
        assert record.extra_fields['warnings'] == ['Not a float on line 3. column=speed, value=x, type=float']

    @pytest.mark.unit
    def test_log_validation_result_clean(self, tscop_caplog):
        log_validation_result(get_logger('test'), ValidationResult(records=5))
        assert tscop_caplog.records[-1].levelno == logging.DEBUG


class TestConsoleFormatter:
    """Tests for ConsoleFormatter."""

    @pytest.mark.unit
    def test_context_and_code(self):
        logger = get_logger('sinks')
        record = logger.makeRecord(logger.name, logging.ERROR, '', 0, 'write failed', (), None)
        record.extra_fields = {'error_code': OrderError('x').error_code.code}
        with LogContext(phase='save', measurement='par'):
            text = ConsoleFormatter(use_colors=False).format(record)
        assert text.endswith(' ERROR    sinks: write failed [phase=save, measurement=par] (code=ENC_002)')

    @pytest.mark.unit
    def test_error_location(self):
        """Line and column from a failed value are shown after the code."""
        logger = get_logger('documents')
        record = logger.makeRecord(logger.name, logging.ERROR, '', 0, 'Validation failed', (), None)
        record.extra_fields = {'error_code': 'VAL_001', 'line': 9, 'column': 'speed', 'records': 7}
        text = ConsoleFormatter(use_colors=False).format(record)
        assert text.endswith('documents: Validation failed (code=VAL_001, line=9, column=speed)')


class TestStructuredFormatter:
    """Tests for StructuredFormatter."""

    @pytest.mark.unit
    def test_location_promoted(self):
        """error_code, line and column are top-level keys; the rest stays under extra."""
        logger = get_logger('sinks')
        record = logger.makeRecord(logger.name, logging.ERROR, '', 0, 'Save stopped', (), None)
        record.extra_fields = {'error_code': 'ENC_002', 'line': 12, 'exception_type': 'OrderError'}
        entry = json.loads(StructuredFormatter().format(record))
        assert entry['error_code'] == 'ENC_002'
        assert entry['line'] == 12
        assert 'column' not in entry
        assert entry['extra'] == {'exception_type': 'OrderError'}
        assert 'context' not in entry

    @pytest.mark.unit
    def test_log_exception_carries_error_location(self, caplog):
        """log_exception() copies line and column out of the error's data."""
        caplog.set_level(logging.DEBUG, logger='tscop')
        error = ValueValidationError('Not a float', 9, 'speed', 'fast', 'float')
        log_exception(get_logger('test'), 'body failed', error, include_traceback=False)
        entry = json.loads(StructuredFormatter().format(caplog.records[-1]))
        assert (entry['error_code'], entry['line'], entry['column']) == ('VAL_001', 9, 'speed')
