"""
Pytest configuration and fixtures for tscop tests.
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tscop.config import clear_config_cache
from tscop.logging import reset_context
from tscop.text import Record


@pytest.fixture(autouse=True)
def clean_state():
    """Reset cached settings and log context around every test."""
    clear_config_cache()
    reset_context()
    yield
    clear_config_cache()
    reset_context()


@pytest.fixture
def project_root_path():
    """Return the project root path."""
    return project_root


@pytest.fixture
def standard_lines():
    """A comma-delimited standard format file with one data line."""
    return [
        'fileType\n',
        'cruise\n',
        'description\n',
        'desc1,desc2,des3,desc4,desc5,desc6\n',
        'time,float,integer,text,category,boolean\n',
        'NA,m/s,km,NA,NA,NA\n',
        'time,speed,distance,notes,group,flag\n',
        '2017-05-06T19:52:57.601Z,6.0,10,some notes,A,TRUE\n',
    ]


@pytest.fixture
def scenario_schema():
    """Output schema used by the encoding scenarios (cruise last)."""
    return {
        'time': 'time',
        'speed': 'float',
        'distance': 'integer',
        'notes': 'text',
        'group': 'category',
        'flag': 'boolean',
        'cruise': 'category',
    }


@pytest.fixture
def make_record():
    """Build a Record holding a document."""
    def _make(doc, line_index=0, record_index=0):
        return Record(text='', line_index=line_index, fields=[], record_index=record_index, doc=doc)
    return _make


class FakeInfluxClient:
    """Stand-in for InfluxDBClient3 that records calls."""

    def __init__(self, fail_write=False, fail_query=False):
        self.writes = []
        self.queries = []
        self.closed = False
        self.fail_write = fail_write
        self.fail_query = fail_query

    def write(self, record=None, write_precision=None, **kwargs):
        if self.fail_write:
            raise ConnectionError('connection refused')
        self.writes.append((list(record), write_precision))

    def query(self, query=None, language=None, **kwargs):
        if self.fail_query:
            raise RuntimeError('bad query')
        self.queries.append((query, language))

    def close(self):
        self.closed = True


@pytest.fixture
def fake_client():
    """Return a fresh FakeInfluxClient."""
    return FakeInfluxClient()


@pytest.fixture
def fake_client_factory():
    """Return the FakeInfluxClient class for tests needing failure modes."""
    return FakeInfluxClient
