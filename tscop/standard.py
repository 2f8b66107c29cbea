"""
Standard format parser.

A standard format file describes itself in seven header lines, followed by
data from line 8 on:

    1. measurement name
    2. cruise name
    3. file description
    4. column descriptions
    5. column types (first must be ``time``)
    6. column units
    7. column headers (first must be ``time``)

Every data record is validated strictly against the header's types and
written with the cruise name added as a ``cruise`` tag.
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import IO, AbstractSet, Any, Dict, Iterable, Iterator, List, Optional, Union

from .errors import StructureError
from .logging.context import LogContext
from .logging.error_codes import ErrorCode
from .pipeline import Pipeline
from .sinks.batching import DEFAULT_BATCH_SIZE
from .sinks.save import SaveResult, save_data
from .text.fields import Record, field_stream
from .text.lines import TextSource
from .validation.documents import fields_to_doc, validate_doc

logger = logging.getLogger(__name__)

HEADER_LINES = 7

HEADER_KEYS = (
    'measurement',
    'cruise',
    'description',
    'column_descriptions',
    'types',
    'units',
    'headers',
)

HEADER_DESCRIPTIONS = {
    'measurement': 'measurement',
    'cruise': 'cruise',
    'description': 'File description',
    'column_descriptions': 'Column descriptions',
    'types': 'Column types',
    'units': 'Column units',
    'headers': 'Column headers',
}

SINGLE_VALUE_KEYS = ('measurement', 'cruise', 'description')
COLUMNAR_KEYS = ('column_descriptions', 'types', 'units', 'headers')

CRUISE_COLUMN = 'cruise'

RawHeader = Dict[str, Optional[Record]]


@dataclass
class StandardHeader:
    """Validated standard format header."""
    measurement: str
    cruise: str
    description: str
    column_descriptions: List[str]
    types: List[str]
    units: List[str]
    headers: List[str]

    @property
    def schema(self) -> Dict[str, str]:
        """Column header -> type tag for the data section."""
        return dict(zip(self.headers, self.types))

    @property
    def output_schema(self) -> Dict[str, str]:
        """Schema for writing: the data columns plus the cruise tag."""
        schema = self.schema
        schema[CRUISE_COLUMN] = 'category'
        return schema


def _header_error(message: str) -> StructureError:
    return StructureError(message, error_code=ErrorCode.STRUCTURE_HEADER)


def get_standard_header(stream: TextSource, delimiter: str = '\t') -> RawHeader:
    """
    Read the seven header lines of a standard format file.

    Blank header lines are kept so that each line lands in its section.

    Returns:
        Section name -> Record (None for sections the input is too short to
        contain).
    """
    raw: RawHeader = {key: None for key in HEADER_KEYS}
    records = field_stream(
        stream,
        end=HEADER_LINES,
        drop_internal_blank=False,
        drop_final_blank=False,
        delimiter=delimiter,
    )
    for record in records:
        raw[HEADER_KEYS[record.line_index]] = record
    return raw


def validate_standard_header(raw: RawHeader) -> StandardHeader:
    """
    Check a raw header and convert it to a StandardHeader.

    Raises:
        StructureError: If a section is missing or empty, a columnar section
            has an empty column, columnar sections differ in length, ``NA``
            is used as a column header, or the first header or type is not
            ``time``.
    """
    data: Dict[str, Any] = {}
    for key in SINGLE_VALUE_KEYS:
        record = raw.get(key)
        data[key] = record.fields[0] if record is not None and record.fields else None
    for key in COLUMNAR_KEYS:
        record = raw.get(key)
        data[key] = list(record.fields) if record is not None else None

    empties = [HEADER_DESCRIPTIONS[key] for key in HEADER_KEYS if not data[key]]
    if empties:
        raise _header_error(f"Incomplete header section(s): {', '.join(empties)}")

    for key in COLUMNAR_KEYS:
        if any(column == '' for column in data[key]):
            raise _header_error(
                f"{HEADER_DESCRIPTIONS[key]} has an empty column on line {raw[key].line_number}"
            )

    if len({len(data[key]) for key in COLUMNAR_KEYS}) > 1:
        lines = ','.join(str(raw[key].line_number) for key in COLUMNAR_KEYS)
        raise _header_error(f"Lines {lines} must have the same column numbers")

    headers_line = raw['headers'].line_number
    if 'NA' in data['headers']:
        raise _header_error(f"'NA' is not a valid column header on line {headers_line}")
    if data['headers'][0] != 'time':
        raise _header_error(f"The first headers value on line {headers_line} should be 'time'")
    if data['types'][0].lower() != 'time':
        raise _header_error(
            f"The first type value on line {raw['types'].line_number} should be 'time'"
        )

    return StandardHeader(**data)


def _add_cruise(cruise: str):
    def stage(records: Iterable[Record]) -> Iterator[Record]:
        for record in records:
            yield replace(record, doc={**record.doc, CRUISE_COLUMN: cruise})
    return stage


def parse_standard_body(
    stream: TextSource,
    header: StandardHeader,
    delimiter: str = '\t',
    outstream: Optional[IO] = None,
    host: Optional[str] = None,
    database: Optional[str] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
    ensure_sorted: bool = True,
    token: Optional[str] = None,
    downsample_query: Optional[str] = None,
    missing_values: Optional[AbstractSet[str]] = None,
    client: Optional[Any] = None,
) -> SaveResult:
    """
    Validate and write the data section of a standard format file.

    ``stream`` is the whole file; the header lines are skipped. Internal
    blank lines are kept and fail the column count check. Pass
    ``ensure_sorted=False`` for files written newest-first; each batch is
    still sorted before it is written.

    Returns:
        SaveResult; ``result.message`` reads "Success. Wrote N points."
    """
    records = (
        Pipeline(field_stream(
            stream,
            start=HEADER_LINES,
            drop_internal_blank=False,
            drop_final_blank=True,
            delimiter=delimiter,
        ))
        .through(fields_to_doc(header.headers))
        .through(validate_doc(header.schema, strict=True, missing_values=missing_values))
        .through(_add_cruise(header.cruise))
    )
    with LogContext(phase='body', measurement=header.measurement, cruise=header.cruise):
        return save_data(
            records,
            header.measurement,
            header.output_schema,
            outstream=outstream,
            host=host,
            database=database,
            batch_size=batch_size,
            ensure_sorted=ensure_sorted,
            token=token,
            downsample_query=downsample_query,
            client=client,
        )


def parse_standard_file(
    path: Union[str, Path],
    delimiter: str = '\t',
    **kwargs: Any,
) -> SaveResult:
    """
    Parse a standard format file and write it to a file stream or InfluxDB.

    The file is opened twice: once for the header and once for the body.
    Keyword arguments are passed to parse_standard_body.
    """
    path = Path(path)
    with LogContext(phase='header', source=path.name):
        with open(path, 'r', encoding='utf-8', newline='') as f:
            header = validate_standard_header(get_standard_header(f, delimiter))
        logger.debug(f"Read header for {header.measurement} ({len(header.headers)} columns)")
        with open(path, 'r', encoding='utf-8', newline='') as f:
            result = parse_standard_body(f, header, delimiter, **kwargs)
    logger.info(f"{path.name}: {result.message}")
    return result


__all__ = [
    'HEADER_KEYS',
    'StandardHeader',
    'get_standard_header',
    'validate_standard_header',
    'parse_standard_body',
    'parse_standard_file',
]
