"""
Document construction and validation stages.

Both stages are callables that take an iterable of Records and return an
iterator of Records, so they can be chained with Pipeline.through().
"""

import logging
from dataclasses import replace
from typing import AbstractSet, Any, Callable, Dict, Iterable, Iterator, Mapping, Optional, Sequence

from ..errors import StructureError, ValueValidationError
from ..logging.utils import log_validation_result
from ..text.fields import Record
from .result import ValidationIssue, ValidationResult, ValidationSeverity
from .schema import FieldType, require_schema
from .values import Validator, get_validator

logger = logging.getLogger(__name__)

Stage = Callable[[Iterable[Record]], Iterator[Record]]


def fields_to_doc(headers: Sequence[str], strict: bool = True) -> Stage:
    """
    Create a stage that zips each record's fields with column headers.

    Args:
        headers: Column names in field order.
        strict: Raise on a column count mismatch. When False, mismatched
            records are dropped.

    Returns:
        Stage adding a ``doc`` mapping of header -> raw string to each record.
    """
    headers = list(headers)

    def stage(records: Iterable[Record]) -> Iterator[Record]:
        dropped = 0
        for record in records:
            if len(record.fields) != len(headers):
                if strict:
                    raise StructureError(
                        f"Column count ({len(record.fields)}) does not match "
                        f"header count ({len(headers)}) on line {record.line_number}",
                        data={'line': record.line_number, 'fields': len(record.fields)},
                    )
                dropped += 1
                continue
            yield replace(record, doc=dict(zip(headers, record.fields)))
        if dropped:
            logger.debug(f"Dropped {dropped} record(s) with unexpected column count")

    return stage


class DocumentValidator:
    """
    Validate raw documents against a schema.

    Each schema column's validator is resolved once at construction. For
    every record, only columns present in both the raw document and the
    schema are carried into the typed document; schema columns missing from
    the raw document are omitted. The raw mapping is kept as ``orig_doc``.

    Example:
        >>> validator = DocumentValidator({'time': 'time', 'par': 'float'}, strict=True)
        >>> typed = list(validator(records))
    """

    def __init__(
        self,
        schema: Mapping[str, Any],
        strict: bool = False,
        missing_values: Optional[AbstractSet[str]] = None,
    ):
        self.schema: Dict[str, FieldType] = require_schema(schema)
        self.strict = strict
        self.result = ValidationResult()
        self.result.add_metadata('strict', strict)
        self._validators: Dict[str, Validator] = {
            column: get_validator(field_type, strict=strict, missing_values=missing_values)
            for column, field_type in self.schema.items()
        }

    def validate_record(self, record: Record) -> Record:
        """
        Return a copy of ``record`` whose ``doc`` holds typed values.

        Raises:
            ValueValidationError: If a value is rejected.
        """
        raw = record.doc or {}
        typed: Dict[str, Any] = {}
        for column, raw_value in raw.items():
            validate = self._validators.get(column)
            if validate is None:
                continue
            check = validate(raw_value)
            if check.error is not None:
                type_name = self.schema[column].value
                self.result.add_error(ValidationIssue(
                    ValidationSeverity.ERROR, check.error, record.line_number,
                    column, raw_value, type_name,
                ))
                raise ValueValidationError(check.error, record.line_number, column, raw_value, type_name)
            if check.degraded is not None:
                self.result.add_warning(ValidationIssue(
                    ValidationSeverity.WARNING, check.degraded, record.line_number,
                    column, raw_value, self.schema[column].value,
                ))
            typed[column] = check.value

        self.result.records += 1
        return replace(record, doc=typed, orig_doc=dict(raw))

    def __call__(self, records: Iterable[Record]) -> Iterator[Record]:
        try:
            for record in records:
                yield self.validate_record(record)
        finally:
            log_validation_result(logger, self.result)


def validate_doc(
    schema: Mapping[str, Any],
    strict: bool = False,
    missing_values: Optional[AbstractSet[str]] = None,
) -> DocumentValidator:
    """
    Create a stage that validates each record's document against a schema.

    Args:
        schema: Column name -> type tag (category, text, float, integer,
            boolean, time).
        strict: Reject malformed values instead of replacing them with None.
        missing_values: Missing-data sentinels; defaults to NA and NaN.

    Raises:
        SchemaError: Immediately, if the schema contains an unknown type.
    """
    return DocumentValidator(schema, strict=strict, missing_values=missing_values)


__all__ = [
    'DocumentValidator',
    'Stage',
    'fields_to_doc',
    'validate_doc',
]
