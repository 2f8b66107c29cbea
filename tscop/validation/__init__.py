"""
Schema and document validation.

Main exports:
- validate_schema / require_schema: check and normalize type tags
- validate_measurement: check a measurement name
- fields_to_doc: zip fields with column headers
- validate_doc / DocumentValidator: typed documents in strict or lax mode
"""

from .schema import (
    FieldType,
    VALID_TYPES,
    MEASUREMENT_REGEX,
    SchemaValidation,
    validate_schema,
    require_schema,
    validate_measurement,
)
from .values import (
    DEFAULT_MISSING_VALUES,
    ValueCheck,
    get_validator,
    is_missing,
    parse_iso8601,
)
from .result import ValidationIssue, ValidationResult, ValidationSeverity
from .documents import DocumentValidator, fields_to_doc, validate_doc

__all__ = [
    'FieldType',
    'VALID_TYPES',
    'MEASUREMENT_REGEX',
    'SchemaValidation',
    'validate_schema',
    'require_schema',
    'validate_measurement',
    'DEFAULT_MISSING_VALUES',
    'ValueCheck',
    'get_validator',
    'is_missing',
    'parse_iso8601',
    'ValidationIssue',
    'ValidationResult',
    'ValidationSeverity',
    'DocumentValidator',
    'fields_to_doc',
    'validate_doc',
]
