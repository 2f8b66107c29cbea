"""
Schema validation.

A schema maps column names to one of six type tags. Column names are case
sensitive; type tags are case-insensitive and normalized to lowercase with
surrounding whitespace removed.
"""

import re
from enum import Enum
from typing import Any, Dict, Mapping, NamedTuple, Optional

from ..errors import SchemaError


class FieldType(str, Enum):
    """Enumeration of the recognized schema type tags."""
    TEXT = 'text'
    CATEGORY = 'category'
    FLOAT = 'float'
    INTEGER = 'integer'
    BOOLEAN = 'boolean'
    TIME = 'time'

    def __str__(self) -> str:
        return self.value

    @property
    def is_tag(self) -> bool:
        """Category values become line protocol tags."""
        return self is FieldType.CATEGORY

    @property
    def is_field(self) -> bool:
        """Every type except category and time becomes a line protocol field."""
        return self not in (FieldType.CATEGORY, FieldType.TIME)


VALID_TYPES = tuple(t.value for t in FieldType)

MEASUREMENT_REGEX = re.compile(r'^[a-zA-Z0-9_-]+$')


class SchemaValidation(NamedTuple):
    """Result of validate_schema(): ``error`` is None or the offending raw type."""
    error: Optional[Any]
    schema: Mapping[str, Any]


def _normalize_type(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    normalized = value.lower().strip()
    return normalized if normalized in VALID_TYPES else None


def validate_schema(schema: Mapping[str, Any]) -> SchemaValidation:
    """
    Validate a schema mapping.

    Args:
        schema: Mapping of column name to type tag.

    Returns:
        SchemaValidation. On the first invalid type (in iteration order),
        ``error`` is that type exactly as given and ``schema`` is the input
        object. Otherwise ``error`` is None and ``schema`` is a new dict with
        normalized type tags. The input is never modified.

    Example:
        >>> validate_schema({'prop1': 'TeXt', 'prop2': 'text'})
        SchemaValidation(error=None, schema={'prop1': 'text', 'prop2': 'text'})
    """
    normalized: Dict[str, str] = {}
    for key, value in schema.items():
        type_name = _normalize_type(value)
        if type_name is None:
            # None would read as success, so report it by name
            return SchemaValidation(error=value if value is not None else 'None', schema=schema)
        normalized[key] = type_name
    return SchemaValidation(error=None, schema=normalized)


def require_schema(schema: Mapping[str, Any]) -> Dict[str, FieldType]:
    """
    Validate a schema and resolve each entry to its FieldType.

    Raises:
        SchemaError: If any type tag is not recognized.
    """
    validation = validate_schema(schema)
    if validation.error is not None:
        raise SchemaError(validation.error)
    return {key: FieldType(value) for key, value in validation.schema.items()}


def validate_measurement(measurement: Optional[str]) -> bool:
    """Check a measurement name against MEASUREMENT_REGEX."""
    return bool(measurement) and MEASUREMENT_REGEX.fullmatch(measurement) is not None


__all__ = [
    'FieldType',
    'VALID_TYPES',
    'MEASUREMENT_REGEX',
    'SchemaValidation',
    'validate_schema',
    'require_schema',
    'validate_measurement',
]
