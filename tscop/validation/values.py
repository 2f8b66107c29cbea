"""
Per-type value validators.

Each validator takes one raw string and returns a ValueCheck. Strict
validators report malformed values as errors. Lax validators apply the same
rules but replace a malformed value with None and report the reason as a
degradation instead. Time values are the exception: a record without a valid
time cannot be placed on a time axis, so an invalid time is an error in both
modes.

Missing-data sentinels (by default 'NA' and 'NaN') map to None in both modes
for every type except time.
"""

import math
import re
from typing import AbstractSet, Any, Callable, Dict, NamedTuple, Optional

import numpy as np
import pandas as pd

from .schema import FieldType

DEFAULT_MISSING_VALUES = frozenset({'NA', 'NaN'})

_INT64 = np.iinfo(np.int64)

# Locale-independent decimal literals
_FLOAT_PATTERN = re.compile(r'^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?$')
_INTEGER_PATTERN = re.compile(r'^[-+]?\d+$')

# Extended ISO-8601: calendar date, optional time of day, optional zone
_ISO8601_PATTERN = re.compile(
    r'^\d{4}-\d{2}-\d{2}'
    r'(?:[T ]\d{2}:\d{2}(?::\d{2}(?:[.,]\d+)?)?'
    r'(?:Z|[+-]\d{2}(?::?\d{2})?)?)?$'
)


class ValueCheck(NamedTuple):
    """
    Outcome of validating one raw value.

    ``error`` is set when the value is rejected. ``degraded`` is set when a
    lax validator replaced a malformed value with None.
    """
    value: Any
    error: Optional[str] = None
    degraded: Optional[str] = None


Validator = Callable[[Any], ValueCheck]


def is_missing(value: Any, missing_values: AbstractSet[str] = DEFAULT_MISSING_VALUES) -> bool:
    """Check whether a raw value is a missing-data sentinel."""
    return isinstance(value, str) and value in missing_values


def parse_iso8601(value: Any) -> Optional[pd.Timestamp]:
    """
    Parse a strict extended ISO-8601 timestamp.

    Values without a zone designator are taken as UTC.

    Returns:
        Timezone-aware UTC Timestamp, or None if the value is not a valid
        ISO-8601 timestamp (bad format or impossible calendar date).
    """
    if isinstance(value, pd.Timestamp):
        ts = value
    else:
        if not isinstance(value, str) or not _ISO8601_PATTERN.match(value):
            return None
        try:
            ts = pd.Timestamp(value.replace(',', '.'))
        except (ValueError, OverflowError):
            return None
    if ts is pd.NaT:
        return None
    if ts.tz is None:
        return ts.tz_localize('UTC')
    return ts.tz_convert('UTC')


# -----------------------------------------------------------------------------
# Strict validators
# -----------------------------------------------------------------------------

def _check_text(value: str, missing: AbstractSet[str], label: str = 'text') -> ValueCheck:
    if is_missing(value, missing):
        return ValueCheck(None)
    if value == '':
        return ValueCheck(value, error=f'Empty {label} value')
    return ValueCheck(value)


def _check_category(value: str, missing: AbstractSet[str]) -> ValueCheck:
    return _check_text(value, missing, label='category')


def _check_float(value: str, missing: AbstractSet[str]) -> ValueCheck:
    if is_missing(value, missing):
        return ValueCheck(None)
    if isinstance(value, str) and _FLOAT_PATTERN.match(value):
        number = float(value)
        if math.isfinite(number):
            return ValueCheck(number)
        return ValueCheck(value, error='Float out of range')
    if value == '':
        return ValueCheck(value, error='Empty float value')
    return ValueCheck(value, error='Not a float')


def _check_integer(value: str, missing: AbstractSet[str]) -> ValueCheck:
    if is_missing(value, missing):
        return ValueCheck(None)
    if isinstance(value, str) and _INTEGER_PATTERN.match(value):
        number = int(value)
        if _INT64.min <= number <= _INT64.max:
            return ValueCheck(number)
        return ValueCheck(value, error='Integer out of range')
    if value == '':
        return ValueCheck(value, error='Empty integer value')
    return ValueCheck(value, error='Not an integer')


def _check_boolean(value: str, missing: AbstractSet[str]) -> ValueCheck:
    if is_missing(value, missing):
        return ValueCheck(None)
    upper = value.upper() if isinstance(value, str) else value
    if upper == 'TRUE':
        return ValueCheck(True)
    if upper == 'FALSE':
        return ValueCheck(False)
    if value == '':
        return ValueCheck(value, error='Empty boolean value')
    return ValueCheck(value, error='Invalid boolean value')


def _check_time(value: Any, missing: AbstractSet[str]) -> ValueCheck:
    ts = parse_iso8601(value)
    if ts is None:
        return ValueCheck(value, error='Invalid ISO8601 timestamp')
    return ValueCheck(ts)


_STRICT_CHECKS: Dict[FieldType, Callable[[Any, AbstractSet[str]], ValueCheck]] = {
    FieldType.TEXT: _check_text,
    FieldType.CATEGORY: _check_category,
    FieldType.FLOAT: _check_float,
    FieldType.INTEGER: _check_integer,
    FieldType.BOOLEAN: _check_boolean,
    FieldType.TIME: _check_time,
}


def get_validator(
    field_type: FieldType,
    strict: bool = False,
    missing_values: Optional[AbstractSet[str]] = None,
) -> Validator:
    """
    Build the validator for one schema type.

    Args:
        field_type: Schema type of the column.
        strict: Reject malformed values instead of replacing them with None.
        missing_values: Sentinels meaning "no value"; defaults to NA and NaN.

    Returns:
        Callable taking a raw value and returning a ValueCheck.
    """
    field_type = FieldType(field_type)
    check = _STRICT_CHECKS[field_type]
    missing = frozenset(DEFAULT_MISSING_VALUES if missing_values is None else missing_values)

    if strict or field_type is FieldType.TIME:
        def validate(value: Any) -> ValueCheck:
            return check(value, missing)
    else:
        def validate(value: Any) -> ValueCheck:
            result = check(value, missing)
            if result.error is not None:
                return ValueCheck(None, degraded=result.error)
            return result

    validate.__name__ = f"validate_{field_type.value}{'_strict' if strict else ''}"
    return validate


__all__ = [
    'DEFAULT_MISSING_VALUES',
    'ValueCheck',
    'Validator',
    'get_validator',
    'is_missing',
    'parse_iso8601',
]
