"""
Validation result container.

A DocumentValidator owns one ValidationResult and records every lax-mode
degradation in it, so a caller can report how many values were replaced by
null once the stream has been consumed.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

# Keep at most this many warning messages; the count is always exact
MAX_STORED_WARNINGS = 100


class ValidationSeverity(str, Enum):
    """Enumeration of validation severity levels."""
    ERROR = 'error'
    WARNING = 'warning'

    def __str__(self) -> str:
        return self.value


@dataclass
class ValidationIssue:
    """A single value that failed validation."""
    severity: ValidationSeverity
    reason: str
    line: int
    column: str
    value: Any
    type_name: str

    def __str__(self) -> str:
        return (
            f"{self.reason} on line {self.line}. "
            f"column={self.column}, value={self.value}, type={self.type_name}"
        )


@dataclass
class ValidationResult:
    """
    Aggregated outcome of validating a stream of documents.

    Example:
        >>> result = ValidationResult()
        >>> result.add_warning(ValidationIssue(
        ...     ValidationSeverity.WARNING, 'Not a float', 3, 'speed', 'x', 'float'))
        >>> result.warning_count
        1
    """
    passed: bool = True
    records: int = 0
    warnings: List[ValidationIssue] = field(default_factory=list)
    errors: List[ValidationIssue] = field(default_factory=list)
    warning_count: int = 0
    degraded_columns: Dict[str, int] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_warning(self, issue: ValidationIssue) -> 'ValidationResult':
        """Record a value replaced by null."""
        self.warning_count += 1
        self.degraded_columns[issue.column] = self.degraded_columns.get(issue.column, 0) + 1
        if len(self.warnings) < MAX_STORED_WARNINGS:
            self.warnings.append(issue)
        return self

    def add_error(self, issue: ValidationIssue) -> 'ValidationResult':
        """Record a rejected value and mark validation as failed."""
        self.errors.append(issue)
        self.passed = False
        return self

    def add_metadata(self, key: str, value: Any) -> 'ValidationResult':
        """Add metadata to the result."""
        self.metadata[key] = value
        return self

    def __repr__(self) -> str:
        status = "PASSED" if self.passed else "FAILED"
        return f"ValidationResult({status}, records={self.records}, warnings={self.warning_count})"


__all__ = [
    'MAX_STORED_WARNINGS',
    'ValidationIssue',
    'ValidationResult',
    'ValidationSeverity',
]
