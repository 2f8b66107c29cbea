"""
Error codes for structured error tracking.

Every TimeSeriesCopError carries one of these codes so that file logs can be
filtered by failure class.
"""

from enum import Enum
from typing import NamedTuple


class ErrorCodeInfo(NamedTuple):
    """Container for error code information."""
    code: str
    category: str
    description: str


class ErrorCode(Enum):
    """
    Enumeration of error codes for structured logging.

    Each error code has:
    - code: Unique identifier (e.g., "SCH_001")
    - category: Error category (e.g., "schema", "encoding")
    - description: Human-readable description
    """

    # Schema errors (SCH_xxx)
    SCHEMA_INVALID_TYPE = ErrorCodeInfo("SCH_001", "schema", "Unrecognized schema type")

    # Structural errors (STR_xxx)
    STRUCTURE_COLUMN_COUNT = ErrorCodeInfo("STR_001", "structure", "Column count does not match header count")
    STRUCTURE_HEADER = ErrorCodeInfo("STR_002", "structure", "File header section is invalid")

    # Value validation errors (VAL_xxx)
    VALUE_INVALID = ErrorCodeInfo("VAL_001", "validation", "Value failed type validation")
    VALUE_DEGRADED = ErrorCodeInfo("VAL_002", "validation", "Value replaced with null in lax mode")

    # Encoding errors (ENC_xxx)
    ENCODING_MISSING_TIME = ErrorCodeInfo("ENC_001", "encoding", "Time value missing")
    ENCODING_ORDER = ErrorCodeInfo("ENC_002", "encoding", "Records not in ascending chronological order")

    # Sink errors (SNK_xxx)
    SINK_WRITE_FAILED = ErrorCodeInfo("SNK_001", "sink", "Failed to write batch")
    SINK_QUERY_FAILED = ErrorCodeInfo("SNK_002", "sink", "Post-write query failed")

    # Configuration errors (CFG_xxx)
    CONFIG_INVALID = ErrorCodeInfo("CFG_001", "config", "Configuration is invalid")
    CONFIG_LOAD_ERROR = ErrorCodeInfo("CFG_002", "config", "Failed to load configuration")

    # General errors (GEN_xxx)
    UNKNOWN_ERROR = ErrorCodeInfo("GEN_001", "general", "An unknown error occurred")

    @property
    def code(self) -> str:
        """Get the error code identifier."""
        return self.value.code

    @property
    def category(self) -> str:
        """Get the error category."""
        return self.value.category

    @property
    def description(self) -> str:
        """Get the error description."""
        return self.value.description

    def __str__(self) -> str:
        return f"{self.code}: {self.description}"


# Public exports
__all__ = [
    "ErrorCode",
    "ErrorCodeInfo",
]
