"""
Centralized logging package for tscop.

Provides structured logging with consistent formatting across all modules.
Supports both console output (human-readable, on stderr) and file output
(structured JSON).

Usage:
    from tscop.logging import configure_logging, get_logger, LogContext

    configure_logging(level="INFO", console=True, file=False)

    logger = get_logger('my_module')
    logger.info("Operation completed")

    with LogContext(phase="encode", measurement="seaflow"):
        logger.info("Encoding...")  # Includes context info
"""

from .config import (
    configure_logging,
    shutdown_logging,
    get_logger,
    LogLevel,
)

from .context import (
    LogContext,
    current_context,
    reset_context,
)

from .formatters import (
    StructuredFormatter,
    ConsoleFormatter,
)

from .error_codes import (
    ErrorCode,
    ErrorCodeInfo,
)

from .utils import (
    log_with_context,
    log_exception,
    log_validation_result,
)


__all__ = [
    # Core configuration
    "configure_logging",
    "shutdown_logging",
    "get_logger",
    "LogLevel",
    # Context management
    "LogContext",
    "current_context",
    "reset_context",
    # Formatters
    "StructuredFormatter",
    "ConsoleFormatter",
    # Error codes
    "ErrorCode",
    "ErrorCodeInfo",
    # Logging utilities
    "log_with_context",
    "log_exception",
    "log_validation_result",
]
