"""Core module exports."""

from docplane.core.errors import (
    ConfigError,
    DocPlaneError,
    ErrorCode,
    InternalError,
    OracleError,
    ParseError,
)
from docplane.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from docplane.core.progress import pluralize, progress, status

__all__ = [
    # Errors
    "ConfigError",
    "DocPlaneError",
    "ErrorCode",
    "InternalError",
    "OracleError",
    "ParseError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "pluralize",
    "progress",
    "status",
]
