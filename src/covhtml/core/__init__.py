"""Core module exports."""

from covhtml.core.errors import (
    ConfigError,
    CovHtmlError,
    ErrorCode,
    InternalError,
    MalformedProfileError,
    ReportError,
    SourceUnavailableError,
)
from covhtml.core.logging import configure_logging, get_logger, set_run_id
from covhtml.core.progress import pluralize, progress, status

__all__ = [
    # Errors
    "ConfigError",
    "CovHtmlError",
    "ErrorCode",
    "InternalError",
    "MalformedProfileError",
    "ReportError",
    "SourceUnavailableError",
    # Logging
    "configure_logging",
    "get_logger",
    "set_run_id",
    # Progress
    "pluralize",
    "progress",
    "status",
]
