"""covhtml error types with typed error codes.

Error code ranges:
- 1xxx: Profile
- 2xxx: Source
- 3xxx: Config
- 4xxx: Report
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Profile (1xxx)
    PROFILE_MISSING_MODE = 1001
    PROFILE_MALFORMED_LINE = 1002
    PROFILE_INVALID_INTEGER = 1003
    PROFILE_NOT_FOUND = 1004

    # Source (2xxx)
    SOURCE_UNAVAILABLE = 2001

    # Config (3xxx)
    CONFIG_PARSE_ERROR = 3001
    CONFIG_INVALID_VALUE = 3002

    # Report (4xxx)
    REPORT_WRITE_FAILED = 4001

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class CovHtmlError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'PROFILE_MISSING_MODE')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class MalformedProfileError(CovHtmlError):
    """The coverage profile is missing, unreadable, or does not match the grammar."""

    @classmethod
    def missing_mode(cls, first_line: str = "") -> "MalformedProfileError":
        return cls(
            code=ErrorCode.PROFILE_MISSING_MODE,
            message="Profile does not start with a 'mode: <name>' line",
            details={"line_no": 1, "line": first_line},
        )

    @classmethod
    def malformed_line(cls, line_no: int, line: str, reason: str) -> "MalformedProfileError":
        return cls(
            code=ErrorCode.PROFILE_MALFORMED_LINE,
            message=f"Malformed profile line {line_no}: {reason}",
            details={"line_no": line_no, "line": line, "reason": reason},
        )

    @classmethod
    def invalid_integer(cls, line_no: int, line: str, reason: str) -> "MalformedProfileError":
        return cls(
            code=ErrorCode.PROFILE_INVALID_INTEGER,
            message=f"Invalid number on profile line {line_no}: {reason}",
            details={"line_no": line_no, "line": line, "reason": reason},
        )

    @classmethod
    def not_found(cls, path: str, reason: str) -> "MalformedProfileError":
        return cls(
            code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Cannot read coverage profile {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class SourceUnavailableError(CovHtmlError):
    """A source file referenced by the profile cannot be read."""

    @classmethod
    def unreadable(cls, file: str, path: str, reason: str) -> "SourceUnavailableError":
        return cls(
            code=ErrorCode.SOURCE_UNAVAILABLE,
            message=f"Source for {file} is unavailable at {path}: {reason}",
            details={"file": file, "path": path, "reason": reason},
        )


class ConfigError(CovHtmlError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ReportError(CovHtmlError):
    """Errors while writing the HTML report."""

    @classmethod
    def write_failed(cls, path: str, reason: str) -> "ReportError":
        return cls(
            code=ErrorCode.REPORT_WRITE_FAILED,
            message=f"Failed to write report file {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class InternalError(CovHtmlError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
