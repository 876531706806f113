"""DocPlane error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Parse
- 4xxx: Class oracle
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004
    CONFIG_UNKNOWN_STYLE = 2005

    # Parse (3xxx)
    PARSE_UNREADABLE_FILE = 3001
    PARSE_MALFORMED_OVERVIEW = 3002

    # Class oracle (4xxx)
    ORACLE_STRUCTURE_UNAVAILABLE = 4001
    ORACLE_DEFINITION_NOT_FOUND = 4002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class DocPlaneError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
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


class ConfigError(DocPlaneError):
    """Configuration-related errors. These abort a run."""

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

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Path not found or unreadable: {path}",
            details={"path": path},
        )

    @classmethod
    def unknown_style(cls, kind: str, name: str, available: list[str]) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_UNKNOWN_STYLE,
            message=f"Unknown {kind} style '{name}' (available: {', '.join(available)})",
            details={"kind": kind, "name": name, "available": available},
        )


class ParseError(DocPlaneError):
    """Per-file parse errors. Converted to warnings at the file boundary."""

    @classmethod
    def unreadable_file(cls, path: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_UNREADABLE_FILE,
            message=f"Cannot read {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def malformed_overview(cls, path: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_MALFORMED_OVERVIEW,
            message=f"Cannot parse overview file {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class OracleError(DocPlaneError):
    """Class introspection failures."""

    @classmethod
    def structure_unavailable(cls, class_name: str, reason: str) -> "OracleError":
        return cls(
            code=ErrorCode.ORACLE_STRUCTURE_UNAVAILABLE,
            message=f"Cannot determine structure of class {class_name}: {reason}",
            details={"class_name": class_name, "reason": reason},
        )

    @classmethod
    def definition_not_found(cls, class_name: str) -> "OracleError":
        return cls(
            code=ErrorCode.ORACLE_DEFINITION_NOT_FOUND,
            message=f"Definition of class {class_name} not found on the search path",
            details={"class_name": class_name},
        )


class InternalError(DocPlaneError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
