"""testsift error types with typed error codes.

Error code ranges:
- 1xxx: Argument validation
- 2xxx: Config (properties file, filter definitions)
- 3xxx: Scan
- 9xxx: Internal
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Argument validation (1xxx)
    ARGUMENT_NONE = 1001
    ARGUMENT_BLANK = 1002
    ARGUMENT_INVALID = 1003

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004
    CONFIG_LOAD_ERROR = 2005
    FILTER_INVALID_TYPE = 2101
    FILTER_INVALID = 2102

    # Scan (3xxx)
    SCAN_ARCHIVE_UNREADABLE = 3001

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class SiftError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
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
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(SiftError):
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

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def load_failed(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_LOAD_ERROR,
            message=f"Exception loading configuration properties from {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_filter_type(
        cls, index: int, value: Any, expected: Sequence[str] = ()
    ) -> "ConfigError":
        message = f"Invalid filter type {value!r} at definition #{index}"
        if expected:
            message += f" (expected one of: {', '.join(expected)})"
        return cls(
            code=ErrorCode.FILTER_INVALID_TYPE,
            message=message,
            details={"index": index, "type": str(value), "expected": list(expected)},
        )

    @classmethod
    def invalid_filter(cls, index: int | None, reason: str) -> "ConfigError":
        where = f" at definition #{index}" if index is not None else ""
        return cls(
            code=ErrorCode.FILTER_INVALID,
            message=f"Invalid filter{where}: {reason}",
            details={"index": index, "reason": reason},
        )


class ArgumentError(ConfigError):
    """Invalid argument passed across a public call boundary."""

    @classmethod
    def none(cls, name: str) -> "ArgumentError":
        return cls(
            code=ErrorCode.ARGUMENT_NONE,
            message=f"{name} is None",
            details={"argument": name},
        )

    @classmethod
    def blank(cls, name: str) -> "ArgumentError":
        return cls(
            code=ErrorCode.ARGUMENT_BLANK,
            message=f"{name} is empty",
            details={"argument": name},
        )

    @classmethod
    def invalid(cls, name: str, reason: str) -> "ArgumentError":
        return cls(
            code=ErrorCode.ARGUMENT_INVALID,
            message=f"{name} is invalid: {reason}",
            details={"argument": name, "reason": reason},
        )


class ScanError(SiftError):
    """Classpath scan errors scoped to individual roots."""

    @classmethod
    def archive_unreadable(
        cls, failures: dict[str, str], resources: list[Any] | None = None
    ) -> "ScanError":
        roots = ", ".join(failures)
        return cls(
            code=ErrorCode.SCAN_ARCHIVE_UNREADABLE,
            message=f"Unable to open archive root(s): {roots}",
            details={"failures": failures, "resources": list(resources or [])},
        )

    @property
    def partial_results(self) -> list[Any]:
        """Results gathered from the roots that could be scanned."""
        return list(self.details.get("resources", []))


class InternalError(SiftError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
