"""shellfacts error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Grammar / parsing infrastructure
- 9xxx: Internal

Transform functions never raise these. Only the infrastructure around them
(config loading, grammar loading, query compilation, file reading) does.
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

    # Grammar (3xxx)
    GRAMMAR_NOT_INSTALLED = 3001
    GRAMMAR_QUERY_INVALID = 3002
    GRAMMAR_UNSUPPORTED_FILE = 3003
    GRAMMAR_FILE_TOO_LARGE = 3004

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class ShellFactsError(Exception):
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


class ConfigError(ShellFactsError):
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


class GrammarError(ShellFactsError):
    """Grammar loading, query compilation and file selection errors."""

    @classmethod
    def not_installed(cls, module: str, package: str) -> "GrammarError":
        return cls(
            code=ErrorCode.GRAMMAR_NOT_INSTALLED,
            message=f"Grammar module '{module}' is not installed (pip install {package})",
            details={"module": module, "package": package},
        )

    @classmethod
    def query_invalid(cls, category: str, reason: str) -> "GrammarError":
        return cls(
            code=ErrorCode.GRAMMAR_QUERY_INVALID,
            message=f"Query '{category}' failed to compile: {reason}",
            details={"category": category, "reason": reason},
        )

    @classmethod
    def unsupported_file(cls, path: str) -> "GrammarError":
        return cls(
            code=ErrorCode.GRAMMAR_UNSUPPORTED_FILE,
            message=f"No grammar registered for {path}",
            details={"path": path},
        )

    @classmethod
    def file_too_large(cls, path: str, size_bytes: int, limit_bytes: int) -> "GrammarError":
        return cls(
            code=ErrorCode.GRAMMAR_FILE_TOO_LARGE,
            message=f"{path} is {size_bytes} bytes, limit is {limit_bytes}",
            details={"path": path, "size_bytes": size_bytes, "limit_bytes": limit_bytes},
        )


class InternalError(ShellFactsError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
