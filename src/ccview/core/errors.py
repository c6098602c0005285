"""ccview error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Config spec
- 4xxx: Version resolution
- 5xxx: History
- 6xxx: Listing collaborator
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

    # Config spec (3xxx)
    CONFIG_SPEC_PARSE_ERROR = 3001

    # Version resolution (4xxx)
    MALFORMED_PATH = 4001
    MALFORMED_VERSION = 4002
    AMBIGUOUS_VERSION = 4003
    VERSION_NOT_RESOLVED = 4004
    VIEW_OPERATION_FAILED = 4005

    # History (5xxx)
    HISTORY_PARSE_ERROR = 5001

    # Listing collaborator (6xxx)
    LISTING_FAILED = 6001
    SESSION_NOT_REGISTERED = 6002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class CCViewError(Exception):
    """Base error with structured context for machine-readable reports."""

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


class ConfigError(CCViewError):
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


def describe_error(error: BaseException) -> dict[str, Any]:
    """Render any error as a dict, keeping the code of domain errors."""
    if isinstance(error, CCViewError):
        return error.to_dict()
    code = getattr(error, "code", ErrorCode.INTERNAL_ERROR)
    return {
        "code": int(code),
        "error": ErrorCode(code).name,
        "message": str(error),
        "retryable": bool(getattr(error, "retryable", False)),
        "details": {},
    }
