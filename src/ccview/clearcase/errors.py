"""ClearCase module error types."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from ccview.core.errors import ErrorCode

if TYPE_CHECKING:
    from ccview.clearcase._internal.errors import ToolErrorKind


class ClearCaseError(Exception):
    """Base error for view and version resolution operations."""

    code = ErrorCode.INTERNAL_ERROR


class MalformedPathError(ClearCaseError):
    """Path string cannot be normalized or split."""

    code = ErrorCode.MALFORMED_PATH

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Malformed path {path!r}: {reason}")
        self.path = path
        self.reason = reason


class MalformedVersionError(ClearCaseError):
    """Version string is not of the form branch/.../N."""

    code = ErrorCode.MALFORMED_VERSION

    def __init__(self, version: str, reason: str) -> None:
        super().__init__(f"Malformed version {version!r}: {reason}")
        self.version = version
        self.reason = reason


class ConfigSpecParseError(ClearCaseError):
    """Config spec line is structurally invalid."""

    code = ErrorCode.CONFIG_SPEC_PARSE_ERROR

    def __init__(self, line_number: int, line: str, reason: str) -> None:
        super().__init__(f"Config spec line {line_number}: {reason}: {line.strip()!r}")
        self.line_number = line_number
        self.line = line
        self.reason = reason


class AmbiguousVersionError(ClearCaseError):
    """Version selector resolved to more than one version."""

    code = ErrorCode.AMBIGUOUS_VERSION

    def __init__(self, path: str, candidates: Iterable[str]) -> None:
        self.path = path
        self.candidates = sorted(candidates)
        super().__init__(f'Version of "{path}" is ambiguous: {"; ".join(self.candidates)}.')


class VersionResolutionError(ClearCaseError):
    """Current version of an element could not be resolved when it must exist."""

    code = ErrorCode.VERSION_NOT_RESOLVED

    def __init__(self, path: str, operation: str) -> None:
        super().__init__(f"Cannot {operation}: no version of {path!r} is selected by the view")
        self.path = path
        self.operation = operation


class ViewOperationError(ClearCaseError):
    """Unexpected failure while working on an element."""

    code = ErrorCode.VIEW_OPERATION_FAILED

    def __init__(self, operation: str, path: str | None, reason: str) -> None:
        where = f" for {path!r}" if path else ""
        super().__init__(f"{operation} failed{where}: {reason}")
        self.operation = operation
        self.path = path
        self.reason = reason


class HistoryParseError(ClearCaseError):
    """History record has an unreadable event id or date."""

    code = ErrorCode.HISTORY_PARSE_ERROR

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"Cannot parse history record ({reason}): {line!r}")
        self.line = line
        self.reason = reason


class ListingError(ClearCaseError):
    """The listing collaborator failed."""

    code = ErrorCode.LISTING_FAILED

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message

    @property
    def kind(self) -> ToolErrorKind:
        from ccview.clearcase._internal.errors import classify_tool_error

        return classify_tool_error(self.message)


class SessionNotRegisteredError(ClearCaseError):
    """No listing session is registered for a view path."""

    code = ErrorCode.SESSION_NOT_REGISTERED

    def __init__(self, view_path: str) -> None:
        super().__init__(f"No session registered for view: {view_path}")
        self.view_path = view_path
