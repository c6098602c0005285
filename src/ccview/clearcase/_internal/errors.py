"""Centralized classification of native tool error text."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum

from ccview.clearcase.errors import ViewOperationError


class ToolErrorKind(Enum):
    """Closed set of recognized native tool failures."""

    LICENSE_SERVER_UNREACHABLE = "license_server_unreachable"
    BRANCH_TYPE_NOT_FOUND = "branch_type_not_found"
    NOT_A_SNAPSHOT_VIEW = "not_a_snapshot_view"
    UPDATE_IN_PROGRESS = "update_in_progress"
    LABEL_ALREADY_ON_ELEMENT = "label_already_on_element"
    NOT_A_CLEARCASE_OBJECT = "not_a_clearcase_object"
    UNKNOWN_HOST = "unknown_host"
    UNKNOWN = "unknown"


# First match wins; order matters where fragments overlap.
_FRAGMENTS: tuple[tuple[str, ToolErrorKind], ...] = (
    ("unable to contact albd_server on host", ToolErrorKind.LICENSE_SERVER_UNREACHABLE),
    ("license", ToolErrorKind.LICENSE_SERVER_UNREACHABLE),
    ("branch type not found", ToolErrorKind.BRANCH_TYPE_NOT_FOUND),
    ("is not a valid snapshot view path", ToolErrorKind.NOT_A_SNAPSHOT_VIEW),
    ("a snapshot view update is in progress", ToolErrorKind.UPDATE_IN_PROGRESS),
    ("an update is already in progress", ToolErrorKind.UPDATE_IN_PROGRESS),
    ("already on element", ToolErrorKind.LABEL_ALREADY_ON_ELEMENT),
    ("not a clearcase object", ToolErrorKind.NOT_A_CLEARCASE_OBJECT),
    ("unknown host", ToolErrorKind.UNKNOWN_HOST),
)


def classify_tool_error(message: str) -> ToolErrorKind:
    """Map native tool error text to a ToolErrorKind."""
    text = message.lower()
    for fragment, kind in _FRAGMENTS:
        if fragment in text:
            return kind
    return ToolErrorKind.UNKNOWN


class ErrorMapper:
    """Wraps unexpected exceptions with the operation and element path."""

    @staticmethod
    @contextmanager
    def guard(operation: str, *, path: str | None = None) -> Iterator[None]:
        """Context manager for consistent exception translation."""
        try:
            yield
        except (ValueError, KeyError, IndexError) as e:
            raise ViewOperationError(operation, path, str(e) or type(e).__name__) from e
