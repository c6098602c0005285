"""Internal components for tool output handling - not part of public API."""

from ccview.clearcase._internal.errors import ErrorMapper, ToolErrorKind, classify_tool_error
from ccview.clearcase._internal.parsing import (
    DESCRIBE_FORMAT,
    iter_raw_records,
    parse_describe,
    parse_vtree_line,
    read_child_from_ls,
    tokenize_records,
)

__all__ = [
    "DESCRIBE_FORMAT",
    "ErrorMapper",
    "ToolErrorKind",
    "classify_tool_error",
    "iter_raw_records",
    "parse_describe",
    "parse_vtree_line",
    "read_child_from_ls",
    "tokenize_records",
]
