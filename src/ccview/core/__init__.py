"""Core module exports."""

from ccview.core.errors import (
    CCViewError,
    ConfigError,
    ErrorCode,
    describe_error,
)
from ccview.core.logging import configure_logging, get_logger, view_context

__all__ = [
    # Errors
    "CCViewError",
    "ConfigError",
    "ErrorCode",
    "describe_error",
    # Logging
    "configure_logging",
    "get_logger",
    "view_context",
]
