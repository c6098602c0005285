"""Structured logging bound to the view being evaluated.

Every log line emitted inside ``view_context`` carries the view path and a
short session id, so interleaved output from several views can be told
apart. Outputs come from ``LoggingConfig``: each one is a stdlib handler
(stderr, stdout or a file) with its own renderer and level.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from ccview.config.models import LoggingConfig, LogOutputConfig

_CONSOLE_DESTINATIONS = ("stderr", "stdout")


@contextmanager
def view_context(view: str, **values: Any) -> Iterator[str]:
    """Bind ``view`` and a session id to log lines emitted in the block.

    A block nested in another keeps the outer session id. Extra keyword
    values are bound alongside. Yields the session id.
    """
    session = structlog.contextvars.get_contextvars().get("session") or uuid4().hex[:8]
    with structlog.contextvars.bound_contextvars(view=view, session=session, **values):
        yield session


def _level(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]


def configure_logging(config: LoggingConfig | None = None, *, verbose: bool = False) -> None:
    """Install one root handler per configured output.

    ``verbose`` lowers console outputs to DEBUG; file outputs keep their
    configured level. Calling again replaces the previous handlers.
    """
    from ccview.config.models import LoggingConfig

    config = config or LoggingConfig()
    output_levels = [_output_level(config, output, verbose=verbose) for output in config.outputs]
    root_level = min(output_levels, default=_level(config.level))
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration must reach loggers created at import time
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()
    root_logger.setLevel(root_level)

    for output, level in zip(config.outputs, output_levels, strict=True):
        handler = _create_handler(output.destination)
        handler.setLevel(level)
        handler.setFormatter(_formatter(output, shared))
        root_logger.addHandler(handler)


def _output_level(config: LoggingConfig, output: LogOutputConfig, *, verbose: bool) -> int:
    if verbose and output.destination in _CONSOLE_DESTINATIONS:
        return logging.DEBUG
    return _level(output.level or config.level)


def _formatter(output: LogOutputConfig, shared: list[structlog.types.Processor]) -> logging.Formatter:
    if output.format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        is_console = output.destination in _CONSOLE_DESTINATIONS
        renderer = structlog.dev.ConsoleRenderer(
            colors=is_console and sys.stderr.isatty(),
            pad_event_to=0,
            pad_level=False,
        )
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared)


def _create_handler(destination: str) -> logging.Handler:
    if destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a")


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    # Initial values stay on the lazy proxy; bind() would freeze the current configuration
    if name:
        return structlog.get_logger(name)  # type: ignore[no-any-return]
    return structlog.get_logger()  # type: ignore[no-any-return]
