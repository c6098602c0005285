"""Tests for structured logging."""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

from ccview.config.models import LoggingConfig, LogOutputConfig
from ccview.core.logging import configure_logging, get_logger, view_context


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    yield
    for handler in logging.getLogger().handlers:
        handler.close()
    logging.getLogger().handlers.clear()


def _json_lines(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text().splitlines() if line]


class TestViewContext:
    def test_binds_view_and_session(self) -> None:
        with view_context("/view/vob") as session:
            context = structlog.contextvars.get_contextvars()

        assert context == {"view": "/view/vob", "session": session}
        assert len(session) == 8
        assert structlog.contextvars.get_contextvars() == {}

    def test_nested_block_keeps_session(self) -> None:
        with view_context("/view/vob") as outer, view_context("/view/vob", until="10@20240105") as inner:
            context = structlog.contextvars.get_contextvars()

        assert inner == outer
        assert context["until"] == "10@20240105"

    def test_separate_blocks_get_separate_sessions(self) -> None:
        with view_context("/view/vob") as first:
            pass
        with view_context("/view/vob") as second:
            pass

        assert first != second


class TestConfigureLogging:
    def test_file_output_carries_view_context(self, tmp_path: Path) -> None:
        # Given a JSON file output
        log_file = tmp_path / "ccview.log"
        configure_logging(LoggingConfig(outputs=[LogOutputConfig(format="json", destination=str(log_file))]))

        # When a line is logged inside a view context
        with view_context("/view/vob") as session:
            get_logger("ccview.test").info("resolved", element="a.c")

        # Then it names the view, the session and the logger
        [data] = _json_lines(log_file)
        assert data["event"] == "resolved"
        assert data["view"] == "/view/vob"
        assert data["session"] == session
        assert data["logger"] == "ccview.test"
        assert data["level"] == "info"
        assert "timestamp" in data

    def test_outputs_filter_by_their_own_level(self, tmp_path: Path) -> None:
        debug_file = tmp_path / "debug.log"
        warning_file = tmp_path / "warning.log"
        config = LoggingConfig(
            level="WARNING",
            outputs=[
                LogOutputConfig(format="json", destination=str(debug_file), level="DEBUG"),
                LogOutputConfig(format="json", destination=str(warning_file)),
            ],
        )

        configure_logging(config)
        logger = get_logger()
        logger.debug("rule_checked")
        logger.warning("config_spec_time_rule_ignored")

        assert [d["event"] for d in _json_lines(debug_file)] == ["rule_checked", "config_spec_time_rule_ignored"]
        assert [d["event"] for d in _json_lines(warning_file)] == ["config_spec_time_rule_ignored"]

    def test_verbose_lowers_console_outputs_only(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        log_file = tmp_path / "ccview.log"
        config = LoggingConfig(
            level="WARNING",
            outputs=[
                LogOutputConfig(format="console", destination="stderr"),
                LogOutputConfig(format="json", destination=str(log_file)),
            ],
        )

        configure_logging(config, verbose=True)
        get_logger().debug("branch_pruned")

        assert "branch_pruned" in capsys.readouterr().err
        assert log_file.read_text() == ""

    def test_logger_created_before_configuration_follows_it(self, tmp_path: Path) -> None:
        # Given a module-level style logger created before logging is configured
        logger = get_logger("ccview.clearcase.configspec.parser")
        log_file = tmp_path / "ccview.log"

        # When logging is configured afterwards
        configure_logging(LoggingConfig(outputs=[LogOutputConfig(format="json", destination=str(log_file))]))
        logger.warning("config_spec_time_rule_ignored", line=1)

        # Then the line goes to the configured output
        [data] = _json_lines(log_file)
        assert data["event"] == "config_spec_time_rule_ignored"
        assert data["logger"] == "ccview.clearcase.configspec.parser"

    def test_reconfiguring_replaces_handlers(self, tmp_path: Path) -> None:
        first = tmp_path / "first.log"
        second = tmp_path / "second.log"
        configure_logging(LoggingConfig(outputs=[LogOutputConfig(format="json", destination=str(first))]))
        configure_logging(LoggingConfig(outputs=[LogOutputConfig(format="json", destination=str(second))]))

        get_logger().info("session_opened")

        assert first.read_text() == ""
        assert "session_opened" in second.read_text()
        assert len(logging.getLogger().handlers) == 1


class TestLogOutputConfig:
    """Output destination validation."""

    def test_relative_file_destination_rejected(self) -> None:
        with pytest.raises(ValueError, match="absolute"):
            LogOutputConfig(destination="logs/ccview.log")

    @pytest.mark.parametrize("destination", ["stderr", "stdout"])
    def test_console_destinations_accepted(self, destination: str) -> None:
        assert LogOutputConfig(destination=destination).destination == destination
