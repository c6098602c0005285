"""Tests for the ccv command line."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from ccview import __version__
from ccview.cli.main import cli

runner = CliRunner()

RELEASE_SPEC = """\
element * CHECKEDOUT
element * .../release/LATEST
element * /main/LATEST
load /vob
"""

VTREE = """\
a.c@@/main
a.c@@/main/0
a.c@@/main/1
a.c@@/main/2
a.c@@/main/release
a.c@@/main/release/0
a.c@@/main/release/1
"""


@pytest.fixture(autouse=True)
def _isolated_global_config(tmp_path: Path) -> Generator[None, None, None]:
    with patch("ccview.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"):
        yield


@pytest.fixture
def view_root(tmp_path: Path) -> Path:
    root = tmp_path / "view"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def saved_files(tmp_path: Path) -> tuple[Path, Path]:
    spec_file = tmp_path / "config_spec.txt"
    spec_file.write_text(RELEASE_SPEC)
    vtree_file = tmp_path / "a.c.vtree"
    vtree_file.write_text(VTREE)
    return spec_file, vtree_file


class TestCli:
    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "spec" in result.output
        assert "resolve" in result.output


class TestSpecCommand:
    def test_shows_rules(self, view_root: Path, saved_files: tuple[Path, Path]) -> None:
        spec_file, _ = saved_files

        result = runner.invoke(cli, ["spec", str(spec_file), "--view-root", str(view_root)])

        assert result.exit_code == 0, result.output
        assert "Load rules" in result.output
        assert f"{view_root.as_posix()}/vob" in result.output
        assert "CHECKEDOUT" in result.output
        assert "Label based: no" in result.output
        assert "Branches: main, release" in result.output

    def test_without_load_rules(self, view_root: Path, tmp_path: Path) -> None:
        spec_file = tmp_path / "labels.txt"
        spec_file.write_text("element * REL_1\n")

        result = runner.invoke(cli, ["spec", str(spec_file), "--view-root", str(view_root)])

        assert result.exit_code == 0, result.output
        assert "No load rules" in result.output
        assert "Label based: yes" in result.output
        assert "Branches: -" in result.output

    def test_parse_error(self, view_root: Path, tmp_path: Path) -> None:
        spec_file = tmp_path / "include.txt"
        spec_file.write_text("include /net/shared/spec\n")

        result = runner.invoke(cli, ["spec", str(spec_file), "--view-root", str(view_root)])

        assert result.exit_code == 1
        assert "include is not supported" in result.output


class TestResolveCommand:
    def test_selects_release_branch(self, view_root: Path, saved_files: tuple[Path, Path]) -> None:
        spec_file, vtree_file = saved_files

        result = runner.invoke(
            cli, ["resolve", str(spec_file), str(vtree_file), "vob/a.c", "--view-root", str(view_root)]
        )

        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == f"{view_root.as_posix()}/vob/a.c@@/main/release/1"

    def test_outside_load_rules(self, view_root: Path, saved_files: tuple[Path, Path]) -> None:
        spec_file, vtree_file = saved_files

        result = runner.invoke(
            cli, ["resolve", str(spec_file), str(vtree_file), "other/a.c", "--view-root", str(view_root), "--json"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"element": f"{view_root.as_posix()}/other/a.c", "version": None}

    def test_dynamic_view_ignores_load_rules(self, view_root: Path, saved_files: tuple[Path, Path]) -> None:
        spec_file, vtree_file = saved_files

        result = runner.invoke(
            cli,
            ["resolve", str(spec_file), str(vtree_file), "other/a.c", "--view-root", str(view_root), "--dynamic"],
        )

        assert result.exit_code == 0, result.output
        assert result.stdout.strip().endswith("/other/a.c@@/main/release/1")

    def test_ambiguous_selection_as_json(self, view_root: Path, saved_files: tuple[Path, Path], tmp_path: Path) -> None:
        # Given a selector that matches the latest version of every branch
        _, vtree_file = saved_files
        spec_file = tmp_path / "latest.txt"
        spec_file.write_text("element * LATEST\n")

        # When resolving with JSON output
        result = runner.invoke(
            cli,
            ["resolve", str(spec_file), str(vtree_file), "vob/a.c", "--view-root", str(view_root), "--dynamic", "--json"],
        )

        # Then the error is reported with its code
        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["error"]["error"] == "AMBIGUOUS_VERSION"
        assert "/main/release/1" in payload["error"]["message"]

    def test_ambiguous_selection_as_text(self, view_root: Path, saved_files: tuple[Path, Path], tmp_path: Path) -> None:
        _, vtree_file = saved_files
        spec_file = tmp_path / "latest.txt"
        spec_file.write_text("element * LATEST\n")

        result = runner.invoke(
            cli, ["resolve", str(spec_file), str(vtree_file), "vob/a.c", "--view-root", str(view_root), "--dynamic"]
        )

        assert result.exit_code == 1
        assert "ambiguous" in result.output


TIMED_SPEC = """\
time 1-Jan-2024
element * /main/LATEST
end time
load /vob
"""


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()


class TestLoggingSettings:
    """The view's logging settings drive where command output is logged."""

    def _write_view_config(self, view_root: Path, log_file: Path, level: str = "DEBUG") -> None:
        config_dir = view_root / ".ccview"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text(
            "logging:\n"
            "  level: WARNING\n"
            "  outputs:\n"
            f"    - destination: {log_file}\n"
            "      format: json\n"
            f"      level: {level}\n"
        )

    @pytest.mark.usefixtures("restore_logging")
    def test_configured_file_output_is_written(self, view_root: Path, tmp_path: Path) -> None:
        # Given a view config sending logs to a JSON file
        log_file = tmp_path / "logs" / "ccview.log"
        self._write_view_config(view_root, log_file)
        spec_file = tmp_path / "timed.txt"
        spec_file.write_text(TIMED_SPEC)

        # When a command parses a spec with an ignored time block
        result = runner.invoke(cli, ["spec", str(spec_file), "--view-root", str(view_root)])

        # Then the warning lands in the configured file
        assert result.exit_code == 0, result.output
        events = [json.loads(line) for line in log_file.read_text().splitlines() if line]
        ignored = [e for e in events if e["event"] == "config_spec_time_rule_ignored"]
        assert ignored and ignored[0]["line"] == 1
        assert ignored[0]["level"] == "warning"

    @pytest.mark.usefixtures("restore_logging")
    def test_verbose_does_not_lower_file_outputs(self, view_root: Path, tmp_path: Path) -> None:
        log_file = tmp_path / "ccview.log"
        self._write_view_config(view_root, log_file, level="ERROR")
        spec_file = tmp_path / "timed.txt"
        spec_file.write_text(TIMED_SPEC)

        result = runner.invoke(cli, ["-v", "spec", str(spec_file), "--view-root", str(view_root)])

        assert result.exit_code == 0, result.output
        assert "config_spec_time_rule_ignored" not in log_file.read_text()
