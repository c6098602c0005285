"""Listing collaborator interface and an adapter over raw tool output."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Protocol

from ccview.clearcase._internal import (
    DESCRIBE_FORMAT,
    ErrorMapper,
    parse_describe,
    parse_vtree_line,
    read_child_from_ls,
    tokenize_records,
)
from ccview.clearcase.models import DirectoryChild, VersionDescription, VersionEntry
from ccview.clearcase.paths import insert_dots
from ccview.config.constants import HISTORY_FORMAT

CommandRunner = Callable[[Sequence[str]], Iterable[str]]
"""Runs one tool command and returns its output lines; raises ListingError on failure."""


class Listing(Protocol):
    """What the core needs from the version control client.

    Implementations may be slow and may raise ListingError; callers are
    expected to retry if they want to.
    """

    def list_versions(self, element_path: str, *, is_directory: bool) -> list[VersionEntry]: ...

    def list_children(self, directory_with_version: str) -> list[DirectoryChild]: ...

    def describe(self, version_path: str, *, is_directory: bool) -> VersionDescription: ...

    def list_history(self, path: str, options: Sequence[str]) -> Iterable[str]: ...


class RawOutputListing:
    """Listing built from tool commands run by an injected runner."""

    def __init__(self, run: CommandRunner) -> None:
        self._run = run

    def list_versions(self, element_path: str, *, is_directory: bool) -> list[VersionEntry]:
        lines = self._run(["lsvtree", "-obs", "-all", insert_dots(element_path, is_directory=is_directory)])
        with ErrorMapper.guard("list versions", path=element_path):
            return [entry for line in lines if line.strip() and (entry := parse_vtree_line(line))]

    def list_children(self, directory_with_version: str) -> list[DirectoryChild]:
        lines = self._run(["ls", "-long", insert_dots(directory_with_version, is_directory=True)])
        with ErrorMapper.guard("list children", path=directory_with_version):
            return [child for line in lines if (child := read_child_from_ls(line))]

    def describe(self, version_path: str, *, is_directory: bool) -> VersionDescription:
        command = ["describe", "-fmt", DESCRIBE_FORMAT, insert_dots(version_path, is_directory=is_directory)]
        lines = [line for line in self._run(command) if line.strip()]
        with ErrorMapper.guard("describe", path=version_path):
            return parse_describe(lines[0])

    def list_history(self, path: str, options: Sequence[str]) -> Iterable[str]:
        return self._run(
            ["lshistory", "-eventid", "-fmt", HISTORY_FORMAT, *options, insert_dots(path, is_directory=True)]
        )

    def view_is_dynamic(self) -> bool:
        """True unless the current view reports snapshot attributes."""
        records = tokenize_records("view", self._run(["lsview", "-cview", "-long"]))
        return not any("snapshot" in (record.get("attributes") or "") for record in records)
