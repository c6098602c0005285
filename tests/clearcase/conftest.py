"""Test fixtures for clearcase module."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

import pytest

from ccview.clearcase.errors import ListingError
from ccview.clearcase.models import DirectoryChild, VersionDescription, VersionEntry
from ccview.clearcase.paths import extract_element_path
from ccview.clearcase.version_tree import VersionTree


@dataclass
class FakeListing:
    """In-memory listing collaborator.

    ``versions`` maps version-free element paths to version listings,
    ``children`` maps ``dir@@/branch/N`` to its entries and ``history``
    maps an option string (``"-all"``) to raw lshistory lines.
    """

    versions: dict[str, list[VersionEntry]] = field(default_factory=dict)
    children: dict[str, list[DirectoryChild]] = field(default_factory=dict)
    descriptions: dict[str, VersionDescription] = field(default_factory=dict)
    history: dict[str, list[str]] = field(default_factory=dict)
    history_errors: dict[str, str] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)

    def add_versions(self, element_path: str, *versions: str, labels: dict[str, tuple[str, ...]] | None = None) -> None:
        labels = labels or {}
        self.versions[element_path] = [VersionEntry(v, labels.get(v, ())) for v in versions]

    def add_children(self, directory_with_version: str, *children: tuple[str, str]) -> None:
        self.children[directory_with_version] = [
            DirectoryChild(path=f"{directory_with_version.split('@@')[0]}/{name}", kind=kind)  # type: ignore[arg-type]
            for name, kind in children
        ]

    def list_versions(self, element_path: str, *, is_directory: bool) -> list[VersionEntry]:
        key = extract_element_path(element_path)
        self.calls.append(("list_versions", key))
        return list(self.versions.get(key, []))

    def list_children(self, directory_with_version: str) -> list[DirectoryChild]:
        self.calls.append(("list_children", directory_with_version))
        return list(self.children.get(directory_with_version, []))

    def describe(self, version_path: str, *, is_directory: bool) -> VersionDescription:
        self.calls.append(("describe", version_path))
        try:
            return self.descriptions[version_path]
        except KeyError:
            raise ListingError("describe", f"cleartool: Error: Not a vob object: {version_path}") from None

    def list_history(self, path: str, options: Sequence[str]) -> Iterable[str]:
        key = " ".join(o for o in options if o.startswith("-") and o != "-since")
        self.calls.append(("list_history", key))
        if key in self.history_errors:
            raise ListingError("lshistory", self.history_errors[key])
        return list(self.history.get(key, []))


@pytest.fixture
def fake_listing() -> FakeListing:
    return FakeListing()


def build_tree(*versions: str, labels: dict[str, tuple[str, ...]] | None = None) -> VersionTree:
    """Version tree from ``/main/0``-style names, with optional labels per name."""
    labels = labels or {}
    tree = VersionTree()
    for name in versions:
        tree.add_version(name, labels.get(name, ()))
    return tree


@pytest.fixture
def release_tree() -> VersionTree:
    """``/main`` 0..3 with ``/main/release`` 0..1 forked from ``/main/3``."""
    return build_tree(
        "/main/0",
        "/main/1",
        "/main/2",
        "/main/3",
        "/main/release/0",
        "/main/release/1",
    )


@pytest.fixture
def make_tree() -> Callable[..., VersionTree]:
    return build_tree
