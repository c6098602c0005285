"""Serializable data models for listing results and tool output records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from ccview.config.constants import PATH_SEPARATOR

ChildKind = Literal["file", "directory"]
RecordKind = Literal["vob", "view", "storage", "history", "change"]


@dataclass(frozen=True, slots=True)
class VersionEntry:
    """One line of a version tree listing: ``/main/rel/3`` or a bare branch ``/main/rel``."""

    version: str
    labels: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DirectoryChild:
    """One entry of a directory version listing."""

    path: str
    kind: ChildKind

    @property
    def name(self) -> str:
        return self.path.rstrip(PATH_SEPARATOR).rsplit(PATH_SEPARATOR, 1)[-1]

    @property
    def is_file(self) -> bool:
        return self.kind == "file"


@dataclass(frozen=True, slots=True)
class DirectoryDelta:
    """Children added and deleted by one directory version."""

    added: tuple[DirectoryChild, ...] = ()
    deleted: tuple[DirectoryChild, ...] = ()

    @classmethod
    def between(cls, before: list[DirectoryChild], after: list[DirectoryChild]) -> DirectoryDelta:
        # A name that changes kind counts as deleted and added
        before_keys = {(child.name, child.kind) for child in before}
        after_keys = {(child.name, child.kind) for child in after}
        return cls(
            added=tuple(c for c in after if (c.name, c.kind) not in before_keys),
            deleted=tuple(c for c in before if (c.name, c.kind) not in after_keys),
        )

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.deleted


@dataclass(frozen=True, slots=True)
class VersionDescription:
    """Describe output for one version."""

    version_path: str
    created: datetime
    labels: tuple[str, ...] = ()
    is_text: bool = True
    is_executable: bool = False


# =============================================================================
# Tagged Tool Records
# =============================================================================


@dataclass(frozen=True, slots=True)
class ToolRecord:
    """One record of tool output, tagged with its kind.

    ``fields`` holds the prefixed values (``tag``, ``global_path``, ...);
    for ``change`` records, ``entries`` lists (status, path) pairs.
    """

    kind: RecordKind
    fields: dict[str, str] = field(default_factory=dict)
    entries: tuple[tuple[str, str], ...] = ()

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.fields.get(name, default)
