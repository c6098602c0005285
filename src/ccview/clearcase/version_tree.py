"""In-memory branch/version graph of one element.

A tree holds root branches (normally just ``main``). Each branch holds its
versions ordered by number; each version may have branches forked from it.
Branches are addressed by their full path (``/main/rel``) because the same
bare name may recur in unrelated sub-trees.

Trees are built fresh per query from a version listing and thrown away.
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Iterator

from ccview.clearcase.errors import MalformedVersionError
from ccview.clearcase.paths import is_numeric
from ccview.config.constants import PATH_SEPARATOR, VERSION_SEPARATOR
from ccview.core.logging import get_logger

log = get_logger(__name__)


class Version:
    """One revision of an element on one branch."""

    __slots__ = ("number", "branch", "comments", "inherited_branches")

    def __init__(self, branch: Branch, number: int, comments: Iterable[str] = ()) -> None:
        self.branch = branch
        self.number = number
        self.comments: set[str] = set(comments)
        self.inherited_branches: list[Branch] = []

    @property
    def whole_name(self) -> str:
        """Full version path (``/main/rel/3``)."""
        return f"{self.branch.full_name}{PATH_SEPARATOR}{self.number}"

    def has_comment(self, comment: str) -> bool:
        return comment in self.comments

    def find_inherited_branch(self, name: str) -> Branch | None:
        for branch in self.inherited_branches:
            if branch.name == name:
                return branch
        return None

    def add_inherited_branch(self, branch: Branch) -> None:
        self.inherited_branches.append(branch)

    @property
    def previous_version(self) -> Version | None:
        return self.branch.version_before(self.number)

    @property
    def next_version(self) -> Version | None:
        return self.branch.version_after(self.number)

    @property
    def predecessor(self) -> Version | None:
        """Previous version on the branch, or the fork point for version 0."""
        return self.previous_version or self.branch.parent_version

    def __repr__(self) -> str:
        return f"Version({self.whole_name!r})"


class Branch:
    """A named line of versions forked from a parent version."""

    __slots__ = ("name", "parent_version", "_versions", "_numbers")

    def __init__(self, name: str, parent_version: Version | None = None) -> None:
        self.name = name
        self.parent_version = parent_version
        self._versions: list[Version] = []
        self._numbers: list[int] = []

    @property
    def full_name(self) -> str:
        """Full branch path (``/main/rel``)."""
        prefix = self.parent_version.branch.full_name if self.parent_version else ""
        return f"{prefix}{PATH_SEPARATOR}{self.name}"

    @property
    def versions(self) -> tuple[Version, ...]:
        return tuple(self._versions)

    @property
    def last_version(self) -> Version | None:
        return self._versions[-1] if self._versions else None

    def add_version(self, number: int, comments: Iterable[str] = ()) -> Version:
        """Insert version ``number`` at its numeric slot.

        Adding a number that already exists merges the comments into the
        existing version, so destroyed-version backfill can replay safely.
        """
        index = bisect_left(self._numbers, number)
        if index < len(self._numbers) and self._numbers[index] == number:
            existing = self._versions[index]
            existing.comments.update(comments)
            return existing
        version = Version(self, number, comments)
        self._numbers.insert(index, number)
        self._versions.insert(index, version)
        return version

    def find_version_by_number(self, number: int) -> Version | None:
        index = bisect_left(self._numbers, number)
        if index < len(self._numbers) and self._numbers[index] == number:
            return self._versions[index]
        return None

    def find_version_with_comment(self, comment: str) -> Version | None:
        """Highest version carrying ``comment`` (a label)."""
        for version in reversed(self._versions):
            if version.has_comment(comment):
                return version
        return None

    def version_before(self, number: int) -> Version | None:
        index = bisect_left(self._numbers, number)
        return self._versions[index - 1] if index > 0 else None

    def version_after(self, number: int) -> Version | None:
        index = bisect_left(self._numbers, number + 1)
        return self._versions[index] if index < len(self._versions) else None

    def find_child_branch(self, name: str) -> Branch | None:
        for version in self._versions:
            child = version.find_inherited_branch(name)
            if child is not None:
                return child
        return None

    def truncate_from(self, number: int) -> None:
        """Drop version ``number`` and every later version with its sub-branches."""
        index = bisect_left(self._numbers, number)
        del self._numbers[index:]
        del self._versions[index:]

    def __repr__(self) -> str:
        return f"Branch({self.full_name!r})"


class VersionTree:
    """All branches and versions of one element."""

    def __init__(self) -> None:
        self._roots: dict[str, Branch] = {}

    @property
    def root_branches(self) -> tuple[Branch, ...]:
        return tuple(self._roots.values())

    # =========================================================================
    # Population
    # =========================================================================

    def add_version(self, whole_name: str, comments: Iterable[str] = ()) -> Version:
        """Add ``branch/.../N``, creating missing branches on the way.

        A new branch forks from the current last version of its parent branch.

        Raises:
            MalformedVersionError: if there is no branch or N is not a number.
        """
        parts = _split_version_path(whole_name)
        if len(parts) < 2:
            raise MalformedVersionError(whole_name, "expected branch/.../N")
        if not is_numeric(parts[-1]):
            raise MalformedVersionError(whole_name, f"{parts[-1]!r} is not a version number")
        branch = self._walk(parts[:-1], create=True)
        assert branch is not None
        return branch.add_version(int(parts[-1]), comments)

    def add_branch(self, branch_path: str) -> Branch:
        """Declare a branch without adding versions to it."""
        parts = _split_version_path(branch_path)
        if not parts:
            raise MalformedVersionError(branch_path, "empty branch path")
        branch = self._walk(parts, create=True)
        assert branch is not None
        return branch

    def _walk(self, names: list[str], *, create: bool) -> Branch | None:
        branch = self._roots.get(names[0])
        if branch is None:
            if not create:
                return None
            if self._roots:
                raise MalformedVersionError(PATH_SEPARATOR.join(names), "element already has a root branch")
            branch = self._roots[names[0]] = Branch(names[0])
        for name in names[1:]:
            child = branch.find_child_branch(name)
            if child is None:
                if not create:
                    return None
                parent = branch.last_version or branch.add_version(0)
                child = Branch(name, parent)
                parent.add_inherited_branch(child)
            branch = child
        return branch

    # =========================================================================
    # Pruning
    # =========================================================================

    def prune_branch(self, whole_name: str) -> None:
        """Remove a version and its successors, or a whole branch.

        ``/main/rel/4`` drops versions 4.. of ``/main/rel``; ``/main/rel/0``
        and ``/main/rel`` drop the branch. Unknown names are ignored.
        """
        parts = _split_version_path(whole_name)
        if not parts:
            return
        number: int | None = None
        if is_numeric(parts[-1]):
            number = int(parts.pop())
            if not parts:
                return
        branch = self.find_branch(PATH_SEPARATOR.join(parts))
        if branch is None:
            log.debug("prune_skipped", version=whole_name)
            return
        if number is None or number == 0:
            self._detach(branch)
        else:
            branch.truncate_from(number)
        log.debug("branch_pruned", version=whole_name)

    def _detach(self, branch: Branch) -> None:
        if branch.parent_version is None:
            self._roots.pop(branch.name, None)
        else:
            branch.parent_version.inherited_branches.remove(branch)

    # =========================================================================
    # Queries
    # =========================================================================

    def find_branch(self, branch_path: str) -> Branch | None:
        parts = _split_version_path(branch_path)
        return self._walk(parts, create=False) if parts else None

    def find_version_by_path(self, path: str) -> Version | None:
        """Version at ``branch/.../N``, or None when absent."""
        parts = _split_version_path(path)
        if len(parts) < 2 or not is_numeric(parts[-1]):
            return None
        branch = self._walk(parts[:-1], create=False)
        return branch.find_version_by_number(int(parts[-1])) if branch else None

    def iter_branches(self) -> Iterator[Branch]:
        """Every branch, depth first from the roots."""
        stack = list(reversed(self._roots.values()))
        while stack:
            branch = stack.pop()
            yield branch
            for version in reversed(branch.versions):
                stack.extend(reversed(version.inherited_branches))

    def all_branches_with_full_names(self) -> dict[str, Branch]:
        return {branch.full_name: branch for branch in self.iter_branches()}

    @staticmethod
    def root_branch_of(version: Version) -> Branch:
        branch = version.branch
        while branch.parent_version is not None:
            branch = branch.parent_version.branch
        return branch


def _split_version_path(text: str) -> list[str]:
    text = text.strip()
    if text.startswith(VERSION_SEPARATOR):
        text = text[len(VERSION_SEPARATOR) :]
    return [part for part in text.replace("\\", PATH_SEPARATOR).split(PATH_SEPARATOR) if part]
