"""Config spec rules: element selection rules and load rules."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath

from ccview.clearcase.errors import AmbiguousVersionError
from ccview.clearcase.paths import is_numeric, normalize_path
from ccview.clearcase.version_tree import Branch, Version, VersionTree
from ccview.config.constants import CHECKEDOUT, LATEST, PATH_SEPARATOR
from ccview.core.logging import get_logger

log = get_logger(__name__)

_ANY_SEGMENTS_AFTER = "/..."
_ANY_SEGMENTS_BEFORE = ".../"


class ScopeType(Enum):
    """Element types a rule applies to."""

    ANY = "any"
    FILE = "file"
    DIRECTORY = "directory"

    def accepts(self, is_file: bool) -> bool:
        if self is ScopeType.ANY:
            return True
        return (self is ScopeType.FILE) == is_file


class RuleResult(Enum):
    """Outcome of testing one version against one rule."""

    MATCHES = "matches"
    DOES_NOT_MATCH = "does_not_match"
    BRANCH_HAS_BEEN_MADE = "branch_has_been_made"
    BRANCH_HAS_NOT_BEEN_MADE = "branch_has_not_been_made"


def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a config spec wildcard pattern for full matching.

    ``*`` matches any run of characters, ``?`` one character, ``/...``
    and ``.../`` zero or more whole path segments. Everything else is
    literal. A pattern that starts with neither ``/`` nor ``*`` may match
    at any directory depth.
    """
    parts: list[str] = []
    index = 0
    while index < len(pattern):
        if pattern.startswith(_ANY_SEGMENTS_AFTER, index):
            parts.append("(?:/[^/]+)*")
            index += len(_ANY_SEGMENTS_AFTER)
        elif pattern.startswith(_ANY_SEGMENTS_BEFORE, index):
            parts.append("(?:[^/]+/)*")
            index += len(_ANY_SEGMENTS_BEFORE)
        elif pattern[index] == "*":
            parts.append(".*")
            index += 1
        elif pattern[index] == "?":
            parts.append(".")
            index += 1
        else:
            parts.append(re.escape(pattern[index]))
            index += 1
    body = "".join(parts)
    if not pattern.startswith((PATH_SEPARATOR, "*")):
        body = "(?:.*/)?" + body
    return re.compile(body, re.DOTALL)


def is_label_selector(token: str) -> bool:
    """True unless the token is a number, CHECKEDOUT or LATEST."""
    return not is_numeric(token) and token.upper() not in (CHECKEDOUT, LATEST)


@dataclass(frozen=True, slots=True)
class StandardRule:
    """One ``element`` line of a config spec."""

    scope: ScopeType
    scope_pattern: str
    version_selector: str
    mkbranch: str | None = None
    text: str = field(default="", compare=False)

    branch_pattern: str = field(init=False, compare=False)
    version: str = field(init=False, compare=False)
    is_label_based: bool = field(init=False, compare=False)
    primary_branch: str | None = field(init=False, compare=False)
    _scope_regex: re.Pattern[str] = field(init=False, compare=False, repr=False)
    _branch_regex: re.Pattern[str] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        branch_pattern, separator, version = self.version_selector.rpartition(PATH_SEPARATOR)
        if not separator:
            # A bare selector (LATEST, a label) applies to every branch
            branch_pattern = "*"
        set_ = object.__setattr__
        set_(self, "branch_pattern", branch_pattern)
        set_(self, "version", version)
        set_(self, "is_label_based", is_label_selector(version))
        set_(self, "primary_branch", _primary_branch(branch_pattern) if separator else None)
        set_(self, "_scope_regex", compile_glob(self.scope_pattern))
        set_(self, "_branch_regex", compile_glob(branch_pattern))

    # =========================================================================
    # Structural matching
    # =========================================================================

    def matches_path(self, full_file_name: str, is_file: bool) -> bool:
        return self.scope.accepts(is_file) and self._scope_regex.fullmatch(full_file_name) is not None

    def matches_branch(self, branch_full_name: str) -> bool:
        return self._branch_regex.fullmatch(branch_full_name) is not None

    # =========================================================================
    # Version predicate
    # =========================================================================

    def version_matches(self, version: Version) -> bool:
        """Whether ``version`` satisfies the selector, ignoring -mkbranch."""
        if not self.matches_branch(version.branch.full_name):
            return False
        token = self.version
        if is_numeric(token):
            return version.number == int(token)
        upper = token.upper()
        if upper == CHECKEDOUT:
            return False
        if upper == LATEST:
            return True
        return version.has_comment(token)

    def is_version_inside_view(self, version: Version) -> RuleResult:
        """Test ``version``, materializing the -mkbranch branch on a match."""
        if not self.version_matches(version):
            return RuleResult.DOES_NOT_MATCH
        if self.mkbranch is None:
            return RuleResult.MATCHES
        if version.find_inherited_branch(self.mkbranch) is not None:
            return RuleResult.BRANCH_HAS_NOT_BEEN_MADE
        branch = Branch(self.mkbranch, version)
        branch.add_version(0)
        version.add_inherited_branch(branch)
        log.debug("branch_materialized", branch=branch.full_name, rule=self.text)
        return RuleResult.BRANCH_HAS_BEEN_MADE

    # =========================================================================
    # Selection
    # =========================================================================

    def find_version(self, tree: VersionTree, full_file_name: str) -> Version | None:
        """Resolve the selector across every branch matching the branch pattern.

        Raises:
            AmbiguousVersionError: if more than one distinct version is selected.
        """
        token = self.version
        upper = token.upper()
        if upper == CHECKEDOUT:
            return None

        found: dict[str, Version] = {}
        for name, branch in tree.all_branches_with_full_names().items():
            if not self.matches_branch(name):
                continue
            if is_numeric(token):
                version = branch.find_version_by_number(int(token))
            elif upper == LATEST:
                version = branch.last_version
            else:
                version = branch.find_version_with_comment(token)
            if version is not None:
                found[version.whole_name] = version

        if not found:
            return None
        if len(found) > 1:
            raise AmbiguousVersionError(full_file_name, found)
        return next(iter(found.values()))

    def __str__(self) -> str:
        return self.text or f"element {self.scope_pattern} {self.version_selector}"


def _primary_branch(branch_pattern: str) -> str | None:
    """Last concrete branch name in the pattern; wildcard segments are skipped."""
    for candidate in reversed(branch_pattern.split(PATH_SEPARATOR)):
        if candidate and candidate != "..." and not any(c in candidate for c in "*?"):
            return candidate
    return None


@dataclass(frozen=True, slots=True)
class LoadRule:
    """One ``load`` line: a directory loaded into the view."""

    view_root: str
    path: str

    @property
    def directory(self) -> str:
        return normalize_path(f"{self.view_root}{PATH_SEPARATOR}{self.path}")

    def is_under(self, element_path: str) -> bool:
        """True when the element and the load directory are on one ancestry line."""
        directory = PurePosixPath(self.directory)
        element = PurePosixPath(normalize_path(element_path))
        return directory == element or directory in element.parents or element in directory.parents
