"""Config spec evaluation against version trees."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Protocol

from ccview.clearcase.configspec.rules import LoadRule, RuleResult, StandardRule
from ccview.clearcase.paths import PathElement, join_path, normalize_file_name, normalize_path
from ccview.clearcase.version_tree import Branch, Version, VersionTree
from ccview.config.constants import PATH_SEPARATOR
from ccview.core.logging import get_logger

log = get_logger(__name__)


class VersionLocator(Protocol):
    """Looks up one version of an element in a freshly read version tree."""

    def find_version(self, object_path: str, version: str, *, is_directory: bool) -> Version | None:
        ...


@dataclass(frozen=True, slots=True)
class ConfigSpec:
    """Parsed config spec bound to a view root."""

    view_root: str
    load_rules: tuple[LoadRule, ...] = ()
    standard_rules: tuple[StandardRule, ...] = ()
    view_is_dynamic: bool = False

    def with_dynamic_view(self, dynamic: bool = True) -> ConfigSpec:
        return replace(self, view_is_dynamic=dynamic)

    # =========================================================================
    # Load rules
    # =========================================================================

    def is_under_load_rules(self, full_file_name: str) -> bool:
        """Dynamic views load everything; snapshot views only their load rules."""
        if self.view_is_dynamic:
            return True
        path = normalize_path(full_file_name)
        if any(rule.is_under(path) for rule in self.load_rules):
            return True
        in_view = normalize_path(f"{self.view_root}{PATH_SEPARATOR}{path}")
        return any(rule.is_under(in_view) for rule in self.load_rules)

    # =========================================================================
    # Rule set properties
    # =========================================================================

    @property
    def has_label_based_version_selector(self) -> bool:
        return any(rule.is_label_based for rule in self.standard_rules)

    @property
    def branches(self) -> list[str]:
        """Sorted primary branch names, for branch auto-detection."""
        return sorted({r.primary_branch for r in self.standard_rules if r.primary_branch})

    # =========================================================================
    # Queries
    # =========================================================================

    def current_version(self, full_file_name: str, tree: VersionTree, *, is_file: bool) -> Version | None:
        """Version of the element selected by the first applicable rule.

        Raises:
            AmbiguousVersionError: if the first resolving rule selects several versions.
        """
        path = normalize_path(full_file_name, required=True)
        if not self.is_under_load_rules(path):
            return None
        for rule in self.standard_rules:
            if not rule.matches_path(path, is_file):
                continue
            version = rule.find_version(tree, path)
            if version is not None:
                return version
        return None

    def is_version_inside_view(
        self,
        locator: VersionLocator,
        elements: Sequence[PathElement],
        *,
        is_file: bool,
    ) -> bool:
        """Whether every versioned element of the path is selected by this spec.

        Each element that carries a version is looked up through ``locator``
        and must be accepted by the rules; an unknown version is outside.
        """
        last = len(elements) - 1
        for index, element in enumerate(elements):
            if element.version is None:
                continue
            element_is_file = index == last and is_file
            # Ancestors keep their versions; the element itself is addressed bare
            object_path = PATH_SEPARATOR.join([*map(str, elements[:index]), element.name])
            version = locator.find_version(object_path, element.version, is_directory=not element_is_file)
            if version is None:
                return False
            file_path = join_path(elements, 0, index + 1, include_versions=False)
            if not self._accepts(file_path, version, is_file=element_is_file):
                return False
        return True

    def _accepts(self, full_file_name: str, version: Version, *, is_file: bool) -> bool:
        path = normalize_file_name(full_file_name)
        if not self.is_under_load_rules(path):
            return False

        tree_changed = True
        while tree_changed:
            tree_changed = False
            for rule in self.standard_rules:
                if not rule.matches_path(path, is_file):
                    continue
                result = rule.is_version_inside_view(version)
                if result is RuleResult.DOES_NOT_MATCH:
                    if self._right_version_exists(rule, VersionTree.root_branch_of(version)):
                        log.debug("version_excluded", path=path, version=version.whole_name, rule=str(rule))
                        return False
                elif result is RuleResult.BRANCH_HAS_BEEN_MADE:
                    tree_changed = True
                    break
                elif result is RuleResult.MATCHES:
                    return True
        return False

    @staticmethod
    def _right_version_exists(rule: StandardRule, root: Branch) -> bool:
        """Search the whole tree under ``root`` for a version ``rule`` selects outright."""
        if rule.mkbranch is not None:
            return False
        stack = [root]
        while stack:
            branch = stack.pop()
            for version in branch.versions:
                if rule.version_matches(version):
                    return True
                stack.extend(version.inherited_branches)
        return False
