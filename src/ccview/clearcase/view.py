"""View connection: version trees, history and change collection for one view.

``ViewConnection`` glues a listing collaborator, a parsed config spec and
the change classifier together. It builds a fresh version tree per query,
applies the changes recorded as "to ignore" before resolving a version, and
answers the questions the classifier asks about history elements.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterator

from ccview.clearcase._internal import ToolErrorKind
from ccview.clearcase.classifier import ChangeClassifier, ChangedFilesProcessor
from ccview.clearcase.configspec import ConfigSpec
from ccview.clearcase.errors import ListingError, VersionResolutionError
from ccview.clearcase.history import HistoryElement, iter_history, merge_history
from ccview.clearcase.listing import Listing
from ccview.clearcase.models import DirectoryChild, DirectoryDelta
from ccview.clearcase.paths import (
    PathElement,
    ViewPath,
    is_inside_view,
    is_numeric,
    join_path,
    normalize_path,
    path_without_versions,
    split_path,
)
from ccview.clearcase.revision import Revision
from ccview.clearcase.version_tree import Version, VersionTree
from ccview.config.constants import PATH_SEPARATOR, VERSION_SEPARATOR
from ccview.config.models import ClearCaseConfig
from ccview.core.logging import get_logger, view_context

log = get_logger(__name__)


class ViewConnection:
    """Version resolution and history classification against one view.

    Not thread-safe: callers serialize access per view through
    ``SessionRegistry.session``.
    """

    def __init__(
        self,
        view_path: ViewPath,
        config_spec: ConfigSpec,
        listing: Listing,
        *,
        settings: ClearCaseConfig | None = None,
    ) -> None:
        self._view_path = view_path
        self._config_spec = config_spec
        self._listing = listing
        self._settings = settings or ClearCaseConfig()
        self._changes_to_ignore: defaultdict[str, list[HistoryElement]] = defaultdict(list)
        self._deleted_versions: defaultdict[str, list[HistoryElement]] = defaultdict(list)
        self._directory_versions: dict[str, Version | None] = {}
        self._children: dict[str, list[DirectoryChild]] = {}

    @property
    def view_path(self) -> ViewPath:
        return self._view_path

    @property
    def config_spec(self) -> ConfigSpec:
        return self._config_spec

    def _split(self, path: str) -> list[PathElement]:
        return split_path(path, treat_main_as_version=self._settings.treat_main_as_version_identifier)

    def _element_path(self, path: str) -> str:
        return path_without_versions(self._split(path))

    # =========================================================================
    # Version Trees
    # =========================================================================

    def read_version_tree(self, path: str, *, is_directory: bool) -> VersionTree:
        """Build the version tree of ``path`` from the listing.

        Versions recorded as destroyed are added back so that history
        referring to them still resolves.
        """
        tree = VersionTree()
        for entry in self._listing.list_versions(path, is_directory=is_directory):
            tail = entry.version.rstrip(PATH_SEPARATOR).rsplit(PATH_SEPARATOR, 1)[-1]
            if is_numeric(tail):
                tree.add_version(entry.version, entry.labels)
            else:
                tree.add_branch(entry.version)
        for destroyed in self._deleted_versions.get(self._element_path(path), ()):
            tree.add_version(destroyed.object_version)
        return tree

    def get_last_version(self, path: str, *, is_file: bool) -> Version | None:
        """Version of ``path`` currently selected by the view.

        Directory results are cached for the lifetime of the connection.
        """
        if is_file:
            return self._resolve_last_version(path, is_file=True)
        if path not in self._directory_versions:
            self._directory_versions[path] = self._resolve_last_version(path, is_file=False)
        return self._directory_versions[path]

    def _resolve_last_version(self, path: str, *, is_file: bool) -> Version | None:
        tree = self.read_version_tree(path, is_directory=not is_file)
        element_path = self._element_path(path)
        for element in self._changes_to_ignore.get(element_path, ()):
            log.debug("branch_ignored", element=element_path, version=element.object_version)
            tree.prune_branch(element.object_version)
        return self._config_spec.current_version(element_path, tree, is_file=is_file)

    def find_version(self, object_path: str, version: str, *, is_directory: bool) -> Version | None:
        tree = self.read_version_tree(object_path, is_directory=is_directory)
        found = tree.find_version_by_path(version.removeprefix(VERSION_SEPARATOR))
        if found is None:
            log.debug("version_not_found", path=object_path, version=version)
        return found

    # =========================================================================
    # View Membership
    # =========================================================================

    def is_inside_view(self, path: str) -> bool:
        return is_inside_view(path, self._view_path.whole_path)

    def is_version_path_inside_view(self, object_path: str, version: str, *, is_file: bool) -> bool:
        """Whether ``object_path`` at ``version`` is selected, ancestors included."""
        full_path = f"{object_path}{VERSION_SEPARATOR}{PATH_SEPARATOR}{version.lstrip(PATH_SEPARATOR)}"
        result = self._config_spec.is_version_inside_view(self, self._split(full_path), is_file=is_file)
        log.debug("version_inside_view", path=object_path, version=version, inside=result)
        return result

    def version_is_inside_view(self, element: HistoryElement, *, is_file: bool) -> bool:
        return self.is_version_path_inside_view(element.object_name, element.object_version, is_file=is_file)

    def file_exists_in_parents(self, element: HistoryElement, *, is_file: bool) -> bool:
        """Whether every ancestor up to the view currently lists the element.

        An ancestor outside the load rules of a snapshot view is not loaded,
        so the element counts as absent.

        Raises:
            VersionResolutionError: if a loaded ancestor directory has no
                selected version.
        """
        elements = self._split(normalize_path(element.object_name))
        view_root = self._view_path.whole_path
        child_is_file = is_file
        while path_without_versions(elements) != view_root:
            if len(elements) < 2:
                return False
            name = elements[-1].name
            parent = elements[:-1]
            parent_path = join_path(parent)
            last = PathElement(parent[-1].name, parent[-1].version)
            if last.version is None:
                version = self.get_last_version(parent_path, is_file=False)
                if version is None:
                    if not self._config_spec.is_under_load_rules(parent_path):
                        log.debug("parent_not_loaded", path=element.object_name, parent=parent_path)
                        return False
                    raise VersionResolutionError(parent_path, "check parent directory")
                last.set_version(version.whole_name)
            if not self._has_child(join_path([*parent[:-1], last]), name, is_file=child_is_file):
                log.debug("file_not_in_parents", path=element.object_name, parent=parent_path)
                return False
            elements, child_is_file = parent, False
        return True

    def _has_child(self, parent_with_version: str, name: str, *, is_file: bool) -> bool:
        return any(
            child.is_file == is_file and child.name == name
            for child in self._list_children(parent_with_version)
        )

    def _list_children(self, directory_with_version: str) -> list[DirectoryChild]:
        if directory_with_version not in self._children:
            self._children[directory_with_version] = self._listing.list_children(directory_with_version)
        return self._children[directory_with_version]

    def directory_delta(self, element: HistoryElement) -> DirectoryDelta:
        """Children added and deleted by the directory version of ``element``.

        Raises:
            VersionResolutionError: if the version is missing from the directory's tree.
        """
        path = element.object_name
        tree = self.read_version_tree(path, is_directory=True)
        version = tree.find_version_by_path(element.object_version)
        if version is None:
            raise VersionResolutionError(element.versioned_path, "diff directory version")
        element_path = self._element_path(path)
        predecessor = version.predecessor
        before = (
            self._list_children(f"{element_path}{VERSION_SEPARATOR}{predecessor.whole_name}")
            if predecessor is not None
            else []
        )
        after = self._list_children(f"{element_path}{VERSION_SEPARATOR}{version.whole_name}")
        return DirectoryDelta.between(before, after)

    def relative_path(self, full_path: str) -> str:
        """Path relative to the tracked directory, versions kept; ``.`` for the directory itself."""
        root_elements = self._split(self._view_path.view_root)
        view_elements = self._split(self._view_path.whole_path)
        elements = self._split(normalize_path(full_path))
        if not elements or not root_elements:
            return "."
        if elements[0].name != root_elements[0].name:
            if elements[0].name == "":
                elements.pop(0)
            elements = [*root_elements, *elements]
        result = join_path(elements, len(view_elements))
        return result if result.strip() else "."

    # =========================================================================
    # Changes To Ignore
    # =========================================================================

    def ignore_change(self, element: HistoryElement) -> None:
        self._changes_to_ignore[self._element_path(element.object_name)].append(element)
        self._directory_versions.clear()

    def record_destroyed_version(self, element: HistoryElement) -> None:
        self._deleted_versions[self._element_path(element.object_name)].append(element)
        self._directory_versions.clear()

    # =========================================================================
    # History
    # =========================================================================

    def read_history(self, since: Revision | None = None) -> Iterator[HistoryElement]:
        """Merged newest-first history of the view since ``since``."""
        revision_options = since.lshistory_options() if since is not None else []
        option_sets = [*self._settings.lshistory_options, *self._settings.directory_history_options]
        streams = [self._history_stream([*options.split(), *revision_options]) for options in option_sets]
        return merge_history(*streams)

    def _history_stream(self, options: list[str]) -> list[HistoryElement]:
        path = self._view_path.whole_path
        try:
            lines = list(self._listing.list_history(path, options))
        except ListingError as e:
            if e.kind is ToolErrorKind.BRANCH_TYPE_NOT_FOUND:
                log.debug("history_branch_missing", path=path, options=options)
                return []
            raise
        transform = not self._settings.disable_history_transformation
        return list(iter_history(lines, transform_names=transform))

    def collect_changes(
        self,
        since: Revision | None,
        until: Revision | None,
        processor: ChangedFilesProcessor,
    ) -> None:
        """Classify history between ``since`` and ``until`` into ``processor``.

        Changes newer than ``until`` are remembered and pruned from later
        version lookups.
        """
        classifier = ChangeClassifier(self, noise_filter=self._settings.noise_filter())
        until_text = until.as_string() if until is not None else None
        with view_context(self._view_path.whole_path, until=until_text):
            classifier.run(self.read_history(since), processor, until=until)
            log.debug("changes_collected", state=classifier.state.value)
