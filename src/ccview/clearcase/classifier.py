"""Classification of merged history into file, directory and destroy changes.

Elements are consumed newest first and pushed onto one of two stacks:
changes after the requested revision (to be ignored) and changes up to it
(accepted). The ignored stack is drained first so that the view learns
which versions to disregard, then the accepted stack is drained into the
downstream processor. Popping a stack replays its elements oldest first.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Protocol

from ccview.clearcase.history import HistoryElement
from ccview.clearcase.models import DirectoryDelta
from ccview.clearcase.revision import Revision
from ccview.config.constants import (
    EVENT_CREATE_DIRECTORY_VERSION,
    EVENT_CREATE_VERSION,
    EVENT_DESTROY_VERSION,
    OPERATION_CHECKIN,
    OPERATION_RMVER,
)
from ccview.config.models import NoiseFilter
from ccview.core.logging import get_logger

log = get_logger(__name__)


class ChangeKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    DESTROYED = "destroyed"


class ClassifierState(Enum):
    IDLE = "idle"
    CONSUMING = "consuming"
    DRAINING_IGNORED = "draining_ignored"
    DRAINING_ACCEPTED = "draining_accepted"
    DONE = "done"


class ChangedFilesProcessor(Protocol):
    """Downstream consumer of accepted changes."""

    def process_changed_file(self, element: HistoryElement) -> None: ...

    def process_changed_directory(self, element: HistoryElement, delta: DirectoryDelta) -> None: ...

    def process_destroyed_file_version(self, element: HistoryElement) -> None: ...


class ChangeContext(Protocol):
    """View-side services the classifier consults and informs."""

    def is_inside_view(self, path: str) -> bool: ...

    def version_is_inside_view(self, element: HistoryElement, *, is_file: bool) -> bool: ...

    def file_exists_in_parents(self, element: HistoryElement, *, is_file: bool) -> bool: ...

    def directory_delta(self, element: HistoryElement) -> DirectoryDelta: ...

    def ignore_change(self, element: HistoryElement) -> None: ...

    def record_destroyed_version(self, element: HistoryElement) -> None: ...


def classify(element: HistoryElement) -> ChangeKind | None:
    """Kind of change an element represents, or None for other events."""
    if element.operation == OPERATION_CHECKIN:
        if element.event == EVENT_CREATE_DIRECTORY_VERSION:
            return ChangeKind.DIRECTORY
        if element.event == EVENT_CREATE_VERSION:
            return ChangeKind.FILE
    elif element.operation == OPERATION_RMVER and element.event == EVENT_DESTROY_VERSION:
        return ChangeKind.DESTROYED
    return None


class ChangeClassifier:
    """One classification run over a merged history stream."""

    def __init__(self, context: ChangeContext, *, noise_filter: NoiseFilter | None = None) -> None:
        self._context = context
        self._noise_filter = noise_filter
        self._ignored: list[tuple[HistoryElement, ChangeKind]] = []
        self._accepted: list[tuple[HistoryElement, ChangeKind]] = []
        self.state = ClassifierState.IDLE

    def run(
        self,
        elements: Iterable[HistoryElement],
        processor: ChangedFilesProcessor,
        *,
        until: Revision | None = None,
    ) -> None:
        """Classify ``elements`` (newest first) and dispatch them.

        Elements later than ``until`` are reported to the context as changes
        to ignore; the rest go to ``processor``.
        """
        self._ignored.clear()
        self._accepted.clear()

        self.state = ClassifierState.CONSUMING
        for element in elements:
            self._consume(element, until)

        self.state = ClassifierState.DRAINING_IGNORED
        while self._ignored:
            element, kind = self._ignored.pop()
            if self._is_relevant(element, kind):
                self._ignore(element, kind)

        self.state = ClassifierState.DRAINING_ACCEPTED
        while self._accepted:
            element, kind = self._accepted.pop()
            if self._is_relevant(element, kind):
                self._dispatch(element, kind, processor)

        self.state = ClassifierState.DONE

    def _consume(self, element: HistoryElement, until: Revision | None) -> None:
        if not self._context.is_inside_view(element.object_name):
            return
        kind = classify(element)
        if kind is None:
            return
        if until is None or Revision.from_element(element).before_or_equals(until):
            self._accepted.append((element, kind))
        else:
            self._ignored.append((element, kind))

    def _is_relevant(self, element: HistoryElement, kind: ChangeKind) -> bool:
        context = self._context
        if kind is ChangeKind.DIRECTORY:
            return context.version_is_inside_view(element, is_file=False) and context.file_exists_in_parents(
                element, is_file=False
            )
        if kind is ChangeKind.FILE:
            return context.file_exists_in_parents(element, is_file=True) and context.version_is_inside_view(
                element, is_file=True
            )
        return context.file_exists_in_parents(element, is_file=True)

    def _ignore(self, element: HistoryElement, kind: ChangeKind) -> None:
        if kind is ChangeKind.DESTROYED:
            self._context.record_destroyed_version(element)
            log.debug("destroyed_version_recorded", element=element.log_representation)
        else:
            self._context.ignore_change(element)
            log.debug("change_ignored", kind=kind.value, element=element.log_representation)

    def _dispatch(self, element: HistoryElement, kind: ChangeKind, processor: ChangedFilesProcessor) -> None:
        if kind is ChangeKind.FILE:
            if self._noise_filter and self._noise_filter(element.last_branch, element.version_number):
                log.debug("first_version_skipped", element=element.log_representation)
                return
            processor.process_changed_file(element)
        elif kind is ChangeKind.DIRECTORY:
            if element.version_number > 0:
                delta = self._context.directory_delta(element)
                if delta.is_empty:
                    log.debug("empty_directory_delta_skipped", element=element.log_representation)
                    return
                processor.process_changed_directory(element, delta)
        else:
            processor.process_destroyed_file_version(element)
