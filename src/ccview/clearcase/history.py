"""History records: parsing, lshistory name normalization and stream merging."""

from __future__ import annotations

import heapq
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime

from ccview.clearcase._internal.parsing import iter_raw_records
from ccview.clearcase.errors import HistoryParseError
from ccview.clearcase.paths import last_branch, version_number
from ccview.config.constants import (
    EVENT_DESTROY_VERSION,
    HISTORY_DATE_FORMAT,
    HISTORY_DELIMITER,
    HISTORY_EVENT_PREFIX,
    KIND_VERSION,
    OPERATION_RMVER,
    PATH_SEPARATOR,
    VERSION_SEPARATOR,
)
from ccview.core.logging import get_logger

log = get_logger(__name__)

_FIELD_COUNT = 9

_LSHISTORY_VPATH = re.compile(r"(.*?)[/\\](\d*)[/\\](.*?)[/\\](.*)", re.DOTALL)
_LSHISTORY_VFILE = re.compile(r"(.*?)[/\\](\d*)[/\\](.*)", re.DOTALL)
_LSHISTORY_VEND = re.compile(r"(.*?)[/\\](.*?)[/\\](\d*)", re.DOTALL)


@dataclass(frozen=True, slots=True)
class HistoryElement:
    """One change event of one element."""

    event_id: int
    user: str
    date_string: str
    date: datetime
    object_name: str
    object_kind: str
    object_version: str
    operation: str
    event: str
    comment: str
    activity: str = ""

    @classmethod
    def read_from(cls, record: str, *, transform_names: bool = True) -> HistoryElement | None:
        """Parse ``event <id>:<fields>``; None when the record is not an event.

        Raises:
            HistoryParseError: if the event id or date cannot be read.
        """
        if not record.startswith(HISTORY_EVENT_PREFIX):
            return None
        event_id, sep, body = record[len(HISTORY_EVENT_PREFIX) :].partition(":")
        if not sep:
            return None
        fields = body.strip().split(HISTORY_DELIMITER, _FIELD_COUNT - 1)
        if len(fields) < _FIELD_COUNT - 1:
            return None
        if len(fields) == _FIELD_COUNT - 1:
            fields.append("")
        user, date_string, name, kind, version, operation, event, comment, activity = fields

        try:
            parsed_id = int(event_id.strip())
        except ValueError as e:
            raise HistoryParseError(record, f"bad event id {event_id.strip()!r}") from e
        try:
            date = datetime.strptime(date_string, HISTORY_DATE_FORMAT)
        except ValueError as e:
            raise HistoryParseError(record, f"bad date {date_string!r}") from e

        if operation == OPERATION_RMVER and event == EVENT_DESTROY_VERSION:
            destroyed = _quoted_version(comment)
            if destroyed is not None:
                kind, version = KIND_VERSION, destroyed

        if transform_names:
            name = normalize_lshistory_name(name)

        return cls(
            event_id=parsed_id,
            user=user,
            date_string=date_string,
            date=date,
            object_name=name,
            object_kind=kind,
            object_version=version,
            operation=operation,
            event=event,
            comment=comment,
            activity=activity,
        )

    @property
    def version_number(self) -> int:
        return version_number(self.object_version)

    @property
    def last_branch(self) -> str:
        return last_branch(self.object_version)

    @property
    def versioned_path(self) -> str:
        """Object name with its version appended (``file@@/main/3``)."""
        name = self.object_name.strip()
        if name.endswith(VERSION_SEPARATOR):
            return name + self.object_version
        return name + VERSION_SEPARATOR + self.object_version

    @property
    def log_representation(self) -> str:
        return (
            f'"{self.object_name}", version "{self.object_version}", date "{self.date_string}", '
            f'operation "{self.operation}", event "{self.event}"'
        )

    def __str__(self) -> str:
        return f"{self.event_id}: {self.object_name}({self.operation})=>{self.event}"


def _quoted_version(comment: str) -> str | None:
    first, last = comment.find('"'), comment.rfind('"')
    if first != -1 and first < last:
        return comment[first + 1 : last]
    return None


def normalize_lshistory_name(name: str, *, drop_versions: bool = False) -> str:
    """Rewrite an lshistory object name that embeds version segments.

    ``/vobs/a@@/main/3/src/main/2/f.c`` becomes
    ``/vobs/a@@/main/3/src@@/main/2/f.c``, or ``/vobs/a/src/f.c`` with
    ``drop_versions``.
    """
    vsep = name.find(VERSION_SEPARATOR)
    if vsep == -1:
        return name
    separator = PATH_SEPARATOR if PATH_SEPARATOR in name else "\\"
    out = name[:vsep]
    # Skip the version separator and the separator after it
    tail = name[vsep + len(VERSION_SEPARATOR) + 1 :]

    def marker() -> str:
        return "" if out.endswith("@") else VERSION_SEPARATOR

    while True:
        match = _LSHISTORY_VPATH.fullmatch(tail)
        if match:
            branch, version, element, tail = match.groups()
            if drop_versions:
                out += separator + element
            else:
                out += marker() + separator.join(("", branch, version, element))
            continue
        match = _LSHISTORY_VFILE.fullmatch(tail)
        if match:
            branch, version, element = match.groups()
            if drop_versions:
                out += separator + element
            else:
                out += marker() + separator.join(("", branch, version, element))
        elif _LSHISTORY_VEND.fullmatch(tail) and not drop_versions:
            out += marker() + PATH_SEPARATOR + tail
        break

    result = out.strip()
    log.debug("history_name_transformed", source=name, result=result)
    return result


# =============================================================================
# Record Source
# =============================================================================


def iter_history(lines: Iterable[str], *, transform_names: bool = True) -> Iterator[HistoryElement]:
    """Parse raw lshistory output lines into history elements.

    A record may span several lines (multi-line comments) and ends with the
    record terminator. Unreadable records are logged and skipped.
    """
    for record in iter_raw_records(lines):
        try:
            element = HistoryElement.read_from(record, transform_names=transform_names)
        except HistoryParseError as e:
            log.warning("history_record_skipped", reason=e.reason, record=record)
            continue
        if element is not None:
            yield element


# =============================================================================
# Merging
# =============================================================================


def _newest_first_key(element: HistoryElement) -> tuple[datetime, int]:
    return element.date, element.event_id


def merge_history(*streams: Iterable[HistoryElement]) -> Iterator[HistoryElement]:
    """Merge newest-first streams into one newest-first stream.

    Elements are ordered by (date, event id) descending, so on equal dates
    the higher event id comes first. The same event reported by several
    streams is yielded once.
    """
    previous: tuple[int, str, str] | None = None
    for element in heapq.merge(*streams, key=_newest_first_key, reverse=True):
        identity = (element.event_id, element.object_name, element.object_version)
        if identity == previous:
            continue
        previous = identity
        yield element
