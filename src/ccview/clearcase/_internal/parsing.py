"""Line parsers for raw tool output."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime

from ccview.clearcase.models import (
    DirectoryChild,
    RecordKind,
    ToolRecord,
    VersionDescription,
    VersionEntry,
)
from ccview.config.constants import (
    HISTORY_DATE_FORMAT,
    HISTORY_DELIMITER,
    HISTORY_EVENT_PREFIX,
    HISTORY_LINE_END,
    VERSION_SEPARATOR,
)

_DIRECTORY_ELEMENT = "directory element"
_FILE_ELEMENT = "file element"
_NOT_LOADED = "[not loaded]"

DESCRIBE_FORMAT = "%Xn;%Nd;%l;%[type]p\\n"
"""Describe output: extended name, date, (labels), element type."""


def parse_vtree_line(line: str) -> VersionEntry | None:
    """Version after the last ``@@`` plus labels in parentheses (``x@@/main/3 (L1, L2)``)."""
    pos = line.rfind(VERSION_SEPARATOR)
    if pos == -1:
        return None
    text = line[pos + len(VERSION_SEPARATOR) :].strip()
    labels: tuple[str, ...] = ()
    if text.endswith(")") and " (" in text:
        text, _, label_text = text.partition(" (")
        labels = tuple(label.strip() for label in label_text[:-1].split(",") if label.strip())
    if not text:
        return None
    return VersionEntry(version=text.strip(), labels=labels)


def read_child_from_ls(line: str) -> DirectoryChild | None:
    """Parse one ``ls`` line; lines that are not element entries give None."""
    text = line.strip()
    if text.startswith(_DIRECTORY_ELEMENT):
        kind = "directory"
        text = text[len(_DIRECTORY_ELEMENT) :].strip()
    elif text.startswith(_FILE_ELEMENT):
        kind = "file"
        text = text[len(_FILE_ELEMENT) :].strip()
    else:
        return None
    if text.endswith(_NOT_LOADED):
        text = text[: -len(_NOT_LOADED)].strip()
    if text.endswith(VERSION_SEPARATOR):
        text = text[: -len(VERSION_SEPARATOR)].strip()
    return DirectoryChild(path=text, kind=kind)  # type: ignore[arg-type]


def parse_describe(line: str) -> VersionDescription:
    """Parse ``<path>@@<version>;<date>;(<labels>)[;<type>[;<mode>]]``.

    Raises:
        ValueError: if the line has fewer than three fields or a bad date.
    """
    fields = line.strip().split(";")
    if len(fields) < 3:
        raise ValueError(f"expected at least 3 fields in describe output: {line!r}")
    version_path, date_text, label_text = fields[0], fields[1], fields[2].strip()
    created = datetime.strptime(date_text.strip(), HISTORY_DATE_FORMAT)
    labels = tuple(
        label.strip() for label in label_text.strip("()").split(",") if label.strip()
    )
    element_type = fields[3].strip() if len(fields) > 3 else ""
    mode = fields[4].strip() if len(fields) > 4 else ""
    return VersionDescription(
        version_path=version_path.strip(),
        created=created,
        labels=labels,
        is_text=not element_type or "text" in element_type,
        is_executable="x" in mode,
    )


# =============================================================================
# Tagged Records
# =============================================================================

# (prefix, field name); the first entry opens a new record
_RECORD_FIELDS: dict[RecordKind, tuple[tuple[str, str], ...]] = {
    "vob": (
        ("Tag: ", "tag"),
        ("Global path: ", "global_path"),
        ("Server host: ", "server_host"),
        ("Region: ", "region"),
        ("Vob server access path: ", "access_path"),
    ),
    "view": (
        ("Tag: ", "tag"),
        ("Global path: ", "global_path"),
        ("Server host: ", "server_host"),
        ("Region: ", "region"),
        ("View attributes: ", "attributes"),
    ),
    "storage": (
        ("Name: ", "name"),
        ("Type: ", "type"),
        ("Global path: ", "global_path"),
        ("Server host: ", "server_host"),
    ),
}

_CHANGE_PREFIXES: tuple[tuple[str, str], ...] = (
    ("Updated:", "updated"),
    ("New:", "new"),
    ("UnloadDeleted:", "unload_deleted"),
)

_HISTORY_FIELDS = (
    "user",
    "date",
    "object_name",
    "object_kind",
    "object_version",
    "operation",
    "event",
    "comment",
    "activity",
)


def iter_raw_records(lines: Iterable[str]) -> Iterator[str]:
    """Group history output into records ending with the record terminator.

    Lines before the first ``event`` line of a record are dropped. The
    terminator is stripped; a trailing unterminated record is still yielded.
    """
    buffer: list[str] = []
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not buffer and not line.startswith(HISTORY_EVENT_PREFIX):
            continue
        buffer.append(line)
        if line.rstrip().endswith(HISTORY_LINE_END):
            yield "\n".join(buffer).rstrip()[: -len(HISTORY_LINE_END)]
            buffer = []
    if buffer:
        yield "\n".join(buffer)


def tokenize_records(kind: RecordKind, lines: Iterable[str]) -> list[ToolRecord]:
    """Tokenize tool output of one kind into tagged records."""
    if kind == "history":
        return [r for r in map(_history_record, iter_raw_records(lines)) if r is not None]
    if kind == "change":
        return [_change_record(lines)]

    table = _RECORD_FIELDS[kind]
    opener = table[0][0]
    records: list[ToolRecord] = []
    current: dict[str, str] | None = None
    for raw in lines:
        line = raw.strip()
        if line.startswith(opener):
            current = {}
            records.append(ToolRecord(kind=kind, fields=current))
        if current is None:
            continue
        for prefix, name in table:
            if line.startswith(prefix):
                current[name] = line[len(prefix) :].strip()
                break
    return records


def _history_record(record: str) -> ToolRecord | None:
    event_id, sep, body = record[len(HISTORY_EVENT_PREFIX) :].partition(":")
    if not sep:
        return None
    values = body.strip().split(HISTORY_DELIMITER, len(_HISTORY_FIELDS) - 1)
    if len(values) < len(_HISTORY_FIELDS) - 1:
        return None
    fields = dict(zip(_HISTORY_FIELDS, values, strict=False))
    fields.setdefault("activity", "")
    fields["event_id"] = event_id.strip()
    return ToolRecord(kind="history", fields=fields)


def _change_record(lines: Iterable[str]) -> ToolRecord:
    entries: list[tuple[str, str]] = []
    for raw in lines:
        line = raw.strip()
        for prefix, status in _CHANGE_PREFIXES:
            if line.startswith(prefix):
                entries.append((status, line[len(prefix) :].strip()))
                break
    return ToolRecord(kind="change", entries=tuple(entries))
