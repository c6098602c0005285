"""Points in history: ``FIRST`` or ``<event id>@<date>``."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from ccview.clearcase.errors import MalformedVersionError
from ccview.config.constants import REVISION_DATE_FORMAT

if TYPE_CHECKING:
    from ccview.clearcase.history import HistoryElement

_FIRST = "FIRST"
_SEPARATOR = "@"
_UNIQUE_SUFFIX = "#"


@dataclass(frozen=True, slots=True)
class Revision:
    """A history position; ``date is None`` stands for the very beginning."""

    date: datetime | None = None
    event_id: int | None = None

    @classmethod
    def first(cls) -> Revision:
        return cls()

    @classmethod
    def from_date(cls, date: datetime) -> Revision:
        return cls(date=date)

    @classmethod
    def from_element(cls, element: HistoryElement) -> Revision:
        return cls(date=element.date, event_id=element.event_id)

    @classmethod
    def parse(cls, text: str) -> Revision:
        """Parse ``FIRST``, ``<date>`` or ``<event id>@<date>``; a ``#...`` suffix is dropped.

        Raises:
            MalformedVersionError: if the date or event id is unreadable.
        """
        text = text.split(_UNIQUE_SUFFIX, 1)[0].strip()
        if text == _FIRST:
            return cls.first()
        event_part, sep, date_part = text.rpartition(_SEPARATOR)
        try:
            date = datetime.strptime(date_part, REVISION_DATE_FORMAT)
        except ValueError as e:
            raise MalformedVersionError(text, f"bad revision date {date_part!r}") from e
        if not sep:
            return cls(date=date)
        try:
            return cls(date=date, event_id=int(event_part))
        except ValueError as e:
            raise MalformedVersionError(text, f"bad event id {event_part!r}") from e

    @property
    def is_first(self) -> bool:
        return self.date is None

    def before_or_equals(self, other: Revision) -> bool:
        """Event ids decide when both sides have one, dates otherwise."""
        if self.date is None:
            return True
        if other.date is None:
            return False
        if self.event_id is not None and other.event_id is not None:
            return self.event_id <= other.event_id
        return self.date <= other.date

    def lshistory_options(self) -> list[str]:
        if self.date is None:
            return []
        return ["-since", self.date_string]

    @property
    def date_string(self) -> str:
        return self.date.strftime(REVISION_DATE_FORMAT) if self.date else ""

    def as_string(self) -> str:
        if self.date is None:
            return _FIRST
        if self.event_id is None:
            return self.date_string
        return f"{self.event_id}{_SEPARATOR}{self.date_string}"

    def __str__(self) -> str:
        return self.as_string()
