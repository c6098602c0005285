"""Session registry: one listing collaborator per view, serialized access.

The registry is owned by the caller and holds no process-wide state. Each
registered view gets its own lock; ``session`` holds it for one evaluation
or listing round-trip and always releases it.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from ccview.clearcase.errors import SessionNotRegisteredError
from ccview.clearcase.listing import Listing
from ccview.clearcase.paths import normalize_path
from ccview.core.logging import get_logger, view_context

log = get_logger(__name__)


@dataclass
class _Slot:
    listing: Listing
    lock: threading.Lock = field(default_factory=threading.Lock)


@dataclass
class SessionRegistry:
    """Listing collaborators keyed by normalized view path."""

    _slots: dict[str, _Slot] = field(default_factory=dict, init=False)
    _registry_lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    def register(self, view_path: str, listing: Listing) -> None:
        """Register ``listing`` for ``view_path``, replacing any previous one."""
        key = normalize_path(view_path, required=True)
        with self._registry_lock:
            self._slots[key] = _Slot(listing)
        log.debug("session_registered", view=key)

    def unregister(self, view_path: str) -> None:
        key = normalize_path(view_path, required=True)
        with self._registry_lock:
            self._slots.pop(key, None)
        log.debug("session_unregistered", view=key)

    def is_registered(self, view_path: str) -> bool:
        key = normalize_path(view_path, required=True)
        with self._registry_lock:
            return key in self._slots

    @contextmanager
    def session(self, view_path: str) -> Iterator[Listing]:
        """Exclusive access to the listing of ``view_path``.

        Blocks while another session on the same view is open. Sessions on
        different views do not wait for each other. Log lines emitted while
        the session is open carry the view path and the session id.

        Raises:
            SessionNotRegisteredError: if nothing is registered for the view.
        """
        key = normalize_path(view_path, required=True)
        with self._registry_lock:
            slot = self._slots.get(key)
        if slot is None:
            raise SessionNotRegisteredError(key)

        with slot.lock, view_context(key):
            log.debug("session_opened")
            try:
                yield slot.listing
            finally:
                log.debug("session_closed")
