"""Session-scoped in-process draft backend."""
from __future__ import annotations

from collections import OrderedDict
from threading import Lock
from typing import Optional, Tuple

from praxis.core.config import settings
from praxis.services.drafts.base import DraftBackend

# Least recently written first; abandoned sessions age out once the cap is hit.
_entries: "OrderedDict[Tuple[str, str], str]" = OrderedDict()
_lock = Lock()


class MemoryDraftBackend(DraftBackend):
    """Entries are partitioned by client session and capped at ``draft_session_max_entries``."""

    name = "session"

    def __init__(self, client_session: str) -> None:
        self.client_session = client_session

    def get(self, key: str) -> Optional[str]:
        with _lock:
            return _entries.get((self.client_session, key))

    def set(self, key: str, value: str) -> None:
        entry = (self.client_session, key)
        with _lock:
            _entries[entry] = value
            _entries.move_to_end(entry)
            while len(_entries) > max(settings.draft_session_max_entries, 1):
                _entries.popitem(last=False)

    def remove(self, key: str) -> None:
        with _lock:
            _entries.pop((self.client_session, key), None)


def clear_memory_drafts() -> None:
    with _lock:
        _entries.clear()
