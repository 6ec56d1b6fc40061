"""Raw key/value backend interface for draft persistence."""
from __future__ import annotations

from typing import Optional


class DraftBackend:
    """A string-valued store; the draft store handles (de)serialization."""

    name = "base"

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError
