"""Durable draft backend on the ``draft_entries`` table."""
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from praxis.db.models.draft_entry import DraftEntry
from praxis.services.drafts.base import DraftBackend


class DatabaseDraftBackend(DraftBackend):
    name = "durable"

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, key: str) -> Optional[str]:
        entry = self.db.get(DraftEntry, key)
        return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        entry = self.db.get(DraftEntry, key)
        if entry is None:
            self.db.add(DraftEntry(key=key, value=value))
        else:
            entry.value = value
        self.db.commit()

    def remove(self, key: str) -> None:
        entry = self.db.get(DraftEntry, key)
        if entry is not None:
            self.db.delete(entry)
            self.db.commit()
