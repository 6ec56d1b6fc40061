"""Mirror unsaved composer state into a session-scoped and a durable backend.

Both copies are always written together. Reads prefer the session-scoped copy
and fall back to the durable one. There is a single writer per key, so no
merging is attempted.
"""
from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from praxis.observability.tracing import log_metric
from praxis.services.drafts.base import DraftBackend
from praxis.services.drafts.models import Draft

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = "-backup"


class DraftStore:
    def __init__(self, primary: DraftBackend, backup: DraftBackend, key: str) -> None:
        self.primary = primary
        self.backup = backup
        self.key = key
        self.backup_key = f"{key}{BACKUP_SUFFIX}"

    def load_draft(self) -> Optional[Draft]:
        """Return the stored draft, or None when absent, blank or corrupt."""
        raw = self.primary.get(self.key)
        source = self.primary.name
        if not raw:
            raw = self.backup.get(self.backup_key)
            source = self.backup.name
        if not raw:
            return None

        try:
            draft = Draft.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Discarding corrupt draft %s from %s: %s", self.key, source, exc.errors()[:1])
            log_metric("drafts.corrupt", 1, metadata={"source": source})
            self.clear_draft()
            return None

        if not draft.has_content():
            logger.debug("Draft %s has no meaningful content; ignoring", self.key)
            return None

        logger.info("Restored draft %s from %s", self.key, source)
        return draft

    def save_draft(self, draft: Draft) -> bool:
        """Write the same payload to both backends; empty item lists are skipped."""
        if not draft.task_items:
            return False
        payload = draft.model_dump_json(by_alias=True)
        self.primary.set(self.key, payload)
        self.backup.set(self.backup_key, payload)
        return True

    def clear_draft(self) -> None:
        self.primary.remove(self.key)
        self.backup.remove(self.backup_key)
