"""Build a draft store for the current user and client session."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from praxis.core.config import settings
from praxis.core.context import get_client_session
from praxis.services.drafts.database import DatabaseDraftBackend
from praxis.services.drafts.memory import MemoryDraftBackend
from praxis.services.drafts.store import DraftStore


def draft_key_for(user_id: UUID) -> str:
    return f"{user_id}:{settings.draft_storage_key}"


def build_draft_store(db: Session, user_id: UUID, client_session: str | None = None) -> DraftStore:
    return DraftStore(
        primary=MemoryDraftBackend(client_session or get_client_session()),
        backup=DatabaseDraftBackend(db),
        key=draft_key_for(user_id),
    )
