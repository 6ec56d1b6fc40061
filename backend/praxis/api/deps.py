"""Shared FastAPI dependencies for the API layer."""
from __future__ import annotations

from functools import lru_cache
from uuid import UUID

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from praxis.db.deps import get_db
from praxis.services.drafts.factory import build_draft_store
from praxis.services.drafts.store import DraftStore
from praxis.services.llm_client import LLMClient
from praxis.services.plan_events import PlanEventBus
from praxis.services.session_resolver import handle_plan_created


@lru_cache
def get_plan_event_bus() -> PlanEventBus:
    """Process-wide bus; the session resolver reacts to every new plan."""
    bus = PlanEventBus()
    bus.subscribe(handle_plan_created)
    return bus


def get_llm() -> LLMClient:
    return LLMClient()


def get_draft_store(
    request: Request,
    user_id: UUID = Query(..., description="User owning the draft"),
    db: Session = Depends(get_db),
) -> DraftStore:
    return build_draft_store(db, user_id, getattr(request.state, "client_session", None))
