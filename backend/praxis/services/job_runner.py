"""Batch maintenance jobs."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from praxis.core.config import settings
from praxis.db.models.chat import ChatSession
from praxis.db.models.daily_plan import DailyPlan
from praxis.observability.tracing import log_metric, timed_metric
from praxis.services.session_resolver import resolve_for_plan

logger = logging.getLogger(__name__)


@dataclass
class JobRunResult:
    users_processed: int
    sessions_created: int


def plans_missing_sessions(
    db: Session,
    *,
    user_ids: Optional[Iterable[UUID]] = None,
    persona: str | None = None,
) -> List[DailyPlan]:
    persona = persona or settings.default_persona
    bound = select(ChatSession.plan_id).where(
        ChatSession.persona_name == persona,
        ChatSession.plan_id.isnot(None),
    )
    query = db.query(DailyPlan).filter(DailyPlan.id.notin_(bound))
    if user_ids is not None:
        query = query.filter(DailyPlan.user_id.in_(list(user_ids)))
    return query.order_by(DailyPlan.user_id, DailyPlan.plan_date).all()


def backfill_missing_sessions(
    db: Session,
    *,
    user_ids: Optional[Iterable[UUID]] = None,
    persona: str | None = None,
) -> JobRunResult:
    """Create a journal thread for every plan that has none."""
    with timed_metric("jobs.backfill_sessions"):
        plans = plans_missing_sessions(db, user_ids=user_ids, persona=persona)
        users = set()
        created = 0
        for plan in plans:
            users.add(plan.user_id)
            resolve_for_plan(db, plan.user_id, plan.id, plan.plan_date, persona=persona)
            created += 1

    log_metric("jobs.backfill_sessions.created", created)
    logger.info("Backfill created %d sessions for %d users", created, len(users))
    return JobRunResult(users_processed=len(users), sessions_created=created)
