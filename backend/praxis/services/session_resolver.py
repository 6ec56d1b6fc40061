"""Decide which conversation thread a user sees, creating or archiving threads as needed.

Per user and persona a thread moves through::

    NONE -> ACTIVE(plan P)            first resolution for a plan
    ACTIVE(P) -> ARCHIVED(plan NULL)  the day is replanned
    ARCHIVED -> ACTIVE(P')            next resolution for a plan

Sessions are never deleted. Archiving clears ``plan_id`` in place.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from praxis.core.config import settings
from praxis.db.models.chat import ChatSession
from praxis.db.models.daily_plan import DailyPlan
from praxis.db.models.user_profile import UserProfile
from praxis.observability.tracing import log_metric, trace
from praxis.services.activity import record_activity
from praxis.services.notifications.base import Notice
from praxis.services.notifications.hooks import notify_fresh_journal
from praxis.services.plan_events import PlanCreated
from praxis.services.plan_service import utc_today
from praxis.services.user_service import display_name_for, get_or_create_profile, timezone_for

logger = logging.getLogger(__name__)

PLACEHOLDER_GOALS = "No goals set yet"
PLACEHOLDER_TASKS = "No tasks for today"
PLACEHOLDER_PATTERNS = "No patterns available yet"


@dataclass
class SessionTransition:
    session: ChatSession
    archived_session_id: Optional[UUID] = None
    notice: Optional[Notice] = None


def build_context_snapshot(profile: UserProfile | None) -> Dict[str, Any]:
    return {
        "user_name": display_name_for(profile),
        "timezone": timezone_for(profile),
        "user_goals": (profile.primary_goal if profile and profile.primary_goal else PLACEHOLDER_GOALS),
        "current_tasks": PLACEHOLDER_TASKS,
        "recent_patterns": PLACEHOLDER_PATTERNS,
    }


def find_session_for_plan(db: Session, user_id: UUID, plan_id: UUID, persona: str | None = None) -> ChatSession | None:
    persona = persona or settings.default_persona
    return (
        db.query(ChatSession)
        .filter(
            ChatSession.user_id == user_id,
            ChatSession.persona_name == persona,
            ChatSession.plan_id == plan_id,
        )
        .one_or_none()
    )


def latest_session(db: Session, user_id: UUID, persona: str | None = None) -> ChatSession | None:
    persona = persona or settings.default_persona
    return (
        db.query(ChatSession)
        .filter(ChatSession.user_id == user_id, ChatSession.persona_name == persona)
        .order_by(desc(ChatSession.session_date), desc(ChatSession.created_at))
        .first()
    )


def resolve_for_plan(
    db: Session,
    user_id: UUID,
    plan_id: UUID,
    plan_date: date,
    *,
    persona: str | None = None,
) -> ChatSession:
    """Return the thread bound to ``plan_id``, creating it on first use.

    Concurrent creators race on the (user, persona, plan) unique constraint;
    the loser rolls back and returns the winner's row.
    """
    persona = persona or settings.default_persona
    metadata = {"plan_id": str(plan_id), "persona": persona}
    with trace("session.resolve_for_plan", metadata=metadata, user_id=user_id):
        existing = find_session_for_plan(db, user_id, plan_id, persona)
        if existing:
            return existing

        profile = get_or_create_profile(db, user_id)
        session = ChatSession(
            user_id=user_id,
            persona_name=persona,
            session_date=plan_date,
            plan_id=plan_id,
            context_snapshot=build_context_snapshot(profile),
        )
        db.add(session)
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            winner = find_session_for_plan(db, user_id, plan_id, persona)
            if winner is None:
                raise
            logger.info("Session for plan %s created concurrently; reusing %s", plan_id, winner.id)
            return winner

        record_activity(
            db,
            user_id,
            "chat_session_created",
            {"session_id": str(session.id), "plan_id": str(plan_id), "persona": persona},
        )
        db.commit()
        db.refresh(session)

    log_metric("session.created", 1, metadata={"persona": persona})
    logger.info("Created chat session %s for plan %s", session.id, plan_id)
    return session


def resolve_active_or_latest(
    db: Session,
    user_id: UUID,
    *,
    today: date | None = None,
    persona: str | None = None,
) -> ChatSession | None:
    """Today's plan thread if a plan exists, else the latest thread untouched.

    Skipped days do not reset the conversation. ``None`` means the user has
    neither a plan today nor any earlier thread.
    """
    today = today or utc_today()
    plan = (
        db.query(DailyPlan)
        .filter(DailyPlan.user_id == user_id, DailyPlan.plan_date == today)
        .one_or_none()
    )
    if plan is not None:
        return resolve_for_plan(db, user_id, plan.id, plan.plan_date, persona=persona)
    return latest_session(db, user_id, persona)


def active_session_for(
    db: Session,
    user_id: UUID,
    plan_id: UUID,
    plan_date: date,
    persona: str | None = None,
) -> ChatSession | None:
    """The plan-bound thread a replan of ``plan_id`` would displace."""
    bound = find_session_for_plan(db, user_id, plan_id, persona)
    if bound is not None:
        return bound
    return (
        db.query(ChatSession)
        .filter(
            ChatSession.user_id == user_id,
            ChatSession.persona_name == (persona or settings.default_persona),
            ChatSession.session_date == plan_date,
            ChatSession.plan_id.isnot(None),
        )
        .order_by(desc(ChatSession.created_at))
        .first()
    )


def archive_and_create_new(
    db: Session,
    user_id: UUID,
    plan_id: UUID,
    plan_date: date,
    *,
    persona: str | None = None,
) -> SessionTransition:
    """Archive the active plan thread in place, then resolve a fresh one."""
    archived_id: Optional[UUID] = None
    with trace("session.archive", metadata={"plan_id": str(plan_id)}, user_id=user_id):
        current = active_session_for(db, user_id, plan_id, plan_date, persona)
        if current is not None:
            archived_id = current.id
            previous_plan_id = current.plan_id
            current.plan_id = None
            record_activity(
                db,
                user_id,
                "chat_session_archived",
                {"session_id": str(current.id), "plan_id": str(previous_plan_id)},
            )
            db.commit()
            logger.info("Archived chat session %s (plan %s)", current.id, previous_plan_id)

    session = resolve_for_plan(db, user_id, plan_id, plan_date, persona=persona)
    return SessionTransition(session=session, archived_session_id=archived_id)


def handle_plan_created(db: Session, event: PlanCreated) -> SessionTransition:
    """Plan event subscriber: continue or restart the journal for the new plan."""
    if not event.is_replan:
        session = resolve_for_plan(db, event.user_id, event.plan_id, event.plan_date)
        return SessionTransition(session=session)

    transition = archive_and_create_new(db, event.user_id, event.plan_id, event.plan_date)
    transition.notice = notify_fresh_journal(db, transition.session)
    db.commit()
    return transition
