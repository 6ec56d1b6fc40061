"""Notification hooks: build the in-app notice and fan out to the provider."""
from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from praxis.core.config import settings
from praxis.core.context import get_request_id
from praxis.db.models.chat import ChatSession
from praxis.observability.tracing import log_metric, trace
from praxis.services.activity import record_activity
from praxis.services.notifications.base import Notice, NotificationResult
from praxis.services.notifications.factory import get_notification_service

logger = logging.getLogger(__name__)

SKIPPED = NotificationResult(status="skipped", reason="notifications disabled")


def notify_fresh_journal(db: Session, session: ChatSession) -> Notice:
    """Announce that a replan started a new journal thread."""
    plan_date: date = session.session_date
    notice = Notice(
        title="Fresh Journal Started",
        description=f"Started a fresh journal for {plan_date.strftime('%b %d, %Y')}.",
    )
    result = SKIPPED
    if settings.notifications_enabled:
        with trace("notifications.fresh_journal", metadata={"session_id": str(session.id)}, user_id=session.user_id):
            result = get_notification_service().notify_fresh_journal(
                user_id=session.user_id,
                session_id=session.id,
                plan_date=plan_date,
                request_id=get_request_id(),
            )
    _record(db, session.user_id, "notification_fresh_journal", notice, result, {"session_id": str(session.id)})
    return notice


def notify_rollover_deleted(db: Session, user_id: UUID, task_title: str, original_plan_date: date | None) -> Notice:
    notice = Notice(
        title="Rollover Task Removed",
        description=(
            f'"{task_title}" has been permanently deleted. '
            "Consider reflecting on why this task was left unfinished."
        ),
        variant="gray",
    )
    result = SKIPPED
    if settings.notifications_enabled:
        with trace("notifications.rollover_deleted", user_id=user_id):
            result = get_notification_service().notify_rollover_deleted(
                user_id=user_id,
                task_title=task_title,
                original_plan_date=original_plan_date,
                request_id=get_request_id(),
            )
    _record(db, user_id, "notification_rollover_deleted", notice, result, {"task_title": task_title})
    return notice


def _record(db: Session, user_id: UUID, activity_type: str, notice: Notice, result: NotificationResult, extra: dict) -> None:
    metric = "notifications.skipped" if result.status == "skipped" else "notifications.sent"
    log_metric(metric, 1, metadata={"type": activity_type, "provider": settings.notifications_provider})
    record_activity(
        db,
        user_id,
        activity_type,
        {
            "title": notice.title,
            "description": notice.description,
            "provider": settings.notifications_provider,
            "result": result.__dict__,
            **extra,
        },
    )
