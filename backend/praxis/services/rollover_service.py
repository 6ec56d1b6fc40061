"""Carry unfinished tasks from the previous day into the composer."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy import asc
from sqlalchemy.orm import Session

from praxis.db.models.daily_plan import DailyPlan
from praxis.db.models.deleted_task import DeletedTask
from praxis.db.models.task import DailyTask
from praxis.observability.tracing import log_metric, trace
from praxis.services.activity import record_activity
from praxis.services.drafts.models import Draft
from praxis.services.drafts.store import DraftStore
from praxis.services.errors import ConfirmationRequiredError, InvalidTaskListError, NotFoundError
from praxis.services.notifications.base import Notice
from praxis.services.notifications.hooks import notify_rollover_deleted
from praxis.services.plan_service import MIN_TASKS, utc_today

logger = logging.getLogger(__name__)

DELETION_REASON = "user_deleted_rollover"
DELETION_NOTES = "Task deleted from rollover list"


@dataclass
class RolloverTask:
    task_id: UUID
    title: str
    task_order: int
    original_plan_date: date


@dataclass
class RolloverDeletion:
    draft: Draft
    notice: Notice
    deleted_task_id: UUID


def fetch_rollover_tasks(db: Session, user_id: UUID, for_date: date) -> List[RolloverTask]:
    """Incomplete tasks from the day before ``for_date``, in their original order."""
    previous = for_date - timedelta(days=1)
    rows = (
        db.query(DailyTask)
        .join(DailyPlan, DailyPlan.id == DailyTask.daily_plan_id)
        .filter(
            DailyPlan.user_id == user_id,
            DailyPlan.plan_date == previous,
            DailyTask.completed.is_(False),
        )
        .order_by(asc(DailyTask.task_order))
        .all()
    )
    return [
        RolloverTask(task_id=row.id, title=row.title, task_order=row.task_order, original_plan_date=previous)
        for row in rows
    ]


def delete_rollover_task(
    db: Session,
    user_id: UUID,
    store: DraftStore,
    item_id: str,
    *,
    confirmed: bool,
    today: Optional[date] = None,
) -> RolloverDeletion:
    """Drop a rolled-over item from the stored draft and log it for reflection.

    The previous day's task row is left untouched.
    """
    if not confirmed:
        raise ConfirmationRequiredError("Deleting a rollover task must be confirmed.")

    draft = store.load_draft()
    item = next((entry for entry in draft.task_items if entry.id == item_id), None) if draft else None
    if draft is None or item is None:
        raise NotFoundError("Composer item not found")
    if not item.rollover:
        raise InvalidTaskListError("Only rollover tasks can be deleted this way.")
    if len(draft.task_items) <= MIN_TASKS:
        raise InvalidTaskListError(f"Keep at least {MIN_TASKS} task slots.")

    original_date = item.original_plan_date or today or utc_today()
    with trace("rollover.delete", metadata={"item_id": item_id}, user_id=user_id):
        deleted = DeletedTask(
            user_id=user_id,
            original_task_id=item.id,
            task_title=item.text,
            original_plan_date=original_date,
            deletion_reason=DELETION_REASON,
            notes=DELETION_NOTES,
        )
        db.add(deleted)
        record_activity(
            db,
            user_id,
            "rollover_task_deleted",
            {"item_id": item.id, "task_title": item.text, "original_plan_date": original_date.isoformat()},
        )
        notice = notify_rollover_deleted(db, user_id, item.text, original_date)
        db.commit()

    draft.task_items = [entry for entry in draft.task_items if entry.id != item_id]
    store.save_draft(draft)

    log_metric("rollover.deleted", 1, metadata={"user_id": str(user_id)})
    logger.info("Rollover task %s removed from composer for user %s", item_id, user_id)
    return RolloverDeletion(draft=draft, notice=notice, deleted_task_id=deleted.id)
