"""Task composer state: seeding, slot rules and saving into a plan."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy.orm import Session

from praxis.db.models.user_profile import UserProfile
from praxis.observability.tracing import trace
from praxis.services.drafts.models import Draft, DraftItem
from praxis.services.drafts.store import DraftStore
from praxis.services.errors import ConfirmationRequiredError, InvalidTaskListError, NotFoundError
from praxis.services.plan_service import (
    MAX_TASKS,
    MIN_TASKS,
    PlanCreationResult,
    create_daily_plan,
    normalize_task_texts,
    plan_for_date,
    replan_day,
    utc_today,
)
from praxis.services.rollover_service import RolloverTask, fetch_rollover_tasks
from praxis.services.user_service import get_or_create_profile, preferred_task_count

logger = logging.getLogger(__name__)

TODAY = "today"
TOMORROW = "tomorrow"
MORNING_WINDOW_HOURS = 4
EVENING_WINDOW_HOURS = 3


@dataclass
class ComposerState:
    draft: Draft
    restored: bool
    recommendation: Optional[str]


def initial_items(rollover: Iterable[RolloverTask], slot_count: int) -> List[DraftItem]:
    """Rollover entries first (locked), then blank slots up to ``slot_count``."""
    items = [
        DraftItem(id=str(task.task_id), text=task.title, rollover=True, original_plan_date=task.original_plan_date)
        for task in rollover
    ][:slot_count]
    while len(items) < slot_count:
        items.append(DraftItem())
    return items


def pad_items(items: List[DraftItem], size: int = MAX_TASKS) -> List[DraftItem]:
    padded = list(items)
    while len(padded) < size:
        padded.append(DraftItem())
    return padded


def valid_task_texts(items: Iterable[DraftItem]) -> List[str]:
    return [item.text.strip() for item in items if item.text.strip()]


def remove_item(draft: Draft, item_id: str) -> Draft:
    """Drop a regular slot; the composer never shrinks below the minimum."""
    item = next((entry for entry in draft.task_items if entry.id == item_id), None)
    if item is None:
        raise NotFoundError("Composer item not found")
    if item.rollover:
        raise ConfirmationRequiredError("Rollover tasks must be deleted with confirmation.")
    if len(draft.task_items) <= MIN_TASKS:
        raise InvalidTaskListError(f"Keep at least {MIN_TASKS} task slots.")
    draft.task_items = [entry for entry in draft.task_items if entry.id != item_id]
    return draft


def recommend_target(profile: UserProfile | None, now: datetime) -> Optional[str]:
    """Suggest planning today early in the workday and tomorrow near its end."""
    if profile is None or not profile.work_start_time or not profile.work_end_time:
        return None
    try:
        start_hour = int(profile.work_start_time.split(":")[0])
        end_hour = int(profile.work_end_time.split(":")[0])
    except ValueError:
        logger.warning("Unparseable work hours for user %s", profile.user_id)
        return None

    if profile.timezone:
        try:
            now = now.astimezone(ZoneInfo(profile.timezone))
        except (ZoneInfoNotFoundError, ValueError):
            pass
    hour = now.hour
    if start_hour <= hour < start_hour + MORNING_WINDOW_HOURS:
        return TODAY
    if end_hour - EVENING_WINDOW_HOURS <= hour < end_hour:
        return TOMORROW
    return None


def load_composer(
    db: Session,
    user_id: UUID,
    store: DraftStore,
    *,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
) -> ComposerState:
    """Restore the saved draft, or seed a new one from yesterday's unfinished work."""
    today = today or utc_today()
    profile = get_or_create_profile(db, user_id)
    db.commit()
    recommendation = recommend_target(profile, now or datetime.now().astimezone())
    slot_count = preferred_task_count(profile)

    draft = store.load_draft()
    if draft is not None:
        draft.task_items = pad_items(draft.task_items, slot_count)
        return ComposerState(draft=draft, restored=True, recommendation=recommendation)

    rollover = fetch_rollover_tasks(db, user_id, today)
    draft = Draft(task_items=initial_items(rollover, slot_count))
    store.save_draft(draft)
    return ComposerState(draft=draft, restored=False, recommendation=recommendation)


def save_composer(
    db: Session,
    user_id: UUID,
    store: DraftStore,
    draft: Draft,
    *,
    today: Optional[date] = None,
) -> PlanCreationResult:
    """Turn the composer's non-blank slots into today's or tomorrow's plan.

    Today's plan is never overwritten. A plan that already exists for
    tomorrow has its tasks replaced. The stored draft is cleared only once the
    plan is written.
    """
    today = today or utc_today()
    texts = normalize_task_texts(valid_task_texts(draft.task_items))

    target = today if draft.is_for_today else today + timedelta(days=1)
    with trace("composer.save", metadata={"target": target.isoformat(), "task_count": len(texts)}, user_id=user_id):
        existing = None if draft.is_for_today else plan_for_date(db, user_id, target)
        if existing is not None:
            result = replan_day(db, user_id, existing.id, texts)
        else:
            result = create_daily_plan(db, user_id, target, texts)

    store.clear_draft()
    logger.info("Composer saved %d tasks for %s", len(texts), target)
    return result
