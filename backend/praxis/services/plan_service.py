"""Daily plan and task persistence."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import asc, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from praxis.db.models.chat import ChatSession
from praxis.db.models.daily_plan import DailyPlan
from praxis.db.models.task import DailyTask
from praxis.observability.tracing import log_metric, trace
from praxis.services.activity import record_activity
from praxis.services.errors import (
    InvalidTaskListError,
    NoActivePlanError,
    NotFoundError,
    OwnershipError,
    PlanAlreadyExistsError,
)
from praxis.services.user_service import get_or_create_profile

logger = logging.getLogger(__name__)

MIN_TASKS = 3
MAX_TASKS = 6
DEFAULT_PRIORITY = "medium"
DEFAULT_ESTIMATE_MINUTES = 60


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


@dataclass
class PlanCreationResult:
    plan: DailyPlan
    tasks: List[DailyTask]
    is_replan: bool = False


@dataclass
class TaskView:
    task: DailyTask
    rollover: bool
    original_plan_date: date


@dataclass
class PlanView:
    plan: DailyPlan
    tasks: List[TaskView] = field(default_factory=list)


@dataclass
class TaskCompletionResult:
    task: DailyTask
    changed: bool


def normalize_task_texts(texts: Iterable[Optional[str]]) -> List[str]:
    """Strip entries, drop blanks and enforce the 3..6 task window."""
    cleaned = [text.strip() for text in texts if text and text.strip()]
    if len(cleaned) < MIN_TASKS:
        raise InvalidTaskListError(f"Please add at least {MIN_TASKS} tasks before saving.")
    if len(cleaned) > MAX_TASKS:
        raise InvalidTaskListError(f"A plan can hold at most {MAX_TASKS} tasks.")
    return cleaned


def plan_for_date(db: Session, user_id: UUID, plan_date: date) -> DailyPlan | None:
    return (
        db.query(DailyPlan)
        .filter(DailyPlan.user_id == user_id, DailyPlan.plan_date == plan_date)
        .one_or_none()
    )


def list_plan_tasks(db: Session, plan_id: UUID) -> List[DailyTask]:
    return (
        db.query(DailyTask)
        .filter(DailyTask.daily_plan_id == plan_id)
        .order_by(asc(DailyTask.task_order))
        .all()
    )


def create_daily_plan(db: Session, user_id: UUID, for_date: date, task_texts: Iterable[Optional[str]]) -> PlanCreationResult:
    """Insert a plan for ``for_date`` with one task per non-blank text.

    An existing plan for the date is never merged into; the call is rejected
    before anything is written.
    """
    texts = normalize_task_texts(task_texts)
    metadata = {"plan_date": for_date.isoformat(), "task_count": len(texts)}

    with trace("plan.create", metadata=metadata, user_id=user_id):
        get_or_create_profile(db, user_id)
        if plan_for_date(db, user_id, for_date) is not None:
            log_metric("plan.create.duplicate", 1, metadata={"user_id": str(user_id)})
            raise PlanAlreadyExistsError(f"A plan already exists for {for_date.isoformat()}.")

        plan = DailyPlan(user_id=user_id, plan_date=for_date)
        db.add(plan)
        try:
            db.flush()
        except IntegrityError as exc:
            db.rollback()
            raise PlanAlreadyExistsError(f"A plan already exists for {for_date.isoformat()}.") from exc

        tasks = _insert_tasks(db, user_id, plan.id, texts)
        record_activity(
            db,
            user_id,
            "plan_created",
            {"plan_id": str(plan.id), "plan_date": for_date.isoformat(), "task_count": len(tasks)},
        )
        db.commit()
        db.refresh(plan)

    log_metric("plan.create.success", 1, metadata={"user_id": str(user_id), "task_count": len(tasks)})
    logger.info("Created plan %s for %s with %d tasks", plan.id, for_date, len(tasks))
    return PlanCreationResult(plan=plan, tasks=list_plan_tasks(db, plan.id), is_replan=False)


def replan_day(db: Session, user_id: UUID, plan_id: UUID, task_texts: Iterable[Optional[str]]) -> PlanCreationResult:
    """Replace an existing plan's task list.

    ``is_replan`` is set when a journal thread was already bound to the plan,
    which tells subscribers to archive it.
    """
    texts = normalize_task_texts(task_texts)
    plan = _owned_plan(db, user_id, plan_id)

    with trace("plan.replan", metadata={"plan_id": str(plan_id), "task_count": len(texts)}, user_id=user_id):
        had_session = (
            db.query(ChatSession.id)
            .filter(ChatSession.user_id == user_id, ChatSession.plan_id == plan.id)
            .first()
            is not None
        )
        removed = (
            db.query(DailyTask)
            .filter(DailyTask.daily_plan_id == plan.id, DailyTask.user_id == user_id)
            .delete(synchronize_session=False)
        )
        tasks = _insert_tasks(db, user_id, plan.id, texts)
        record_activity(
            db,
            user_id,
            "plan_replanned",
            {"plan_id": str(plan.id), "removed": removed, "task_count": len(tasks)},
        )
        db.commit()

    log_metric("plan.replan.success", 1, metadata={"user_id": str(user_id)})
    return PlanCreationResult(plan=plan, tasks=list_plan_tasks(db, plan.id), is_replan=had_session)


def get_current_plan(db: Session, user_id: UUID, today: date | None = None) -> PlanView | None:
    """Most recent plan on or before ``today``; tasks of an older plan are rollovers."""
    today = today or utc_today()
    plan = (
        db.query(DailyPlan)
        .filter(DailyPlan.user_id == user_id, DailyPlan.plan_date <= today)
        .order_by(desc(DailyPlan.plan_date))
        .first()
    )
    if plan is None:
        return None
    is_rolled_over = plan.plan_date < today
    views = [
        TaskView(task=task, rollover=is_rolled_over, original_plan_date=plan.plan_date)
        for task in list_plan_tasks(db, plan.id)
    ]
    return PlanView(plan=plan, tasks=views)


def get_tomorrow_plan(db: Session, user_id: UUID, today: date | None = None) -> PlanView | None:
    """The plan saved for the day after ``today``, if any; its tasks are never rollovers."""
    tomorrow = (today or utc_today()) + timedelta(days=1)
    plan = plan_for_date(db, user_id, tomorrow)
    if plan is None:
        return None
    views = [TaskView(task=task, rollover=False, original_plan_date=plan.plan_date) for task in list_plan_tasks(db, plan.id)]
    return PlanView(plan=plan, tasks=views)


def set_task_completion(db: Session, user_id: UUID, task_id: UUID, completed: bool) -> TaskCompletionResult:
    """Set the completion flag, keeping ``completed_at`` consistent with it."""
    task = _owned_task(db, user_id, task_id)
    changed = task.completed != completed
    with trace("task.complete", metadata={"task_id": str(task_id), "completed": completed}, user_id=user_id):
        if changed:
            task.completed = completed
            task.completed_at = datetime.now(timezone.utc) if completed else None
            record_activity(
                db,
                user_id,
                "task_completed" if completed else "task_uncompleted",
                {"task_id": str(task.id), "plan_id": str(task.daily_plan_id)},
            )
        db.commit()
        db.refresh(task)

    log_metric("task.complete.changed", 1 if changed else 0, metadata={"task_id": str(task_id)})
    return TaskCompletionResult(task=task, changed=changed)


def update_task_time(db: Session, user_id: UUID, task_id: UUID, actual_minutes: int) -> DailyTask:
    task = _owned_task(db, user_id, task_id)
    task.actual_minutes = actual_minutes
    db.commit()
    db.refresh(task)
    return task


def remove_task(db: Session, user_id: UUID, task_id: UUID) -> None:
    task = _owned_task(db, user_id, task_id)
    record_activity(db, user_id, "task_removed", {"task_id": str(task.id), "title": task.title})
    db.delete(task)
    db.commit()


def update_daily_reflection(db: Session, user_id: UUID, plan_id: UUID, reflection: str) -> DailyPlan:
    return _update_plan_fields(db, user_id, plan_id, {"evening_reflection": reflection})


def update_morning_intention(db: Session, user_id: UUID, plan_id: UUID, intention: str) -> DailyPlan:
    return _update_plan_fields(db, user_id, plan_id, {"morning_intention": intention})


def update_energy_and_mood(db: Session, user_id: UUID, plan_id: UUID, energy: int, mood: int) -> DailyPlan:
    return _update_plan_fields(db, user_id, plan_id, {"energy_level": energy, "mood_rating": mood})


def update_daily_check_in(db: Session, user_id: UUID, plan_id: UUID, mood: int, energy: int, focus: int) -> DailyPlan:
    return _update_plan_fields(
        db,
        user_id,
        plan_id,
        {"mood_rating": mood, "energy_rating": energy, "focus_rating": focus},
    )


def _update_plan_fields(db: Session, user_id: UUID, plan_id: UUID, fields: Dict[str, Any]) -> DailyPlan:
    plan = db.get(DailyPlan, plan_id)
    if plan is None or plan.user_id != user_id:
        raise NoActivePlanError("No active plan to update.")
    for name, value in fields.items():
        setattr(plan, name, value)
    db.commit()
    db.refresh(plan)
    return plan


def _insert_tasks(db: Session, user_id: UUID, plan_id: UUID, texts: List[str]) -> List[DailyTask]:
    tasks = [
        DailyTask(
            user_id=user_id,
            daily_plan_id=plan_id,
            title=text,
            task_order=index,
            completed=False,
            priority=DEFAULT_PRIORITY,
            estimated_minutes=DEFAULT_ESTIMATE_MINUTES,
        )
        for index, text in enumerate(texts, start=1)
    ]
    db.add_all(tasks)
    db.flush()
    return tasks


def _owned_plan(db: Session, user_id: UUID, plan_id: UUID) -> DailyPlan:
    plan = db.get(DailyPlan, plan_id)
    if plan is None:
        raise NotFoundError("Plan not found")
    if plan.user_id != user_id:
        raise OwnershipError("Plan does not belong to user")
    return plan


def _owned_task(db: Session, user_id: UUID, task_id: UUID) -> DailyTask:
    task = db.get(DailyTask, task_id)
    if task is None:
        raise NotFoundError("Task not found")
    if task.user_id != user_id:
        raise OwnershipError("Task does not belong to user")
    return task
