"""Daily plan API routes."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from praxis.api.deps import get_plan_event_bus
from praxis.api.errors import to_http_exception
from praxis.api.schemas.plan import (
    CheckInRequest,
    EnergyMoodRequest,
    IntentionRequest,
    NoticeOut,
    PlanCreateRequest,
    PlanOut,
    PlanWriteResponse,
    ReflectionRequest,
    ReplanRequest,
    TaskOut,
)
from praxis.db.deps import get_db
from praxis.db.models.daily_plan import DailyPlan
from praxis.observability.tracing import log_metric, trace
from praxis.services.errors import PraxisError
from praxis.services.plan_events import PlanCreated, PlanEventBus
from praxis.services.plan_service import (
    PlanCreationResult,
    PlanView,
    TaskView,
    create_daily_plan,
    get_current_plan,
    get_tomorrow_plan,
    replan_day,
    update_daily_check_in,
    update_daily_reflection,
    update_energy_and_mood,
    update_morning_intention,
    utc_today,
)
from praxis.services.session_resolver import SessionTransition

router = APIRouter()


@router.post("/plans", response_model=PlanWriteResponse, status_code=status.HTTP_201_CREATED, tags=["plans"])
def create_plan(
    payload: PlanCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    bus: PlanEventBus = Depends(get_plan_event_bus),
) -> PlanWriteResponse:
    """Create the plan for a date (today by default) and announce it."""
    request_id = getattr(http_request.state, "request_id", None)
    plan_date = payload.plan_date or utc_today()
    with trace("plans.create", metadata={"route": "/plans", "plan_date": plan_date.isoformat()}, user_id=payload.user_id):
        try:
            result = create_daily_plan(db, payload.user_id, plan_date, payload.tasks)
        except PraxisError as exc:
            db.rollback()
            raise to_http_exception(exc) from exc
        except Exception:
            db.rollback()
            raise
    return publish_plan_write(db, bus, payload.user_id, result, request_id)


@router.get("/plans/current", response_model=Optional[PlanOut], tags=["plans"])
def read_current_plan(
    user_id: UUID = Query(..., description="User owning the plan"),
    db: Session = Depends(get_db),
) -> Optional[PlanOut]:
    """Today's plan, or the most recent earlier one with its tasks flagged as rollover."""
    with trace("plans.current", metadata={"route": "/plans/current"}, user_id=user_id):
        view = get_current_plan(db, user_id)
    log_metric("plans.current.found", 1 if view else 0, metadata={"user_id": str(user_id)})
    return serialize_plan_view(view) if view else None


@router.get("/plans/tomorrow", response_model=Optional[PlanOut], tags=["plans"])
def read_tomorrow_plan(
    user_id: UUID = Query(..., description="User owning the plan"),
    db: Session = Depends(get_db),
) -> Optional[PlanOut]:
    """The plan already saved for tomorrow, or null."""
    with trace("plans.tomorrow", metadata={"route": "/plans/tomorrow"}, user_id=user_id):
        view = get_tomorrow_plan(db, user_id)
    return serialize_plan_view(view) if view else None


@router.post("/plans/{plan_id}/replan", response_model=PlanWriteResponse, tags=["plans"])
def replan(
    plan_id: UUID,
    payload: ReplanRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    bus: PlanEventBus = Depends(get_plan_event_bus),
) -> PlanWriteResponse:
    request_id = getattr(http_request.state, "request_id", None)
    try:
        result = replan_day(db, payload.user_id, plan_id, payload.tasks)
    except PraxisError as exc:
        db.rollback()
        raise to_http_exception(exc) from exc
    except Exception:
        db.rollback()
        raise
    return publish_plan_write(db, bus, payload.user_id, result, request_id)


@router.patch("/plans/{plan_id}/reflection", response_model=PlanOut, tags=["plans"])
def set_reflection(plan_id: UUID, payload: ReflectionRequest, db: Session = Depends(get_db)) -> PlanOut:
    return _guarded_update(db, lambda: update_daily_reflection(db, payload.user_id, plan_id, payload.reflection))


@router.patch("/plans/{plan_id}/intention", response_model=PlanOut, tags=["plans"])
def set_intention(plan_id: UUID, payload: IntentionRequest, db: Session = Depends(get_db)) -> PlanOut:
    return _guarded_update(db, lambda: update_morning_intention(db, payload.user_id, plan_id, payload.intention))


@router.patch("/plans/{plan_id}/energy-mood", response_model=PlanOut, tags=["plans"])
def set_energy_mood(plan_id: UUID, payload: EnergyMoodRequest, db: Session = Depends(get_db)) -> PlanOut:
    return _guarded_update(
        db,
        lambda: update_energy_and_mood(db, payload.user_id, plan_id, payload.energy, payload.mood),
    )


@router.patch("/plans/{plan_id}/check-in", response_model=PlanOut, tags=["plans"])
def set_check_in(plan_id: UUID, payload: CheckInRequest, db: Session = Depends(get_db)) -> PlanOut:
    return _guarded_update(
        db,
        lambda: update_daily_check_in(db, payload.user_id, plan_id, payload.mood, payload.energy, payload.focus),
    )


def publish_plan_write(
    db: Session,
    bus: PlanEventBus,
    user_id: UUID,
    result: PlanCreationResult,
    request_id: str | None,
) -> PlanWriteResponse:
    """Announce a committed plan write and fold subscriber output into the response."""
    event = PlanCreated(
        user_id=user_id,
        plan_id=result.plan.id,
        plan_date=result.plan.plan_date,
        is_replan=result.is_replan,
    )
    transitions = [item for item in bus.publish(db, event) if isinstance(item, SessionTransition)]
    transition = transitions[0] if transitions else None

    notices: List[NoticeOut] = []
    if transition and transition.notice:
        notice = transition.notice
        notices.append(NoticeOut(title=notice.title, description=notice.description, variant=notice.variant))

    plan = db.get(DailyPlan, event.plan_id)
    views = [TaskView(task=task, rollover=False, original_plan_date=plan.plan_date) for task in result.tasks]
    return PlanWriteResponse(
        plan=serialize_plan_view(PlanView(plan=plan, tasks=views)),
        is_replan=result.is_replan,
        session_id=transition.session.id if transition else None,
        archived_session_id=transition.archived_session_id if transition else None,
        notices=notices,
        request_id=request_id or "",
    )


def serialize_plan_view(view: PlanView) -> PlanOut:
    plan = view.plan
    return PlanOut(
        id=plan.id,
        user_id=plan.user_id,
        plan_date=plan.plan_date,
        morning_intention=plan.morning_intention,
        evening_reflection=plan.evening_reflection,
        energy_level=plan.energy_level,
        mood_rating=plan.mood_rating,
        energy_rating=plan.energy_rating,
        focus_rating=plan.focus_rating,
        tasks=[_serialize_task(task_view) for task_view in view.tasks],
    )


def _serialize_task(view: TaskView) -> TaskOut:
    task = view.task
    return TaskOut(
        id=task.id,
        daily_plan_id=task.daily_plan_id,
        title=task.title,
        task_order=task.task_order,
        completed=bool(task.completed),
        completed_at=task.completed_at,
        estimated_minutes=task.estimated_minutes,
        actual_minutes=task.actual_minutes,
        priority=task.priority,
        rollover=view.rollover,
        original_plan_date=view.original_plan_date if view.rollover else None,
    )


def _guarded_update(db: Session, update) -> PlanOut:
    try:
        plan = update()
    except PraxisError as exc:
        db.rollback()
        raise to_http_exception(exc) from exc
    except Exception:
        db.rollback()
        raise
    return serialize_plan_view(PlanView(plan=plan))
