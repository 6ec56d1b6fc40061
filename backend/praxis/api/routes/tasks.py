"""Task mutation API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from praxis.api.errors import to_http_exception
from praxis.api.schemas.task import TaskTimeRequest, TaskTimeResponse, TaskUpdateRequest, TaskUpdateResponse
from praxis.db.deps import get_db
from praxis.observability.tracing import timed_metric
from praxis.services.errors import PraxisError
from praxis.services.plan_service import remove_task, set_task_completion, update_task_time

router = APIRouter()


@router.patch("/tasks/{task_id}", response_model=TaskUpdateResponse, tags=["tasks"])
def update_task_completion(
    task_id: UUID,
    payload: TaskUpdateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> TaskUpdateResponse:
    """Mark a task complete or incomplete."""
    request_id = getattr(http_request.state, "request_id", None)
    with timed_metric("task.complete", metadata={"task_id": str(task_id)}):
        try:
            result = set_task_completion(db, payload.user_id, task_id, payload.completed)
        except PraxisError as exc:
            db.rollback()
            raise to_http_exception(exc) from exc
        except Exception:
            db.rollback()
            raise

    return TaskUpdateResponse(
        id=result.task.id,
        completed=bool(result.task.completed),
        completed_at=result.task.completed_at,
        changed=result.changed,
        request_id=request_id or "",
    )


@router.patch("/tasks/{task_id}/time", response_model=TaskTimeResponse, tags=["tasks"])
def update_time(
    task_id: UUID,
    payload: TaskTimeRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> TaskTimeResponse:
    """Record how long a task actually took."""
    request_id = getattr(http_request.state, "request_id", None)
    try:
        task = update_task_time(db, payload.user_id, task_id, payload.actual_minutes)
    except PraxisError as exc:
        db.rollback()
        raise to_http_exception(exc) from exc
    except Exception:
        db.rollback()
        raise
    return TaskTimeResponse(id=task.id, actual_minutes=task.actual_minutes, request_id=request_id or "")


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["tasks"])
def delete_task(
    task_id: UUID,
    user_id: UUID = Query(..., description="User owning the task"),
    db: Session = Depends(get_db),
) -> Response:
    try:
        remove_task(db, user_id, task_id)
    except PraxisError as exc:
        db.rollback()
        raise to_http_exception(exc) from exc
    except Exception:
        db.rollback()
        raise
    return Response(status_code=status.HTTP_204_NO_CONTENT)
