"""Operational endpoints for maintenance jobs."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from praxis.api.schemas.jobs import BackfillRequest, BackfillResponse
from praxis.core.config import settings
from praxis.db.deps import get_db
from praxis.observability.tracing import log_metric, trace
from praxis.services.job_runner import backfill_missing_sessions

router = APIRouter()


@router.get("/jobs", tags=["jobs"])
def get_jobs_config(request: Request) -> dict:
    request_id = getattr(request.state, "request_id", None)
    with trace("jobs.config", metadata={"request_id": request_id}, request_id=request_id):
        data = {
            "scheduler_enabled": settings.scheduler_enabled,
            "schedule": {
                "timezone": settings.scheduler_timezone,
                "backfill_time": f"{settings.backfill_job_hour:02d}:{settings.backfill_job_minute:02d}",
            },
        }
    return {**data, "request_id": request_id or ""}


@router.post("/jobs/backfill-sessions", response_model=BackfillResponse, tags=["jobs"])
def run_backfill(
    request: Request,
    payload: Optional[BackfillRequest] = None,
    db: Session = Depends(get_db),
) -> BackfillResponse:
    """Create journal threads for plans that never got one."""
    request_id = getattr(request.state, "request_id", None)
    user_ids = payload.user_ids if payload else None
    with trace("jobs.backfill_sessions", metadata={"request_id": request_id}, request_id=request_id):
        try:
            result = backfill_missing_sessions(db, user_ids=user_ids)
        except Exception:
            db.rollback()
            raise

    log_metric("jobs.backfill_sessions.success", 1)
    return BackfillResponse(
        job="backfill_sessions",
        users_processed=result.users_processed,
        sessions_created=result.sessions_created,
        request_id=request_id or "",
    )
