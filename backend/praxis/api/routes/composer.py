"""Task composer API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from praxis.api.deps import get_draft_store, get_plan_event_bus
from praxis.api.errors import to_http_exception
from praxis.api.routes.plans import publish_plan_write
from praxis.api.schemas.draft import (
    ComposerResponse,
    ComposerSaveRequest,
    RolloverDeleteRequest,
    RolloverDeleteResponse,
)
from praxis.api.schemas.plan import NoticeOut, PlanWriteResponse
from praxis.db.deps import get_db
from praxis.observability.tracing import log_metric, trace
from praxis.services.composer import load_composer, remove_item, save_composer
from praxis.services.drafts.factory import build_draft_store
from praxis.services.drafts.store import DraftStore
from praxis.services.errors import NotFoundError, PraxisError
from praxis.services.plan_events import PlanEventBus
from praxis.services.rollover_service import delete_rollover_task

router = APIRouter()


@router.get("/composer", response_model=ComposerResponse, tags=["composer"])
def open_composer(
    http_request: Request,
    user_id: UUID = Query(..., description="User composing a plan"),
    db: Session = Depends(get_db),
    store: DraftStore = Depends(get_draft_store),
) -> ComposerResponse:
    """Restore the stored draft or seed a fresh one with yesterday's unfinished tasks."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace("composer.open", metadata={"route": "/composer"}, user_id=user_id):
        state = load_composer(db, user_id, store)
    log_metric("composer.open.restored", 1 if state.restored else 0, metadata={"user_id": str(user_id)})
    return ComposerResponse(
        draft=state.draft,
        restored=state.restored,
        recommendation=state.recommendation,
        request_id=request_id or "",
    )


@router.post(
    "/composer/save",
    response_model=PlanWriteResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["composer"],
)
def save(
    payload: ComposerSaveRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    bus: PlanEventBus = Depends(get_plan_event_bus),
) -> PlanWriteResponse:
    request_id = getattr(http_request.state, "request_id", None)
    store = build_draft_store(db, payload.user_id, getattr(http_request.state, "client_session", None))
    try:
        result = save_composer(db, payload.user_id, store, payload.draft)
    except PraxisError as exc:
        db.rollback()
        raise to_http_exception(exc) from exc
    except Exception:
        db.rollback()
        raise
    return publish_plan_write(db, bus, payload.user_id, result, request_id)


@router.delete("/composer/items/{item_id}", response_model=ComposerResponse, tags=["composer"])
def remove_composer_item(
    item_id: str,
    http_request: Request,
    store: DraftStore = Depends(get_draft_store),
) -> ComposerResponse:
    """Drop a regular slot from the stored draft."""
    draft = store.load_draft()
    try:
        if draft is None:
            raise NotFoundError("No draft in progress")
        draft = remove_item(draft, item_id)
    except PraxisError as exc:
        raise to_http_exception(exc) from exc
    store.save_draft(draft)
    return ComposerResponse(
        draft=draft,
        restored=True,
        request_id=getattr(http_request.state, "request_id", None) or "",
    )


@router.post("/composer/rollover/delete", response_model=RolloverDeleteResponse, tags=["composer"])
def delete_rollover(
    payload: RolloverDeleteRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> RolloverDeleteResponse:
    """Permanently drop a carried-over task after the user confirms."""
    request_id = getattr(http_request.state, "request_id", None)
    store = build_draft_store(db, payload.user_id, getattr(http_request.state, "client_session", None))
    try:
        result = delete_rollover_task(db, payload.user_id, store, payload.item_id, confirmed=payload.confirmed)
    except PraxisError as exc:
        db.rollback()
        raise to_http_exception(exc) from exc
    except Exception:
        db.rollback()
        raise
    notice = result.notice
    return RolloverDeleteResponse(
        draft=result.draft,
        notice=NoticeOut(title=notice.title, description=notice.description, variant=notice.variant),
        request_id=request_id or "",
    )
