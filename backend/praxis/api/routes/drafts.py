"""Draft store API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from praxis.api.deps import get_draft_store
from praxis.api.schemas.draft import DraftResponse, DraftSaveResponse
from praxis.services.drafts.models import Draft
from praxis.services.drafts.store import DraftStore

router = APIRouter()


@router.get("/drafts", response_model=DraftResponse, tags=["drafts"])
def read_draft(http_request: Request, store: DraftStore = Depends(get_draft_store)) -> DraftResponse:
    return DraftResponse(draft=store.load_draft(), request_id=getattr(http_request.state, "request_id", None) or "")


@router.put("/drafts", response_model=DraftSaveResponse, tags=["drafts"])
def write_draft(
    payload: Draft,
    http_request: Request,
    store: DraftStore = Depends(get_draft_store),
) -> DraftSaveResponse:
    """Mirror the composer state; an empty item list is not persisted."""
    saved = store.save_draft(payload)
    return DraftSaveResponse(saved=saved, request_id=getattr(http_request.state, "request_id", None) or "")


@router.delete("/drafts", status_code=status.HTTP_204_NO_CONTENT, tags=["drafts"])
def discard_draft(store: DraftStore = Depends(get_draft_store)) -> Response:
    store.clear_draft()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
