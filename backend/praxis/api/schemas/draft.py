"""Schemas for draft and composer endpoints."""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from praxis.api.schemas.plan import NoticeOut
from praxis.services.drafts.models import Draft


class DraftResponse(BaseModel):
    draft: Optional[Draft]
    request_id: str


class DraftSaveResponse(BaseModel):
    saved: bool
    request_id: str


class ComposerResponse(BaseModel):
    draft: Draft
    restored: bool
    recommendation: Optional[str] = None
    request_id: str


class ComposerSaveRequest(BaseModel):
    user_id: UUID
    draft: Draft


class RolloverDeleteRequest(BaseModel):
    user_id: UUID
    item_id: str
    confirmed: bool = False


class RolloverDeleteResponse(BaseModel):
    draft: Draft
    notice: NoticeOut
    request_id: str
