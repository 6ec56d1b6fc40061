"""Schemas for job operations endpoints."""
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel


class BackfillRequest(BaseModel):
    user_ids: Optional[List[UUID]] = None


class BackfillResponse(BaseModel):
    job: str
    users_processed: int
    sessions_created: int
    request_id: str
