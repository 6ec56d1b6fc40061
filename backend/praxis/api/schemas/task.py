"""Schemas for task mutation endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class TaskUpdateRequest(BaseModel):
    user_id: UUID
    completed: bool


class TaskUpdateResponse(BaseModel):
    id: UUID
    completed: bool
    completed_at: Optional[datetime]
    changed: bool
    request_id: str


class TaskTimeRequest(BaseModel):
    user_id: UUID
    actual_minutes: int = Field(..., ge=0, le=24 * 60)


class TaskTimeResponse(BaseModel):
    id: UUID
    actual_minutes: Optional[int]
    request_id: str
