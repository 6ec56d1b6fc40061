"""Schemas for daily plan endpoints."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class TaskOut(BaseModel):
    id: UUID
    daily_plan_id: UUID
    title: str
    task_order: int
    completed: bool
    completed_at: Optional[datetime]
    estimated_minutes: Optional[int]
    actual_minutes: Optional[int]
    priority: str
    rollover: bool = False
    original_plan_date: Optional[date] = None


class PlanOut(BaseModel):
    id: UUID
    user_id: UUID
    plan_date: date
    morning_intention: Optional[str]
    evening_reflection: Optional[str]
    energy_level: Optional[int]
    mood_rating: Optional[int]
    energy_rating: Optional[int]
    focus_rating: Optional[int]
    tasks: List[TaskOut] = Field(default_factory=list)


class NoticeOut(BaseModel):
    title: str
    description: str
    variant: str = "default"


class PlanCreateRequest(BaseModel):
    user_id: UUID
    plan_date: Optional[date] = None
    tasks: List[str]


class ReplanRequest(BaseModel):
    user_id: UUID
    tasks: List[str]


class PlanWriteResponse(BaseModel):
    plan: PlanOut
    is_replan: bool
    session_id: Optional[UUID] = None
    archived_session_id: Optional[UUID] = None
    notices: List[NoticeOut] = Field(default_factory=list)
    request_id: str


class ReflectionRequest(BaseModel):
    user_id: UUID
    reflection: str = Field(..., max_length=5000)


class IntentionRequest(BaseModel):
    user_id: UUID
    intention: str = Field(..., max_length=2000)


class EnergyMoodRequest(BaseModel):
    user_id: UUID
    energy: int = Field(..., ge=1, le=10)
    mood: int = Field(..., ge=1, le=10)


class CheckInRequest(BaseModel):
    user_id: UUID
    mood: int = Field(..., ge=1, le=10)
    energy: int = Field(..., ge=1, le=10)
    focus: int = Field(..., ge=1, le=10)
