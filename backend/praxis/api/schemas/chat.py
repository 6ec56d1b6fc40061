"""Schemas for journal chat endpoints."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ChatSessionOut(BaseModel):
    id: UUID
    persona_name: str
    session_date: date
    plan_id: Optional[UUID]
    context_snapshot: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class ChatMessageOut(BaseModel):
    id: UUID
    sender: str
    message_text: str
    created_at: datetime


class ChatSessionResponse(BaseModel):
    session: Optional[ChatSessionOut]
    messages: List[ChatMessageOut] = Field(default_factory=list)
    request_id: str


class ResolveSessionRequest(BaseModel):
    user_id: UUID
    plan_id: UUID


class SendMessageRequest(BaseModel):
    user_id: UUID
    text: str = Field(..., min_length=1, max_length=4000)


class SendMessageResponse(BaseModel):
    user_message: ChatMessageOut
    assistant_message: ChatMessageOut
    usage: Dict[str, int] = Field(default_factory=dict)
    request_id: str


class ClearSessionResponse(BaseModel):
    removed: int
    request_id: str
