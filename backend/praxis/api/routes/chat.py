"""Journal chat API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from praxis.api.deps import get_llm
from praxis.api.errors import to_http_exception
from praxis.api.schemas.chat import (
    ChatMessageOut,
    ChatSessionOut,
    ChatSessionResponse,
    ClearSessionResponse,
    ResolveSessionRequest,
    SendMessageRequest,
    SendMessageResponse,
)
from praxis.db.deps import get_db
from praxis.db.models.chat import ChatMessage, ChatSession
from praxis.db.models.daily_plan import DailyPlan
from praxis.observability.tracing import log_metric, trace
from praxis.services.chat_service import clear_session, list_messages, send_message
from praxis.services.errors import PraxisError
from praxis.services.llm_client import LLMClient
from praxis.services.session_resolver import resolve_active_or_latest, resolve_for_plan

router = APIRouter()


@router.get("/chat/session", response_model=ChatSessionResponse, tags=["chat"])
def current_session(
    http_request: Request,
    user_id: UUID = Query(..., description="User whose journal to open"),
    db: Session = Depends(get_db),
) -> ChatSessionResponse:
    """Today's plan thread when a plan exists, otherwise the most recent thread."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace("chat.session.current", metadata={"route": "/chat/session"}, user_id=user_id):
        try:
            session = resolve_active_or_latest(db, user_id)
        except Exception:
            db.rollback()
            raise
    log_metric("chat.session.current.found", 1 if session else 0, metadata={"user_id": str(user_id)})
    return _session_response(db, session, request_id)


@router.post("/chat/sessions/resolve", response_model=ChatSessionResponse, tags=["chat"])
def resolve_session(
    payload: ResolveSessionRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> ChatSessionResponse:
    request_id = getattr(http_request.state, "request_id", None)
    plan = db.get(DailyPlan, payload.plan_id)
    if plan is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan not found")
    if plan.user_id != payload.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Plan does not belong to user")
    try:
        session = resolve_for_plan(db, payload.user_id, plan.id, plan.plan_date)
    except Exception:
        db.rollback()
        raise
    return _session_response(db, session, request_id)


@router.post("/chat/sessions/{session_id}/messages", response_model=SendMessageResponse, tags=["chat"])
def post_message(
    session_id: UUID,
    payload: SendMessageRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    llm: LLMClient = Depends(get_llm),
) -> SendMessageResponse:
    request_id = getattr(http_request.state, "request_id", None)
    text = payload.text.strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Message cannot be empty")
    try:
        exchange = send_message(db, payload.user_id, session_id, text, llm)
    except PraxisError as exc:
        db.rollback()
        raise to_http_exception(exc) from exc
    except Exception:
        db.rollback()
        raise
    return SendMessageResponse(
        user_message=_serialize_message(exchange.user_message),
        assistant_message=_serialize_message(exchange.assistant_message),
        usage=exchange.usage,
        request_id=request_id or "",
    )


@router.delete("/chat/sessions/{session_id}/messages", response_model=ClearSessionResponse, tags=["chat"])
def delete_messages(
    session_id: UUID,
    http_request: Request,
    user_id: UUID = Query(..., description="User owning the session"),
    db: Session = Depends(get_db),
) -> ClearSessionResponse:
    request_id = getattr(http_request.state, "request_id", None)
    try:
        removed = clear_session(db, user_id, session_id)
    except PraxisError as exc:
        db.rollback()
        raise to_http_exception(exc) from exc
    except Exception:
        db.rollback()
        raise
    return ClearSessionResponse(removed=removed, request_id=request_id or "")


def _session_response(db: Session, session: ChatSession | None, request_id: str | None) -> ChatSessionResponse:
    if session is None:
        return ChatSessionResponse(session=None, messages=[], request_id=request_id or "")
    return ChatSessionResponse(
        session=ChatSessionOut(
            id=session.id,
            persona_name=session.persona_name,
            session_date=session.session_date,
            plan_id=session.plan_id,
            context_snapshot=session.context_snapshot or {},
            created_at=session.created_at,
        ),
        messages=[_serialize_message(message) for message in list_messages(db, session.id)],
        request_id=request_id or "",
    )


def _serialize_message(message: ChatMessage) -> ChatMessageOut:
    return ChatMessageOut(
        id=message.id,
        sender=message.sender,
        message_text=message.message_text,
        created_at=message.created_at,
    )
