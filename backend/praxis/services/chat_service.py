"""Journal conversation: prompt assembly, message persistence and model calls."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List
from uuid import UUID

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session

from praxis.core.config import settings
from praxis.db.models.chat import ChatMessage, ChatSession
from praxis.db.models.system_prompt import SystemPrompt
from praxis.db.models.user_profile import UserProfile
from praxis.observability.tracing import log_metric, trace
from praxis.services.errors import ChatCompletionError, NotFoundError, OwnershipError, SystemPromptMissingError
from praxis.services.llm_client import LLMClient, LLMError, get_llm_client
from praxis.services.plan_service import TaskView, get_current_plan
from praxis.services.prompt_templates import format_tasks, render_template
from praxis.services.session_resolver import PLACEHOLDER_GOALS, PLACEHOLDER_PATTERNS
from praxis.services.user_service import get_or_create_profile, timezone_for

logger = logging.getLogger(__name__)

USER = "user"
ASSISTANT = "assistant"
SYSTEM = "system"
SEND_FAILED = "Failed to get response from AI. Please try again."


@dataclass
class ChatExchange:
    user_message: ChatMessage
    assistant_message: ChatMessage
    usage: Dict[str, int] = field(default_factory=dict)


def load_system_prompt(db: Session, persona: str | None = None) -> SystemPrompt:
    persona = persona or settings.default_persona
    prompt = (
        db.query(SystemPrompt)
        .filter(SystemPrompt.name == persona, SystemPrompt.is_active.is_(True))
        .order_by(SystemPrompt.updated_at.desc())
        .first()
    )
    if prompt is None:
        logger.error("No active system prompt for persona %s", persona)
        raise SystemPromptMissingError("Failed to load chat system")
    return prompt


def build_prompt_context(profile: UserProfile | None, tasks: Iterable[TaskView]) -> Dict[str, Any]:
    first_name = profile.first_name if profile and profile.first_name else None
    return {
        "user_name": first_name or "User",
        "timezone": timezone_for(profile),
        "user_goals": PLACEHOLDER_GOALS,
        "current_tasks": format_tasks(tasks),
        "recent_patterns": PLACEHOLDER_PATTERNS,
    }


def get_owned_session(db: Session, user_id: UUID, session_id: UUID) -> ChatSession:
    session = db.get(ChatSession, session_id)
    if session is None:
        raise NotFoundError("Chat session not found")
    if session.user_id != user_id:
        raise OwnershipError("Chat session does not belong to user")
    return session


def list_messages(db: Session, session_id: UUID) -> List[ChatMessage]:
    return (
        db.query(ChatMessage)
        .filter(ChatMessage.session_id == session_id)
        .order_by(asc(ChatMessage.created_at))
        .all()
    )


def send_message(
    db: Session,
    user_id: UUID,
    session_id: UUID,
    text: str,
    llm: LLMClient | None = None,
) -> ChatExchange:
    """Persist the user's message, ask the model, persist the reply.

    If the model call fails the user message is deleted again, leaving the
    conversation exactly as it was before the send.
    """
    session = get_owned_session(db, user_id, session_id)
    prompt = load_system_prompt(db, session.persona_name)
    llm = llm or get_llm_client()

    history = list(
        reversed(
            db.query(ChatMessage)
            .filter(ChatMessage.session_id == session.id, ChatMessage.sender != SYSTEM)
            .order_by(desc(ChatMessage.created_at))
            .limit(settings.chat_history_limit)
            .all()
        )
    )
    profile = get_or_create_profile(db, user_id)
    plan_view = get_current_plan(db, user_id)
    context = build_prompt_context(profile, plan_view.tasks if plan_view else [])

    messages = [{"role": SYSTEM, "content": render_template(prompt.system_prompt, context)}]
    messages.extend({"role": message.sender, "content": message.message_text} for message in history)
    messages.append({"role": USER, "content": text})

    user_message = ChatMessage(session_id=session.id, sender=USER, message_text=text)
    db.add(user_message)
    db.commit()

    with trace("chat.send", metadata={"session_id": str(session.id), "history": len(history)}, user_id=user_id):
        try:
            result = llm.complete(messages)
        except LLMError as exc:
            db.delete(user_message)
            db.commit()
            log_metric("chat.send.error", 1, metadata={"session_id": str(session.id)})
            raise ChatCompletionError(SEND_FAILED) from exc

        assistant_message = ChatMessage(
            session_id=session.id,
            sender=ASSISTANT,
            message_text=result.content,
            metadata_json={"usage": result.usage} if result.usage else None,
        )
        db.add(assistant_message)
        db.commit()

    log_metric("chat.send.success", 1, metadata={"session_id": str(session.id)})
    return ChatExchange(user_message=user_message, assistant_message=assistant_message, usage=result.usage)


def clear_session(db: Session, user_id: UUID, session_id: UUID) -> int:
    session = get_owned_session(db, user_id, session_id)
    removed = (
        db.query(ChatMessage)
        .filter(ChatMessage.session_id == session.id)
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("Cleared %d messages from chat session %s", removed, session.id)
    return removed
