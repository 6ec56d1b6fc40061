"""Persona system prompt model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, Index, Text, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from praxis.db.base import Base
from praxis.db.types import JSONBCompat


class SystemPrompt(Base):
    __tablename__ = "system_prompts"
    __table_args__ = (Index("ix_system_prompts_name", "name"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    system_prompt = Column(Text, nullable=False)
    context_access = Column(JSONBCompat, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=sa_text("true"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
