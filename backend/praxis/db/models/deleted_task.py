"""Deleted rollover task audit model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Text, func
from sqlalchemy.dialects.postgresql import UUID

from praxis.db.base import Base


class DeletedTask(Base):
    __tablename__ = "deleted_tasks"
    __table_args__ = (Index("ix_deleted_tasks_user_id", "user_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("user_profiles.user_id", ondelete="CASCADE"), nullable=False)
    # Composer item ids are client generated, so this is free text rather than a FK.
    original_task_id = Column(Text, nullable=True)
    task_title = Column(Text, nullable=False)
    original_plan_date = Column(Date, nullable=True)
    deletion_reason = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
