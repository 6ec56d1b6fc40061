"""User profile ORM model."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, Text, func
from sqlalchemy.dialects.postgresql import UUID

from praxis.db.base import Base


class UserProfile(Base):
    """Display and preference data for an externally authenticated user."""

    __tablename__ = "user_profiles"

    user_id = Column(UUID(as_uuid=True), primary_key=True)
    first_name = Column(Text, nullable=True)
    last_name = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    timezone = Column(Text, nullable=True)
    primary_goal = Column(Text, nullable=True)
    daily_task_count = Column(Integer, nullable=True)
    work_start_time = Column(Text, nullable=True)
    work_end_time = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
