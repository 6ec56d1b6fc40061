"""Durable key/value rows backing the draft store."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Text, func

from praxis.db.base import Base


class DraftEntry(Base):
    __tablename__ = "draft_entries"

    key = Column(Text, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
