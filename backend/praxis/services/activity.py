"""Audit trail helpers for the user_activity table."""
from __future__ import annotations

from typing import Any, Dict
from uuid import UUID

from sqlalchemy.orm import Session

from praxis.core.context import get_request_id
from praxis.db.models.user_activity import UserActivity


def record_activity(db: Session, user_id: UUID, activity_type: str, data: Dict[str, Any] | None = None) -> UserActivity:
    """Stage an audit row in the current transaction; the caller commits."""
    payload: Dict[str, Any] = dict(data or {})
    request_id = get_request_id()
    if request_id:
        payload.setdefault("request_id", request_id)
    entry = UserActivity(user_id=user_id, activity_type=activity_type, activity_data=payload)
    db.add(entry)
    return entry

