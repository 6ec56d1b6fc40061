"""Notification service interface and in-app notice type."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass
class Notice:
    """A dismissible, user-facing message (the UI renders it as a toast)."""

    title: str
    description: str
    variant: str = "default"


@dataclass
class NotificationResult:
    status: str
    reason: str


class NotificationService:
    """Base interface for outbound notification providers."""

    def notify_fresh_journal(
        self,
        *,
        user_id: UUID,
        session_id: UUID,
        plan_date: date,
        request_id: str | None,
    ) -> NotificationResult:
        raise NotImplementedError

    def notify_rollover_deleted(
        self,
        *,
        user_id: UUID,
        task_title: str,
        original_plan_date: date | None,
        request_id: str | None,
    ) -> NotificationResult:
        raise NotImplementedError
