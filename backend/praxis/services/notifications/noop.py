"""No-op notification provider (logs only)."""
from __future__ import annotations

import logging
from datetime import date
from uuid import UUID

from praxis.services.notifications.base import NotificationResult, NotificationService

logger = logging.getLogger(__name__)


class NoopNotificationService(NotificationService):
    def notify_fresh_journal(
        self,
        *,
        user_id: UUID,
        session_id: UUID,
        plan_date: date,
        request_id: str | None,
    ) -> NotificationResult:
        logger.info("Notification queued (noop) fresh_journal user=%s session=%s date=%s", user_id, session_id, plan_date)
        return NotificationResult(status="noop", reason="notification provider is noop")

    def notify_rollover_deleted(
        self,
        *,
        user_id: UUID,
        task_title: str,
        original_plan_date: date | None,
        request_id: str | None,
    ) -> NotificationResult:
        logger.info(
            "Notification queued (noop) rollover_deleted user=%s title=%r original=%s",
            user_id,
            task_title,
            original_plan_date,
        )
        return NotificationResult(status="noop", reason="notification provider is noop")
