"""In-process event bus announcing plan creation to interested services."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Iterable, List
from uuid import UUID

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanCreated:
    user_id: UUID
    plan_id: UUID
    plan_date: date
    is_replan: bool


PlanCreatedHandler = Callable[[Session, PlanCreated], Any]


class PlanEventBus:
    """Dispatch ``PlanCreated`` events to subscribers in registration order.

    A failing subscriber is logged and skipped; the plan write that produced
    the event has already been committed and stays in place.
    """

    def __init__(self, handlers: Iterable[PlanCreatedHandler] = ()) -> None:
        self._handlers: List[PlanCreatedHandler] = list(handlers)

    def subscribe(self, handler: PlanCreatedHandler) -> PlanCreatedHandler:
        self._handlers.append(handler)
        return handler

    def publish(self, db: Session, event: PlanCreated) -> List[Any]:
        results: List[Any] = []
        for handler in list(self._handlers):
            try:
                results.append(handler(db, event))
            except Exception:
                db.rollback()
                logger.exception(
                    "Plan event handler %s failed for plan %s",
                    getattr(handler, "__name__", handler),
                    event.plan_id,
                )
        return results
