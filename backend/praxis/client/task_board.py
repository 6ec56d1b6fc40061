"""Local view of the current plan with optimistic completion toggles.

A toggle is applied locally before the server confirms it::

    COMMITTED -> PENDING -> COMMITTED      server accepted
                         -> ROLLED_BACK    server refused; local value restored

There is no retry queue. Overlapping toggles on one task resolve as
"last response wins".
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from praxis.client.api_client import PraxisClient, PraxisClientError
from praxis.services.notifications.base import Notice

logger = logging.getLogger(__name__)


class OptimisticState(str, enum.Enum):
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass
class TaskState:
    id: UUID
    title: str
    task_order: int
    completed: bool = False
    completed_at: Optional[datetime] = None
    actual_minutes: Optional[int] = None
    rollover: bool = False
    original_plan_date: Optional[date] = None
    state: OptimisticState = OptimisticState.COMMITTED

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TaskState":
        return cls(
            id=UUID(payload["id"]),
            title=payload["title"],
            task_order=payload["task_order"],
            completed=bool(payload["completed"]),
            completed_at=_parse_datetime(payload.get("completed_at")),
            actual_minutes=payload.get("actual_minutes"),
            rollover=bool(payload.get("rollover")),
            original_plan_date=date.fromisoformat(payload["original_plan_date"]) if payload.get("original_plan_date") else None,
        )


@dataclass
class PlanState:
    id: UUID
    plan_date: date
    morning_intention: Optional[str] = None
    evening_reflection: Optional[str] = None
    energy_level: Optional[int] = None
    mood_rating: Optional[int] = None
    energy_rating: Optional[int] = None
    focus_rating: Optional[int] = None


@dataclass
class TaskBoard:
    client: PraxisClient
    plan: Optional[PlanState] = None
    tasks: List[TaskState] = field(default_factory=list)
    tomorrow_tasks: List[TaskState] = field(default_factory=list)
    notices: List[Notice] = field(default_factory=list)

    def load(self) -> None:
        payload = self.client.get_current_plan()
        if not payload:
            self.plan = None
            self.tasks = []
            return
        self.plan = PlanState(
            id=UUID(payload["id"]),
            plan_date=date.fromisoformat(payload["plan_date"]),
            morning_intention=payload.get("morning_intention"),
            evening_reflection=payload.get("evening_reflection"),
            energy_level=payload.get("energy_level"),
            mood_rating=payload.get("mood_rating"),
            energy_rating=payload.get("energy_rating"),
            focus_rating=payload.get("focus_rating"),
        )
        self.tasks = sorted(
            (TaskState.from_payload(item) for item in payload.get("tasks", [])),
            key=lambda task: task.task_order,
        )

    def task(self, task_id: UUID) -> TaskState:
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise KeyError(task_id)

    def load_tomorrow(self) -> List[TaskState]:
        """Read-only view of tasks already planned for tomorrow."""
        try:
            payload = self.client.get_tomorrow_plan()
        except PraxisClientError:
            self._notify("Load Failed", "Failed to load tomorrow's tasks.")
            return self.tomorrow_tasks
        items = payload.get("tasks", []) if payload else []
        self.tomorrow_tasks = sorted((TaskState.from_payload(item) for item in items), key=lambda task: task.task_order)
        return self.tomorrow_tasks

    def toggle_task(self, task_id: UUID) -> TaskState:
        """Flip completion locally, then confirm with the server or roll back."""
        task = self.task(task_id)
        previous = (task.completed, task.completed_at)

        task.completed = not task.completed
        task.completed_at = datetime.now(timezone.utc) if task.completed else None
        task.state = OptimisticState.PENDING

        try:
            response = self.client.set_task_completion(task_id, task.completed)
        except PraxisClientError as exc:
            task.completed, task.completed_at = previous
            task.state = OptimisticState.ROLLED_BACK
            logger.warning("Toggle of task %s rolled back: %s", task_id, exc.message)
            self._notify("Update Failed", "Failed to update task completion status.", "destructive")
            return task

        task.completed = bool(response["completed"])
        task.completed_at = _parse_datetime(response.get("completed_at"))
        task.state = OptimisticState.COMMITTED
        return task

    def update_task_time(self, task_id: UUID, actual_minutes: int) -> bool:
        task = self.task(task_id)
        try:
            response = self.client.update_task_time(task_id, actual_minutes)
        except PraxisClientError:
            self._notify("Update Failed", "Failed to update task time.")
            return False
        task.actual_minutes = response["actual_minutes"]
        return True

    def remove_task(self, task_id: UUID) -> bool:
        try:
            self.client.remove_task(task_id)
        except PraxisClientError:
            self._notify("Delete Failed", "Failed to delete task from database.")
            return False
        self.tasks = [task for task in self.tasks if task.id != task_id]
        return True

    def update_reflection(self, reflection: str) -> bool:
        return self._update_plan(
            lambda plan_id: self.client.update_reflection(plan_id, reflection),
            "Failed to save evening reflection.",
        )

    def update_intention(self, intention: str) -> bool:
        return self._update_plan(
            lambda plan_id: self.client.update_intention(plan_id, intention),
            "Failed to save morning intention.",
        )

    def update_energy_mood(self, energy: int, mood: int) -> bool:
        return self._update_plan(
            lambda plan_id: self.client.update_energy_mood(plan_id, energy, mood),
            "Failed to save energy and mood ratings.",
        )

    def update_check_in(self, mood: int, energy: int, focus: int) -> bool:
        return self._update_plan(
            lambda plan_id: self.client.update_check_in(plan_id, mood, energy, focus),
            "Failed to save daily check-in ratings.",
        )

    def _update_plan(self, call, failure_message: str) -> bool:
        # Non-optimistic: local state only changes once the server accepts.
        if self.plan is None:
            self._notify("Update Failed", failure_message)
            return False
        try:
            payload = call(self.plan.id)
        except PraxisClientError:
            self._notify("Update Failed", failure_message)
            return False
        for name in (
            "morning_intention",
            "evening_reflection",
            "energy_level",
            "mood_rating",
            "energy_rating",
            "focus_rating",
        ):
            setattr(self.plan, name, payload.get(name))
        return True

    def _notify(self, title: str, description: str, variant: str = "gray") -> None:
        self.notices.append(Notice(title=title, description=description, variant=variant))


def _parse_datetime(value: str | None) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
