"""``{{key}}`` placeholder rendering for persona system prompts."""
from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from praxis.services.plan_service import TaskView

PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")
NO_TASKS = "No tasks for today"


def render_template(template: str, values: Mapping[str, Any]) -> str:
    """Substitute known placeholders in a single pass.

    Unknown placeholders are left as written, and substituted text is never
    scanned again, so values containing ``{{...}}`` come through literally.
    """

    def _replace(match: re.Match) -> str:
        key = match.group(1)
        if key not in values or values[key] is None:
            return match.group(0)
        return str(values[key])

    return PLACEHOLDER.sub(_replace, template)


def format_tasks(tasks: Iterable[TaskView]) -> str:
    lines = []
    for view in tasks:
        status = "completed" if view.task.completed else "pending"
        if view.rollover:
            status = f"{status} [rolled over from {view.original_plan_date.isoformat()}]"
        lines.append(f"- {view.task.title} ({status})")
    return "\n".join(lines) if lines else NO_TASKS
