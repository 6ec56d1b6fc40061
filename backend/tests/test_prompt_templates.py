from __future__ import annotations

from datetime import date
from types import SimpleNamespace

from praxis.services.plan_service import TaskView
from praxis.services.prompt_templates import format_tasks, render_template


def _view(title, completed=False, rollover=False, original=None):
    task = SimpleNamespace(title=title, completed=completed)
    return TaskView(task=task, rollover=rollover, original_plan_date=original)


def test_render_substitutes_known_keys():
    rendered = render_template("Hi {{user_name}}, tz {{ timezone }}.", {"user_name": "Ada", "timezone": "UTC"})
    assert rendered == "Hi Ada, tz UTC."


def test_render_leaves_unknown_and_missing_values():
    rendered = render_template("{{user_name}} / {{mystery}} / {{user_goals}}", {"user_name": "Ada", "user_goals": None})
    assert rendered == "Ada / {{mystery}} / {{user_goals}}"


def test_render_does_not_rescan_substituted_text():
    rendered = render_template("{{user_name}} {{timezone}}", {"user_name": "{{timezone}}", "timezone": "UTC"})
    assert rendered == "{{timezone}} UTC"


def test_render_ignores_single_braces():
    assert render_template("{user_name} {{user_name}}", {"user_name": "Ada"}) == "{user_name} Ada"


def test_format_tasks_lines():
    text = format_tasks(
        [
            _view("Finish slides", rollover=True, original=date(2026, 10, 16)),
            _view("Email Sam", completed=True),
            _view("Stretch"),
        ]
    )
    assert text.splitlines() == [
        "- Finish slides (pending [rolled over from 2026-10-16])",
        "- Email Sam (completed)",
        "- Stretch (pending)",
    ]


def test_format_tasks_empty():
    assert format_tasks([]) == "No tasks for today"
