from __future__ import annotations

from datetime import timedelta

import httpx
import pytest

from praxis.client.api_client import PraxisClient, PraxisClientError
from praxis.client.task_board import OptimisticState, TaskBoard
from praxis.db.models.task import DailyTask
from praxis.services.plan_service import utc_today

from conftest import seed_plan, seed_profile


@pytest.fixture()
def board(client):
    test_client, session_factory = client
    user_id = seed_profile(session_factory)
    plan_id = seed_plan(session_factory, user_id, utc_today(), ["Write report", "Call mom", "Exercise"])
    board = TaskBoard(client=PraxisClient(user_id, http=test_client, client_session="tab-1"))
    board.load()
    return board, session_factory, plan_id


def _stored_completion(session_factory, task_id):
    session = session_factory()
    try:
        return session.get(DailyTask, task_id).completed
    finally:
        session.close()


def test_load_orders_tasks(board):
    board, _, plan_id = board
    assert board.plan.id == plan_id
    assert [task.title for task in board.tasks] == ["Write report", "Call mom", "Exercise"]
    assert not any(task.rollover for task in board.tasks)


def test_load_without_plan(client):
    test_client, session_factory = client
    board = TaskBoard(client=PraxisClient(seed_profile(session_factory), http=test_client))
    board.load()
    assert board.plan is None
    assert board.tasks == []


def test_toggle_commits(board):
    board, session_factory, _ = board
    task = board.tasks[0]

    result = board.toggle_task(task.id)

    assert result.state is OptimisticState.COMMITTED
    assert result.completed is True
    assert result.completed_at is not None
    assert _stored_completion(session_factory, task.id) is True
    assert board.notices == []


def test_toggle_rolls_back_when_server_refuses(board):
    board, session_factory, _ = board
    task = board.tasks[1]
    session = session_factory()
    try:
        session.delete(session.get(DailyTask, task.id))
        session.commit()
    finally:
        session.close()

    result = board.toggle_task(task.id)

    assert result.state is OptimisticState.ROLLED_BACK
    assert result.completed is False
    assert result.completed_at is None
    notice = board.notices[-1]
    assert (notice.title, notice.description, notice.variant) == (
        "Update Failed",
        "Failed to update task completion status.",
        "destructive",
    )


def test_toggle_rolls_back_on_transport_error(board, monkeypatch):
    board, session_factory, _ = board
    task = board.tasks[0]
    board.toggle_task(task.id)
    completed_at = task.completed_at

    def broken(*args, **kwargs):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(board.client.http, "request", broken)
    result = board.toggle_task(task.id)

    assert result.state is OptimisticState.ROLLED_BACK
    assert result.completed is True
    assert result.completed_at == completed_at
    assert _stored_completion(session_factory, task.id) is True


def test_update_task_time_and_remove(board):
    board, session_factory, _ = board
    first, second = board.tasks[0], board.tasks[1]

    assert board.update_task_time(first.id, 30) is True
    assert first.actual_minutes == 30

    assert board.remove_task(second.id) is True
    assert [task.title for task in board.tasks] == ["Write report", "Exercise"]

    assert board.remove_task(second.id) is False
    assert board.notices[-1].title == "Delete Failed"


def test_reflection_and_intention(board):
    board, _, _ = board
    assert board.update_reflection("Solid day") is True
    assert board.update_intention("Stay calm") is True
    assert board.plan.evening_reflection == "Solid day"
    assert board.plan.morning_intention == "Stay calm"


def test_invalid_check_in_keeps_local_state(board):
    board, _, _ = board
    assert board.update_check_in(mood=7, energy=6, focus=8) is True

    assert board.update_check_in(mood=12, energy=6, focus=8) is False
    assert board.plan.mood_rating == 7
    notice = board.notices[-1]
    assert (notice.title, notice.description, notice.variant) == (
        "Update Failed",
        "Failed to save daily check-in ratings.",
        "gray",
    )


def test_client_error_carries_status(client):
    test_client, session_factory = client
    api = PraxisClient(seed_profile(session_factory), http=test_client)
    with pytest.raises(PraxisClientError) as excinfo:
        api.create_plan(["only one"])
    assert excinfo.value.status_code == 422
    assert excinfo.value.message == "Please add at least 3 tasks before saving."


def test_load_tomorrow_lists_next_days_plan(board):
    board, session_factory, _ = board
    assert board.load_tomorrow() == []

    board.client.create_plan(["Deep work", "Gym", "Groceries"], plan_date=(utc_today() + timedelta(days=1)).isoformat())

    tasks = board.load_tomorrow()
    assert [task.title for task in tasks] == ["Deep work", "Gym", "Groceries"]
    assert board.tomorrow_tasks is tasks
    assert [task.title for task in board.tasks] == ["Write report", "Call mom", "Exercise"]


def test_load_tomorrow_failure_keeps_previous_view(board, monkeypatch):
    board, _, _ = board

    def broken(*args, **kwargs):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(board.client.http, "request", broken)
    assert board.load_tomorrow() == []
    notice = board.notices[-1]
    assert (notice.title, notice.description, notice.variant) == (
        "Load Failed",
        "Failed to load tomorrow's tasks.",
        "gray",
    )
