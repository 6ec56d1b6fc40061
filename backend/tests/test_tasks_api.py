from __future__ import annotations

from uuid import uuid4

from praxis.db.models.daily_plan import DailyPlan
from praxis.db.models.task import DailyTask
from praxis.db.models.user_activity import UserActivity
from praxis.services.plan_service import utc_today

from conftest import seed_plan, seed_profile


def _first_task_id(session_factory, plan_id):
    session = session_factory()
    try:
        task = (
            session.query(DailyTask)
            .filter(DailyTask.daily_plan_id == plan_id)
            .order_by(DailyTask.task_order)
            .first()
        )
        return task.id
    finally:
        session.close()


def _activity_types(session_factory, user_id):
    session = session_factory()
    try:
        rows = (
            session.query(UserActivity)
            .filter(UserActivity.user_id == user_id)
            .order_by(UserActivity.created_at)
            .all()
        )
        return [row.activity_type for row in rows]
    finally:
        session.close()


def test_toggle_sets_and_clears_completed_at(client):
    test_client, session_factory = client
    user_id = seed_profile(session_factory)
    plan_id = seed_plan(session_factory, user_id, utc_today(), ["Write report", "Call mom", "Exercise"])
    task_id = _first_task_id(session_factory, plan_id)

    resp = test_client.patch(f"/tasks/{task_id}", json={"user_id": str(user_id), "completed": True})
    assert resp.status_code == 200
    data = resp.json()
    assert data["completed"] is True
    assert data["completed_at"] is not None
    assert data["changed"] is True
    assert data["request_id"]

    session = session_factory()
    try:
        plan = session.get(DailyPlan, plan_id)
        task = session.get(DailyTask, task_id)
        assert task.completed_at.replace(tzinfo=None) >= plan.created_at.replace(tzinfo=None)
    finally:
        session.close()

    resp = test_client.patch(f"/tasks/{task_id}", json={"user_id": str(user_id), "completed": False})
    data = resp.json()
    assert data["completed"] is False
    assert data["completed_at"] is None

    assert _activity_types(session_factory, user_id) == ["task_completed", "task_uncompleted"]


def test_repeated_toggle_is_a_noop(client):
    test_client, session_factory = client
    user_id = seed_profile(session_factory)
    plan_id = seed_plan(session_factory, user_id, utc_today(), ["a", "b", "c"])
    task_id = _first_task_id(session_factory, plan_id)
    body = {"user_id": str(user_id), "completed": True}

    first = test_client.patch(f"/tasks/{task_id}", json=body).json()
    second = test_client.patch(f"/tasks/{task_id}", json=body).json()

    assert second["changed"] is False
    assert second["completed_at"] == first["completed_at"]
    assert _activity_types(session_factory, user_id) == ["task_completed"]


def test_toggle_missing_task_returns_404(client):
    test_client, _ = client
    resp = test_client.patch(f"/tasks/{uuid4()}", json={"user_id": str(uuid4()), "completed": True})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Task not found"


def test_toggle_foreign_task_returns_403(client):
    test_client, session_factory = client
    owner = seed_profile(session_factory)
    plan_id = seed_plan(session_factory, owner, utc_today(), ["a", "b", "c"])
    task_id = _first_task_id(session_factory, plan_id)

    resp = test_client.patch(f"/tasks/{task_id}", json={"user_id": str(uuid4()), "completed": True})
    assert resp.status_code == 403

    session = session_factory()
    try:
        assert session.get(DailyTask, task_id).completed is False
    finally:
        session.close()


def test_update_task_time(client):
    test_client, session_factory = client
    user_id = seed_profile(session_factory)
    plan_id = seed_plan(session_factory, user_id, utc_today(), ["a", "b", "c"])
    task_id = _first_task_id(session_factory, plan_id)

    resp = test_client.patch(f"/tasks/{task_id}/time", json={"user_id": str(user_id), "actual_minutes": 45})
    assert resp.status_code == 200
    assert resp.json()["actual_minutes"] == 45

    resp = test_client.patch(f"/tasks/{task_id}/time", json={"user_id": str(user_id), "actual_minutes": -5})
    assert resp.status_code == 422


def test_delete_task(client):
    test_client, session_factory = client
    user_id = seed_profile(session_factory)
    plan_id = seed_plan(session_factory, user_id, utc_today(), ["a", "b", "c"])
    task_id = _first_task_id(session_factory, plan_id)

    resp = test_client.delete(f"/tasks/{task_id}", params={"user_id": str(user_id)})
    assert resp.status_code == 204

    session = session_factory()
    try:
        assert session.get(DailyTask, task_id) is None
        assert session.query(DailyTask).filter(DailyTask.daily_plan_id == plan_id).count() == 2
    finally:
        session.close()
    assert _activity_types(session_factory, user_id) == ["task_removed"]

    resp = test_client.delete(f"/tasks/{task_id}", params={"user_id": str(user_id)})
    assert resp.status_code == 404
