from __future__ import annotations

from datetime import timedelta
from uuid import UUID, uuid4

from praxis.db.models.chat import ChatSession
from praxis.db.models.daily_plan import DailyPlan
from praxis.db.models.task import DailyTask
from praxis.db.models.user_activity import UserActivity
from praxis.services.plan_service import utc_today

from conftest import seed_plan, seed_profile


def _create_plan(test_client, user_id, tasks=("Write report", "Call mom", "Exercise"), **extra):
    return test_client.post("/plans", json={"user_id": str(user_id), "tasks": list(tasks), **extra})


def test_create_plan_inserts_ordered_tasks(client):
    test_client, session_factory = client
    user_id = uuid4()

    resp = _create_plan(test_client, user_id)
    assert resp.status_code == 201
    payload = resp.json()

    tasks = payload["plan"]["tasks"]
    assert [task["title"] for task in tasks] == ["Write report", "Call mom", "Exercise"]
    assert [task["task_order"] for task in tasks] == [1, 2, 3]
    assert all(task["completed"] is False and task["completed_at"] is None for task in tasks)
    assert {task["priority"] for task in tasks} == {"medium"}
    assert {task["estimated_minutes"] for task in tasks} == {60}
    assert payload["plan"]["plan_date"] == utc_today().isoformat()
    assert payload["is_replan"] is False
    assert payload["notices"] == []

    session = session_factory()
    try:
        chat = session.get(ChatSession, UUID(payload["session_id"]))
        assert chat.plan_id == UUID(payload["plan"]["id"])
        activity = [row.activity_type for row in session.query(UserActivity).all()]
        assert "plan_created" in activity
        assert "chat_session_created" in activity
    finally:
        session.close()


def test_duplicate_date_is_rejected_without_write(client):
    test_client, session_factory = client
    user_id = uuid4()
    assert _create_plan(test_client, user_id).status_code == 201

    resp = _create_plan(test_client, user_id, tasks=("One", "Two", "Three", "Four"))
    assert resp.status_code == 409
    assert "already exists" in resp.json()["detail"]

    session = session_factory()
    try:
        assert session.query(DailyPlan).filter(DailyPlan.user_id == user_id).count() == 1
        assert session.query(DailyTask).filter(DailyTask.user_id == user_id).count() == 3
    finally:
        session.close()


def test_create_plan_needs_three_non_blank_tasks(client):
    test_client, session_factory = client
    user_id = uuid4()

    resp = _create_plan(test_client, user_id, tasks=("Write report", "   ", "Call mom"))
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Please add at least 3 tasks before saving."

    session = session_factory()
    try:
        assert session.query(DailyPlan).count() == 0
    finally:
        session.close()


def test_create_plan_caps_at_six_tasks(client):
    test_client, _ = client
    resp = _create_plan(test_client, uuid4(), tasks=[f"Task {idx}" for idx in range(7)])
    assert resp.status_code == 422


def test_blank_entries_are_skipped_when_ranking(client):
    test_client, _ = client
    resp = _create_plan(test_client, uuid4(), tasks=("", "First", " Second ", "", "Third"))
    assert resp.status_code == 201
    tasks = resp.json()["plan"]["tasks"]
    assert [(task["title"], task["task_order"]) for task in tasks] == [("First", 1), ("Second", 2), ("Third", 3)]


def test_current_plan_flags_rollover_from_earlier_day(client):
    test_client, session_factory = client
    user_id = seed_profile(session_factory)

    assert test_client.get("/plans/current", params={"user_id": str(user_id)}).json() is None

    yesterday = utc_today() - timedelta(days=1)
    seed_plan(session_factory, user_id, yesterday, ["Finish slides", "Email Sam", "Stretch"], [False, True, False])

    resp = test_client.get("/plans/current", params={"user_id": str(user_id)})
    assert resp.status_code == 200
    tasks = resp.json()["tasks"]
    assert [task["title"] for task in tasks] == ["Finish slides", "Email Sam", "Stretch"]
    assert all(task["rollover"] for task in tasks)
    assert {task["original_plan_date"] for task in tasks} == {yesterday.isoformat()}


def test_current_plan_prefers_today(client):
    test_client, session_factory = client
    user_id = seed_profile(session_factory)
    seed_plan(session_factory, user_id, utc_today() - timedelta(days=1), ["Old 1", "Old 2", "Old 3"])
    seed_plan(session_factory, user_id, utc_today(), ["New 1", "New 2", "New 3"])
    seed_plan(session_factory, user_id, utc_today() + timedelta(days=1), ["Later 1", "Later 2", "Later 3"])

    tasks = test_client.get("/plans/current", params={"user_id": str(user_id)}).json()["tasks"]
    assert [task["title"] for task in tasks] == ["New 1", "New 2", "New 3"]
    assert not any(task["rollover"] for task in tasks)


def test_replan_archives_session_and_starts_fresh_journal(client):
    test_client, session_factory = client
    user_id = uuid4()
    created = _create_plan(test_client, user_id).json()
    plan_id = created["plan"]["id"]
    first_session = created["session_id"]

    resp = test_client.post(
        f"/plans/{plan_id}/replan",
        json={"user_id": str(user_id), "tasks": ["Ship feature", "Review PR", "Walk", "Read"]},
    )
    assert resp.status_code == 200
    payload = resp.json()

    assert payload["is_replan"] is True
    assert payload["archived_session_id"] == first_session
    assert payload["session_id"] != first_session
    assert [task["title"] for task in payload["plan"]["tasks"]] == ["Ship feature", "Review PR", "Walk", "Read"]
    notice = payload["notices"][0]
    assert notice["title"] == "Fresh Journal Started"
    assert notice["description"] == f"Started a fresh journal for {utc_today().strftime('%b %d, %Y')}."

    session = session_factory()
    try:
        archived = session.get(ChatSession, UUID(first_session))
        fresh = session.get(ChatSession, UUID(payload["session_id"]))
        assert archived.plan_id is None
        assert fresh.plan_id == UUID(plan_id)
        assert session.query(DailyTask).filter(DailyTask.daily_plan_id == UUID(plan_id)).count() == 4
        types = [row.activity_type for row in session.query(UserActivity).all()]
        assert "chat_session_archived" in types
        assert "notification_fresh_journal" in types
    finally:
        session.close()


def test_replan_without_thread_just_binds_one(client):
    test_client, session_factory = client
    user_id = seed_profile(session_factory)
    plan_id = seed_plan(session_factory, user_id, utc_today(), ["a", "b", "c"])

    resp = test_client.post(f"/plans/{plan_id}/replan", json={"user_id": str(user_id), "tasks": ["x", "y", "z"]})
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["is_replan"] is False
    assert payload["archived_session_id"] is None
    assert payload["session_id"] is not None
    assert payload["notices"] == []


def test_replan_of_foreign_plan_is_forbidden(client):
    test_client, session_factory = client
    owner = seed_profile(session_factory)
    plan_id = seed_plan(session_factory, owner, utc_today(), ["a", "b", "c"])

    resp = test_client.post(f"/plans/{plan_id}/replan", json={"user_id": str(uuid4()), "tasks": ["x", "y", "z"]})
    assert resp.status_code == 403


def test_single_field_updates(client):
    test_client, _ = client
    user_id = uuid4()
    plan_id = _create_plan(test_client, user_id).json()["plan"]["id"]
    body = {"user_id": str(user_id)}

    resp = test_client.patch(f"/plans/{plan_id}/reflection", json={**body, "reflection": "Good focus today."})
    assert resp.status_code == 200
    assert resp.json()["evening_reflection"] == "Good focus today."

    resp = test_client.patch(f"/plans/{plan_id}/intention", json={**body, "intention": "Be present"})
    assert resp.json()["morning_intention"] == "Be present"

    resp = test_client.patch(f"/plans/{plan_id}/energy-mood", json={**body, "energy": 7, "mood": 6})
    assert (resp.json()["energy_level"], resp.json()["mood_rating"]) == (7, 6)

    resp = test_client.patch(f"/plans/{plan_id}/check-in", json={**body, "mood": 8, "energy": 5, "focus": 9})
    data = resp.json()
    assert (data["mood_rating"], data["energy_rating"], data["focus_rating"]) == (8, 5, 9)
    assert data["evening_reflection"] == "Good focus today."


def test_updates_need_an_active_plan(client):
    test_client, _ = client
    resp = test_client.patch(
        f"/plans/{uuid4()}/reflection",
        json={"user_id": str(uuid4()), "reflection": "Nothing to attach to"},
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "No active plan to update."


def test_ratings_are_bounded(client):
    test_client, _ = client
    user_id = uuid4()
    plan_id = _create_plan(test_client, user_id).json()["plan"]["id"]

    resp = test_client.patch(
        f"/plans/{plan_id}/check-in",
        json={"user_id": str(user_id), "mood": 11, "energy": 5, "focus": 5},
    )
    assert resp.status_code == 422
