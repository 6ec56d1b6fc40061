from __future__ import annotations

from datetime import timedelta

from praxis.db.models.chat import ChatSession
from praxis.services.job_runner import backfill_missing_sessions
from praxis.services.plan_service import utc_today
from praxis.services.session_resolver import resolve_for_plan
from praxis.worker import scheduler_main

from conftest import seed_plan, seed_profile


def _seed_history(session_factory):
    first = seed_profile(session_factory)
    second = seed_profile(session_factory)
    seed_plan(session_factory, first, utc_today() - timedelta(days=2), ["a", "b", "c"])
    seed_plan(session_factory, first, utc_today() - timedelta(days=1), ["a", "b", "c"])
    bound_plan = seed_plan(session_factory, second, utc_today(), ["a", "b", "c"])

    session = session_factory()
    try:
        resolve_for_plan(session, second, bound_plan, utc_today())
    finally:
        session.close()
    return first, second


def _session_count(session_factory):
    session = session_factory()
    try:
        return session.query(ChatSession).count()
    finally:
        session.close()


def test_backfill_creates_missing_sessions(session_factory):
    first, _ = _seed_history(session_factory)

    session = session_factory()
    try:
        result = backfill_missing_sessions(session)
        plans = {row.plan_id for row in session.query(ChatSession).filter(ChatSession.user_id == first).all()}
    finally:
        session.close()

    assert result.users_processed == 1
    assert result.sessions_created == 2
    assert len(plans) == 2
    assert _session_count(session_factory) == 3


def test_backfill_is_idempotent(session_factory):
    _seed_history(session_factory)

    session = session_factory()
    try:
        backfill_missing_sessions(session)
        again = backfill_missing_sessions(session)
    finally:
        session.close()

    assert again.users_processed == 0
    assert again.sessions_created == 0
    assert _session_count(session_factory) == 3


def test_backfill_can_target_users(session_factory):
    first, second = _seed_history(session_factory)

    session = session_factory()
    try:
        result = backfill_missing_sessions(session, user_ids=[second])
    finally:
        session.close()

    assert result.sessions_created == 0
    assert _session_count(session_factory) == 1


def test_backfill_endpoint(client):
    test_client, session_factory = client
    _seed_history(session_factory)

    resp = test_client.post("/jobs/backfill-sessions")
    assert resp.status_code == 200
    data = resp.json()
    assert data["job"] == "backfill_sessions"
    assert data["users_processed"] == 1
    assert data["sessions_created"] == 2
    assert data["request_id"]


def test_jobs_config_endpoint(client):
    test_client, _ = client
    resp = test_client.get("/jobs")
    assert resp.status_code == 200
    data = resp.json()
    assert data["schedule"]["backfill_time"] == "03:00"
    assert "scheduler_enabled" in data


def test_scheduler_registers_backfill_job():
    scheduler = scheduler_main.build_scheduler()
    jobs = scheduler.get_jobs()
    assert [job.id for job in jobs] == [scheduler_main.BACKFILL_JOB_ID]
    assert jobs[0].func is scheduler_main.run_backfill_job


def test_run_backfill_job_uses_own_session(session_factory, monkeypatch):
    _seed_history(session_factory)
    monkeypatch.setattr(scheduler_main, "SessionLocal", session_factory)

    scheduler_main.run_backfill_job()

    assert _session_count(session_factory) == 3
