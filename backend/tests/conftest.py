from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Iterable, Sequence
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from praxis.db import Base
from praxis.db.deps import get_db
from praxis.db.models.daily_plan import DailyPlan
from praxis.db.models.system_prompt import SystemPrompt
from praxis.db.models.task import DailyTask
from praxis.db.models.user_profile import UserProfile
from praxis.main import app
from praxis.services.drafts.memory import clear_memory_drafts


def make_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):  # pragma: no cover - sqlite setup
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture()
def session_factory():
    return make_session_factory()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client, session_factory
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _reset_session_drafts():
    clear_memory_drafts()
    yield
    clear_memory_drafts()


def seed_profile(session_factory, user_id: UUID | None = None, **fields) -> UUID:
    session = session_factory()
    try:
        user_id = user_id or uuid4()
        session.add(UserProfile(user_id=user_id, **fields))
        session.commit()
        return user_id
    finally:
        session.close()


def seed_plan(
    session_factory,
    user_id: UUID,
    plan_date: date,
    titles: Sequence[str],
    completed: Iterable[bool] | None = None,
) -> UUID:
    session = session_factory()
    try:
        plan = DailyPlan(user_id=user_id, plan_date=plan_date)
        session.add(plan)
        session.flush()
        flags = list(completed) if completed is not None else [False] * len(titles)
        for index, (title, done) in enumerate(zip(titles, flags), start=1):
            session.add(
                DailyTask(
                    user_id=user_id,
                    daily_plan_id=plan.id,
                    title=title,
                    task_order=index,
                    completed=done,
                    completed_at=datetime.now(timezone.utc) if done else None,
                    priority="medium",
                    estimated_minutes=60,
                )
            )
        session.commit()
        return plan.id
    finally:
        session.close()


def seed_prompt(session_factory, template: str, name: str = "praxis", is_active: bool = True) -> None:
    session = session_factory()
    try:
        session.add(
            SystemPrompt(
                name=name,
                title="Praxis",
                system_prompt=template,
                context_access=["user_name", "current_tasks"],
                is_active=is_active,
            )
        )
        session.commit()
    finally:
        session.close()
