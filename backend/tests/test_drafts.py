from __future__ import annotations

from uuid import uuid4

import pytest

from praxis.db.models.draft_entry import DraftEntry
from praxis.services.drafts.database import DatabaseDraftBackend
from praxis.services.drafts.factory import build_draft_store, draft_key_for
from praxis.services.drafts.memory import MemoryDraftBackend
from praxis.services.drafts.models import Draft, DraftItem


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def _draft(*texts, **fields):
    return Draft(task_items=[DraftItem(text=text) for text in texts], **fields)


def test_round_trip_within_session(db):
    user_id = uuid4()
    store = build_draft_store(db, user_id, "tab-1")

    assert store.save_draft(_draft("Write report", "", "Call mom", is_for_today=False)) is True
    restored = store.load_draft()

    assert [item.text for item in restored.task_items] == ["Write report", "", "Call mom"]
    assert restored.is_for_today is False


def test_new_session_falls_back_to_durable_copy(db):
    user_id = uuid4()
    build_draft_store(db, user_id, "tab-1").save_draft(_draft("Write report"))

    other_tab = build_draft_store(db, user_id, "tab-2")
    assert MemoryDraftBackend("tab-2").get(draft_key_for(user_id)) is None
    assert other_tab.load_draft().task_items[0].text == "Write report"


def test_session_copy_wins_over_durable_copy(db):
    user_id = uuid4()
    mine = build_draft_store(db, user_id, "tab-1")
    other = build_draft_store(db, user_id, "tab-2")

    mine.save_draft(_draft("mine"))
    other.save_draft(_draft("other"))

    assert mine.backup.get(mine.backup_key) == other.backup.get(other.backup_key)
    assert mine.load_draft().task_items[0].text == "mine"
    assert other.load_draft().task_items[0].text == "other"


def test_session_entries_evict_oldest_writer(monkeypatch):
    monkeypatch.setattr("praxis.services.drafts.memory.settings.draft_session_max_entries", 2)
    first, second, third = (MemoryDraftBackend(name) for name in ("tab-1", "tab-2", "tab-3"))

    first.set("drafts", "one")
    second.set("drafts", "two")
    first.set("drafts", "one again")
    third.set("drafts", "three")

    assert second.get("drafts") is None
    assert first.get("drafts") == "one again"
    assert third.get("drafts") == "three"


def test_drafts_are_partitioned_by_user(db):
    build_draft_store(db, uuid4(), "tab-1").save_draft(_draft("Private"))
    assert build_draft_store(db, uuid4(), "tab-1").load_draft() is None


def test_blank_drafts_are_not_restored(db):
    store = build_draft_store(db, uuid4(), "tab-1")
    assert store.save_draft(_draft("", "   ")) is True
    assert store.load_draft() is None


def test_empty_item_list_is_not_saved(db):
    user_id = uuid4()
    store = build_draft_store(db, user_id, "tab-1")
    assert store.save_draft(Draft()) is False
    assert db.get(DraftEntry, f"{draft_key_for(user_id)}-backup") is None


def test_corrupt_payload_is_discarded(db):
    user_id = uuid4()
    store = build_draft_store(db, user_id, "tab-1")
    store.primary.set(store.key, "{not json")
    store.backup.set(store.backup_key, '{"taskItems": "nope"}')

    assert store.load_draft() is None
    assert store.primary.get(store.key) is None
    assert DatabaseDraftBackend(db).get(store.backup_key) is None


def test_clear_removes_both_copies(db):
    store = build_draft_store(db, uuid4(), "tab-1")
    store.save_draft(_draft("Write report"))
    store.clear_draft()

    assert store.primary.get(store.key) is None
    assert store.backup.get(store.backup_key) is None
    assert store.load_draft() is None


def test_stored_json_uses_camel_case(db):
    store = build_draft_store(db, uuid4(), "tab-1")
    store.save_draft(_draft("Write report"))
    raw = store.backup.get(store.backup_key)
    assert '"taskItems"' in raw
    assert '"isForToday"' in raw
    assert '"originalPlanDate"' in raw


def test_draft_api_round_trip(client):
    test_client, _ = client
    user_id = str(uuid4())
    headers = {"X-Client-Session": "tab-1"}
    body = {
        "taskItems": [{"id": "a", "text": "Write report"}, {"id": "b", "text": ""}],
        "isComposerOpen": True,
        "isForToday": True,
        "timestamp": "2026-10-17T08:00:00Z",
    }

    resp = test_client.put("/drafts", params={"user_id": user_id}, json=body, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["saved"] is True

    resp = test_client.get("/drafts", params={"user_id": user_id}, headers={"X-Client-Session": "tab-2"})
    draft = resp.json()["draft"]
    assert [item["id"] for item in draft["taskItems"]] == ["a", "b"]
    assert draft["isComposerOpen"] is True

    assert test_client.delete("/drafts", params={"user_id": user_id}, headers=headers).status_code == 204
    assert test_client.get("/drafts", params={"user_id": user_id}, headers=headers).json()["draft"] is None


def test_draft_api_skips_empty_payload(client):
    test_client, _ = client
    resp = test_client.put("/drafts", params={"user_id": str(uuid4())}, json={"taskItems": []})
    assert resp.json()["saved"] is False
