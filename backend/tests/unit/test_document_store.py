"""
Tests for the SQL-backed document store and its snapshot subscriptions.
"""
from datetime import datetime, timezone

import pytest

from repairdesk.lib.errors import RemoteOperationError
from repairdesk.services.document_store import DocumentStore


@pytest.mark.unit
def test_add_assigns_id_and_server_timestamps(document_store):
    doc_id = document_store.add("things", {"name": "first"})

    snapshot = document_store.get("things", doc_id)

    assert snapshot.id == doc_id
    assert snapshot.data["name"] == "first"
    assert snapshot.data["createdAt"] is not None
    assert snapshot.data["updatedAt"] is not None


@pytest.mark.unit
def test_get_missing_returns_none(document_store):
    assert document_store.get("things", "nope") is None


@pytest.mark.unit
def test_set_honours_supplied_created_at(document_store):
    document_store.set("things", "t1", {"name": "seeded", "createdAt": "2024-01-10T09:00:00Z"})

    snapshot = document_store.get("things", "t1")
    created = snapshot.data["createdAt"]

    assert created.replace(tzinfo=timezone.utc) == datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)


@pytest.mark.unit
def test_set_merge_keeps_other_fields(document_store):
    document_store.set("things", "t1", {"name": "a", "colour": "red"})
    document_store.set("things", "t1", {"name": "b"}, merge=True)
    assert document_store.get("things", "t1").data["colour"] == "red"

    document_store.set("things", "t1", {"name": "c"})
    assert "colour" not in document_store.get("things", "t1").data


@pytest.mark.unit
def test_update_merges_fields_and_ignores_client_timestamps(document_store):
    document_store.set("things", "t1", {"name": "a", "createdAt": "2024-01-10T09:00:00Z"})

    document_store.update("things", "t1", {"name": "b", "createdAt": "1999-01-01T00:00:00Z"})

    data = document_store.get("things", "t1").data
    assert data["name"] == "b"
    assert data["createdAt"].year == 2024
    assert data["updatedAt"] > data["createdAt"]


@pytest.mark.unit
def test_update_missing_document_raises(document_store):
    with pytest.raises(RemoteOperationError) as exc_info:
        document_store.update("things", "ghost", {"name": "x"})

    assert exc_info.value.collection == "things"
    assert exc_info.value.document_id == "ghost"


@pytest.mark.unit
def test_delete_is_idempotent(document_store):
    document_store.set("things", "t1", {"name": "a"})

    document_store.delete("things", "t1")
    document_store.delete("things", "t1")

    assert document_store.get("things", "t1") is None


@pytest.mark.unit
def test_where_matches_exact_string_field(document_store):
    document_store.set("things", "t1", {"email": "a@b.com"})
    document_store.set("things", "t2", {"email": "A@B.com"})
    document_store.set("other", "t3", {"email": "a@b.com"})

    assert [s.id for s in document_store.where("things", "email", "a@b.com")] == ["t1"]


@pytest.mark.unit
def test_list_orders_newest_first(document_store):
    document_store.set("things", "old", {"createdAt": "2024-01-01T00:00:00Z"})
    document_store.set("things", "new", {"createdAt": "2024-03-01T00:00:00Z"})
    document_store.set("things", "mid", {"createdAt": "2024-02-01T00:00:00Z"})

    assert [s.id for s in document_store.list("things")] == ["new", "mid", "old"]


@pytest.mark.unit
def test_subscribe_delivers_current_then_every_write(document_store):
    document_store.set("things", "t1", {"name": "a"})
    received = []

    unsubscribe = document_store.subscribe("things", lambda snapshot: received.append([s.id for s in snapshot]))
    document_store.set("things", "t2", {"name": "b"})
    document_store.set("unrelated", "x", {"name": "c"})
    unsubscribe()
    document_store.set("things", "t3", {"name": "d"})

    assert received == [["t1"], ["t2", "t1"]]
    assert document_store.subscriber_count("things") == 0


@pytest.mark.unit
def test_broken_listener_does_not_fail_write_or_starve_others(document_store):
    received = []

    def broken(snapshot):
        raise RuntimeError("listener bug")

    document_store.subscribe("things", broken)
    document_store.subscribe("things", lambda snapshot: received.append(len(snapshot)))

    document_store.add("things", {"name": "a"})

    assert received == [0, 1]


@pytest.mark.unit
def test_from_url_creates_schema():
    store = DocumentStore.from_url("sqlite://")
    try:
        assert store.list("anything") == []
    finally:
        store.close()
