# tests/test_sqlite_document_store.py
# Integration tests for SQLiteDocumentStore against the real migrations

from __future__ import annotations

import pytest

from zaraboard.errors import DocumentNotFound, StoreError
from zaraboard.repositories.db import Database
from zaraboard.repositories.sqlite_document_store import SQLiteDocumentStore


class _Recorder:
    def __init__(self):
        self.snapshots = []
        self.errors = []

    def on_snapshot(self, docs):
        self.snapshots.append(docs)

    def on_error(self, exc):
        self.errors.append(exc)

    @property
    def last(self):
        return self.snapshots[-1]


def test_migrations_create_documents_table(db_conn):
    cols = {r[1] for r in db_conn.execute("PRAGMA table_info(documents)")}
    assert {"collection", "id", "data", "created_at_utc", "updated_at_utc"} <= cols


def test_migrations_are_applied_once(db):
    assert db.run_migrations() == []
    assert db.pending() == []
    assert "0001_documents.sql" in db.applied()


def test_subscribe_delivers_initial_snapshot(store):
    store.create("tasks", {"title": "A"})
    rec = _Recorder()
    store.subscribe("tasks", rec.on_snapshot, rec.on_error)
    assert len(rec.snapshots) == 1
    assert [d["title"] for d in rec.last] == ["A"]
    assert rec.last[0]["id"]


def test_mutations_push_fresh_snapshots(store):
    rec = _Recorder()
    store.subscribe("tasks", rec.on_snapshot)
    tid = store.create("tasks", {"title": "A", "status": "Pending"})
    assert rec.last == [{"id": tid, "title": "A", "status": "Pending"}]

    store.update("tasks", tid, {"status": "Completed"})
    assert rec.last == [{"id": tid, "title": "A", "status": "Completed"}]

    store.delete("tasks", tid)
    assert rec.last == []
    assert len(rec.snapshots) == 4


def test_snapshot_order_is_insertion_order(store):
    ids = [store.create("notes", {"n": i}) for i in range(3)]
    assert [d["id"] for d in store.list_documents("notes")] == ids


def test_collections_are_isolated(store):
    rec = _Recorder()
    store.subscribe("notes", rec.on_snapshot)
    store.create("tasks", {"title": "A"})
    assert len(rec.snapshots) == 1
    assert rec.last == []


def test_create_ignores_id_in_record(store):
    doc_id = store.create("tasks", {"id": "mine", "title": "A"})
    assert doc_id != "mine"
    assert store.get("tasks", doc_id) == {"id": doc_id, "title": "A"}


def test_update_is_top_level_merge(store):
    doc_id = store.create("budget_items", {"name": "Glue", "payers": [{"name": "Ana"}], "total": 5})
    store.update("budget_items", doc_id, {"payers": []})
    assert store.get("budget_items", doc_id) == {"id": doc_id, "name": "Glue", "payers": [], "total": 5}


def test_missing_documents_raise(store):
    with pytest.raises(DocumentNotFound):
        store.update("tasks", "nope", {"title": "x"})
    with pytest.raises(DocumentNotFound):
        store.delete("tasks", "nope")
    assert store.get("tasks", "nope") is None


def test_unknown_collection_rejected(store):
    with pytest.raises(ValueError):
        store.create("widgets", {})


def test_unserializable_record_raises_store_error(store):
    with pytest.raises(StoreError):
        store.create("tasks", {"title": object()})


def test_unsubscribe_stops_delivery(store):
    rec = _Recorder()
    unsubscribe = store.subscribe("tasks", rec.on_snapshot)
    unsubscribe()
    unsubscribe()
    store.create("tasks", {"title": "A"})
    assert len(rec.snapshots) == 1


def test_listener_exception_does_not_break_others(store):
    rec = _Recorder()

    def boom(_docs):
        raise RuntimeError("listener bug")

    store.subscribe("tasks", boom)
    store.subscribe("tasks", rec.on_snapshot)
    store.create("tasks", {"title": "A"})
    assert len(rec.last) == 1


def test_snapshots_are_copies(store):
    rec = _Recorder()
    store.subscribe("tasks", rec.on_snapshot)
    store.create("tasks", {"title": "A", "inCharge": ["Ana"]})
    rec.last[0]["inCharge"].append("Bea")
    assert store.list_documents("tasks")[0]["inCharge"] == ["Ana"]


def test_poll_picks_up_writes_from_another_connection(db):
    here = SQLiteDocumentStore(db)
    rec = _Recorder()
    here.subscribe("notes", rec.on_snapshot)
    assert here.poll() is False

    other_db = Database(db.path)
    try:
        SQLiteDocumentStore(other_db).create("notes", {"title": "from elsewhere"})
    finally:
        other_db.close()

    assert here.poll() is True
    assert [d["title"] for d in rec.last] == ["from elsewhere"]
    assert here.poll() is False


def test_own_writes_do_not_trigger_poll(store):
    rec = _Recorder()
    store.subscribe("notes", rec.on_snapshot)
    store.create("notes", {"title": "x"})
    count = len(rec.snapshots)
    assert store.poll() is False
    assert len(rec.snapshots) == count
