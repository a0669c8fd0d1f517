# Rev 0.2.1
from __future__ import annotations

import copy
import json
import sqlite3
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from zaraboard.errors import DocumentNotFound, StoreError
from zaraboard.models.types import COLLECTIONS
from zaraboard.repositories.document_store import (
    Document,
    DocumentStore,
    ErrorCallback,
    SnapshotCallback,
    Unsubscribe,
)
from zaraboard.utils.logging_setup import get_logger


@dataclass(eq=False)
class _Subscription:
    collection: str
    on_snapshot: SnapshotCallback
    on_error: Optional[ErrorCallback]


class SQLiteDocumentStore(DocumentStore):
    """
    Document collections on top of the ``documents`` table (migration 0001).

    Every mutation is committed immediately and followed by a fresh snapshot
    pushed to the collection's subscribers. Writes made through another
    connection (another app instance on the same file) are noticed by
    ``poll()``, which compares SQLite's ``PRAGMA data_version``.
    """

    def __init__(self, db_or_conn: Union[sqlite3.Connection, Any]):
        self._db_or_conn = db_or_conn
        self._log = get_logger("SQLiteDocumentStore")
        self._subs: Dict[str, List[_Subscription]] = {}
        self._seen_version: Optional[int] = self._data_version()

    # -------------------------
    # Connection handling
    # -------------------------
    def _conn(self) -> sqlite3.Connection:
        if isinstance(self._db_or_conn, sqlite3.Connection):
            return self._db_or_conn
        if hasattr(self._db_or_conn, "conn") and isinstance(self._db_or_conn.conn, sqlite3.Connection):
            return self._db_or_conn.conn
        raise RuntimeError(
            "SQLiteDocumentStore: could not obtain sqlite3.Connection "
            "(expected .conn on wrapper, or a raw Connection)."
        )

    def _data_version(self) -> int:
        return int(self._conn().execute("PRAGMA data_version").fetchone()[0])

    @staticmethod
    def _check_collection(collection: str) -> None:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection!r}")

    @staticmethod
    def _encode(record: Document) -> str:
        body = {k: v for k, v in record.items() if k != "id"}
        try:
            return json.dumps(body)
        except (TypeError, ValueError) as exc:
            raise StoreError(f"Document is not JSON serializable: {exc}") from exc

    # -------------------------
    # Queries
    # -------------------------
    def list_documents(self, collection: str) -> List[Document]:
        self._check_collection(collection)
        try:
            rows = self._conn().execute(
                "SELECT id, data FROM documents WHERE collection = ? ORDER BY rowid",
                (collection,),
            ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Reading {collection} failed: {exc}") from exc
        return [{**json.loads(data), "id": doc_id} for doc_id, data in rows]

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        self._check_collection(collection)
        try:
            row = self._conn().execute(
                "SELECT data FROM documents WHERE collection = ? AND id = ?",
                (collection, doc_id),
            ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Reading {collection}/{doc_id} failed: {exc}") from exc
        return {**json.loads(row[0]), "id": doc_id} if row else None

    # -------------------------
    # Subscriptions
    # -------------------------
    def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Unsubscribe:
        self._check_collection(collection)
        sub = _Subscription(collection, on_snapshot, on_error)
        self._subs.setdefault(collection, []).append(sub)
        self._log.debug("Subscribed to %s (%d listeners)", collection, len(self._subs[collection]))

        try:
            snapshot = self.list_documents(collection)
        except StoreError as exc:
            self._fail(sub, exc)
        else:
            self._notify(sub, snapshot)

        def unsubscribe() -> None:
            subs = self._subs.get(collection, [])
            if sub in subs:
                subs.remove(sub)

        return unsubscribe

    def poll(self) -> bool:
        """Re-publish every subscribed collection if another connection wrote."""
        try:
            version = self._data_version()
        except sqlite3.Error as exc:
            self._log.warning("data_version check failed: %s", exc)
            return False
        if version == self._seen_version:
            return False
        self._seen_version = version
        self._log.debug("External change detected (data_version=%d)", version)
        for collection in list(self._subs):
            self._publish(collection)
        return True

    def _publish(self, collection: str) -> None:
        subs = list(self._subs.get(collection, ()))
        if not subs:
            return
        try:
            snapshot = self.list_documents(collection)
        except StoreError as exc:
            for sub in subs:
                self._fail(sub, exc)
            return
        for sub in subs:
            self._notify(sub, snapshot)

    def _notify(self, sub: _Subscription, snapshot: List[Document]) -> None:
        try:
            sub.on_snapshot(copy.deepcopy(snapshot))
        except Exception:
            self._log.exception("Snapshot listener for %s raised", sub.collection)

    def _fail(self, sub: _Subscription, exc: Exception) -> None:
        if sub.on_error is None:
            self._log.error("Subscription to %s failed: %s", sub.collection, exc)
            return
        try:
            sub.on_error(exc)
        except Exception:
            self._log.exception("Error listener for %s raised", sub.collection)

    # -------------------------
    # Commands
    # -------------------------
    def create(self, collection: str, record: Document) -> str:
        self._check_collection(collection)
        doc_id = uuid.uuid4().hex
        body = self._encode(record)
        try:
            self._conn().execute(
                "INSERT INTO documents(collection, id, data) VALUES (?, ?, ?)",
                (collection, doc_id, body),
            )
        except sqlite3.Error as exc:
            raise StoreError(f"Creating in {collection} failed: {exc}") from exc
        self._log.info("Created %s/%s", collection, doc_id)
        self._publish(collection)
        return doc_id

    def update(self, collection: str, doc_id: str, partial: Document) -> None:
        current = self.get(collection, doc_id)
        if current is None:
            raise DocumentNotFound(collection, doc_id)
        merged = {**current, **partial}
        body = self._encode(merged)
        try:
            self._conn().execute(
                "UPDATE documents SET data = ? WHERE collection = ? AND id = ?",
                (body, collection, doc_id),
            )
        except sqlite3.Error as exc:
            raise StoreError(f"Updating {collection}/{doc_id} failed: {exc}") from exc
        self._log.debug("Updated %s/%s fields=%s", collection, doc_id, sorted(partial))
        self._publish(collection)

    def delete(self, collection: str, doc_id: str) -> None:
        self._check_collection(collection)
        try:
            cur = self._conn().execute(
                "DELETE FROM documents WHERE collection = ? AND id = ?",
                (collection, doc_id),
            )
        except sqlite3.Error as exc:
            raise StoreError(f"Deleting {collection}/{doc_id} failed: {exc}") from exc
        if cur.rowcount == 0:
            raise DocumentNotFound(collection, doc_id)
        self._log.info("Deleted %s/%s", collection, doc_id)
        self._publish(collection)
