# Rev 0.3.0

"""Pytest fixtures for zaraboard (Rev 0.3.0)"""
from __future__ import annotations
import os
import pytest
from pathlib import Path

from zaraboard.repositories.db import Database
from zaraboard.repositories.sqlite_document_store import SQLiteDocumentStore

# viewmodel tests only need an event-loop-less core app
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture()
def db(tmp_path: Path):
    database = Database(path=tmp_path / "test.db")
    try:
        database.run_migrations()
        yield database
    finally:
        database.close()


@pytest.fixture()
def db_conn(db):
    return db.conn


@pytest.fixture()
def store(db) -> SQLiteDocumentStore:
    return SQLiteDocumentStore(db)


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtCore import QCoreApplication
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture(autouse=True)
def _isolated_dirs(tmp_path: Path, monkeypatch):
    # keep settings/db/log lookups inside the test's tmp dir
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    monkeypatch.delenv("ZARABOARD_DB", raising=False)
