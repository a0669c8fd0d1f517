# Rev 0.3.0

"""SQLite connection & migration runner (Rev 0.3.0)
- autocommit connection in WAL mode so other processes see writes at once
- *.sql files under zaraboard/data/migrations run in name order, each in its own transaction
- the schema_migrations table records what already ran
"""
from __future__ import annotations
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Set

from zaraboard.utils.logging_setup import get_logger
from zaraboard.utils.paths import MIGRATIONS_DIR, default_db_path

_LEDGER_DDL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    filename   TEXT PRIMARY KEY,
    applied_at TEXT NOT NULL
)
"""


class Database:
    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else default_db_path()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._log = get_logger("Database")
        self.conn = sqlite3.connect(str(self.path), isolation_level=None, check_same_thread=False)
        for pragma in ("journal_mode=WAL", "foreign_keys=ON", "busy_timeout=3000"):
            self.conn.execute(f"PRAGMA {pragma}")
        self.conn.execute(_LEDGER_DDL)
        self._log.info("Opened database %s", self.path)

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def applied(self) -> Set[str]:
        return {name for (name,) in self.conn.execute("SELECT filename FROM schema_migrations")}

    def pending(self, migrations_dir: Path = MIGRATIONS_DIR) -> List[Path]:
        done = self.applied()
        return [p for p in sorted(migrations_dir.glob("*.sql")) if p.name not in done]

    def run_migrations(self, migrations_dir: Path = MIGRATIONS_DIR) -> List[str]:
        """Apply pending migrations; returns the file names that ran."""
        ran: List[str] = []
        for script in self.pending(migrations_dir):
            stamp = datetime.now(timezone.utc).isoformat()
            # executescript commits first, so the ledger row goes inside the script's own transaction
            try:
                self.conn.executescript(
                    "BEGIN;\n"
                    + script.read_text(encoding="utf-8")
                    + "\nINSERT INTO schema_migrations(filename, applied_at) VALUES "
                    + f"('{script.name}', '{stamp}');\nCOMMIT;"
                )
            except sqlite3.Error:
                if self.conn.in_transaction:
                    self.conn.execute("ROLLBACK")
                self._log.exception("Migration %s failed", script.name)
                raise
            self._log.info("Applied migration %s", script.name)
            ran.append(script.name)
        return ran
