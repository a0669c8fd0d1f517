# Rev 0.2.0

"""Paths and XDG helpers (Rev 0.2.0)
- Uses XDG Base Directory spec for data, logs and config
- DB defaults to $XDG_DATA_HOME/zaraboard/zaraboard.db, ZARABOARD_DB overrides
- Migrations ship inside the package (zaraboard/data/migrations)
"""
from __future__ import annotations
import os
from pathlib import Path


APP_NAME = "zaraboard"


def _xdg(var: str, fallback: Path) -> Path:
    return Path(os.environ.get(var) or fallback).expanduser()


def data_dir() -> Path:
    return _xdg("XDG_DATA_HOME", Path.home() / ".local" / "share") / APP_NAME


def state_dir() -> Path:
    return _xdg("XDG_STATE_HOME", Path.home() / ".local" / "state") / APP_NAME


def logs_dir() -> Path:
    return state_dir() / "logs"


def config_dir() -> Path:
    return _xdg("XDG_CONFIG_HOME", Path.home() / ".config") / APP_NAME


PACKAGE_ROOT = Path(__file__).resolve().parents[1]
MIGRATIONS_DIR = PACKAGE_ROOT / "data" / "migrations"


def default_db_path() -> Path:
    override = os.environ.get("ZARABOARD_DB")
    if override:
        return Path(override).expanduser()
    return data_dir() / "zaraboard.db"


def ensure_dirs() -> None:
    for p in (data_dir(), logs_dir(), config_dir()):
        p.mkdir(parents=True, exist_ok=True)
