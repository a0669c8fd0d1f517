# Rev 0.2.1
from __future__ import annotations

import json
import logging

import pytest

from zaraboard.utils import config
from zaraboard.utils.formatting import format_currency, format_date
from zaraboard.utils.paths import default_db_path


def test_defaults_when_no_file(tmp_path):
    s = config.load_settings(tmp_path / "missing.json")
    assert s["store"]["poll_interval_ms"] == 1500
    assert config.projects(s) == [("lantern", "Lantern Making"), ("hiphop", "Hiphop")]
    assert len(config.people_roster(s)) == 8


def test_file_overrides_merge_over_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"main_window": {"width": 1400}, "people": ["Zoe", "Zoe", "Yui"]}))
    s = config.load_settings(path)
    assert s["main_window"] == {"width": 1400, "height": 720, "is_maximized": False}
    assert config.people_roster(s) == ["Zoe", "Yui"]


def test_corrupt_file_falls_back(tmp_path, caplog):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    with caplog.at_level(logging.WARNING):
        s = config.load_settings(path)
    assert s["ui"]["default_tab"] == "tasks"
    assert "Ignoring unreadable settings" in caplog.text


@pytest.mark.parametrize("content", ["[1, 2]", '"just text"', "null", "3"])
def test_non_object_file_falls_back(tmp_path, caplog, content):
    path = tmp_path / "settings.json"
    path.write_text(content)
    with caplog.at_level(logging.WARNING):
        s = config.load_settings(path)
    assert s["store"]["poll_interval_ms"] == 1500
    assert "Ignoring unreadable settings" in caplog.text


def test_save_round_trip_uses_config_dir(tmp_path):
    s = config.load_settings()
    s["ui"]["default_tab"] = "budget"
    config.save_settings(s)
    assert config.settings_file().is_relative_to(tmp_path)
    assert config.load_settings()["ui"]["default_tab"] == "budget"


def test_defaults_are_not_shared_between_loads(tmp_path):
    a = config.load_settings(tmp_path / "nope.json")
    a["people"].append("Extra")
    assert "Extra" not in config.load_settings(tmp_path / "nope.json")["people"]


def test_project_label_defaults_to_id():
    assert config.projects({"projects": [{"id": "expo"}]}) == [("expo", "expo")]


def test_db_path_env_override(tmp_path, monkeypatch):
    assert default_db_path() == tmp_path / "data" / "zaraboard" / "zaraboard.db"
    monkeypatch.setenv("ZARABOARD_DB", str(tmp_path / "other.db"))
    assert default_db_path() == tmp_path / "other.db"


def test_formatting():
    assert format_currency(1234.5) == "₱1,234.50"
    assert format_currency(-12) == "-₱12.00"
    assert format_date(0) == "—"
