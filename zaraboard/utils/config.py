# Rev 0.2.1
import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .paths import config_dir

SETTINGS_FILENAME = "settings.json"

_DEFAULTS: Dict[str, Any] = {
    "main_window": {
        "width": 1100,
        "height": 720,
        "is_maximized": False,
    },
    "ui": {
        "default_tab": "tasks",
    },
    "store": {
        # how often other processes' writes are picked up
        "poll_interval_ms": 1500,
    },
    "projects": [
        {"id": "lantern", "label": "Lantern Making"},
        {"id": "hiphop", "label": "Hiphop"},
    ],
    # fixed roster of selectable people
    "people": ["Ana", "Bea", "Carlo", "Dani", "Eli", "Faye", "Gio", "Hana"],
}

_log = logging.getLogger(__name__)


def settings_file() -> Path:
    return config_dir() / SETTINGS_FILENAME


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    path = path or settings_file()
    if path.exists():
        try:
            loaded = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(loaded, dict):
                raise ValueError(f"expected a JSON object, got {type(loaded).__name__}")
            return _merge(_DEFAULTS, loaded)
        except (OSError, ValueError) as exc:
            _log.warning("Ignoring unreadable settings file %s: %s", path, exc)
            return copy.deepcopy(_DEFAULTS)
    return copy.deepcopy(_DEFAULTS)


def save_settings(data: Dict[str, Any], path: Optional[Path] = None) -> None:
    path = path or settings_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def people_roster(settings: Dict[str, Any]) -> List[str]:
    return list(dict.fromkeys(str(p) for p in settings.get("people") or []))


def projects(settings: Dict[str, Any]) -> List[Tuple[str, str]]:
    """(id, label) pairs in display order."""
    return [(str(p["id"]), str(p.get("label") or p["id"])) for p in settings.get("projects") or []]
