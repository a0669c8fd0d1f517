# Rev 0.3.0
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from zaraboard.errors import PresetValidationError
from zaraboard.models.entities import PeoplePreset, now_ms


def validate_preset(name: str, people: Iterable[str]) -> Tuple[str, List[str]]:
    name = (name or "").strip()
    people = list(dict.fromkeys(people))
    if not name:
        raise PresetValidationError("Please give the preset a name.")
    if not people:
        raise PresetValidationError("Select at least one person before saving a preset.")
    return name, people


def new_preset(name: str, people: Iterable[str], *, now: Optional[int] = None) -> PeoplePreset:
    name, people = validate_preset(name, people)
    return PeoplePreset(id=None, name=name, people=people, created_at=now_ms() if now is None else now)


def sort_presets(presets: Iterable[PeoplePreset]) -> List[PeoplePreset]:
    return sorted(presets, key=lambda p: p.name.casefold())
