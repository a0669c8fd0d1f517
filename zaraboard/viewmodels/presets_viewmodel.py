# Rev 0.2.0
from __future__ import annotations

from typing import Iterable, List, Optional

from zaraboard.models.entities import PeoplePreset
from zaraboard.repositories.document_store import Document
from zaraboard.services import preset_rules
from zaraboard.viewmodels.collection_viewmodel import CollectionViewModel


class PresetsViewModel(CollectionViewModel):
    """Saved people selections, shared by every project, ordered by name."""

    collection = "people_presets"

    def _parse(self, doc: Document) -> PeoplePreset:
        return PeoplePreset.from_doc(doc)

    def _sort(self, items: List[PeoplePreset]) -> List[PeoplePreset]:
        return preset_rules.sort_presets(items)

    def add_preset(self, name: str, people: Iterable[str]) -> Optional[str]:
        """Raises PresetValidationError for a blank name or empty selection."""
        return self._create(preset_rules.new_preset(name, people).to_doc())

    def delete_preset(self, preset_id: str) -> None:
        self._delete(preset_id)
