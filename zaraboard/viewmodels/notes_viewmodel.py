# Rev 0.2.0
from __future__ import annotations

from typing import Any, List, Optional

from zaraboard.errors import NoteValidationError
from zaraboard.models.entities import Note, now_ms
from zaraboard.repositories.document_store import Document
from zaraboard.services import note_rules
from zaraboard.viewmodels.collection_viewmodel import CollectionViewModel


class NotesViewModel(CollectionViewModel):
    """Notes, pinned first then most recently edited."""

    collection = "notes"

    def _parse(self, doc: Document) -> Note:
        return Note.from_doc(doc)

    def _sort(self, items: List[Note]) -> List[Note]:
        return note_rules.sort_notes(items)

    def visible_notes(self, project_id: str, search: str = "") -> List[Note]:
        return note_rules.search_notes(self.for_project(project_id), search)

    # ---- commands
    def add_note(self, *, title: str, content: str, project_id: str, color: str = "default") -> Optional[str]:
        note = note_rules.new_note(title=title, content=content, project_id=project_id, color=color)
        return self._create(note.to_doc())

    def update_note(self, note_id: str, **changes: Any) -> None:
        """Every edit stamps updatedAt. A blank title is saved as "Untitled"."""
        unknown = set(changes) - set(Note.DOC_KEYS)
        if unknown:
            raise NoteValidationError(f"Unknown note fields: {sorted(unknown)}")
        if "title" in changes:
            changes["title"] = (changes["title"] or "").strip() or note_rules.UNTITLED
        if "color" in changes:
            note_rules.validate_color(changes["color"])
        partial = {Note.DOC_KEYS[k]: v for k, v in changes.items()}
        partial["updatedAt"] = now_ms()
        self._update(note_id, partial)

    def toggle_pin(self, note_id: str) -> None:
        note = self.get(note_id)
        if note is None:
            self._log.warning("toggle_pin: unknown note %s", note_id)
            return
        self.update_note(note_id, is_pinned=not note.is_pinned)

    def change_color(self, note_id: str, color: str) -> None:
        self.update_note(note_id, color=color)

    def delete_note(self, note_id: str) -> None:
        self._delete(note_id)
