# Rev 0.3.0
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from zaraboard.errors import NoteValidationError
from zaraboard.models.entities import Note, now_ms
from zaraboard.models.types import NOTE_COLORS

UNTITLED = "Untitled"


def new_note(
    *,
    title: str,
    content: str,
    project_id: str,
    color: str = "default",
    now: Optional[int] = None,
) -> Note:
    if not (title or "").strip() and not (content or "").strip():
        raise NoteValidationError("A note needs a title or some content.")
    ts = now_ms() if now is None else now
    return Note(
        id=None,
        title=(title or "").strip() or UNTITLED,
        content=content or "",
        is_pinned=False,
        color=validate_color(color),
        project_id=project_id,
        created_at=ts,
        updated_at=ts,
    )


def validate_color(color: str) -> str:
    if color not in NOTE_COLORS:
        raise NoteValidationError(f"Unknown note color: {color!r}")
    return color


def sort_notes(notes: Iterable[Note]) -> List[Note]:
    """Pinned first, then most recently edited."""
    return sorted(notes, key=lambda n: (not n.is_pinned, -n.updated_at))


def split_pinned(notes: Iterable[Note]) -> Tuple[List[Note], List[Note]]:
    notes = list(notes)
    return [n for n in notes if n.is_pinned], [n for n in notes if not n.is_pinned]


def search_notes(notes: Iterable[Note], text: str) -> List[Note]:
    needle = (text or "").strip().lower()
    if not needle:
        return list(notes)
    return [n for n in notes if needle in n.title.lower() or needle in n.content.lower()]
