# Rev 0.2.0
from __future__ import annotations
from typing import List, Sequence

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QToolButton, QMenu


class PeopleFilterButton(QToolButton):
    """Drop-down of checkable names; an empty selection means "everyone"."""

    changed = Signal(list)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._selected: List[str] = []
        self._menu = QMenu(self)
        self.setMenu(self._menu)
        self.setPopupMode(QToolButton.InstantPopup)
        self._refresh_text()

    def selected(self) -> List[str]:
        return list(self._selected)

    def set_people(self, people: Sequence[str]) -> None:
        """Rebuild the menu; names that vanished drop out of the selection."""
        keep = [p for p in self._selected if p in people]
        self._menu.clear()
        for person in people:
            act = self._menu.addAction(person)
            act.setCheckable(True)
            act.setChecked(person in keep)
            act.toggled.connect(lambda on, p=person: self._on_toggled(p, on))
        if people:
            self._menu.addSeparator()
            self._menu.addAction("Clear filter").triggered.connect(self.clear)
        else:
            self._menu.addAction("Nobody yet").setEnabled(False)
        if keep != self._selected:
            self._selected = keep
            self._refresh_text()
            self.changed.emit(self.selected())

    def clear(self) -> None:
        for act in self._menu.actions():
            if act.isCheckable():
                act.blockSignals(True)
                act.setChecked(False)
                act.blockSignals(False)
        self._selected = []
        self._refresh_text()
        self.changed.emit([])

    def _on_toggled(self, person: str, on: bool) -> None:
        if on and person not in self._selected:
            self._selected.append(person)
        elif not on and person in self._selected:
            self._selected.remove(person)
        self._refresh_text()
        self.changed.emit(self.selected())

    def _refresh_text(self) -> None:
        n = len(self._selected)
        self.setText("People: all" if n == 0 else f"People: {n} selected")
