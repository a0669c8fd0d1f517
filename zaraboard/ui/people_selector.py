# Rev 0.2.0 — roster toggles + presets (load / save / delete)
from __future__ import annotations
from typing import List, Sequence

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QPushButton,
    QToolButton, QMenu, QInputDialog, QMessageBox
)

from zaraboard.errors import PresetValidationError
from zaraboard.services.task_rules import toggle_selection


class PeopleSelector(QWidget):
    """
    Toggle buttons for the fixed people roster.

    Emits selectionChanged(list[str]) in roster order. Presets come from a
    PresetsViewModel when one is given; without it the preset controls hide.
    """

    selectionChanged = Signal(list)

    COLUMNS = 4

    def __init__(self, roster: Sequence[str], presets_vm=None, *, label: str = "Select People", parent=None):
        super().__init__(parent)
        self._roster = list(roster)
        self._presets_vm = presets_vm
        self._label_text = label
        self._selected: List[str] = []

        self._label = QLabel()
        btn_all = QPushButton("All")
        btn_none = QPushButton("None")
        btn_all.clicked.connect(lambda: self.set_selected(self._roster))
        btn_none.clicked.connect(lambda: self.set_selected([]))

        self._btn_presets = QToolButton()
        self._btn_presets.setText("Presets")
        self._btn_presets.setPopupMode(QToolButton.InstantPopup)
        self._presets_menu = QMenu(self._btn_presets)
        self._btn_presets.setMenu(self._presets_menu)

        self._btn_save = QPushButton("Save as preset…")
        self._btn_save.clicked.connect(self._on_save_preset)

        header = QHBoxLayout()
        header.addWidget(self._label, 1)
        header.addWidget(self._btn_presets)
        header.addWidget(self._btn_save)
        header.addWidget(btn_all)
        header.addWidget(btn_none)

        grid = QGridLayout()
        grid.setSpacing(4)
        self._buttons: dict[str, QPushButton] = {}
        for i, person in enumerate(self._roster):
            b = QPushButton(person)
            b.setCheckable(True)
            b.toggled.connect(lambda _on, p=person: self._on_toggled(p))
            grid.addWidget(b, i // self.COLUMNS, i % self.COLUMNS)
            self._buttons[person] = b

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.addLayout(header)
        root.addLayout(grid)

        if presets_vm is None:
            self._btn_presets.hide()
            self._btn_save.hide()
        else:
            presets_vm.itemsReloaded.connect(lambda _items: self._rebuild_presets_menu())
            self._rebuild_presets_menu()
        self._refresh_label()

    # ---- Public API
    def selected(self) -> List[str]:
        return list(self._selected)

    def set_selected(self, people: Sequence[str]) -> None:
        wanted = set(people)
        self._selected = [p for p in self._roster if p in wanted]
        for person, b in self._buttons.items():
            b.blockSignals(True)
            b.setChecked(person in wanted)
            b.blockSignals(False)
        self._refresh_label()
        self.selectionChanged.emit(self.selected())

    # ---- Internals
    def _on_toggled(self, person: str) -> None:
        toggled = toggle_selection(self._selected, person)
        self._selected = [p for p in self._roster if p in toggled]
        self._refresh_label()
        self.selectionChanged.emit(self.selected())

    def _refresh_label(self) -> None:
        self._label.setText(f"{self._label_text} ({len(self._selected)} selected)")

    def _rebuild_presets_menu(self) -> None:
        self._presets_menu.clear()
        presets = self._presets_vm.items
        if not presets:
            act = self._presets_menu.addAction("No presets saved")
            act.setEnabled(False)
            return
        for preset in presets:
            act = self._presets_menu.addAction(f"{preset.name} ({len(preset.people)})")
            act.triggered.connect(lambda _=False, p=preset: self.set_selected(p.people))
        self._presets_menu.addSeparator()
        delete_menu = self._presets_menu.addMenu("Delete preset")
        for preset in presets:
            act = delete_menu.addAction(preset.name)
            act.triggered.connect(lambda _=False, p=preset: self._on_delete_preset(p))

    def _on_save_preset(self) -> None:
        name, ok = QInputDialog.getText(self, "Save preset", "Preset name:")
        if not ok:
            return
        try:
            self._presets_vm.add_preset(name, self._selected)
        except PresetValidationError as e:
            QMessageBox.warning(self, "Cannot save preset", str(e))

    def _on_delete_preset(self, preset) -> None:
        if QMessageBox.question(
            self, "Delete preset", f"Delete the preset “{preset.name}”?",
            QMessageBox.Yes | QMessageBox.No
        ) == QMessageBox.Yes:
            self._presets_vm.delete_preset(preset.id)
