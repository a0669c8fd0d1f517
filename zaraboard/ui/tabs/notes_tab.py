# Rev 0.2.0 — searchable list (pinned first) + inline editor
from __future__ import annotations
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QListWidget, QListWidgetItem, QLineEdit,
    QPlainTextEdit, QPushButton, QComboBox, QLabel, QMessageBox, QDialog, QSplitter
)

from zaraboard.errors import NoteValidationError
from zaraboard.models.entities import Note
from zaraboard.models.types import NOTE_COLORS
from zaraboard.services.note_rules import split_pinned
from zaraboard.ui.dialogs.note_editor_dialog import NoteEditorDialog
from zaraboard.utils.formatting import format_datetime
from zaraboard.viewmodels.notes_viewmodel import NotesViewModel

_BACKGROUNDS = {
    "default": None,
    "yellow": "#fff8c4",
    "green": "#dcf5dc",
    "blue": "#dbe9ff",
    "pink": "#ffe0ec",
    "purple": "#ece0ff",
}


class NotesTab(QWidget):
    def __init__(self, vm: NotesViewModel, parent=None):
        super().__init__(parent)
        self._vm = vm
        self._project_id: Optional[str] = None
        self._current_id: Optional[str] = None

        # ---------- List side ----------
        self._search = QLineEdit()
        self._search.setPlaceholderText("Search notes…")
        self._search.setClearButtonEnabled(True)
        self._btn_new = QPushButton("New Note")
        self._list = QListWidget()
        self._list.currentItemChanged.connect(lambda cur, _prev: self._on_current_changed(cur))

        search_bar = QHBoxLayout()
        search_bar.addWidget(self._search, 1)
        search_bar.addWidget(self._btn_new)

        left = QWidget(self)
        _l = QVBoxLayout(left)
        _l.setContentsMargins(0, 0, 0, 0)
        _l.addLayout(search_bar)
        _l.addWidget(self._list, 1)

        # ---------- Editor side ----------
        self._title = QLineEdit()
        self._title.setPlaceholderText("Title")
        self._content = QPlainTextEdit()
        self._cmb_color = QComboBox()
        for color in NOTE_COLORS:
            self._cmb_color.addItem(color.capitalize(), color)
        self._btn_pin = QPushButton("Pin")
        self._btn_pin.setCheckable(True)
        self._btn_save = QPushButton("Save")
        self._btn_delete = QPushButton("Delete")
        self._lbl_meta = QLabel()
        self._lbl_meta.setProperty("dim", True)

        editor_bar = QHBoxLayout()
        editor_bar.addWidget(QLabel("Color:"))
        editor_bar.addWidget(self._cmb_color)
        editor_bar.addWidget(self._btn_pin)
        editor_bar.addStretch(1)
        editor_bar.addWidget(self._btn_save)
        editor_bar.addWidget(self._btn_delete)

        self._editor = QWidget(self)
        _e = QVBoxLayout(self._editor)
        _e.setContentsMargins(0, 0, 0, 0)
        _e.addWidget(self._title)
        _e.addWidget(self._content, 1)
        _e.addLayout(editor_bar)
        _e.addWidget(self._lbl_meta)

        split = QSplitter(Qt.Horizontal, self)
        split.addWidget(left)
        split.addWidget(self._editor)
        split.setStretchFactor(0, 1)
        split.setStretchFactor(1, 2)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.addWidget(split, 1)

        # ---------- Wiring ----------
        self._search.textChanged.connect(lambda _t: self._render())
        self._btn_new.clicked.connect(self._on_new)
        self._btn_save.clicked.connect(self._on_save)
        self._btn_delete.clicked.connect(self._on_delete)
        self._btn_pin.clicked.connect(self._on_pin)
        self._cmb_color.activated.connect(self._on_color_chosen)
        self._vm.itemsReloaded.connect(lambda _items: self._render())

        self._show_note(None)

    # ---------- Public API ----------
    def set_project(self, project_id: str) -> None:
        self._project_id = project_id
        self._current_id = None
        self._render()

    # ---------- Rendering ----------
    def _render(self) -> None:
        if self._project_id is None:
            return
        pinned, others = split_pinned(self._vm.visible_notes(self._project_id, self._search.text()))
        self._list.blockSignals(True)
        self._list.clear()
        current_row = -1
        for section, notes in (("Pinned", pinned), ("Notes", others)):
            if not notes:
                continue
            if pinned:
                header = QListWidgetItem(section)
                header.setFlags(Qt.NoItemFlags)
                self._list.addItem(header)
            for note in notes:
                it = QListWidgetItem(f"{note.title}\n{format_datetime(note.updated_at)}")
                it.setData(Qt.UserRole, note.id)
                bg = _BACKGROUNDS.get(note.color)
                if bg:
                    it.setBackground(QColor(bg))
                self._list.addItem(it)
                if note.id == self._current_id:
                    current_row = self._list.count() - 1
        if current_row >= 0:
            self._list.setCurrentRow(current_row)
        self._list.blockSignals(False)

        # the open note may have been changed or deleted elsewhere
        self._show_note(self._vm.get(self._current_id) if self._current_id else None, keep_text=True)

    def _show_note(self, note: Optional[Note], *, keep_text: bool = False) -> None:
        self._editor.setEnabled(note is not None)
        if note is None:
            self._current_id = None
            self._title.clear()
            self._content.clear()
            self._lbl_meta.clear()
            self._btn_pin.setChecked(False)
            return
        switching = note.id != self._current_id
        self._current_id = note.id
        if switching or not keep_text or not self._is_dirty(note):
            self._title.setText(note.title)
            self._content.setPlainText(note.content)
        self._cmb_color.setCurrentIndex(max(0, self._cmb_color.findData(note.color)))
        self._btn_pin.setChecked(note.is_pinned)
        self._btn_pin.setText("Unpin" if note.is_pinned else "Pin")
        self._lbl_meta.setText(
            f"Created {format_datetime(note.created_at)} · Edited {format_datetime(note.updated_at)}"
        )

    def _is_dirty(self, note: Note) -> bool:
        return self._title.text() != note.title or self._content.toPlainText() != note.content

    def _on_current_changed(self, item: Optional[QListWidgetItem]) -> None:
        note_id = item.data(Qt.UserRole) if item else None
        self._show_note(self._vm.get(note_id) if note_id else None)

    # ---------- Actions ----------
    def _on_new(self) -> None:
        if self._project_id is None:
            return
        dlg = NoteEditorDialog(self)
        if dlg.exec() != int(QDialog.DialogCode.Accepted):
            return
        title, content, color = dlg.values()
        try:
            new_id = self._vm.add_note(title=title, content=content, project_id=self._project_id, color=color)
        except NoteValidationError as e:
            QMessageBox.warning(self, "Cannot add note", str(e))
            return
        if new_id:
            self._current_id = new_id
            self._render()

    def _on_save(self) -> None:
        if self._current_id is None:
            return
        self._vm.update_note(self._current_id, title=self._title.text(), content=self._content.toPlainText())

    def _on_pin(self) -> None:
        if self._current_id is not None:
            self._vm.toggle_pin(self._current_id)

    def _on_color_chosen(self, _index: int) -> None:
        if self._current_id is not None:
            self._vm.change_color(self._current_id, str(self._cmb_color.currentData()))

    def _on_delete(self) -> None:
        note = self._vm.get(self._current_id) if self._current_id else None
        if note is None:
            return
        if QMessageBox.question(
            self, "Delete Note", f"Delete the note “{note.title}”?",
            QMessageBox.Yes | QMessageBox.No
        ) == QMessageBox.Yes:
            self._vm.delete_note(note.id)
