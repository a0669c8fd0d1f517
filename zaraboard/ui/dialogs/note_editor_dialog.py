# Rev 0.2.0
from __future__ import annotations
from typing import Tuple

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QLineEdit, QPlainTextEdit,
    QDialogButtonBox, QComboBox, QWidget
)

from zaraboard.models.types import NOTE_COLORS
from zaraboard.ui.window_mode import size_dialog


class NoteEditorDialog(QDialog):
    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.setWindowTitle("New Note")

        self._title = QLineEdit()
        self._title.setPlaceholderText("Note title…")
        self._content = QPlainTextEdit()
        self._content.setPlaceholderText("Write something…")
        self._cmb_color = QComboBox()
        for color in NOTE_COLORS:
            self._cmb_color.addItem(color.capitalize(), color)

        form = QFormLayout()
        form.addRow("Title:", self._title)
        form.addRow("Content:", self._content)
        form.addRow("Color:", self._cmb_color)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(btns)

        size_dialog(self, width_ratio=0.35, height_ratio=0.5)
        self._title.setFocus(Qt.OtherFocusReason)

    def values(self) -> Tuple[str, str, str]:
        return self._title.text(), self._content.toPlainText(), str(self._cmb_color.currentData())
