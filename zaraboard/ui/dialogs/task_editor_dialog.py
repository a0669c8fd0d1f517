# Rev 0.2.0
from __future__ import annotations
from typing import List, Sequence, Tuple

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QLineEdit, QTextEdit,
    QDialogButtonBox, QComboBox, QLabel, QWidget
)

from zaraboard.models.types import TASK_STATUSES
from zaraboard.ui.people_selector import PeopleSelector
from zaraboard.ui.window_mode import size_dialog


class TaskEditorDialog(QDialog):
    """
    New-task form. Values returned (see values()):
      title: str
      status: str
      in_charge: list[str]
      first_update: str
    Validation happens in the viewmodel; the caller shows its errors.
    """

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        roster: Sequence[str],
        presets_vm=None,
        title: str = "New Task",
    ):
        super().__init__(parent)
        self.setWindowTitle(title)

        self._title = QLineEdit()
        self._title.setPlaceholderText("What needs to be done?")

        self._cmb_status = QComboBox()
        for status in TASK_STATUSES:
            self._cmb_status.addItem(status, status)

        self._people = PeopleSelector(roster, presets_vm, label="Assign People", parent=self)

        self._update = QTextEdit()
        self._update.setAcceptRichText(False)
        self._update.setPlaceholderText("Optional first update")

        form = QFormLayout()
        form.addRow("Title:", self._title)
        form.addRow("Status:", self._cmb_status)
        form.addRow(QLabel("<hr/>"))
        form.addRow(self._people)
        form.addRow("Update:", self._update)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(btns)

        size_dialog(self, width_ratio=0.45, height_ratio=0.6)
        self._title.setFocus(Qt.OtherFocusReason)

    def values(self) -> Tuple[str, str, List[str], str]:
        title = self._title.text().strip()
        status = str(self._cmb_status.currentData())
        people = self._people.selected()
        first_update = self._update.toPlainText().strip()
        return title, status, people, first_update
