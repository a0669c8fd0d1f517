# Rev 0.3.0 — status/people filters, sort modes, history panel below the table
from __future__ import annotations
from typing import List, Optional, Sequence

from PySide6.QtCore import Qt, QSettings
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QTableWidget, QTableWidgetItem, QHeaderView,
    QPushButton, QToolButton, QMenu, QComboBox, QLabel, QMessageBox, QDialog,
    QSplitter, QInputDialog
)

from zaraboard.errors import LastAssigneeError, TaskValidationError
from zaraboard.models.entities import Task
from zaraboard.models.types import TASK_STATUSES
from zaraboard.services.task_rules import people_in_tasks
from zaraboard.ui.dialogs.task_editor_dialog import TaskEditorDialog
from zaraboard.ui.panels.history_panel import HistoryPanel
from zaraboard.ui.people_filter import PeopleFilterButton
from zaraboard.utils.formatting import format_date
from zaraboard.viewmodels.tasks_viewmodel import TasksViewModel

_SORTS = [("Latest update", "update"), ("Completion", "completion"), ("Created", "created")]
_STATUS_COLORS = {"Pending": "#b26a00", "In Progress": "#1565c0", "Completed": "#2e7d32"}


class TasksTab(QWidget):
    def __init__(self, vm: TasksViewModel, *, roster: Sequence[str], presets_vm=None, parent=None):
        super().__init__(parent)
        self._vm = vm
        self._roster = list(roster)
        self._presets_vm = presets_vm
        self._project_id: Optional[str] = None
        self._rows: List[Task] = []

        # ---------- Filters ----------
        self._cmb_status = QComboBox()
        self._cmb_status.addItem("All statuses", None)
        for status in TASK_STATUSES:
            self._cmb_status.addItem(status, status)
        self._people_filter = PeopleFilterButton(self)
        self._cmb_sort = QComboBox()
        for label, key in _SORTS:
            self._cmb_sort.addItem(label, key)

        # ---------- Controls ----------
        self._btn_new = QPushButton("New Task")
        self._btn_update = QPushButton("Add Update")
        self._btn_status = QToolButton()
        self._btn_status.setText("Status")
        self._btn_status.setPopupMode(QToolButton.InstantPopup)
        self._status_menu = QMenu(self._btn_status)
        for status in TASK_STATUSES:
            self._status_menu.addAction(status).triggered.connect(
                lambda _=False, s=status: self._on_status_chosen(s)
            )
        self._btn_status.setMenu(self._status_menu)
        self._btn_people = QToolButton()
        self._btn_people.setText("In charge")
        self._btn_people.setPopupMode(QToolButton.InstantPopup)
        self._people_menu = QMenu(self._btn_people)
        self._people_menu.aboutToShow.connect(self._rebuild_people_menu)
        self._btn_people.setMenu(self._people_menu)
        self._btn_delete = QPushButton("Delete")

        # ---------- Table: Title | Status | In charge | Latest update | Created ----------
        self._table = QTableWidget(0, 5)
        self._table.setHorizontalHeaderLabels(["Title", "Status", "In charge", "Latest update", "Created"])
        self._table.setEditTriggers(QTableWidget.NoEditTriggers)
        self._table.setSelectionBehavior(QTableWidget.SelectRows)
        self._table.setSelectionMode(QTableWidget.SingleSelection)
        self._table.itemSelectionChanged.connect(self._on_selection_changed)
        self._table.itemDoubleClicked.connect(lambda _it: self._on_add_update())

        hdr = self._table.horizontalHeader()
        hdr.setSectionResizeMode(0, QHeaderView.Stretch)
        hdr.setSectionResizeMode(1, QHeaderView.ResizeToContents)
        hdr.setSectionResizeMode(2, QHeaderView.ResizeToContents)
        hdr.setSectionResizeMode(3, QHeaderView.Stretch)
        hdr.setSectionResizeMode(4, QHeaderView.ResizeToContents)
        vh = self._table.verticalHeader()
        vh.setVisible(False)
        vh.setDefaultSectionSize(22)
        self._table.setWordWrap(False)
        self._table.setAlternatingRowColors(True)

        self._history = HistoryPanel(self)
        self._history.setObjectName("HistoryPanel")
        self._lbl_count = QLabel()

        filter_bar = QHBoxLayout()
        filter_bar.addWidget(self._cmb_status)
        filter_bar.addWidget(self._people_filter)
        filter_bar.addWidget(QLabel("Sort:"))
        filter_bar.addWidget(self._cmb_sort)
        filter_bar.addStretch(1)
        filter_bar.addWidget(self._lbl_count)

        top_bar = QHBoxLayout()
        for w in (self._btn_new, self._btn_update, self._btn_status, self._btn_people, self._btn_delete):
            top_bar.addWidget(w)
        top_bar.addStretch(1)

        top_holder = QWidget(self)
        _top = QVBoxLayout(top_holder)
        _top.setContentsMargins(0, 0, 0, 0)
        _top.addLayout(filter_bar)
        _top.addLayout(top_bar)
        _top.addWidget(self._table, 1)

        self._split = QSplitter(Qt.Vertical, self)
        self._split.addWidget(top_holder)
        self._split.addWidget(self._history)
        self._split.setStretchFactor(0, 3)
        self._split.setStretchFactor(1, 2)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.addWidget(self._split, 1)

        # ---------- Wiring ----------
        self._btn_new.clicked.connect(self._on_new)
        self._btn_update.clicked.connect(self._on_add_update)
        self._btn_delete.clicked.connect(self._on_delete)
        self._cmb_status.currentIndexChanged.connect(lambda _i: self._render())
        self._cmb_sort.currentIndexChanged.connect(lambda _i: self._render())
        self._people_filter.changed.connect(lambda _p: self._render())
        self._vm.itemsReloaded.connect(lambda _items: self._render())

        self._on_selection_changed()

    # ---------- Public API ----------
    def set_project(self, project_id: str) -> None:
        self._project_id = project_id
        self._render()

    # ---------- Lifecycle (persist splitter sizes) ----------
    def showEvent(self, ev):
        super().showEvent(ev)
        sizes = QSettings("zaraboard", "ui").value("tasks_split_sizes")
        if sizes:
            self._split.setSizes([int(x) for x in sizes])
        else:
            self._split.setSizes([700, 300])

    def save_state(self) -> None:
        QSettings("zaraboard", "ui").setValue("tasks_split_sizes", self._split.sizes())

    # ---------- Rendering ----------
    def _render(self) -> None:
        if self._project_id is None:
            return
        keep = self._selected_task_id()
        project_tasks = self._vm.for_project(self._project_id)
        self._people_filter.blockSignals(True)
        self._people_filter.set_people(people_in_tasks(project_tasks))
        self._people_filter.blockSignals(False)
        self._rows = self._vm.visible_tasks(
            self._project_id,
            sort_by=self._cmb_sort.currentData(),
            status=self._cmb_status.currentData(),
            people=self._people_filter.selected(),
        )

        self._table.blockSignals(True)
        self._table.setRowCount(len(self._rows))
        reselect = -1
        for r, task in enumerate(self._rows):
            latest = task.updates[0].text if task.updates else ""
            cells = [
                QTableWidgetItem(task.title),
                QTableWidgetItem(task.status),
                QTableWidgetItem(", ".join(task.in_charge)),
                QTableWidgetItem(latest.splitlines()[0] if latest else "—"),
                QTableWidgetItem(format_date(task.created_at)),
            ]
            color = _STATUS_COLORS.get(task.status)
            if color:
                cells[1].setForeground(QColor(color))
            for c, it in enumerate(cells):
                it.setData(Qt.UserRole, task.id)
                self._table.setItem(r, c, it)
            if task.id == keep:
                reselect = r
        if reselect >= 0:
            self._table.selectRow(reselect)
        else:
            self._table.clearSelection()
        self._table.blockSignals(False)

        self._lbl_count.setText(f"{len(self._rows)} of {len(project_tasks)} tasks")
        self._on_selection_changed()

    def _selected_task_id(self) -> Optional[str]:
        items = self._table.selectedItems()
        if not items:
            return None
        return items[0].data(Qt.UserRole)

    def _selected_task(self) -> Optional[Task]:
        tid = self._selected_task_id()
        return self._vm.get(tid) if tid else None

    def _on_selection_changed(self) -> None:
        task = self._selected_task()
        for w in (self._btn_update, self._btn_status, self._btn_people, self._btn_delete):
            w.setEnabled(task is not None)
        if task is None:
            self._history.set_updates([])
        else:
            self._history.set_updates(task.updates, title=task.title)

    def _rebuild_people_menu(self) -> None:
        self._people_menu.clear()
        task = self._selected_task()
        if task is None:
            return
        names = list(self._roster) + [p for p in task.in_charge if p not in self._roster]
        for person in names:
            act = self._people_menu.addAction(person)
            act.setCheckable(True)
            act.setChecked(person in task.in_charge)
            act.triggered.connect(lambda _=False, p=person, tid=task.id: self._on_toggle_assignee(tid, p))

    # ---------- Actions ----------
    def _on_new(self) -> None:
        if self._project_id is None:
            return
        dlg = TaskEditorDialog(self, roster=self._roster, presets_vm=self._presets_vm)
        if dlg.exec() != int(QDialog.DialogCode.Accepted):
            return
        title, status, people, first_update = dlg.values()
        try:
            self._vm.add_task(
                title=title,
                in_charge=people,
                project_id=self._project_id,
                status=status,
                first_update=first_update,
            )
        except TaskValidationError as e:
            QMessageBox.warning(self, "Cannot add task", str(e))

    def _on_add_update(self) -> None:
        task = self._selected_task()
        if task is None:
            return
        text, ok = QInputDialog.getMultiLineText(self, "Add Update", f"Update for “{task.title}”:")
        if ok and text.strip():
            self._vm.add_update(task.id, text)

    def _on_status_chosen(self, status: str) -> None:
        tid = self._selected_task_id()
        if tid is not None:
            self._vm.change_status(tid, status)

    def _on_toggle_assignee(self, task_id: str, person: str) -> None:
        try:
            self._vm.toggle_assignee(task_id, person)
        except LastAssigneeError as e:
            QMessageBox.information(self, "Cannot remove", str(e))

    def _on_delete(self) -> None:
        task = self._selected_task()
        if task is None:
            return
        if QMessageBox.question(
            self, "Delete Task", f"Delete the task “{task.title}” and its updates?",
            QMessageBox.Yes | QMessageBox.No
        ) == QMessageBox.Yes:
            self._vm.delete_task(task.id)
            self._history.set_updates([])
