# Rev 0.3.0
# zaraboard — Main Window: project switcher + Tasks | Budget | Notes tabs

from __future__ import annotations
from typing import Any, Dict

from PySide6.QtCore import QSettings, QTimer
from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QComboBox, QLabel, QTabWidget
)

from zaraboard.repositories.sqlite_document_store import SQLiteDocumentStore
from zaraboard.ui.tabs.budget_tab import BudgetTab
from zaraboard.ui.tabs.notes_tab import NotesTab
from zaraboard.ui.tabs.tasks_tab import TasksTab
from zaraboard.ui.window_mode import restore_geometry
from zaraboard.utils.config import people_roster, projects, save_settings
from zaraboard.utils.logging_setup import get_logger
from zaraboard.viewmodels.budget_viewmodel import BudgetViewModel
from zaraboard.viewmodels.notes_viewmodel import NotesViewModel
from zaraboard.viewmodels.presets_viewmodel import PresetsViewModel
from zaraboard.viewmodels.tasks_viewmodel import TasksViewModel

_TAB_KEYS = ["tasks", "budget", "notes"]


class MainWindow(QMainWindow):
    def __init__(self, *, store: SQLiteDocumentStore, settings: Dict[str, Any], logfile=None, parent=None):
        super().__init__(parent)
        self._store = store
        self._settings = settings
        self._log = get_logger("MainWindow")
        if logfile:
            self.statusBar().showMessage(f"Log: {logfile}", 8000)

        self.setWindowTitle("zaraboard")
        roster = people_roster(settings)

        # ---- viewmodels (one live subscription per collection) ----
        self._presets_vm = PresetsViewModel(store, self)
        self._tasks_vm = TasksViewModel(store, self)
        self._budget_vm = BudgetViewModel(store, self)
        self._notes_vm = NotesViewModel(store, self)
        self._vms = [self._presets_vm, self._tasks_vm, self._budget_vm, self._notes_vm]

        # ---- top bar ----
        self._cmb_project = QComboBox()
        for project_id, label in projects(settings):
            self._cmb_project.addItem(label, project_id)
        self._lbl_status = QLabel()
        self._lbl_status.setProperty("dim", True)

        top_bar = QHBoxLayout()
        top_bar.addWidget(QLabel("Project:"))
        top_bar.addWidget(self._cmb_project)
        top_bar.addStretch(1)
        top_bar.addWidget(self._lbl_status)

        # ---- tabs ----
        self._tasks_tab = TasksTab(self._tasks_vm, roster=roster, presets_vm=self._presets_vm)
        self._budget_tab = BudgetTab(self._budget_vm, roster=roster, presets_vm=self._presets_vm)
        self._notes_tab = NotesTab(self._notes_vm)
        self._tabs = QTabWidget(self)
        self._tabs.addTab(self._tasks_tab, "Tasks")
        self._tabs.addTab(self._budget_tab, "Budget")
        self._tabs.addTab(self._notes_tab, "Notes")

        central = QWidget(self)
        v = QVBoxLayout(central)
        v.addLayout(top_bar)
        v.addWidget(self._tabs, 1)
        self.setCentralWidget(central)

        for vm in self._vms:
            vm.loadingChanged.connect(lambda _on: self._refresh_status())
        self._cmb_project.currentIndexChanged.connect(lambda _i: self._on_project_changed())

        # ---- restore UI state ----
        mw = settings.get("main_window", {})
        restore_geometry(
            self,
            width=int(mw.get("width", 1100)),
            height=int(mw.get("height", 720)),
            maximized=bool(mw.get("is_maximized", False)),
        )
        qs = QSettings("zaraboard", "ui")
        last_project = qs.value("last_project")
        idx = self._cmb_project.findData(last_project) if last_project else -1
        if idx >= 0:
            self._cmb_project.setCurrentIndex(idx)
        default_tab = str(settings.get("ui", {}).get("default_tab", "tasks"))
        if default_tab in _TAB_KEYS:
            self._tabs.setCurrentIndex(_TAB_KEYS.index(default_tab))

        # ---- go live ----
        for vm in self._vms:
            vm.start()
        self._on_project_changed()

        self._poll = QTimer(self)
        self._poll.setInterval(int(settings.get("store", {}).get("poll_interval_ms", 1500)))
        self._poll.timeout.connect(self._store.poll)
        self._poll.start()

    # -------------------- state --------------------

    def _current_project(self) -> str | None:
        data = self._cmb_project.currentData()
        return str(data) if data is not None else None

    def _on_project_changed(self) -> None:
        project_id = self._current_project()
        if project_id is None:
            self._log.warning("No projects configured")
            return
        self._log.info("Project -> %s", project_id)
        QSettings("zaraboard", "ui").setValue("last_project", project_id)
        for tab in (self._tasks_tab, self._budget_tab, self._notes_tab):
            tab.set_project(project_id)

    def _refresh_status(self) -> None:
        loading = any(vm.loading for vm in self._vms)
        self._lbl_status.setText("Loading…" if loading else "")

    # -------------------- lifecycle --------------------

    def closeEvent(self, ev):
        self._poll.stop()
        for vm in self._vms:
            vm.stop()
        self._tasks_tab.save_state()
        self._budget_tab.save_state()

        self._settings.setdefault("main_window", {})
        self._settings["main_window"]["is_maximized"] = self.isMaximized()
        if not self.isMaximized():
            self._settings["main_window"]["width"] = self.width()
            self._settings["main_window"]["height"] = self.height()
        self._settings.setdefault("ui", {})
        self._settings["ui"]["default_tab"] = _TAB_KEYS[self._tabs.currentIndex()]
        try:
            save_settings(self._settings)
        except OSError as exc:
            self._log.warning("Could not save settings: %s", exc)
        super().closeEvent(ev)
