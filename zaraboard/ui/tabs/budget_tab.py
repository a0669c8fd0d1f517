# Rev 0.3.0 — items + payers split view; per-person view
from __future__ import annotations
from typing import List, Optional, Sequence

from PySide6.QtCore import Qt, QSettings
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QTableWidget, QTableWidgetItem, QHeaderView,
    QPushButton, QToolButton, QMenu, QComboBox, QLabel, QMessageBox, QDialog,
    QSplitter, QInputDialog, QCheckBox, QStackedWidget
)

from zaraboard.errors import BudgetValidationError
from zaraboard.models.entities import BudgetItem, PayerPayment
from zaraboard.models.types import PAYMENT_STATUSES
from zaraboard.services.budget_rules import completion_percent, person_view_totals, total_left, total_paid
from zaraboard.ui.dialogs.budget_item_dialog import BudgetItemDialog
from zaraboard.ui.people_filter import PeopleFilterButton
from zaraboard.utils.formatting import format_currency, format_date, format_datetime
from zaraboard.viewmodels.budget_viewmodel import BudgetViewModel

_SORTS = [("Newest", "created"), ("Completion", "completion"), ("Total", "total")]
_TYPES = [("All types", None), ("Props", "prop"), ("Assistance", "assistance")]
_STATUS_COLORS = {"due": "#b26a00", "delayed": "#c62828", "paid": "#2e7d32"}
_PAYMENT_LABELS = {"gcash": "GCash", "cash": "Cash"}


def _ro(text: str, *, align_right: bool = False) -> QTableWidgetItem:
    it = QTableWidgetItem(text)
    if align_right:
        it.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
    return it


def _setup_table(table: QTableWidget, headers: List[str], stretch: int) -> None:
    table.setHorizontalHeaderLabels(headers)
    table.setEditTriggers(QTableWidget.NoEditTriggers)
    table.setSelectionBehavior(QTableWidget.SelectRows)
    table.setSelectionMode(QTableWidget.SingleSelection)
    table.setAlternatingRowColors(True)
    table.setWordWrap(False)
    vh = table.verticalHeader()
    vh.setVisible(False)
    vh.setDefaultSectionSize(22)
    hdr = table.horizontalHeader()
    for c in range(len(headers)):
        hdr.setSectionResizeMode(c, QHeaderView.Stretch if c == stretch else QHeaderView.ResizeToContents)


class BudgetTab(QWidget):
    def __init__(self, vm: BudgetViewModel, *, roster: Sequence[str], presets_vm=None, parent=None):
        super().__init__(parent)
        self._vm = vm
        self._roster = list(roster)
        self._presets_vm = presets_vm
        self._project_id: Optional[str] = None

        # ---------- Filters ----------
        self._cmb_type = QComboBox()
        for label, value in _TYPES:
            self._cmb_type.addItem(label, value)
        self._people_filter = PeopleFilterButton(self)
        self._cmb_sort = QComboBox()
        for label, key in _SORTS:
            self._cmb_sort.addItem(label, key)
        self._chk_person_view = QCheckBox("By person")
        self._lbl_summary = QLabel()
        self._lbl_summary.setTextInteractionFlags(Qt.TextSelectableByMouse)

        filter_bar = QHBoxLayout()
        filter_bar.addWidget(self._cmb_type)
        filter_bar.addWidget(self._people_filter)
        filter_bar.addWidget(QLabel("Sort:"))
        filter_bar.addWidget(self._cmb_sort)
        filter_bar.addWidget(self._chk_person_view)
        filter_bar.addStretch(1)
        filter_bar.addWidget(self._lbl_summary)

        # ---------- Items ----------
        self._btn_new = QPushButton("New Item")
        self._btn_edit = QPushButton("Edit")
        self._btn_delete = QPushButton("Delete")
        item_bar = QHBoxLayout()
        for w in (self._btn_new, self._btn_edit, self._btn_delete):
            item_bar.addWidget(w)
        item_bar.addStretch(1)

        # Name | Type | Total | Paid | Left | Done | Payers | Created
        self._items = QTableWidget(0, 8)
        _setup_table(self._items, ["Name", "Type", "Total", "Paid", "Left", "Done", "Payers", "Created"], stretch=0)
        self._items.itemSelectionChanged.connect(self._on_item_selection_changed)
        self._items.itemDoubleClicked.connect(lambda _it: self._on_edit())

        items_holder = QWidget(self)
        _il = QVBoxLayout(items_holder)
        _il.setContentsMargins(0, 0, 0, 0)
        _il.addLayout(item_bar)
        _il.addWidget(self._items, 1)

        # ---------- Payers of the selected item ----------
        self._lbl_payers = QLabel("Payers")
        self._btn_add_payer = QToolButton()
        self._btn_add_payer.setText("Add payer")
        self._btn_add_payer.setPopupMode(QToolButton.InstantPopup)
        self._add_payer_menu = QMenu(self._btn_add_payer)
        self._add_payer_menu.aboutToShow.connect(self._rebuild_add_payer_menu)
        self._btn_add_payer.setMenu(self._add_payer_menu)

        self._btn_all = QPushButton("Select all")
        self._btn_preset = QToolButton()
        self._btn_preset.setText("Load preset")
        self._btn_preset.setPopupMode(QToolButton.InstantPopup)
        self._preset_menu = QMenu(self._btn_preset)
        self._preset_menu.aboutToShow.connect(self._rebuild_preset_menu)
        self._btn_preset.setMenu(self._preset_menu)
        self._btn_clear = QPushButton("Clear")

        self._btn_pay = QPushButton("Record payment")
        self._btn_status = QToolButton()
        self._btn_status.setText("Status")
        self._btn_status.setPopupMode(QToolButton.InstantPopup)
        status_menu = QMenu(self._btn_status)
        for status in PAYMENT_STATUSES:
            status_menu.addAction(status.capitalize()).triggered.connect(
                lambda _=False, s=status: self._on_override_status(s)
            )
        self._btn_status.setMenu(status_menu)
        self._btn_payment_type = QPushButton("GCash / Cash")
        self._btn_remove = QPushButton("Remove")

        payer_bar = QHBoxLayout()
        payer_bar.addWidget(self._lbl_payers, 1)
        for w in (self._btn_add_payer, self._btn_all, self._btn_preset, self._btn_clear,
                  self._btn_pay, self._btn_status, self._btn_payment_type, self._btn_remove):
            payer_bar.addWidget(w)
        if presets_vm is None:
            self._btn_preset.hide()

        # Name | To pay | Paid | Left | Status | Type | Updated
        self._payers = QTableWidget(0, 7)
        _setup_table(self._payers, ["Name", "To pay", "Paid", "Left", "Status", "Type", "Updated"], stretch=0)
        self._payers.itemSelectionChanged.connect(self._update_payer_buttons)
        self._payers.itemDoubleClicked.connect(lambda _it: self._on_record_payment())

        payers_holder = QWidget(self)
        _pl = QVBoxLayout(payers_holder)
        _pl.setContentsMargins(0, 0, 0, 0)
        _pl.addLayout(payer_bar)
        _pl.addWidget(self._payers, 1)

        self._split = QSplitter(Qt.Vertical, self)
        self._split.addWidget(items_holder)
        self._split.addWidget(payers_holder)
        self._split.setStretchFactor(0, 3)
        self._split.setStretchFactor(1, 2)

        # ---------- Person view ----------
        # Person | Item | Type | To pay | Paid | Left | Status
        self._person_table = QTableWidget(0, 7)
        _setup_table(self._person_table, ["Person", "Item", "Type", "To pay", "Paid", "Left", "Status"], stretch=1)
        self._lbl_person_totals = QLabel()
        person_page = QWidget(self)
        _pp = QVBoxLayout(person_page)
        _pp.setContentsMargins(0, 0, 0, 0)
        _pp.addWidget(self._person_table, 1)
        _pp.addWidget(self._lbl_person_totals)

        self._stack = QStackedWidget(self)
        self._stack.addWidget(self._split)
        self._stack.addWidget(person_page)

        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.addLayout(filter_bar)
        root.addWidget(self._stack, 1)

        # ---------- Wiring ----------
        self._btn_new.clicked.connect(self._on_new)
        self._btn_edit.clicked.connect(self._on_edit)
        self._btn_delete.clicked.connect(self._on_delete)
        self._btn_all.clicked.connect(self._on_select_all)
        self._btn_clear.clicked.connect(self._on_clear)
        self._btn_pay.clicked.connect(self._on_record_payment)
        self._btn_payment_type.clicked.connect(self._on_toggle_payment_type)
        self._btn_remove.clicked.connect(self._on_remove_payer)
        self._cmb_type.currentIndexChanged.connect(lambda _i: self._render())
        self._cmb_sort.currentIndexChanged.connect(lambda _i: self._render())
        self._people_filter.changed.connect(lambda _p: self._render())
        self._chk_person_view.toggled.connect(self._on_person_view_toggled)
        self._vm.itemsReloaded.connect(lambda _items: self._render())

        self._on_item_selection_changed()

    # ---------- Public API ----------
    def set_project(self, project_id: str) -> None:
        self._project_id = project_id
        self._render()

    def showEvent(self, ev):
        super().showEvent(ev)
        sizes = QSettings("zaraboard", "ui").value("budget_split_sizes")
        if sizes:
            self._split.setSizes([int(x) for x in sizes])
        else:
            self._split.setSizes([600, 400])

    def save_state(self) -> None:
        QSettings("zaraboard", "ui").setValue("budget_split_sizes", self._split.sizes())

    # ---------- Rendering ----------
    def _render(self) -> None:
        if self._project_id is None:
            return
        self._people_filter.blockSignals(True)
        self._people_filter.set_people(self._vm.people(self._project_id))
        self._people_filter.blockSignals(False)

        s = self._vm.summary(self._project_id)
        self._lbl_summary.setText(
            f"{s.item_count} items · Budget {format_currency(s.total_budget)} · "
            f"Collected {format_currency(s.collected)} · Remaining {format_currency(s.remaining)}"
        )
        if self._chk_person_view.isChecked():
            self._render_person_view()
        else:
            self._render_items()

    def _render_items(self) -> None:
        keep = self._selected_item_id()
        rows = self._vm.visible_items(
            self._project_id,
            sort_by=self._cmb_sort.currentData(),
            item_type=self._cmb_type.currentData(),
            people=self._people_filter.selected(),
        )
        self._items.blockSignals(True)
        self._items.setRowCount(len(rows))
        reselect = -1
        for r, item in enumerate(rows):
            cells = [
                _ro(item.name),
                _ro(item.type.capitalize()),
                _ro(format_currency(item.total), align_right=True),
                _ro(format_currency(total_paid(item.payers)), align_right=True),
                _ro(format_currency(total_left(item.payers)), align_right=True),
                _ro(f"{completion_percent(item):.0f}%", align_right=True),
                _ro(str(len(item.payers))),
                _ro(format_date(item.created_at)),
            ]
            if item.link:
                cells[0].setToolTip(item.link)
            for c, it in enumerate(cells):
                it.setData(Qt.UserRole, item.id)
                self._items.setItem(r, c, it)
            if item.id == keep:
                reselect = r
        if reselect >= 0:
            self._items.selectRow(reselect)
        else:
            self._items.clearSelection()
        self._items.blockSignals(False)
        self._on_item_selection_changed()

    def _render_payers(self, item: Optional[BudgetItem]) -> None:
        keep = self._selected_payer_name()
        payers = item.payers if item else []
        self._lbl_payers.setText(f"Payers — {item.name}" if item else "Payers")
        self._payers.blockSignals(True)
        self._payers.setRowCount(len(payers))
        reselect = -1
        for r, p in enumerate(payers):
            status = _ro(p.status.capitalize() + (" (set)" if p.status_override else ""))
            status.setForeground(QColor(_STATUS_COLORS.get(p.status, "#000000")))
            cells = [
                _ro(p.name),
                _ro(format_currency(p.amount_to_pay), align_right=True),
                _ro(format_currency(p.amount_paid), align_right=True),
                _ro(format_currency(p.amount_to_pay - p.amount_paid), align_right=True),
                status,
                _ro(_PAYMENT_LABELS.get(p.payment_type, p.payment_type)),
                _ro(format_datetime(p.last_updated)),
            ]
            for c, it in enumerate(cells):
                it.setData(Qt.UserRole, p.name)
                self._payers.setItem(r, c, it)
            if p.name == keep:
                reselect = r
        if reselect >= 0:
            self._payers.selectRow(reselect)
        else:
            self._payers.clearSelection()
        self._payers.blockSignals(False)
        self._update_payer_buttons()

    def _render_person_view(self) -> None:
        people = self._people_filter.selected()
        rows = self._vm.person_rows(self._project_id, people)
        self._person_table.setRowCount(len(rows))
        for r, row in enumerate(rows):
            p = row.payer
            status = _ro(p.status.capitalize())
            status.setForeground(QColor(_STATUS_COLORS.get(p.status, "#000000")))
            cells = [
                _ro(p.name),
                _ro(row.item_name),
                _ro(row.item_type.capitalize()),
                _ro(format_currency(p.amount_to_pay), align_right=True),
                _ro(format_currency(p.amount_paid), align_right=True),
                _ro(format_currency(row.amount_left), align_right=True),
                status,
            ]
            for c, it in enumerate(cells):
                self._person_table.setItem(r, c, it)
        if not people:
            self._lbl_person_totals.setText("Pick people from the People filter to see what they owe.")
            return
        to_pay, paid, left = person_view_totals(rows)
        self._lbl_person_totals.setText(
            f"To pay {format_currency(to_pay)} · Paid {format_currency(paid)} · Left {format_currency(left)}"
        )

    # ---------- Selection ----------
    def _selected_item_id(self) -> Optional[str]:
        items = self._items.selectedItems()
        return items[0].data(Qt.UserRole) if items else None

    def _selected_item(self) -> Optional[BudgetItem]:
        iid = self._selected_item_id()
        return self._vm.get(iid) if iid else None

    def _selected_payer_name(self) -> Optional[str]:
        items = self._payers.selectedItems()
        return items[0].data(Qt.UserRole) if items else None

    def _selected_payer(self) -> Optional[PayerPayment]:
        item = self._selected_item()
        name = self._selected_payer_name()
        if item is None or name is None:
            return None
        return next((p for p in item.payers if p.name == name), None)

    def _on_item_selection_changed(self) -> None:
        item = self._selected_item()
        for w in (self._btn_edit, self._btn_delete, self._btn_add_payer, self._btn_all,
                  self._btn_preset, self._btn_clear):
            w.setEnabled(item is not None)
        self._render_payers(item)

    def _update_payer_buttons(self) -> None:
        has_payer = self._selected_payer() is not None
        for w in (self._btn_pay, self._btn_status, self._btn_payment_type, self._btn_remove):
            w.setEnabled(has_payer)

    def _on_person_view_toggled(self, on: bool) -> None:
        self._stack.setCurrentIndex(1 if on else 0)
        self._render()

    # ---------- Menus ----------
    def _rebuild_add_payer_menu(self) -> None:
        self._add_payer_menu.clear()
        item = self._selected_item()
        if item is None:
            return
        taken = {p.name for p in item.payers}
        free = [name for name in self._roster if name not in taken]
        if not free:
            self._add_payer_menu.addAction("Everyone is already paying").setEnabled(False)
        for name in free:
            self._add_payer_menu.addAction(name).triggered.connect(
                lambda _=False, n=name, iid=item.id: self._vm.add_payer(iid, n)
            )

    def _rebuild_preset_menu(self) -> None:
        self._preset_menu.clear()
        item = self._selected_item()
        if item is None or self._presets_vm is None:
            return
        presets = self._presets_vm.items
        if not presets:
            self._preset_menu.addAction("No presets saved").setEnabled(False)
        for preset in presets:
            self._preset_menu.addAction(f"{preset.name} ({len(preset.people)})").triggered.connect(
                lambda _=False, p=preset, iid=item.id: self._on_load_preset(iid, p)
            )

    # ---------- Item actions ----------
    def _on_new(self) -> None:
        if self._project_id is None:
            return
        dlg = BudgetItemDialog(self, roster=self._roster, presets_vm=self._presets_vm)
        if dlg.exec() != int(QDialog.DialogCode.Accepted):
            return
        try:
            self._vm.add_item(project_id=self._project_id, **dlg.values())
        except BudgetValidationError as e:
            QMessageBox.warning(self, "Cannot add item", str(e))

    def _on_edit(self) -> None:
        item = self._selected_item()
        if item is None:
            return
        dlg = BudgetItemDialog(self, item=item)
        if dlg.exec() != int(QDialog.DialogCode.Accepted):
            return
        try:
            self._vm.update_item(item.id, **dlg.values())
        except BudgetValidationError as e:
            QMessageBox.warning(self, "Cannot update item", str(e))

    def _on_delete(self) -> None:
        item = self._selected_item()
        if item is None:
            return
        if QMessageBox.question(
            self, "Delete Item", f"Delete “{item.name}” and all of its payments?",
            QMessageBox.Yes | QMessageBox.No
        ) == QMessageBox.Yes:
            self._vm.delete_item(item.id)

    # ---------- Payer actions ----------
    def _on_select_all(self) -> None:
        item = self._selected_item()
        if item is not None:
            self._vm.select_all_payers(item.id, self._roster)

    def _on_load_preset(self, item_id: str, preset) -> None:
        item = self._vm.get(item_id)
        if item is not None and item.payers and QMessageBox.question(
            self, "Load preset", f"Replace the current payers of “{item.name}” with “{preset.name}”?",
            QMessageBox.Yes | QMessageBox.No
        ) != QMessageBox.Yes:
            return
        self._vm.load_preset(item_id, preset)

    def _on_clear(self) -> None:
        item = self._selected_item()
        if item is None or not item.payers:
            return
        if QMessageBox.question(
            self, "Clear payers", f"Remove every payer from “{item.name}”?",
            QMessageBox.Yes | QMessageBox.No
        ) == QMessageBox.Yes:
            self._vm.clear_payers(item.id)

    def _on_record_payment(self) -> None:
        item = self._selected_item()
        payer = self._selected_payer()
        if item is None or payer is None:
            return
        amount, ok = QInputDialog.getDouble(
            self, "Record payment",
            f"Amount paid by {payer.name} (share {format_currency(payer.amount_to_pay)}):",
            payer.amount_paid, 0.0, 10_000_000.0, 2,
        )
        if ok:
            self._vm.record_payment(item.id, payer.name, amount)

    def _on_override_status(self, status: str) -> None:
        item = self._selected_item()
        payer = self._selected_payer()
        if item is not None and payer is not None:
            self._vm.override_status(item.id, payer.name, status)

    def _on_toggle_payment_type(self) -> None:
        item = self._selected_item()
        payer = self._selected_payer()
        if item is None or payer is None:
            return
        new_type = "cash" if payer.payment_type == "gcash" else "gcash"
        self._vm.set_payment_type(item.id, payer.name, new_type)

    def _on_remove_payer(self) -> None:
        item = self._selected_item()
        payer = self._selected_payer()
        if item is None or payer is None:
            return
        if QMessageBox.question(
            self, "Remove payer",
            f"Remove {payer.name} from “{item.name}”? The total is split again between the rest.",
            QMessageBox.Yes | QMessageBox.No
        ) == QMessageBox.Yes:
            self._vm.remove_payer(item.id, payer.name)
