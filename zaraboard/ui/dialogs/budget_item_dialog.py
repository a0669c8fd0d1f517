# Rev 0.3.0 — live total preview; payer split on create only
from __future__ import annotations
from typing import Any, Dict, Optional, Sequence

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QFormLayout, QLineEdit, QComboBox, QDoubleSpinBox,
    QSpinBox, QCheckBox, QDialogButtonBox, QLabel, QWidget, QHBoxLayout
)

from zaraboard.models.entities import BudgetItem
from zaraboard.services.budget_rules import calculate_total
from zaraboard.ui.people_selector import PeopleSelector
from zaraboard.ui.window_mode import size_dialog
from zaraboard.utils.formatting import format_currency

_TYPE_LABELS = {"prop": "Prop", "assistance": "Assistance"}
_MAX_AMOUNT = 10_000_000.0


def _money_spin() -> QDoubleSpinBox:
    s = QDoubleSpinBox()
    s.setRange(0.0, _MAX_AMOUNT)
    s.setDecimals(2)
    s.setSingleStep(10.0)
    s.setPrefix("₱ ")
    return s


class BudgetItemDialog(QDialog):
    """
    Create mode (item=None) also picks the payers to split the total between.
    Edit mode returns only the item fields; the viewmodel re-splits payers
    when the total changes.
    """

    def __init__(
        self,
        parent: QWidget | None = None,
        *,
        roster: Sequence[str] = (),
        presets_vm=None,
        item: Optional[BudgetItem] = None,
    ):
        super().__init__(parent)
        self._item = item
        self.setWindowTitle("Edit Budget Item" if item else "New Budget Item")

        self._name = QLineEdit(item.name if item else "")
        self._name.setPlaceholderText("Item name")

        self._cmb_type = QComboBox()
        for value, label in _TYPE_LABELS.items():
            self._cmb_type.addItem(label, value)
        if item:
            self._cmb_type.setCurrentIndex(max(0, self._cmb_type.findData(item.type)))

        self._cost = _money_spin()
        self._quantity = QSpinBox()
        self._quantity.setRange(1, 100_000)
        self._other_fee = _money_spin()
        self._chk_labor = QCheckBox("Labor fee")
        self._labor_fee = _money_spin()
        self._link = QLineEdit(item.link if item else "")
        self._link.setPlaceholderText("https://…")

        if item:
            self._cost.setValue(item.cost)
            self._quantity.setValue(item.quantity)
            self._other_fee.setValue(item.other_fee)
            self._chk_labor.setChecked(item.has_labor_fee)
            self._labor_fee.setValue(item.labor_fee)
        self._labor_fee.setEnabled(self._chk_labor.isChecked())

        self._lbl_total = QLabel()
        self._lbl_total.setTextInteractionFlags(Qt.TextSelectableByMouse)

        labor_row = QHBoxLayout()
        labor_row.addWidget(self._chk_labor)
        labor_row.addWidget(self._labor_fee, 1)

        form = QFormLayout()
        form.addRow("Name:", self._name)
        form.addRow("Type:", self._cmb_type)
        form.addRow("Cost:", self._cost)
        form.addRow("Quantity:", self._quantity)
        form.addRow("Other fee:", self._other_fee)
        form.addRow(labor_row)
        form.addRow("Link:", self._link)
        form.addRow("Total:", self._lbl_total)

        self._people: Optional[PeopleSelector] = None
        if item is None:
            form.addRow(QLabel("<hr/>"))
            self._people = PeopleSelector(roster, presets_vm, label="Split between", parent=self)
            self._people.selectionChanged.connect(lambda _p: self._refresh_total())
            form.addRow(self._people)

        btns = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        btns.accepted.connect(self.accept)
        btns.rejected.connect(self.reject)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(btns)

        for spin in (self._cost, self._other_fee, self._labor_fee):
            spin.valueChanged.connect(lambda _v: self._refresh_total())
        self._quantity.valueChanged.connect(lambda _v: self._refresh_total())
        self._chk_labor.toggled.connect(self._on_labor_toggled)

        self._refresh_total()
        size_dialog(self, width_ratio=0.4, height_ratio=0.7 if item is None else 0.45)
        self._name.setFocus(Qt.OtherFocusReason)

    def _on_labor_toggled(self, on: bool) -> None:
        self._labor_fee.setEnabled(on)
        self._refresh_total()

    def _total(self) -> float:
        return calculate_total(
            self._cost.value(),
            self._quantity.value(),
            self._other_fee.value(),
            self._chk_labor.isChecked(),
            self._labor_fee.value(),
        )

    def _refresh_total(self) -> None:
        total = self._total()
        text = format_currency(total)
        if self._people is not None and self._people.selected():
            n = len(self._people.selected())
            text += f"  ({format_currency(total / n)} each × {n})"
        self._lbl_total.setText(text)

    def values(self) -> Dict[str, Any]:
        vals: Dict[str, Any] = {
            "name": self._name.text().strip(),
            "type": str(self._cmb_type.currentData()),
            "cost": self._cost.value(),
            "quantity": self._quantity.value(),
            "other_fee": self._other_fee.value(),
            "has_labor_fee": self._chk_labor.isChecked(),
            "labor_fee": self._labor_fee.value() if self._chk_labor.isChecked() else 0.0,
            "link": self._link.text().strip(),
        }
        if self._people is not None:
            vals["payer_names"] = self._people.selected()
        return vals
