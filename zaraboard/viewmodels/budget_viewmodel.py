# Rev 0.3.0 — derived total recomputed with its inputs; statuses reconciled after re-splits
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence

from zaraboard.models.entities import BudgetItem, PayerPayment, PeoplePreset
from zaraboard.repositories.document_store import Document
from zaraboard.services import budget_rules
from zaraboard.services.budget_rules import BudgetSummary, PersonRow
from zaraboard.viewmodels.collection_viewmodel import CollectionViewModel


class BudgetViewModel(CollectionViewModel):
    """
    Budget items of every project, newest first.

    Every payer edit is computed by budget_rules against the latest snapshot
    and written back as the item's whole ``payers`` list.
    """

    collection = "budget_items"

    def _parse(self, doc: Document) -> BudgetItem:
        return BudgetItem.from_doc(doc)

    def _sort(self, items: List[BudgetItem]) -> List[BudgetItem]:
        return sorted(items, key=lambda i: i.created_at, reverse=True)

    # ---- queries
    def visible_items(
        self,
        project_id: str,
        *,
        sort_by: str = "created",
        item_type: Optional[str] = None,
        people: Sequence[str] = (),
    ) -> List[BudgetItem]:
        return budget_rules.filter_and_sort_budget_items(
            self.for_project(project_id), sort_by=sort_by, item_type=item_type, people=people
        )

    def person_rows(self, project_id: str, people: Sequence[str]) -> List[PersonRow]:
        return budget_rules.person_view_rows(self.for_project(project_id), people)

    def summary(self, project_id: str) -> BudgetSummary:
        return budget_rules.budget_summary(self.for_project(project_id))

    def people(self, project_id: str) -> List[str]:
        return budget_rules.people_in_budget(self.for_project(project_id))

    # ---- item commands
    def add_item(
        self,
        *,
        name: str,
        project_id: str,
        type: str = "prop",
        cost: float = 0.0,
        quantity: int = 1,
        other_fee: float = 0.0,
        has_labor_fee: bool = False,
        labor_fee: float = 0.0,
        link: str = "",
        payer_names: Iterable[str] = (),
    ) -> Optional[str]:
        """Raises BudgetValidationError before anything is written."""
        item = budget_rules.new_budget_item(
            name=name,
            project_id=project_id,
            type=type,
            cost=cost,
            quantity=quantity,
            other_fee=other_fee,
            has_labor_fee=has_labor_fee,
            labor_fee=labor_fee,
            link=link,
            payer_names=payer_names,
        )
        return self._create(item.to_doc())

    def update_item(self, item_id: str, **changes: Any) -> None:
        """Partial edit by attribute name; total inputs also rewrite total and shares."""
        item = self.get(item_id)
        if item is None:
            self._log.warning("update_item: unknown item %s", item_id)
            return
        before = item.to_doc()
        after = budget_rules.apply_item_changes(item, changes).to_doc()
        partial = {
            key: after[key]
            for attr, key in BudgetItem.DOC_KEYS.items()
            if attr in changes or after[key] != before[key]
        }
        if partial:
            self._update(item_id, partial)

    def delete_item(self, item_id: str) -> None:
        self._delete(item_id)

    # ---- roster commands
    def add_payer(self, item_id: str, name: str) -> None:
        self._edit_payers(item_id, lambda item: budget_rules.add_payer(item.payers, name, item.total))

    def remove_payer(self, item_id: str, name: str) -> None:
        self._edit_payers(item_id, lambda item: budget_rules.remove_payer(item.payers, name, item.total))

    def select_all_payers(self, item_id: str, roster: Iterable[str]) -> None:
        roster = list(roster)
        self._edit_payers(item_id, lambda item: budget_rules.select_all_payers(roster, item.total))

    def load_preset(self, item_id: str, preset: PeoplePreset) -> None:
        self._edit_payers(item_id, lambda item: budget_rules.load_preset_payers(preset, item.total))

    def clear_payers(self, item_id: str) -> None:
        self._edit_payers(item_id, lambda item: budget_rules.clear_payers())

    # ---- per-payer commands
    def record_payment(self, item_id: str, name: str, amount_paid: float) -> None:
        amount = max(0.0, float(amount_paid))
        self._edit_payers(item_id, lambda item: budget_rules.record_payment(item.payers, name, amount), reconcile=False)

    def override_status(self, item_id: str, name: str, status: str) -> None:
        self._edit_payers(item_id, lambda item: budget_rules.override_status(item.payers, name, status), reconcile=False)

    def set_payment_type(self, item_id: str, name: str, payment_type: str) -> None:
        self._edit_payers(
            item_id, lambda item: budget_rules.set_payment_type(item.payers, name, payment_type), reconcile=False
        )

    # ---- internals
    def _edit_payers(self, item_id: str, compute, *, reconcile: bool = True) -> None:
        item = self.get(item_id)
        if item is None:
            self._log.warning("payer edit: unknown item %s", item_id)
            return
        payers: List[PayerPayment] = compute(item)
        if reconcile:
            payers = budget_rules.reconcile_statuses(payers)
        if payers == item.payers:
            return
        self._update(item_id, {"payers": [p.to_doc() for p in payers]})
