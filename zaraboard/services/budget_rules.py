# Rev 0.3.0
"""Budget arithmetic: totals, equal splits, payment status, sort/filter.

Every function here is pure. Payer lists are never mutated in place; callers
get a new list and hand it to the store as a whole (``{"payers": [...]}``).

Splits use plain float division with no rounding, so after many roster edits
the shares may not sum to the item total exactly.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence

from zaraboard.errors import BudgetValidationError
from zaraboard.models.entities import BudgetItem, PayerPayment, PeoplePreset, now_ms
from zaraboard.models.normalize import payment_status
from zaraboard.models.types import BUDGET_ITEM_TYPES

# Fields that feed ``total``; changing any of them recomputes it.
# ``total`` itself is never set directly.
TOTAL_INPUTS = frozenset({"cost", "quantity", "other_fee", "has_labor_fee", "labor_fee"})


# ---------------------------------------------------------------------------
# Total calculator
# ---------------------------------------------------------------------------

def calculate_total(
    cost: float,
    quantity: int,
    other_fee: float,
    has_labor_fee: bool,
    labor_fee: float,
) -> float:
    return cost * quantity + other_fee + (labor_fee if has_labor_fee else 0)


def item_total(item: BudgetItem) -> float:
    return calculate_total(item.cost, item.quantity, item.other_fee, item.has_labor_fee, item.labor_fee)


def _clamp_amount(value) -> float:
    return max(0.0, float(value or 0))


# ---------------------------------------------------------------------------
# Payment status
# ---------------------------------------------------------------------------

def reconcile_statuses(payers: Sequence[PayerPayment]) -> List[PayerPayment]:
    """Re-derive status for payers whose status was not set by hand."""
    out = []
    for p in payers:
        if p.status_override:
            out.append(p)
            continue
        status = payment_status(p.amount_to_pay, p.amount_paid)
        out.append(p if status == p.status else replace(p, status=status))
    return out


# ---------------------------------------------------------------------------
# Split engine
# ---------------------------------------------------------------------------

def _new_payer(name: str, share: float, now: int) -> PayerPayment:
    return PayerPayment(
        name=name,
        amount_to_pay=share,
        amount_paid=0.0,
        last_updated=now,
        status="due",
        payment_type="gcash",
    )


def split_evenly(total: float, names: Iterable[str], *, now: Optional[int] = None) -> List[PayerPayment]:
    """Fresh payer records sharing ``total`` equally. Duplicate names collapse."""
    unique: List[str] = []
    for n in names:
        if n not in unique:
            unique.append(n)
    if not unique:
        return []
    ts = now_ms() if now is None else now
    share = total / len(unique)
    return [_new_payer(n, share, ts) for n in unique]


def resplit(payers: Sequence[PayerPayment], total: float) -> List[PayerPayment]:
    """Recompute every share against the current roster size."""
    if not payers:
        return []
    share = total / len(payers)
    return [replace(p, amount_to_pay=share) for p in payers]


def add_payer(
    payers: Sequence[PayerPayment],
    name: str,
    total: float,
    *,
    now: Optional[int] = None,
) -> List[PayerPayment]:
    if any(p.name == name for p in payers):
        return list(payers)
    share = total / (len(payers) + 1)
    ts = now_ms() if now is None else now
    updated = [replace(p, amount_to_pay=share) for p in payers]
    updated.append(_new_payer(name, share, ts))
    return updated


def remove_payer(payers: Sequence[PayerPayment], name: str, total: float) -> List[PayerPayment]:
    remaining = [p for p in payers if p.name != name]
    return resplit(remaining, total)


def select_all_payers(roster: Iterable[str], total: float, *, now: Optional[int] = None) -> List[PayerPayment]:
    return split_evenly(total, roster, now=now)


def load_preset_payers(preset: PeoplePreset, total: float, *, now: Optional[int] = None) -> List[PayerPayment]:
    return split_evenly(total, preset.people, now=now)


def clear_payers() -> List[PayerPayment]:
    return []


# ---------------------------------------------------------------------------
# Per-payer edits
# ---------------------------------------------------------------------------

def _edit_payer(payers: Sequence[PayerPayment], name: str, now: Optional[int], **changes) -> List[PayerPayment]:
    ts = now_ms() if now is None else now
    return [replace(p, last_updated=ts, **changes) if p.name == name else p for p in payers]


def record_payment(
    payers: Sequence[PayerPayment],
    name: str,
    amount_paid: float,
    *,
    now: Optional[int] = None,
) -> List[PayerPayment]:
    """Set a payer's paid amount and derive its status from it.

    Unknown names leave the list unchanged.
    """
    target = next((p for p in payers if p.name == name), None)
    if target is None:
        return list(payers)
    status = payment_status(target.amount_to_pay, amount_paid)
    return _edit_payer(payers, name, now, amount_paid=amount_paid, status=status, status_override=False)


def override_status(
    payers: Sequence[PayerPayment],
    name: str,
    status: str,
    *,
    now: Optional[int] = None,
) -> List[PayerPayment]:
    """Manual status; not checked against the amounts."""
    return _edit_payer(payers, name, now, status=status, status_override=True)


def set_payment_type(
    payers: Sequence[PayerPayment],
    name: str,
    payment_type: str,
    *,
    now: Optional[int] = None,
) -> List[PayerPayment]:
    return _edit_payer(payers, name, now, payment_type=payment_type)


# ---------------------------------------------------------------------------
# Item creation / edits
# ---------------------------------------------------------------------------

def new_budget_item(
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
    now: Optional[int] = None,
) -> BudgetItem:
    name = (name or "").strip()
    if not name:
        raise BudgetValidationError("Please provide an item name.")
    if type not in BUDGET_ITEM_TYPES:
        raise BudgetValidationError(f"Unknown item type: {type!r}")

    ts = now_ms() if now is None else now
    cost = _clamp_amount(cost)
    quantity = max(1, int(quantity or 1))
    other_fee = _clamp_amount(other_fee)
    labor_fee = _clamp_amount(labor_fee) if has_labor_fee else 0.0
    total = calculate_total(cost, quantity, other_fee, has_labor_fee, labor_fee)
    return BudgetItem(
        id=None,
        name=name,
        type=type,
        cost=cost,
        quantity=quantity,
        other_fee=other_fee,
        has_labor_fee=bool(has_labor_fee),
        labor_fee=labor_fee,
        total=total,
        link=(link or "").strip(),
        payers=split_evenly(total, payer_names, now=ts),
        project_id=project_id,
        created_at=ts,
    )


def apply_item_changes(item: BudgetItem, changes: dict) -> BudgetItem:
    """Return ``item`` with ``changes`` applied, keeping ``total`` consistent.

    When a total input changes value, the total is recomputed and the payer
    shares are re-split against it in the same edit; statuses that were not
    set by hand follow the new shares. Inputs resent with their current value
    leave the payers alone.
    """
    unknown = set(changes) - set(BudgetItem.DOC_KEYS)
    if unknown:
        raise BudgetValidationError(f"Unknown budget item fields: {sorted(unknown)}")
    if "total" in changes:
        raise BudgetValidationError("The total is derived from cost, quantity and fees; edit those instead.")
    changes = dict(changes)
    if "name" in changes:
        changes["name"] = (changes["name"] or "").strip()
        if not changes["name"]:
            raise BudgetValidationError("Please provide an item name.")
    if "type" in changes and changes["type"] not in BUDGET_ITEM_TYPES:
        raise BudgetValidationError(f"Unknown item type: {changes['type']!r}")
    if "link" in changes:
        changes["link"] = (changes["link"] or "").strip()
    updated = replace(item, **changes)
    if TOTAL_INPUTS & set(changes):
        updated = replace(
            updated,
            cost=_clamp_amount(updated.cost),
            quantity=max(1, int(updated.quantity or 1)),
            other_fee=_clamp_amount(updated.other_fee),
            labor_fee=_clamp_amount(updated.labor_fee) if updated.has_labor_fee else 0.0,
        )
        if any(getattr(updated, f) != getattr(item, f) for f in TOTAL_INPUTS):
            updated = replace(updated, total=item_total(updated))
            updated = replace(updated, payers=reconcile_statuses(resplit(updated.payers, updated.total)))
    return updated


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------

def total_paid(payers: Iterable[PayerPayment]) -> float:
    return sum(p.amount_paid for p in payers)


def total_left(payers: Iterable[PayerPayment]) -> float:
    return sum(p.amount_to_pay - p.amount_paid for p in payers)


def completion_percent(item: BudgetItem) -> float:
    if item.total == 0:
        return 0.0
    return total_paid(item.payers) / item.total * 100


def people_in_budget(items: Iterable[BudgetItem]) -> List[str]:
    return sorted({p.name for item in items for p in item.payers})


@dataclass(frozen=True)
class BudgetSummary:
    total_budget: float
    collected: float
    remaining: float
    item_count: int


def budget_summary(items: Sequence[BudgetItem]) -> BudgetSummary:
    return BudgetSummary(
        total_budget=sum(i.total for i in items),
        collected=sum(total_paid(i.payers) for i in items),
        remaining=sum(total_left(i.payers) for i in items),
        item_count=len(items),
    )


# ---------------------------------------------------------------------------
# Sort / filter
# ---------------------------------------------------------------------------

def filter_budget_items(
    items: Iterable[BudgetItem],
    *,
    item_type: Optional[str] = None,
    people: Sequence[str] = (),
) -> List[BudgetItem]:
    """``item_type`` of None or "all" keeps every type; ``people`` matches any."""
    out = list(items)
    if item_type and item_type != "all":
        out = [i for i in out if i.type == item_type]
    if people:
        wanted = set(people)
        out = [i for i in out if any(p.name in wanted for p in i.payers)]
    return out


_BUDGET_SORT_KEYS = {
    "completion": completion_percent,
    "total": lambda i: i.total,
    "created": lambda i: i.created_at,
}


def sort_budget_items(items: Iterable[BudgetItem], sort_by: str = "created") -> List[BudgetItem]:
    """All keys sort descending. Unknown keys fall back to "created"."""
    key = _BUDGET_SORT_KEYS.get(sort_by, _BUDGET_SORT_KEYS["created"])
    return sorted(items, key=key, reverse=True)


def filter_and_sort_budget_items(
    items: Iterable[BudgetItem],
    *,
    sort_by: str = "created",
    item_type: Optional[str] = None,
    people: Sequence[str] = (),
) -> List[BudgetItem]:
    return sort_budget_items(filter_budget_items(items, item_type=item_type, people=people), sort_by)


@dataclass(frozen=True)
class PersonRow:
    item_id: Optional[str]
    item_name: str
    item_type: str
    payer: PayerPayment

    @property
    def amount_left(self) -> float:
        return self.payer.amount_to_pay - self.payer.amount_paid


def person_view_rows(items: Iterable[BudgetItem], people: Sequence[str]) -> List[PersonRow]:
    """One row per (item, payer) for the selected people, by payer then item name."""
    if not people:
        return []
    wanted = set(people)
    rows = [
        PersonRow(item.id, item.name, item.type, payer)
        for item in items
        for payer in item.payers
        if payer.name in wanted
    ]
    rows.sort(key=lambda r: (r.payer.name, r.item_name))
    return rows


def person_view_totals(rows: Iterable[PersonRow]) -> tuple[float, float, float]:
    """(to pay, paid, left); left counts over-payments as zero."""
    rows = list(rows)
    to_pay = sum(r.payer.amount_to_pay for r in rows)
    paid = sum(r.payer.amount_paid for r in rows)
    left = sum(max(0.0, r.amount_left) for r in rows)
    return to_pay, paid, left
