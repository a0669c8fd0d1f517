# Rev 0.3.0
"""Read-boundary normalization of stored documents.

Older task documents carry ``latestUpdate`` (a single free-text string) instead
of an ``updates`` list, and ``inCharge`` as a single name instead of a list.
Payer records from before hand-set statuses were tracked have no
``statusOverride`` key.
Everything past this module only ever sees the canonical shape.
"""
from __future__ import annotations

from typing import Any, Dict, List


def _as_name_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    names: List[str] = []
    for v in value:
        if isinstance(v, str) and v and v not in names:
            names.append(v)
    return names


def _as_updates(doc: Dict[str, Any]) -> List[Dict[str, Any]]:
    raw = doc.get("updates")
    if isinstance(raw, list):
        out = []
        for u in raw:
            if isinstance(u, dict):
                out.append({"text": str(u.get("text") or ""), "timestamp": int(u.get("timestamp") or 0)})
            elif isinstance(u, str) and u.strip():
                out.append({"text": u, "timestamp": int(doc.get("createdAt") or 0)})
        # newest first; stable for equal timestamps
        out.sort(key=lambda u: u["timestamp"], reverse=True)
        return out

    legacy = doc.get("latestUpdate")
    if isinstance(legacy, str) and legacy.strip():
        return [{"text": legacy.strip(), "timestamp": int(doc.get("createdAt") or 0)}]
    return []


def normalize_task_doc(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of a task document in the canonical shape."""
    out = {k: v for k, v in doc.items() if k != "latestUpdate"}
    out["inCharge"] = _as_name_list(doc.get("inCharge"))
    out["updates"] = _as_updates(doc)
    return out


def normalize_preset_doc(doc: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(doc)
    out["people"] = _as_name_list(doc.get("people"))
    return out


def payment_status(amount_to_pay: float, amount_paid: float) -> str:
    """paid when the share is covered (over-payment included), delayed when
    partially paid, due otherwise."""
    if amount_paid >= amount_to_pay:
        return "paid"
    if amount_paid > 0:
        return "delayed"
    return "due"


def _as_quantity(value: Any) -> int:
    # whole units only; fractions truncate and anything below one reads as one
    try:
        return max(1, int(float(value or 1)))
    except (TypeError, ValueError):
        return 1


def normalize_payer_doc(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Payer records written before ``statusOverride`` existed keep a status
    that disagrees with their amounts as a hand-set one."""
    out = dict(doc)
    if "statusOverride" not in doc:
        status = doc.get("status") or "due"
        paid = float(doc.get("amountPaid") or 0)
        # new payers start as due, even on a zero share
        untouched = status == "due" and paid <= 0
        out["statusOverride"] = not untouched and status != payment_status(float(doc.get("amountToPay") or 0), paid)
    return out


def normalize_budget_doc(doc: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(doc)
    out["quantity"] = _as_quantity(doc.get("quantity"))
    out["payers"] = [normalize_payer_doc(p) for p in doc.get("payers") or [] if isinstance(p, dict)]
    return out
