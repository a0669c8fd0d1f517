# Rev 0.3.0
"""Entities stored as documents.

Attributes are snake_case; ``to_doc()`` / ``from_doc()`` convert to and from
the camelCase document shape the store holds. ``id`` is assigned by the store
and never written into the document body. Timestamps are epoch milliseconds.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from zaraboard.models.normalize import (
    normalize_budget_doc,
    normalize_payer_doc,
    normalize_preset_doc,
    normalize_task_doc,
)


def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


@dataclass(frozen=True)
class TaskUpdate:
    text: str
    timestamp: int

    def to_doc(self) -> Dict[str, Any]:
        return {"text": self.text, "timestamp": self.timestamp}


@dataclass
class Task:
    id: Optional[str]
    title: str
    status: str = "Pending"
    in_charge: List[str] = field(default_factory=list)
    updates: List[TaskUpdate] = field(default_factory=list)   # newest first
    project_id: str = ""
    created_at: int = 0

    def to_doc(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "status": self.status,
            "inCharge": list(self.in_charge),
            "updates": [u.to_doc() for u in self.updates],
            "projectId": self.project_id,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "Task":
        d = normalize_task_doc(doc)
        return cls(
            id=d.get("id"),
            title=str(d.get("title") or ""),
            status=d.get("status") or "Pending",
            in_charge=d["inCharge"],
            updates=[TaskUpdate(u["text"], u["timestamp"]) for u in d["updates"]],
            project_id=str(d.get("projectId") or ""),
            created_at=int(d.get("createdAt") or 0),
        )


@dataclass(frozen=True)
class PayerPayment:
    name: str
    amount_to_pay: float
    amount_paid: float = 0.0
    last_updated: int = 0
    status: str = "due"
    payment_type: str = "gcash"
    status_override: bool = False   # status was set by hand, not derived from amounts

    def to_doc(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "amountToPay": self.amount_to_pay,
            "amountPaid": self.amount_paid,
            "lastUpdated": self.last_updated,
            "status": self.status,
            "paymentType": self.payment_type,
            "statusOverride": self.status_override,
        }

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "PayerPayment":
        d = normalize_payer_doc(doc)
        return cls(
            name=str(d["name"]),
            amount_to_pay=float(d.get("amountToPay") or 0),
            amount_paid=float(d.get("amountPaid") or 0),
            last_updated=int(d.get("lastUpdated") or 0),
            status=d.get("status") or "due",
            payment_type=d.get("paymentType") or "gcash",
            status_override=bool(d["statusOverride"]),
        )


@dataclass
class BudgetItem:
    id: Optional[str]
    name: str
    type: str = "prop"
    cost: float = 0.0
    quantity: int = 1
    other_fee: float = 0.0
    has_labor_fee: bool = False
    labor_fee: float = 0.0
    total: float = 0.0
    link: str = ""
    payers: List[PayerPayment] = field(default_factory=list)
    project_id: str = ""
    created_at: int = 0

    # attribute -> document key, for partial updates
    DOC_KEYS = {
        "name": "name",
        "type": "type",
        "cost": "cost",
        "quantity": "quantity",
        "other_fee": "otherFee",
        "has_labor_fee": "hasLaborFee",
        "labor_fee": "laborFee",
        "total": "total",
        "link": "link",
        "payers": "payers",
        "project_id": "projectId",
    }

    def to_doc(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "cost": self.cost,
            "quantity": self.quantity,
            "otherFee": self.other_fee,
            "hasLaborFee": self.has_labor_fee,
            "laborFee": self.labor_fee,
            "total": self.total,
            "link": self.link,
            "payers": [p.to_doc() for p in self.payers],
            "projectId": self.project_id,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "BudgetItem":
        d = normalize_budget_doc(doc)
        return cls(
            id=d.get("id"),
            name=str(d.get("name") or ""),
            type=d.get("type") or "prop",
            cost=float(d.get("cost") or 0),
            quantity=d["quantity"],
            other_fee=float(d.get("otherFee") or 0),
            has_labor_fee=bool(d.get("hasLaborFee", False)),
            labor_fee=float(d.get("laborFee") or 0),
            total=float(d.get("total") or 0),
            link=str(d.get("link") or ""),
            payers=[PayerPayment.from_doc(p) for p in d["payers"]],
            project_id=str(d.get("projectId") or ""),
            created_at=int(d.get("createdAt") or 0),
        )


@dataclass
class Note:
    id: Optional[str]
    title: str
    content: str = ""
    is_pinned: bool = False
    color: str = "default"
    project_id: str = ""
    created_at: int = 0
    updated_at: int = 0

    DOC_KEYS = {
        "title": "title",
        "content": "content",
        "is_pinned": "isPinned",
        "color": "color",
    }

    def to_doc(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "isPinned": self.is_pinned,
            "color": self.color,
            "projectId": self.project_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "Note":
        return cls(
            id=doc.get("id"),
            title=str(doc.get("title") or ""),
            content=str(doc.get("content") or ""),
            is_pinned=bool(doc.get("isPinned", False)),
            color=doc.get("color") or "default",
            project_id=str(doc.get("projectId") or ""),
            created_at=int(doc.get("createdAt") or 0),
            updated_at=int(doc.get("updatedAt") or doc.get("createdAt") or 0),
        )


@dataclass
class PeoplePreset:
    id: Optional[str]
    name: str
    people: List[str] = field(default_factory=list)
    created_at: int = 0

    def to_doc(self) -> Dict[str, Any]:
        return {"name": self.name, "people": list(self.people), "createdAt": self.created_at}

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "PeoplePreset":
        d = normalize_preset_doc(doc)
        return cls(
            id=d.get("id"),
            name=str(d.get("name") or ""),
            people=d["people"],
            created_at=int(d.get("createdAt") or 0),
        )
