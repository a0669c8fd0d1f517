# zaraboard type definitions
# Rev 0.2.0

from __future__ import annotations
from typing import Literal

# Stored string values; these are the document wire values as well.
TaskStatus = Literal["Pending", "In Progress", "Completed"]
BudgetItemType = Literal["prop", "assistance"]
PaymentStatus = Literal["due", "delayed", "paid"]
PaymentType = Literal["gcash", "cash"]
NoteColor = Literal["default", "yellow", "green", "blue", "pink", "purple"]

CollectionName = Literal["tasks", "budget_items", "notes", "people_presets"]

TaskSortKey = Literal["update", "completion", "created"]
BudgetSortKey = Literal["completion", "total", "created"]

TASK_STATUSES: tuple[str, ...] = ("Pending", "In Progress", "Completed")
BUDGET_ITEM_TYPES: tuple[str, ...] = ("prop", "assistance")
PAYMENT_STATUSES: tuple[str, ...] = ("due", "delayed", "paid")
PAYMENT_TYPES: tuple[str, ...] = ("gcash", "cash")
NOTE_COLORS: tuple[str, ...] = ("default", "yellow", "green", "blue", "pink", "purple")

COLLECTIONS: tuple[str, ...] = ("tasks", "budget_items", "notes", "people_presets")
