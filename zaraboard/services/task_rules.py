# Rev 0.3.0
"""Task editing rules and task sort/filter helpers (pure)."""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from zaraboard.errors import LastAssigneeError, TaskValidationError
from zaraboard.models.entities import Task, TaskUpdate, now_ms
from zaraboard.models.types import TASK_STATUSES

STATUS_ORDER = {status: i for i, status in enumerate(TASK_STATUSES)}


def new_task(
    *,
    title: str,
    in_charge: Sequence[str],
    project_id: str,
    status: str = "Pending",
    first_update: str = "",
    now: Optional[int] = None,
) -> Task:
    title = (title or "").strip()
    if not title:
        raise TaskValidationError("Please provide a task title.")
    people = list(dict.fromkeys(in_charge))
    if not people:
        raise TaskValidationError("Assign at least one person to the task.")
    if status not in STATUS_ORDER:
        raise TaskValidationError(f"Unknown task status: {status!r}")

    ts = now_ms() if now is None else now
    return Task(
        id=None,
        title=title,
        status=status,
        in_charge=people,
        updates=prepend_update([], first_update, now=ts),
        project_id=project_id,
        created_at=ts,
    )


def prepend_update(updates: Sequence[TaskUpdate], text: str, *, now: Optional[int] = None) -> List[TaskUpdate]:
    """New update goes first; blank text leaves the history as it was."""
    text = (text or "").strip()
    if not text:
        return list(updates)
    ts = now_ms() if now is None else now
    return [TaskUpdate(text, ts), *updates]


def toggle_selection(selected: Sequence[str], person: str) -> List[str]:
    """Add or remove ``person``; may leave the selection empty."""
    if person in selected:
        return [p for p in selected if p != person]
    return [*selected, person]


def toggle_assignee(in_charge: Sequence[str], person: str) -> List[str]:
    """Like toggle_selection, but a task always keeps someone in charge."""
    people = toggle_selection(in_charge, person)
    if not people:
        raise LastAssigneeError(person)
    return people


def validate_status(status: str) -> str:
    if status not in STATUS_ORDER:
        raise TaskValidationError(f"Unknown task status: {status!r}")
    return status


# ---------------------------------------------------------------------------
# Sort / filter
# ---------------------------------------------------------------------------

def latest_activity(task: Task) -> int:
    """Most recent update timestamp, or creation time when there are none."""
    if task.updates:
        return max(u.timestamp for u in task.updates)
    return task.created_at


def filter_tasks(
    tasks: Iterable[Task],
    *,
    status: Optional[str] = None,
    people: Sequence[str] = (),
) -> List[Task]:
    """``status`` of None or "all" keeps every status; ``people`` matches any."""
    out = list(tasks)
    if status and status != "all":
        out = [t for t in out if t.status == status]
    if people:
        wanted = set(people)
        out = [t for t in out if any(p in wanted for p in t.in_charge)]
    return out


def sort_tasks(tasks: Iterable[Task], sort_by: str = "update") -> List[Task]:
    if sort_by == "completion":
        return sorted(tasks, key=lambda t: STATUS_ORDER.get(t.status, len(STATUS_ORDER)))
    if sort_by == "created":
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)
    return sorted(tasks, key=latest_activity, reverse=True)


def filter_and_sort_tasks(
    tasks: Iterable[Task],
    *,
    sort_by: str = "update",
    status: Optional[str] = None,
    people: Sequence[str] = (),
) -> List[Task]:
    return sort_tasks(filter_tasks(tasks, status=status, people=people), sort_by)


def people_in_tasks(tasks: Iterable[Task]) -> List[str]:
    return sorted({p for t in tasks for p in t.in_charge})
