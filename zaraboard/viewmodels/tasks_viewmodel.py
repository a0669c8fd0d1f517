# Rev 0.2.0
from __future__ import annotations

from typing import List, Optional, Sequence

from zaraboard.models.entities import Task
from zaraboard.repositories.document_store import Document
from zaraboard.services import task_rules
from zaraboard.viewmodels.collection_viewmodel import CollectionViewModel


class TasksViewModel(CollectionViewModel):
    """Tasks of every project, newest first. Views narrow with visible_tasks()."""

    collection = "tasks"

    def _parse(self, doc: Document) -> Task:
        return Task.from_doc(doc)

    def _sort(self, items: List[Task]) -> List[Task]:
        return sorted(items, key=lambda t: t.created_at, reverse=True)

    # ---- queries
    def visible_tasks(
        self,
        project_id: str,
        *,
        sort_by: str = "update",
        status: Optional[str] = None,
        people: Sequence[str] = (),
    ) -> List[Task]:
        return task_rules.filter_and_sort_tasks(
            self.for_project(project_id), sort_by=sort_by, status=status, people=people
        )

    # ---- commands
    def add_task(
        self,
        *,
        title: str,
        in_charge: Sequence[str],
        project_id: str,
        status: str = "Pending",
        first_update: str = "",
    ) -> Optional[str]:
        """Raises TaskValidationError before anything is written."""
        task = task_rules.new_task(
            title=title,
            in_charge=in_charge,
            project_id=project_id,
            status=status,
            first_update=first_update,
        )
        return self._create(task.to_doc())

    def change_status(self, task_id: str, status: str) -> None:
        self._update(task_id, {"status": task_rules.validate_status(status)})

    def add_update(self, task_id: str, text: str) -> None:
        task = self.get(task_id)
        if task is None:
            self._log.warning("add_update: unknown task %s", task_id)
            return
        updates = task_rules.prepend_update(task.updates, text)
        if len(updates) == len(task.updates):
            return
        self._update(task_id, {"updates": [u.to_doc() for u in updates]})

    def toggle_assignee(self, task_id: str, person: str) -> None:
        """Raises LastAssigneeError instead of leaving nobody in charge."""
        task = self.get(task_id)
        if task is None:
            self._log.warning("toggle_assignee: unknown task %s", task_id)
            return
        people = task_rules.toggle_assignee(task.in_charge, person)
        self._update(task_id, {"inCharge": people})

    def delete_task(self, task_id: str) -> None:
        self._delete(task_id)
