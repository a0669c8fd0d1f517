# Rev 0.2.0
"""Exception hierarchy.

Validation errors are raised by the pure helpers in ``zaraboard.services``
before any store call is attempted; views show them to the user.
Store errors come from the document store adapter and are logged by the
viewmodels, never shown.
"""
from __future__ import annotations


class ZaraboardError(Exception):
    """Base class for all application errors."""


class TaskValidationError(ZaraboardError):
    pass


class LastAssigneeError(TaskValidationError):
    """Removing this person would leave the task with nobody in charge."""

    def __init__(self, person: str):
        super().__init__(f"{person} is the last person in charge; a task needs at least one.")
        self.person = person


class BudgetValidationError(ZaraboardError):
    pass


class NoteValidationError(ZaraboardError):
    pass


class PresetValidationError(ZaraboardError):
    pass


class StoreError(ZaraboardError):
    """A document store call failed."""


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection}/{doc_id} does not exist")
        self.collection = collection
        self.doc_id = doc_id
