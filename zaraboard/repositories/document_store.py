# Rev 0.2.0
"""Document store port.

The app only talks to collections of JSON-like documents through these four
calls. Subscribers receive a full snapshot (every document of the collection,
``id`` included) right away and again after every change.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

Document = Dict[str, Any]
SnapshotCallback = Callable[[List[Document]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class DocumentStore(ABC):
    @abstractmethod
    def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Unsubscribe:
        ...

    @abstractmethod
    def create(self, collection: str, record: Document) -> str:
        """Store a new document; returns the id the store assigned."""

    @abstractmethod
    def update(self, collection: str, doc_id: str, partial: Document) -> None:
        """Merge top-level keys of ``partial`` into the document."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        ...
