# Rev 0.2.0
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from PySide6.QtCore import QObject, Signal

from zaraboard.repositories.document_store import Document, DocumentStore, Unsubscribe
from zaraboard.utils.logging_setup import get_logger


class CollectionViewModel(QObject):
    """
    Live, locally sorted view of one store collection.

    Emits:
      - itemsReloaded(items: list)   after every snapshot
      - loadingChanged(loading: bool)

    Store mutations are fire-and-forget: a failure is logged and the view
    keeps showing the last snapshot.
    """

    itemsReloaded = Signal(list)
    loadingChanged = Signal(bool)

    collection: str = ""

    def __init__(self, store: DocumentStore, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._store = store
        self._items: List[Any] = []
        self._loading = True
        self._unsubscribe: Optional[Unsubscribe] = None
        self._log = get_logger(type(self).__name__)

    # ---- lifecycle
    def start(self) -> None:
        if self._unsubscribe is not None:
            return
        self._set_loading(True)
        self._unsubscribe = self._store.subscribe(self.collection, self._on_snapshot, self._on_error)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # ---- state
    @property
    def items(self) -> List[Any]:
        return list(self._items)

    @property
    def loading(self) -> bool:
        return self._loading

    def get(self, item_id: str) -> Optional[Any]:
        return next((i for i in self._items if getattr(i, "id", None) == item_id), None)

    def for_project(self, project_id: str) -> List[Any]:
        return [i for i in self._items if getattr(i, "project_id", None) == project_id]

    # ---- snapshot handling
    def _parse(self, doc: Document) -> Any:
        raise NotImplementedError

    def _sort(self, items: List[Any]) -> List[Any]:
        return items

    def _on_snapshot(self, docs: List[Document]) -> None:
        parsed: List[Any] = []
        for doc in docs:
            try:
                parsed.append(self._parse(doc))
            except (KeyError, TypeError, ValueError) as exc:
                self._log.warning("Skipping malformed %s document %s: %s", self.collection, doc.get("id"), exc)
        self._items = self._sort(parsed)
        self._set_loading(False)
        self.itemsReloaded.emit(self.items)

    def _on_error(self, exc: Exception) -> None:
        self._log.error("%s subscription error: %s", self.collection, exc)
        self._set_loading(False)

    def _set_loading(self, loading: bool) -> None:
        if loading != self._loading:
            self._loading = loading
            self.loadingChanged.emit(loading)

    # ---- fire-and-forget mutations
    def _fire(self, action: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        except Exception:
            self._log.exception("%s on %s failed", action, self.collection)
            return None

    def _create(self, record: Dict[str, Any]) -> Optional[str]:
        return self._fire("create", self._store.create, self.collection, record)

    def _update(self, item_id: str, partial: Dict[str, Any]) -> None:
        self._fire("update", self._store.update, self.collection, item_id, partial)

    def _delete(self, item_id: str) -> None:
        self._fire("delete", self._store.delete, self.collection, item_id)
