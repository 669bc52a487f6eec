"""In-memory document store used for local runs and tests."""

from collections.abc import Callable
import copy
import threading
from typing import Any
import uuid

from src.application.ports.document_store import (
    DocumentSnapshot,
    DocumentStorePort,
    WriteBatchPort,
)
from src.domain.errors import NotFoundError, StoreError
from src.infrastructure.document_store_common import (
    check_collection_path,
    check_document_path,
    document_id,
    matches,
    parent_path,
)


class InMemoryWriteBatch(WriteBatchPort):
    """Batch staging operations for :class:`InMemoryDocumentStore`."""

    def __init__(self, store: "InMemoryDocumentStore") -> None:
        self._store = store
        self._operations: list[tuple[str, str, dict[str, Any] | None]] = []
        self._committed = False

    def set(self, path: str, data: dict[str, Any]) -> None:
        self._stage("set", path, data)

    def update(self, path: str, fields: dict[str, Any]) -> None:
        self._stage("update", path, fields)

    def delete(self, path: str) -> None:
        self._stage("delete", path, None)

    def commit(self) -> None:
        if self._committed:
            raise StoreError("Batch already committed")
        self._store._apply(self._operations)
        self._committed = True

    def _stage(self, kind: str, path: str, data: dict[str, Any] | None) -> None:
        if self._committed:
            raise StoreError("Batch already committed")
        self._operations.append(
            (kind, check_document_path(path), copy.deepcopy(data))
        )


class InMemoryDocumentStore(DocumentStorePort):
    """Document store keeping every document in a dictionary.

    Batches are applied to a copy of the documents and swapped in only when
    every operation succeeded.
    """

    def __init__(self, id_factory: Callable[[], str] | None = None) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)

    def new_id(self) -> str:
        return self._id_factory()

    def get(self, path: str) -> DocumentSnapshot | None:
        path = check_document_path(path)
        with self._lock:
            data = self._documents.get(path)
            if data is None:
                return None
            return _snapshot(path, data)

    def set(self, path: str, data: dict[str, Any]) -> None:
        self._apply([("set", check_document_path(path), copy.deepcopy(data))])

    def update(self, path: str, fields: dict[str, Any]) -> None:
        self._apply([("update", check_document_path(path), copy.deepcopy(fields))])

    def delete(self, path: str) -> None:
        self._apply([("delete", check_document_path(path), None)])

    def list_collection(self, collection_path: str) -> list[DocumentSnapshot]:
        collection_path = check_collection_path(collection_path)
        with self._lock:
            return [
                _snapshot(path, data)
                for path, data in sorted(self._documents.items())
                if parent_path(path) == collection_path
            ]

    def find(
        self,
        collection_path: str,
        field_path: str,
        value: Any,
        limit: int | None = None,
    ) -> list[DocumentSnapshot]:
        found = [
            snapshot
            for snapshot in self.list_collection(collection_path)
            if matches(snapshot.data, field_path, value)
        ]
        return found if limit is None else found[:limit]

    def batch(self) -> InMemoryWriteBatch:
        return InMemoryWriteBatch(self)

    def _apply(self, operations) -> None:
        with self._lock:
            working = dict(self._documents)
            for kind, path, data in operations:
                if kind == "set":
                    working[path] = data
                elif kind == "update":
                    if path not in working:
                        raise NotFoundError(f"Document not found: {path}")
                    working[path] = {**working[path], **data}
                else:
                    working.pop(path, None)
            self._documents = working


def _snapshot(path: str, data: dict[str, Any]) -> DocumentSnapshot:
    return DocumentSnapshot(
        id=document_id(path),
        path=path,
        data=copy.deepcopy(data),
    )


__all__ = ["InMemoryDocumentStore", "InMemoryWriteBatch"]
