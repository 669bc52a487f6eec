"""Document store ports for the budget tracker.

Documents live in a hierarchy of collections addressed by slash separated
paths such as ``workspaces/{owner}/events/{event}``. Infrastructure adapters
implement these protocols on top of a concrete storage engine.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class DocumentSnapshot:
    """Point-in-time copy of a stored document.

    Attributes:
        id: Last path segment of the document.
        path: Full document path.
        data: Decoded document fields.
    """

    id: str
    path: str
    data: dict[str, Any] = field(default_factory=dict)


class WriteBatchPort(Protocol):
    """Atomic multi-document write.

    Operations are staged in order and applied on ``commit``. Either every
    staged operation is applied or none is.
    """

    def set(self, path: str, data: dict[str, Any]) -> None:
        """Stage a create-or-replace of the document at ``path``."""

    def update(self, path: str, fields: dict[str, Any]) -> None:
        """Stage a merge of top-level fields into an existing document.

        The whole batch fails on commit when the document does not exist.
        """

    def delete(self, path: str) -> None:
        """Stage the deletion of the document at ``path``."""

    def commit(self) -> None:
        """Apply every staged operation atomically.

        Raises:
            NotFoundError: If an update targets a missing document.
            StoreError: If the underlying store fails.
        """


class DocumentStorePort(Protocol):
    """Port exposing hierarchical document storage."""

    def new_id(self) -> str:
        """Return a fresh opaque document id."""

    def get(self, path: str) -> DocumentSnapshot | None:
        """Return the document at ``path`` or None when it is missing."""

    def set(self, path: str, data: dict[str, Any]) -> None:
        """Create or replace the document at ``path``."""

    def update(self, path: str, fields: dict[str, Any]) -> None:
        """Merge top-level fields into an existing document.

        Raises:
            NotFoundError: If the document does not exist.
        """

    def delete(self, path: str) -> None:
        """Delete the document at ``path``; missing documents are ignored."""

    def list_collection(self, collection_path: str) -> list[DocumentSnapshot]:
        """Return every direct child document of a collection."""

    def find(
        self,
        collection_path: str,
        field_path: str,
        value: Any,
        limit: int | None = None,
    ) -> list[DocumentSnapshot]:
        """Return child documents whose field equals ``value``.

        Args:
            collection_path: Collection to search.
            field_path: Dotted path to the compared field (``category.id``).
            value: Expected value.
            limit: Optional maximum number of matches.
        """

    def batch(self) -> WriteBatchPort:
        """Return a new empty write batch."""


__all__ = ["DocumentSnapshot", "WriteBatchPort", "DocumentStorePort"]
