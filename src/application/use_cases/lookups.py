"""Shared existence checks used by the use cases."""

from src.application.ports.document_store import DocumentSnapshot, DocumentStorePort
from src.domain.errors import NotFoundError
from src.domain.services.validation import require_id


def require_event_ids(owner_id: str | None, event_id: str | None) -> tuple[str, str]:
    """Validate and return the owner and event identifiers."""
    return require_id(owner_id, "User ID"), require_id(event_id, "Event ID")


def require_document(
    store: DocumentStorePort,
    path: str,
    label: str,
) -> DocumentSnapshot:
    """Return the document at ``path``.

    Raises:
        NotFoundError: If the document does not exist.
    """
    snapshot = store.get(path)
    if snapshot is None:
        raise NotFoundError(f"{label} not found")
    return snapshot


__all__ = ["require_event_ids", "require_document"]
