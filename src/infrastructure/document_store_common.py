"""Path and field helpers shared by the document store adapters."""

from typing import Any

from src.domain.errors import StoreError

_MISSING = object()


def split_path(path: str) -> list[str]:
    """Split a path into its non-empty segments."""
    return [segment for segment in path.strip("/").split("/") if segment]


def check_document_path(path: str) -> str:
    """Return a normalized document path.

    Document paths alternate collection and document ids, so they always
    have an even number of segments.

    Raises:
        StoreError: If the path does not address a document.
    """
    segments = split_path(path)
    if not segments or len(segments) % 2:
        raise StoreError(f"Invalid document path: {path!r}")
    return "/".join(segments)


def check_collection_path(path: str) -> str:
    """Return a normalized collection path."""
    segments = split_path(path)
    if not segments or not len(segments) % 2:
        raise StoreError(f"Invalid collection path: {path!r}")
    return "/".join(segments)


def parent_path(path: str) -> str:
    return path.rsplit("/", 1)[0]


def document_id(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def get_field(data: dict[str, Any], field_path: str) -> Any:
    """Return the value at a dotted field path, or a sentinel when absent."""
    current: Any = data
    for key in field_path.split("."):
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def matches(data: dict[str, Any], field_path: str, value: Any) -> bool:
    """Return True when the field at ``field_path`` equals ``value``."""
    found = get_field(data, field_path)
    return found is not _MISSING and found == value


__all__ = [
    "split_path",
    "check_document_path",
    "check_collection_path",
    "parent_path",
    "document_id",
    "get_field",
    "matches",
]
