"""Factory for selecting the document store adapter."""

from typing import Optional

from src.application.ports.database import DatabaseEnginePort
from src.application.ports.document_store import DocumentStorePort
from src.infrastructure.memory_document_store import InMemoryDocumentStore
from src.infrastructure.settings import StoreSettings
from src.infrastructure.sqlalchemy_document_store import SqlAlchemyDocumentStore

_memory_store: Optional[InMemoryDocumentStore] = None


def get_memory_store() -> InMemoryDocumentStore:
    """Get the process wide in-memory store shared by every service."""
    global _memory_store
    if _memory_store is None:
        _memory_store = InMemoryDocumentStore()
    return _memory_store


def create_document_store(
    db_port: DatabaseEnginePort,
    logger,
    settings: StoreSettings | None = None,
) -> DocumentStorePort:
    """Return the configured document store.

    Args:
        db_port: Port providing the SQLAlchemy engine.
        logger: Logger used for adapter diagnostics.
        settings: Optional settings, read from the environment when omitted.

    Returns:
        DocumentStorePort: SQLAlchemy store with its table prepared, or the
        shared in-memory store.
    """
    resolved = settings or StoreSettings.from_env()
    if resolved.backend == "memory":
        logger.info("Using in-memory document store")
        return get_memory_store()
    store = SqlAlchemyDocumentStore(db_port, logger=logger)
    store.prepare()
    return store


__all__ = ["create_document_store", "get_memory_store"]
