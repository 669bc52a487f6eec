"""Document store persisting JSON documents in a SQL table.

Each document is one row keyed by its full path. The parent collection path
is indexed so listing a collection is a single indexed query. A write batch
runs all of its operations inside one transaction.
"""

from collections.abc import Callable
import copy
from typing import Any
import uuid

from sqlalchemy import (
    JSON,
    Column,
    MetaData,
    String,
    Table,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from src.application.ports.database import DatabaseEnginePort
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
from src.infrastructure.logging.logger import get_app_logger

metadata = MetaData()

documents_table = Table(
    "documents",
    metadata,
    Column("path", String(512), primary_key=True),
    Column("parent", String(512), nullable=False, index=True),
    Column("doc_id", String(128), nullable=False),
    Column("data", JSON, nullable=False),
)


class SqlAlchemyWriteBatch(WriteBatchPort):
    """Batch applying staged operations in a single transaction."""

    def __init__(self, store: "SqlAlchemyDocumentStore") -> None:
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
        self._store._run(self._operations)
        self._committed = True

    def _stage(self, kind: str, path: str, data: dict[str, Any] | None) -> None:
        if self._committed:
            raise StoreError("Batch already committed")
        self._operations.append(
            (kind, check_document_path(path), copy.deepcopy(data))
        )


class SqlAlchemyDocumentStore(DocumentStorePort):
    """Document store backed by a SQLAlchemy engine."""

    def __init__(
        self,
        db_port: DatabaseEnginePort,
        logger=None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            db_port: Port providing access to the store engine.
            logger: Optional logger compatible with logging.Logger-like API.
            id_factory: Optional callable generating document ids.
        """
        self._db_port = db_port
        self._logger = logger or get_app_logger()
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)

    def prepare(self) -> None:
        """Create the documents table when it does not exist."""
        engine = self._db_port.get_store_engine()
        try:
            metadata.create_all(engine)
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not prepare document table: {exc}") from exc
        self._logger.info("Document table is ready")

    def new_id(self) -> str:
        return self._id_factory()

    def get(self, path: str) -> DocumentSnapshot | None:
        path = check_document_path(path)
        query = select(documents_table.c.data).where(documents_table.c.path == path)
        try:
            with self._db_port.get_store_engine().connect() as conn:
                row = conn.execute(query).first()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not read {path}: {exc}") from exc
        if row is None:
            return None
        return DocumentSnapshot(id=document_id(path), path=path, data=dict(row.data))

    def set(self, path: str, data: dict[str, Any]) -> None:
        self._run([("set", check_document_path(path), data)])

    def update(self, path: str, fields: dict[str, Any]) -> None:
        self._run([("update", check_document_path(path), fields)])

    def delete(self, path: str) -> None:
        self._run([("delete", check_document_path(path), None)])

    def list_collection(self, collection_path: str) -> list[DocumentSnapshot]:
        collection_path = check_collection_path(collection_path)
        query = (
            select(documents_table.c.path, documents_table.c.data)
            .where(documents_table.c.parent == collection_path)
            .order_by(documents_table.c.path)
        )
        try:
            with self._db_port.get_store_engine().connect() as conn:
                rows = conn.execute(query).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not list {collection_path}: {exc}") from exc
        return [
            DocumentSnapshot(id=document_id(row.path), path=row.path, data=dict(row.data))
            for row in rows
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

    def batch(self) -> SqlAlchemyWriteBatch:
        return SqlAlchemyWriteBatch(self)

    def _run(self, operations) -> None:
        try:
            with self._db_port.get_store_engine().begin() as conn:
                for kind, path, data in operations:
                    if kind == "set":
                        self._set(conn, path, data)
                    elif kind == "update":
                        self._update(conn, path, data)
                    else:
                        conn.execute(
                            delete(documents_table).where(
                                documents_table.c.path == path
                            )
                        )
        except SQLAlchemyError as exc:
            raise StoreError(f"Document write failed: {exc}") from exc

    @staticmethod
    def _set(conn: Connection, path: str, data: dict[str, Any]) -> None:
        conn.execute(delete(documents_table).where(documents_table.c.path == path))
        conn.execute(
            insert(documents_table).values(
                path=path,
                parent=parent_path(path),
                doc_id=document_id(path),
                data=data,
            )
        )

    @staticmethod
    def _update(conn: Connection, path: str, fields: dict[str, Any]) -> None:
        row = conn.execute(
            select(documents_table.c.data).where(documents_table.c.path == path)
        ).first()
        if row is None:
            raise NotFoundError(f"Document not found: {path}")
        conn.execute(
            update(documents_table)
            .where(documents_table.c.path == path)
            .values(data={**row.data, **fields})
        )


__all__ = [
    "metadata",
    "documents_table",
    "SqlAlchemyDocumentStore",
    "SqlAlchemyWriteBatch",
]
