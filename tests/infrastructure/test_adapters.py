"""Tests for attachment storage, telemetry and store selection."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from src.infrastructure import document_store_factory
from src.infrastructure.attachment_storage import FileSystemAttachmentStorage
from src.infrastructure.memory_document_store import InMemoryDocumentStore
from src.infrastructure.settings import StoreSettings
from src.infrastructure.telemetry import LoggingTelemetry


def test_attachment_upload_and_delete(tmp_path: Path) -> None:
    """Uploaded files should be addressable by their file URL."""
    storage = FileSystemAttachmentStorage(tmp_path, logger=MagicMock())

    url = storage.upload("user/1", "../quote 2024.pdf", b"%PDF")

    assert url.startswith("file://")
    stored = list((tmp_path / "user_1").iterdir())
    assert len(stored) == 1
    assert stored[0].name.endswith("_quote_2024.pdf")
    assert stored[0].read_bytes() == b"%PDF"

    storage.delete(url)

    assert list((tmp_path / "user_1").iterdir()) == []
    with pytest.raises(FileNotFoundError):
        storage.delete(url)


def test_attachment_delete_rejects_foreign_urls(tmp_path: Path) -> None:
    """URLs outside the storage root should never be deleted."""
    outside = tmp_path / "outside.txt"
    outside.write_text("keep")
    storage = FileSystemAttachmentStorage(tmp_path / "root", logger=MagicMock())

    with pytest.raises(ValueError, match="outside storage root"):
        storage.delete(outside.as_uri())
    with pytest.raises(ValueError, match="Unsupported attachment URL"):
        storage.delete("https://example.com/a.pdf")
    assert outside.exists()


def test_logging_telemetry_writes_to_logger() -> None:
    """Breadcrumbs go to debug and exceptions to error."""
    logger = MagicMock()
    telemetry = LoggingTelemetry(logger=logger)
    telemetry.set_user("u1")

    telemetry.add_breadcrumb("expense.add", "Starting add expense", data={"event_id": "e1"})
    error = RuntimeError("boom")
    telemetry.capture_exception(error, tags={"action": "expense.add"})

    logger.debug.assert_called_once_with(
        "[expense.add] info: Starting add expense event_id=e1 user=u1"
    )
    message = logger.error.call_args.args[0]
    assert message == "Captured RuntimeError: boom action=expense.add"
    assert logger.error.call_args.kwargs["exc_info"][1] is error


def test_factory_selects_memory_store(monkeypatch) -> None:
    """Memory backend should share one store across calls."""
    monkeypatch.setattr(document_store_factory, "_memory_store", None)
    db_port = MagicMock()
    settings = StoreSettings(backend="memory")

    first = document_store_factory.create_document_store(
        db_port, logger=MagicMock(), settings=settings
    )
    second = document_store_factory.create_document_store(
        db_port, logger=MagicMock(), settings=settings
    )

    assert isinstance(first, InMemoryDocumentStore)
    assert first is second
    db_port.get_store_engine.assert_not_called()


def test_factory_prepares_sqlalchemy_store(monkeypatch) -> None:
    """SQLAlchemy backend should prepare its table."""
    created = MagicMock()
    monkeypatch.setattr(
        document_store_factory, "SqlAlchemyDocumentStore", MagicMock(return_value=created)
    )

    store = document_store_factory.create_document_store(
        MagicMock(), logger=MagicMock(), settings=StoreSettings(backend="sqlalchemy")
    )

    assert store is created
    created.prepare.assert_called_once_with()
