"""Composition root for wiring infrastructure adapters."""

from src.application.ports.attachment_storage import AttachmentStoragePort
from src.application.ports.database import DatabaseEnginePort
from src.application.ports.document_store import DocumentStorePort
from src.application.ports.telemetry import TelemetryPort
from src.application.use_cases.attachments import AttachmentCleaner
from src.application.use_cases.categories import CategoryService
from src.application.use_cases.event_aggregation import EventAggregationService
from src.application.use_cases.event_totals_maintenance import (
    RecalculateAllEventTotalsUseCase,
    ValidateEventTotalsUseCase,
)
from src.application.use_cases.events import EventService
from src.application.use_cases.expenses import ExpenseService
from src.application.use_cases.payments import PaymentService
from src.infrastructure.attachment_storage import FileSystemAttachmentStorage
from src.infrastructure.db import SqlAlchemyDatabaseEngineAdapter
from src.infrastructure.document_store_factory import create_document_store
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.settings import StoreSettings
from src.infrastructure.telemetry import LoggingTelemetry


def build_database_adapter() -> DatabaseEnginePort:
    """Return the database adapter instance."""
    return SqlAlchemyDatabaseEngineAdapter()


def build_document_store(
    db_port: DatabaseEnginePort | None = None,
) -> DocumentStorePort:
    """Return the configured document store."""
    resolved_db = db_port or build_database_adapter()
    return create_document_store(
        resolved_db,
        logger=get_app_logger(),
        settings=StoreSettings.from_env(),
    )


def build_telemetry() -> TelemetryPort:
    """Return the telemetry adapter."""
    return LoggingTelemetry(logger=get_app_logger())


def build_attachment_storage() -> AttachmentStoragePort:
    """Return the attachment storage adapter."""
    settings = StoreSettings.from_env()
    return FileSystemAttachmentStorage(
        settings.attachments_dir, logger=get_app_logger()
    )


def build_event_aggregation_service(
    store: DocumentStorePort | None = None,
) -> EventAggregationService:
    """Return the event totals aggregation service."""
    return EventAggregationService(
        store or build_document_store(),
        build_telemetry(),
        logger=get_app_logger(),
    )


def build_expense_service(
    store: DocumentStorePort | None = None,
) -> ExpenseService:
    """Return the expense service with best-effort attachment cleanup."""
    return ExpenseService(
        store or build_document_store(),
        build_telemetry(),
        attachments=AttachmentCleaner(build_attachment_storage()),
        logger=get_app_logger(),
    )


def build_payment_service(
    store: DocumentStorePort | None = None,
) -> PaymentService:
    """Return the payment service."""
    return PaymentService(
        store or build_document_store(),
        build_telemetry(),
        logger=get_app_logger(),
    )


def build_category_service(
    store: DocumentStorePort | None = None,
) -> CategoryService:
    """Return the category service."""
    return CategoryService(
        store or build_document_store(),
        build_telemetry(),
        logger=get_app_logger(),
    )


def build_event_service(
    store: DocumentStorePort | None = None,
) -> EventService:
    """Return the event service with best-effort attachment cleanup."""
    return EventService(
        store or build_document_store(),
        build_telemetry(),
        attachments=AttachmentCleaner(build_attachment_storage()),
        logger=get_app_logger(),
    )


def build_recalculate_use_case(
    store: DocumentStorePort | None = None,
) -> RecalculateAllEventTotalsUseCase:
    """Return the use case rebuilding every event's totals."""
    resolved = store or build_document_store()
    return RecalculateAllEventTotalsUseCase(
        resolved,
        build_event_aggregation_service(resolved),
        logger=get_app_logger(),
    )


def build_validate_use_case(
    store: DocumentStorePort | None = None,
) -> ValidateEventTotalsUseCase:
    """Return the use case reporting drifted totals."""
    resolved = store or build_document_store()
    return ValidateEventTotalsUseCase(
        resolved,
        build_event_aggregation_service(resolved),
        logger=get_app_logger(),
    )


__all__ = [
    "build_database_adapter",
    "build_document_store",
    "build_telemetry",
    "build_attachment_storage",
    "build_event_aggregation_service",
    "build_expense_service",
    "build_payment_service",
    "build_category_service",
    "build_event_service",
    "build_recalculate_use_case",
    "build_validate_use_case",
]
