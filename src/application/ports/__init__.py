"""Application ports package."""

from .attachment_storage import AttachmentStoragePort
from .database import DatabaseEnginePort
from .document_store import DocumentSnapshot, DocumentStorePort, WriteBatchPort
from .telemetry import TelemetryPort

__all__ = [
    "AttachmentStoragePort",
    "DatabaseEnginePort",
    "DocumentSnapshot",
    "DocumentStorePort",
    "TelemetryPort",
    "WriteBatchPort",
]
