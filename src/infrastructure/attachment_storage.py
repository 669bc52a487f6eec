"""File-system attachment storage."""

from pathlib import Path
import re
from urllib.parse import unquote, urlparse
import uuid

from src.application.ports.attachment_storage import AttachmentStoragePort
from src.infrastructure.logging.logger import get_app_logger

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class FileSystemAttachmentStorage(AttachmentStoragePort):
    """Store attachments under ``<root>/<owner>/`` and address them by URL."""

    def __init__(self, root: Path, logger=None) -> None:
        self._root = Path(root).expanduser().resolve()
        self._logger = logger or get_app_logger()

    def upload(self, owner_id: str, filename: str, content: bytes) -> str:
        """Write a file and return its ``file://`` URL."""
        directory = self._root / _safe_name(owner_id)
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / f"{uuid.uuid4().hex}_{_safe_name(filename)}"
        target.write_bytes(content)
        self._logger.info(f"Stored attachment {target.name} for {owner_id}")
        return target.as_uri()

    def delete(self, url: str) -> None:
        """Delete a stored file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the URL points outside the storage root.
        """
        path = self._resolve(url)
        path.unlink()
        self._logger.info(f"Deleted attachment {path.name}")

    def _resolve(self, url: str) -> Path:
        parsed = urlparse(url)
        if parsed.scheme != "file":
            raise ValueError(f"Unsupported attachment URL: {url}")
        path = Path(unquote(parsed.path)).resolve()
        if self._root not in path.parents:
            raise ValueError(f"Attachment outside storage root: {url}")
        return path


def _safe_name(value: str) -> str:
    cleaned = _UNSAFE_CHARS.sub("_", value).strip("._")
    return cleaned or "file"


__all__ = ["FileSystemAttachmentStorage"]
