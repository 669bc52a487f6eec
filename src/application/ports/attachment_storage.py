"""Port for expense attachment storage."""

from typing import Protocol


class AttachmentStoragePort(Protocol):
    """Port storing attachment files addressed by URL."""

    def upload(self, owner_id: str, filename: str, content: bytes) -> str:
        """Store a file for an owner and return its URL."""

    def delete(self, url: str) -> None:
        """Delete the file behind ``url``.

        Raises:
            FileNotFoundError: If nothing is stored at ``url``.
        """


__all__ = ["AttachmentStoragePort"]
