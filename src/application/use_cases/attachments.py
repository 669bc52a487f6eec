"""Best-effort attachment cleanup."""

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from src.application.ports.attachment_storage import AttachmentStoragePort
from src.infrastructure.logging.logger import get_app_logger


class AttachmentCleaner:
    """Delete attachment files in parallel without failing the caller."""

    def __init__(
        self,
        storage: AttachmentStoragePort,
        logger=None,
        max_workers: int = 4,
    ) -> None:
        self._storage = storage
        self._logger = logger or get_app_logger()
        self._max_workers = max_workers

    def delete_all(self, urls: Iterable[str]) -> list[str]:
        """Delete every attachment URL.

        Failures are logged and never raised.

        Returns:
            list[str]: URLs whose deletion failed.
        """
        pending = [url for url in dict.fromkeys(urls) if url]
        if not pending:
            return []
        with ThreadPoolExecutor(max_workers=self._max_workers) as executor:
            futures = {
                url: executor.submit(self._storage.delete, url)
                for url in pending
            }
        failed = []
        for url, future in futures.items():
            error = future.exception()
            if error is not None:
                failed.append(url)
                self._logger.warning(
                    f"Failed to delete attachment {url}: {error}"
                )
        if failed:
            self._logger.warning(
                f"{len(failed)} of {len(pending)} attachments could not be deleted"
            )
        return failed


__all__ = ["AttachmentCleaner"]
