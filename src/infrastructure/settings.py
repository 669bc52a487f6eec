"""Settings helpers for infrastructure adapters."""

from dataclasses import dataclass
import os
from pathlib import Path

import dotenv

from src.infrastructure.logging.logger import get_app_logger
from src.utils.utils import get_project_root

STORE_BACKENDS = ("sqlalchemy", "memory")


@dataclass(frozen=True)
class StoreSettings:
    """Settings for selecting the document store and attachment location.

    Attributes:
        backend: Store backend identifier (sqlalchemy or memory).
        attachments_dir: Directory holding uploaded attachments.
    """

    backend: str = "sqlalchemy"
    attachments_dir: Path = Path("attachments")

    @classmethod
    def from_env(cls) -> "StoreSettings":
        """Build settings from environment variables.

        Returns:
            StoreSettings: Settings sourced from environment variables.
        """
        dotenv.load_dotenv()
        logger = get_app_logger()
        backend = os.getenv("STORE_BACKEND", "sqlalchemy").strip().lower()
        if backend not in STORE_BACKENDS:
            logger.warning(
                f"Unknown STORE_BACKEND={backend}; falling back to sqlalchemy"
            )
            backend = "sqlalchemy"
        raw_dir = os.getenv("ATTACHMENTS_DIR")
        attachments_dir = (
            cls._normalize_path(raw_dir)
            if raw_dir
            else get_project_root() / "data" / "attachments"
        )
        return cls(backend=backend, attachments_dir=attachments_dir)

    @staticmethod
    def _normalize_path(raw_path: str) -> Path:
        """Resolve a user supplied directory path."""
        return Path(raw_path).expanduser().resolve()


__all__ = ["STORE_BACKENDS", "StoreSettings"]
