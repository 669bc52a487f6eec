"""Telemetry adapter writing breadcrumbs and exceptions to the app logger."""

from typing import Any

from src.application.ports.telemetry import TelemetryPort
from src.infrastructure.logging.logger import get_app_logger


class LoggingTelemetry(TelemetryPort):
    """TelemetryPort implementation backed by the application logger."""

    def __init__(self, logger=None) -> None:
        self._logger = logger or get_app_logger()
        self._user_id: str | None = None

    def set_user(self, user_id: str) -> None:
        self._user_id = user_id

    def add_breadcrumb(
        self,
        category: str,
        message: str,
        level: str = "info",
        data: dict[str, Any] | None = None,
    ) -> None:
        details = " ".join(f"{key}={value}" for key, value in (data or {}).items())
        self._logger.debug(
            f"[{category}] {level}: {message}"
            + (f" {details}" if details else "")
            + (f" user={self._user_id}" if self._user_id else "")
        )

    def capture_exception(
        self,
        error: BaseException,
        tags: dict[str, str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        tag_text = " ".join(f"{key}={value}" for key, value in (tags or {}).items())
        self._logger.error(
            f"Captured {type(error).__name__}: {error} {tag_text}".rstrip(),
            exc_info=(type(error), error, error.__traceback__),
        )


__all__ = ["LoggingTelemetry"]
