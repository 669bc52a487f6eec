"""Port for error and breadcrumb reporting."""

from typing import Any, Protocol


class TelemetryPort(Protocol):
    """Port receiving breadcrumbs and captured exceptions from use cases."""

    def set_user(self, user_id: str) -> None:
        """Attach the acting user to subsequent reports."""

    def add_breadcrumb(
        self,
        category: str,
        message: str,
        level: str = "info",
        data: dict[str, Any] | None = None,
    ) -> None:
        """Record a breadcrumb describing progress of an action."""

    def capture_exception(
        self,
        error: BaseException,
        tags: dict[str, str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Report an exception with identifying tags."""


__all__ = ["TelemetryPort"]
