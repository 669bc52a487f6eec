"""Error envelope and telemetry reporting shared by mutating use cases."""

from collections.abc import Iterator
from contextlib import contextmanager

from src.application.ports.telemetry import TelemetryPort
from src.domain.errors import BudgetTrackerError, StoreError, ValidationError
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger


class ActionRunner:
    """Wrap use case bodies with breadcrumbs, error capture and usage logs.

    Failures raised inside :meth:`guard` are reported to telemetry and
    re-raised with a ``Failed to <operation>: <message>`` envelope. Domain
    errors keep their type; any other exception becomes a ``StoreError``.
    Validation errors pass through untouched.
    """

    def __init__(
        self,
        telemetry: TelemetryPort,
        logger=None,
        usage_logger=None,
    ) -> None:
        """Initialize the runner.

        Args:
            telemetry: Port receiving breadcrumbs and exceptions.
            logger: Optional logger compatible with logging.Logger-like API.
            usage_logger: Optional logger recording action invocations.
        """
        self._telemetry = telemetry
        self._logger = logger or get_app_logger()
        self._usage_logger = usage_logger or get_usage_logger()

    @contextmanager
    def guard(self, operation: str, action: str, **tags: str) -> Iterator[None]:
        """Run a block as the named action.

        Args:
            operation: Human readable operation used in error messages.
            action: Breadcrumb category, e.g. ``expense.add``.
            **tags: Identifiers attached to breadcrumbs and captured errors.

        Raises:
            BudgetTrackerError: The wrapped failure with the envelope applied.
        """
        owner_id = tags.get("owner_id")
        if owner_id:
            self._telemetry.set_user(owner_id)
        self._usage_logger.info(
            f"action={action} "
            + " ".join(f"{key}={value}" for key, value in tags.items())
        )
        self._telemetry.add_breadcrumb(
            category=action,
            message=f"Starting {operation}",
            data=dict(tags),
        )
        try:
            yield
        except ValidationError:
            raise
        except BudgetTrackerError as exc:
            self._report(exc, operation, action, tags)
            raise type(exc)(f"Failed to {operation}: {exc}") from exc
        except Exception as exc:
            self._report(exc, operation, action, tags)
            raise StoreError(f"Failed to {operation}: {exc}") from exc
        self._telemetry.add_breadcrumb(
            category=action,
            message=f"Completed {operation}",
            data=dict(tags),
        )

    def _report(
        self,
        error: Exception,
        operation: str,
        action: str,
        tags: dict[str, str],
    ) -> None:
        self._logger.error(f"Failed to {operation}: {error}")
        self._telemetry.capture_exception(
            error,
            tags={"action": action, **tags},
            extra={"errorMessage": str(error)},
        )


__all__ = ["ActionRunner"]
