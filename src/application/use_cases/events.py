"""Event and workspace use cases."""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Any

from src.application.ports.document_store import DocumentStorePort
from src.application.ports.telemetry import TelemetryPort
from src.application.use_cases.actions import ActionRunner
from src.application.use_cases.attachments import AttachmentCleaner
from src.application.use_cases.document_converters import (
    amount_to_document,
    created_fields,
    datetime_to_document,
    event_from_document,
    event_totals_from_document,
    event_totals_to_document,
    expense_from_document,
    updated_fields,
)
from src.application.use_cases.document_paths import (
    categories_collection,
    category_path,
    event_path,
    events_collection,
    expenses_collection,
    workspace_path,
)
from src.application.use_cases.dtos import (
    AddEventRequest,
    CategorySeed,
    UpdateEventRequest,
)
from src.application.use_cases.expenses import expense_attachment_urls
from src.application.use_cases.lookups import require_document, require_event_ids
from src.domain.constants import SUPPORTED_CURRENCIES
from src.domain.errors import ValidationError
from src.domain.models import Event, EventStatus
from src.domain.services.budget_status import (
    build_event_totals,
    calculate_event_status,
)
from src.domain.services.validation import (
    require_choice,
    require_id,
    require_non_negative,
    require_text,
)
from src.domain.templates import get_category_templates
from src.infrastructure.logging.logger import get_app_logger
from src.utils.decimal_utils import ZERO
from src.utils.time_utils import EPOCH, utc_now


class EventService:
    """Create, update, delete and read events of a workspace."""

    def __init__(
        self,
        store: DocumentStorePort,
        telemetry: TelemetryPort,
        attachments: AttachmentCleaner | None = None,
        logger=None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._attachments = attachments
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now
        self._runner = ActionRunner(telemetry, logger=self._logger)

    def setup_workspace(
        self,
        owner_id: str,
        email: str = "",
        name: str = "",
        currency: str = "USD",
        language: str = "en",
    ) -> bool:
        """Create the owner's workspace document when it is missing.

        Returns:
            bool: True when a workspace was created.
        """
        owner_id = require_id(owner_id, "User ID")
        with self._runner.guard(
            "set up workspace", "workspace.setup", owner_id=owner_id
        ):
            path = workspace_path(owner_id)
            if self._store.get(path) is not None:
                return False
            self._store.set(
                path,
                _workspace_document(
                    owner_id, email, name, currency, language, self._clock()
                ),
            )
        self._logger.info(f"Created workspace for {owner_id}")
        return True

    def add_event(self, request: AddEventRequest) -> Event:
        """Create an event with its seeded categories in one batch.

        Explicit category seeds win over the templates of the event type.
        The event budget is the sum of the seeded budgets.

        Returns:
            Event: The created event.
        """
        owner_id = require_id(request.owner_id, "User ID")
        name = require_text(request.name, "Event name")
        if request.event_date is None:
            raise ValidationError("Event date is required")
        currency = require_choice(request.currency, SUPPORTED_CURRENCIES, "Currency")
        event_type = (request.type or "").strip() or "other"
        seeds = [_validate_seed(seed) for seed in request.category_seeds]
        if not seeds and request.seed_templates:
            seeds = [
                CategorySeed(
                    name=template.name,
                    color=template.color,
                    icon=template.icon,
                    description=template.description,
                )
                for template in get_category_templates(event_type)
            ]

        with self._runner.guard("create event", "event.create", owner_id=owner_id):
            now = self._clock()
            batch = self._store.batch()
            if self._store.get(workspace_path(owner_id)) is None:
                batch.set(
                    workspace_path(owner_id),
                    _workspace_document(owner_id, "", "", currency, "en", now),
                )

            event_id = self._store.new_id()
            budget = sum((seed.budgeted_amount for seed in seeds), start=ZERO)
            document = {
                "name": name,
                "type": event_type,
                "description": (request.description or "").strip() or None,
                "eventDate": datetime_to_document(request.event_date),
                "currency": currency,
                **event_totals_to_document(build_event_totals(budget, ZERO, ZERO)),
                **created_fields(owner_id, now),
            }
            batch.set(event_path(owner_id, event_id), document)
            for seed in seeds:
                batch.set(
                    category_path(owner_id, event_id, self._store.new_id()),
                    _seed_document(seed, owner_id, now),
                )
            batch.commit()

        self._logger.info(
            f"Created event {event_id} ({event_type}) with {len(seeds)} categories"
        )
        return event_from_document(
            require_document(self._store, event_path(owner_id, event_id), "Event")
        )

    def update_event(self, request: UpdateEventRequest) -> None:
        """Update event metadata, or complete or reopen the event."""
        owner_id, event_id = require_event_ids(request.owner_id, request.event_id)
        fields = _event_update_fields(request)
        if request.status is not None and request.status != EventStatus.COMPLETED:
            raise ValidationError("Only the completed status can be set")
        if request.status is not None and request.reopen:
            raise ValidationError("An event cannot be completed and reopened")
        if not fields and request.status is None and not request.reopen:
            raise ValidationError("At least one field must be provided")

        with self._runner.guard(
            "update event",
            "event.update",
            owner_id=owner_id,
            event_id=event_id,
        ):
            path = event_path(owner_id, event_id)
            event = require_document(self._store, path, "Event")
            if request.status is not None:
                fields["status"] = EventStatus.COMPLETED.value
            elif request.reopen:
                totals = event_totals_from_document(event.data)
                fields["status"] = calculate_event_status(
                    totals.total_budgeted_amount, totals.total_spent_amount
                ).value
            self._store.update(
                path, {**fields, **updated_fields(owner_id, self._clock())}
            )

        self._logger.info(f"Updated event {event_id}: {', '.join(sorted(fields))}")

    def delete_event(self, owner_id: str, event_id: str) -> None:
        """Delete an event after its expenses, categories and attachments.

        Child documents and attachments are removed best-effort; failures
        are logged and the event itself is still deleted.
        """
        owner_id, event_id = require_event_ids(owner_id, event_id)
        with self._runner.guard(
            "delete event",
            "event.delete",
            owner_id=owner_id,
            event_id=event_id,
        ):
            path = event_path(owner_id, event_id)
            require_document(self._store, path, "Event")
            expenses = self._store.list_collection(
                expenses_collection(owner_id, event_id)
            )
            categories = self._store.list_collection(
                categories_collection(owner_id, event_id)
            )
            if self._attachments is not None:
                urls = []
                for snapshot in expenses:
                    urls.extend(
                        expense_attachment_urls(expense_from_document(snapshot))
                    )
                self._attachments.delete_all(urls)
            failed = self._delete_children(
                [snapshot.path for snapshot in expenses + categories]
            )
            self._store.delete(path)

        self._logger.info(
            f"Deleted event {event_id} with {len(expenses)} expenses and "
            f"{len(categories)} categories ({failed} cleanup failures)"
        )

    def fetch_event(self, owner_id: str, event_id: str) -> Event:
        """Return an event.

        Raises:
            NotFoundError: If the event does not exist.
        """
        owner_id, event_id = require_event_ids(owner_id, event_id)
        return event_from_document(
            require_document(self._store, event_path(owner_id, event_id), "Event")
        )

    def fetch_events(self, owner_id: str) -> list[Event]:
        """Return the owner's events ordered by event date."""
        owner_id = require_id(owner_id, "User ID")
        events = [
            event_from_document(snapshot)
            for snapshot in self._store.list_collection(events_collection(owner_id))
        ]
        return sorted(
            events,
            key=lambda event: (event.event_date is None, event.event_date or EPOCH),
        )

    def _delete_children(self, paths: list[str]) -> int:
        failed = 0
        for child_path in paths:
            try:
                self._store.delete(child_path)
            except Exception as exc:
                failed += 1
                self._logger.warning(f"Failed to delete {child_path}: {exc}")
        return failed


def _validate_seed(seed: CategorySeed) -> CategorySeed:
    return CategorySeed(
        name=require_text(seed.name, "Category name"),
        color=require_text(seed.color, "Category color"),
        icon=require_text(seed.icon, "Category icon"),
        budgeted_amount=require_non_negative(seed.budgeted_amount, "Budgeted amount"),
        description=seed.description or "",
    )


def _seed_document(seed: CategorySeed, owner_id: str, now: datetime) -> dict[str, Any]:
    return {
        "name": seed.name,
        "description": seed.description,
        "budgetedAmount": amount_to_document(Decimal(seed.budgeted_amount)),
        "scheduledAmount": amount_to_document(ZERO),
        "spentAmount": amount_to_document(ZERO),
        "color": seed.color,
        "icon": seed.icon,
        **created_fields(owner_id, now),
    }


def _workspace_document(
    owner_id: str,
    email: str,
    name: str,
    currency: str,
    language: str,
    now: datetime,
) -> dict[str, Any]:
    return {
        "email": email,
        "name": name,
        "preferences": {"currency": currency, "language": language},
        **created_fields(owner_id, now),
    }


def _event_update_fields(request: UpdateEventRequest) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if request.name is not None:
        fields["name"] = require_text(request.name, "Event name")
    if request.type is not None:
        fields["type"] = require_text(request.type, "Event type")
    if request.description is not None:
        fields["description"] = request.description.strip() or None
    if request.event_date is not None:
        fields["eventDate"] = datetime_to_document(request.event_date)
    if request.currency is not None:
        fields["currency"] = require_choice(
            request.currency, SUPPORTED_CURRENCIES, "Currency"
        )
    return fields


__all__ = ["EventService"]
