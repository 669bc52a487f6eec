"""Category use cases keeping the event budget in sync."""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from src.application.ports.document_store import DocumentStorePort
from src.application.ports.telemetry import TelemetryPort
from src.application.use_cases.actions import ActionRunner
from src.application.use_cases.document_converters import (
    amount_to_document,
    category_from_document,
    category_snapshot_to_document,
    created_fields,
    updated_fields,
)
from src.application.use_cases.document_paths import (
    categories_collection,
    category_path,
    event_path,
    expense_path,
    expenses_collection,
)
from src.application.use_cases.dtos import AddCategoryRequest, UpdateCategoryRequest
from src.application.use_cases.event_aggregation import EventAggregationService
from src.application.use_cases.lookups import require_document, require_event_ids
from src.domain.errors import ConflictError, ValidationError
from src.domain.models import AmountChange, Category, CategorySnapshot, TotalsChanges
from src.domain.services.validation import (
    require_id,
    require_non_negative,
    require_text,
)
from src.infrastructure.logging.logger import get_app_logger
from src.utils.decimal_utils import ZERO
from src.utils.time_utils import utc_now


class CategoryService:
    """Create, update, delete and list the budget categories of an event."""

    def __init__(
        self,
        store: DocumentStorePort,
        telemetry: TelemetryPort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now
        self._runner = ActionRunner(telemetry, logger=self._logger)
        self._aggregation = EventAggregationService(
            store,
            telemetry,
            logger=self._logger,
            clock=self._clock,
            runner=self._runner,
        )

    def add_category(self, request: AddCategoryRequest) -> str:
        """Create a category and add its budget to the event budget.

        Returns:
            str: Id of the new category.
        """
        owner_id, event_id = require_event_ids(request.owner_id, request.event_id)
        name = require_text(request.name, "Category name")
        color = require_text(request.color, "Category color")
        icon = require_text(request.icon, "Category icon")
        budget = require_non_negative(request.budgeted_amount, "Budgeted amount")

        with self._runner.guard(
            "add category",
            "category.add",
            owner_id=owner_id,
            event_id=event_id,
        ):
            event = require_document(
                self._store, event_path(owner_id, event_id), "Event"
            )
            category_id = self._store.new_id()
            batch = self._store.batch()
            batch.set(
                category_path(owner_id, event_id, category_id),
                {
                    "name": name,
                    "description": request.description or "",
                    "budgetedAmount": amount_to_document(budget),
                    "scheduledAmount": amount_to_document(ZERO),
                    "spentAmount": amount_to_document(ZERO),
                    "color": color,
                    "icon": icon,
                    **created_fields(owner_id, self._clock()),
                },
            )
            self._aggregation.stage_event_totals(
                batch,
                owner_id,
                event_id,
                TotalsChanges(budgeted=AmountChange.of(budget)),
                event=event,
            )
            batch.commit()

        self._logger.info(
            f"Added category {category_id} ({name}, budget={budget}) "
            f"to event {event_id}"
        )
        return category_id

    def update_category(self, request: UpdateCategoryRequest) -> None:
        """Update a category; a budget change moves the event budget too."""
        owner_id, event_id = require_event_ids(request.owner_id, request.event_id)
        category_id = require_id(request.category_id, "Category ID")
        fields = _category_update_fields(request)
        if not fields:
            raise ValidationError("At least one field must be provided")

        with self._runner.guard(
            "update category",
            "category.update",
            owner_id=owner_id,
            event_id=event_id,
            category_id=category_id,
        ):
            event = require_document(
                self._store, event_path(owner_id, event_id), "Event"
            )
            path = category_path(owner_id, event_id, category_id)
            current = category_from_document(
                require_document(self._store, path, "Category")
            )
            batch = self._store.batch()
            batch.update(path, {**fields, **updated_fields(owner_id, self._clock())})

            if request.budgeted_amount is not None:
                delta = (
                    require_non_negative(request.budgeted_amount, "Budgeted amount")
                    - current.budgeted_amount
                )
                if delta:
                    self._aggregation.stage_event_totals(
                        batch,
                        owner_id,
                        event_id,
                        TotalsChanges(budgeted=AmountChange.of(delta)),
                        event=event,
                    )

            refreshed = 0
            if request.refresh_snapshots and _snapshot_changed(current, fields):
                refreshed = self._refresh_snapshots(
                    batch, owner_id, event_id, current, fields
                )
            batch.commit()

        self._logger.info(
            f"Updated category {category_id}: {', '.join(sorted(fields))}"
            + (f" ({refreshed} expense snapshots refreshed)" if refreshed else "")
        )

    def delete_category(self, owner_id: str, event_id: str, category_id: str) -> None:
        """Delete a category that no expense references.

        Raises:
            ConflictError: If an expense still references the category.
        """
        owner_id, event_id = require_event_ids(owner_id, event_id)
        category_id = require_id(category_id, "Category ID")

        with self._runner.guard(
            "delete category",
            "category.delete",
            owner_id=owner_id,
            event_id=event_id,
            category_id=category_id,
        ):
            event = require_document(
                self._store, event_path(owner_id, event_id), "Event"
            )
            path = category_path(owner_id, event_id, category_id)
            category = category_from_document(
                require_document(self._store, path, "Category")
            )
            dependents = self._store.find(
                expenses_collection(owner_id, event_id),
                "category.id",
                category_id,
                limit=1,
            )
            if dependents:
                raise ConflictError(
                    "Cannot delete category with existing expenses. "
                    "Please delete or move the expenses first."
                )
            batch = self._store.batch()
            batch.delete(path)
            self._aggregation.stage_event_totals(
                batch,
                owner_id,
                event_id,
                TotalsChanges(
                    budgeted=AmountChange(subtract=category.budgeted_amount),
                    scheduled=AmountChange(subtract=category.scheduled_amount),
                    spent=AmountChange(subtract=category.spent_amount),
                ),
                event=event,
            )
            batch.commit()

        self._logger.info(f"Deleted category {category_id} of event {event_id}")

    def fetch_categories(self, owner_id: str, event_id: str) -> list[Category]:
        """Return the categories of an event ordered by name."""
        owner_id, event_id = require_event_ids(owner_id, event_id)
        categories = [
            category_from_document(snapshot)
            for snapshot in self._store.list_collection(
                categories_collection(owner_id, event_id)
            )
        ]
        return sorted(categories, key=lambda category: category.name.lower())

    def _refresh_snapshots(
        self,
        batch,
        owner_id: str,
        event_id: str,
        current: Category,
        fields: dict[str, Any],
    ) -> int:
        snapshot = CategorySnapshot(
            id=current.id,
            name=fields.get("name", current.name),
            color=fields.get("color", current.color),
            icon=fields.get("icon", current.icon),
        )
        expenses = self._store.find(
            expenses_collection(owner_id, event_id), "category.id", current.id
        )
        for expense in expenses:
            batch.update(
                expense_path(owner_id, event_id, expense.id),
                {"category": category_snapshot_to_document(snapshot)},
            )
        return len(expenses)


def _category_update_fields(request: UpdateCategoryRequest) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if request.name is not None:
        fields["name"] = require_text(request.name, "Category name")
    if request.description is not None:
        fields["description"] = request.description
    if request.budgeted_amount is not None:
        fields["budgetedAmount"] = amount_to_document(
            require_non_negative(request.budgeted_amount, "Budgeted amount")
        )
    if request.color is not None:
        fields["color"] = require_text(request.color, "Category color")
    if request.icon is not None:
        fields["icon"] = require_text(request.icon, "Category icon")
    return fields


def _snapshot_changed(current: Category, fields: dict[str, Any]) -> bool:
    return any(
        key in fields and fields[key] != getattr(current, key)
        for key in ("name", "color", "icon")
    )


__all__ = ["CategoryService"]
