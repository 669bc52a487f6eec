"""Maintenance of the denormalized event totals.

Event totals are a cached sum over the event's categories. They can be
rebuilt from scratch with :meth:`EventAggregationService.update_event_totals`
or adjusted incrementally by the add, subtract and complex modes. Mutators
stage their adjustment into their own batch with
:meth:`EventAggregationService.stage_event_totals` so expense, category and
event writes commit together.
"""

from collections.abc import Callable
from datetime import datetime

from src.application.ports.document_store import (
    DocumentSnapshot,
    DocumentStorePort,
    WriteBatchPort,
)
from src.application.ports.telemetry import TelemetryPort
from src.application.use_cases.actions import ActionRunner
from src.application.use_cases.document_converters import (
    amount_to_document,
    category_from_document,
    event_totals_from_document,
    event_totals_to_document,
    expense_from_document,
    updated_fields,
)
from src.application.use_cases.document_paths import (
    categories_collection,
    category_path,
    event_path,
    expenses_collection,
)
from src.application.use_cases.lookups import require_document, require_event_ids
from src.domain.errors import ValidationError
from src.domain.models import (
    EventBreakdown,
    EventTotals,
    TotalsAmounts,
    TotalsChanges,
)
from src.domain.services.aggregation import (
    add_totals,
    apply_totals_changes,
    compute_event_breakdown,
    subtract_totals,
)
from src.domain.services.validation import require_amount
from src.infrastructure.logging.logger import get_app_logger
from src.utils.time_utils import utc_now

AGGREGATION_ACTION = "event.aggregation"


class EventAggregationService:
    """Keep event totals consistent with categories and expenses."""

    def __init__(
        self,
        store: DocumentStorePort,
        telemetry: TelemetryPort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
        runner: ActionRunner | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Document store holding the event tree.
            telemetry: Port receiving breadcrumbs and exceptions.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional callable returning the current UTC time.
            runner: Optional shared action runner.
        """
        self._store = store
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now
        self._runner = runner or ActionRunner(telemetry, logger=self._logger)

    def update_event_totals(self, owner_id: str, event_id: str) -> EventTotals:
        """Recompute category and event totals from every expense.

        Budgeted amounts are kept as stored on each category. Category and
        event writes are committed in one batch.

        Returns:
            EventTotals: The totals written to the event.
        """
        owner_id, event_id = require_event_ids(owner_id, event_id)
        with self._runner.guard(
            "update event totals",
            AGGREGATION_ACTION,
            owner_id=owner_id,
            event_id=event_id,
        ):
            event = self._load_event(owner_id, event_id)
            breakdown = self._breakdown(owner_id, event_id, event)
            stamp = updated_fields(owner_id, self._clock())
            batch = self._store.batch()
            for category_id, totals in breakdown.categories.items():
                batch.update(
                    category_path(owner_id, event_id, category_id),
                    {
                        "scheduledAmount": amount_to_document(totals.scheduled),
                        "spentAmount": amount_to_document(totals.spent),
                        **stamp,
                    },
                )
            batch.update(
                event_path(owner_id, event_id),
                {**event_totals_to_document(breakdown.totals), **stamp},
            )
            batch.commit()
        self._logger.info(
            f"Recalculated totals for event {event_id}: "
            f"budgeted={breakdown.totals.total_budgeted_amount} "
            f"scheduled={breakdown.totals.total_scheduled_amount} "
            f"spent={breakdown.totals.total_spent_amount}"
        )
        return breakdown.totals

    def compute_event_totals(self, owner_id: str, event_id: str) -> EventBreakdown:
        """Return the recomputed totals without writing anything."""
        owner_id, event_id = require_event_ids(owner_id, event_id)
        event = self._load_event(owner_id, event_id)
        return self._breakdown(owner_id, event_id, event)

    def add_to_event_totals(
        self,
        owner_id: str,
        event_id: str,
        amounts: TotalsAmounts,
    ) -> EventTotals:
        """Add amount deltas to the event totals.

        Raises:
            ValidationError: If no amount is provided.
        """
        owner_id, event_id = require_event_ids(owner_id, event_id)
        _require_amounts(amounts)
        with self._runner.guard(
            "add to event totals",
            AGGREGATION_ACTION,
            owner_id=owner_id,
            event_id=event_id,
        ):
            current = self._load_totals(owner_id, event_id)
            totals = add_totals(current, amounts)
            self._write_totals(owner_id, event_id, totals)
        return totals

    def subtract_from_event_totals(
        self,
        owner_id: str,
        event_id: str,
        amounts: TotalsAmounts,
    ) -> EventTotals:
        """Subtract amount deltas from the event totals, floored at zero.

        Raises:
            ValidationError: If no amount is provided.
        """
        owner_id, event_id = require_event_ids(owner_id, event_id)
        _require_amounts(amounts)
        with self._runner.guard(
            "subtract from event totals",
            AGGREGATION_ACTION,
            owner_id=owner_id,
            event_id=event_id,
        ):
            current = self._load_totals(owner_id, event_id)
            totals = subtract_totals(current, amounts)
            self._write_totals(owner_id, event_id, totals)
        return totals

    def update_event_totals_complex(
        self,
        owner_id: str,
        event_id: str,
        changes: TotalsChanges,
    ) -> EventTotals:
        """Apply mixed-sign per-field changes to the event totals.

        Empty changes still rewrite the derived percentage and status.
        """
        owner_id, event_id = require_event_ids(owner_id, event_id)
        _require_changes(changes)
        with self._runner.guard(
            "update event totals",
            AGGREGATION_ACTION,
            owner_id=owner_id,
            event_id=event_id,
        ):
            current = self._load_totals(owner_id, event_id)
            totals = apply_totals_changes(current, changes)
            self._write_totals(owner_id, event_id, totals)
        return totals

    def stage_event_totals(
        self,
        batch: WriteBatchPort,
        owner_id: str,
        event_id: str,
        changes: TotalsChanges,
        event: DocumentSnapshot | None = None,
    ) -> EventTotals:
        """Stage a complex totals update into a caller batch.

        Args:
            batch: Batch the event update joins.
            owner_id: Workspace owner id.
            event_id: Event id.
            changes: Per-field changes to apply.
            event: Already loaded event document, read when omitted.

        Returns:
            EventTotals: Totals the event will hold once the batch commits.
        """
        if event is None:
            event = self._load_event(owner_id, event_id)
        totals = apply_totals_changes(
            event_totals_from_document(event.data), changes
        )
        batch.update(
            event_path(owner_id, event_id),
            {
                **event_totals_to_document(totals),
                **updated_fields(owner_id, self._clock()),
            },
        )
        return totals

    def _load_event(self, owner_id: str, event_id: str) -> DocumentSnapshot:
        return require_document(
            self._store, event_path(owner_id, event_id), "Event"
        )

    def _load_totals(self, owner_id: str, event_id: str) -> EventTotals:
        event = self._load_event(owner_id, event_id)
        return event_totals_from_document(event.data)

    def _write_totals(
        self,
        owner_id: str,
        event_id: str,
        totals: EventTotals,
    ) -> None:
        self._store.update(
            event_path(owner_id, event_id),
            {
                **event_totals_to_document(totals),
                **updated_fields(owner_id, self._clock()),
            },
        )

    def _breakdown(
        self,
        owner_id: str,
        event_id: str,
        event: DocumentSnapshot,
    ) -> EventBreakdown:
        categories = [
            category_from_document(snapshot)
            for snapshot in self._store.list_collection(
                categories_collection(owner_id, event_id)
            )
        ]
        expenses = [
            expense_from_document(snapshot)
            for snapshot in self._store.list_collection(
                expenses_collection(owner_id, event_id)
            )
        ]
        current = event_totals_from_document(event.data)
        return compute_event_breakdown(
            categories,
            expenses,
            current_status=current.status,
            logger=self._logger,
        )


def _require_amounts(amounts: TotalsAmounts) -> None:
    if amounts.is_empty:
        raise ValidationError("At least one amount must be provided")
    for label, value in (
        ("Budgeted amount", amounts.budgeted),
        ("Scheduled amount", amounts.scheduled),
        ("Spent amount", amounts.spent),
    ):
        if value is not None:
            require_amount(value, label)


def _require_changes(changes: TotalsChanges) -> None:
    for label, change in (
        ("Budgeted amount", changes.budgeted),
        ("Scheduled amount", changes.scheduled),
        ("Spent amount", changes.spent),
    ):
        if change is None:
            continue
        for value in (change.add, change.subtract):
            if value is not None:
                require_amount(value, label)


__all__ = ["AGGREGATION_ACTION", "EventAggregationService"]
