"""Use cases repairing and checking stored event totals."""

from dataclasses import dataclass, field
from decimal import Decimal

from src.application.ports.document_store import DocumentStorePort
from src.application.use_cases.document_converters import (
    category_from_document,
    event_totals_from_document,
)
from src.application.use_cases.document_paths import (
    WORKSPACES,
    categories_collection,
    events_collection,
)
from src.application.use_cases.event_aggregation import EventAggregationService
from src.domain.errors import BudgetTrackerError
from src.infrastructure.logging.logger import get_app_logger


@dataclass(frozen=True)
class RecalculationResult:
    """Summary of a recalculation run.

    Attributes:
        events_processed: Number of events visited.
        events_updated: Number of events whose totals were rewritten.
        failures: Error message per ``owner/event`` key.
    """

    events_processed: int
    events_updated: int
    failures: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TotalsDrift:
    """Difference between a stored and a recomputed total.

    ``category_id`` is None for event level totals.
    """

    owner_id: str
    event_id: str
    field: str
    stored: object
    expected: object
    category_id: str | None = None


def _owner_ids(store: DocumentStorePort, owner_id: str | None) -> list[str]:
    if owner_id:
        return [owner_id]
    return [snapshot.id for snapshot in store.list_collection(WORKSPACES)]


class RecalculateAllEventTotalsUseCase:
    """Rebuild the totals of every event, collecting per-event failures."""

    def __init__(
        self,
        store: DocumentStorePort,
        aggregation: EventAggregationService,
        logger=None,
    ) -> None:
        self._store = store
        self._aggregation = aggregation
        self._logger = logger or get_app_logger()

    def run(self, owner_id: str | None = None) -> RecalculationResult:
        """Recompute totals for one owner's events or for every owner.

        Args:
            owner_id: Optional owner to restrict the run to.

        Returns:
            RecalculationResult: Counts and failures of the run.
        """
        processed = 0
        updated = 0
        failures: dict[str, str] = {}
        for owner in _owner_ids(self._store, owner_id):
            for event in self._store.list_collection(events_collection(owner)):
                processed += 1
                try:
                    self._aggregation.update_event_totals(owner, event.id)
                except BudgetTrackerError as exc:
                    failures[f"{owner}/{event.id}"] = str(exc)
                    self._logger.error(
                        f"Failed to recalculate event {event.id} of {owner}: {exc}"
                    )
                    continue
                updated += 1
        self._logger.info(
            f"Recalculated {updated}/{processed} events ({len(failures)} failed)"
        )
        return RecalculationResult(
            events_processed=processed,
            events_updated=updated,
            failures=failures,
        )


class ValidateEventTotalsUseCase:
    """Compare stored totals with recomputed ones without writing."""

    def __init__(
        self,
        store: DocumentStorePort,
        aggregation: EventAggregationService,
        logger=None,
    ) -> None:
        self._store = store
        self._aggregation = aggregation
        self._logger = logger or get_app_logger()

    def execute(self, owner_id: str | None = None) -> list[TotalsDrift]:
        """Return every drift found for one owner or for every owner."""
        drifts: list[TotalsDrift] = []
        for owner in _owner_ids(self._store, owner_id):
            for event in self._store.list_collection(events_collection(owner)):
                drifts.extend(self._check_event(owner, event.id, event.data))
        if drifts:
            self._logger.warning(f"Found {len(drifts)} drifted totals")
        else:
            self._logger.info("All event totals are consistent")
        return drifts

    def _check_event(self, owner_id: str, event_id: str, data: dict) -> list[TotalsDrift]:
        breakdown = self._aggregation.compute_event_totals(owner_id, event_id)
        stored = event_totals_from_document(data)
        expected = breakdown.totals
        drifts = [
            TotalsDrift(owner_id, event_id, name, stored_value, expected_value)
            for name, stored_value, expected_value in (
                (
                    "totalBudgetedAmount",
                    stored.total_budgeted_amount,
                    expected.total_budgeted_amount,
                ),
                (
                    "totalScheduledAmount",
                    stored.total_scheduled_amount,
                    expected.total_scheduled_amount,
                ),
                (
                    "totalSpentAmount",
                    stored.total_spent_amount,
                    expected.total_spent_amount,
                ),
                (
                    "spentPercentage",
                    stored.spent_percentage,
                    expected.spent_percentage,
                ),
                ("status", stored.status, expected.status),
            )
            if stored_value != expected_value
        ]
        for snapshot in self._store.list_collection(
            categories_collection(owner_id, event_id)
        ):
            category = category_from_document(snapshot)
            totals = breakdown.categories.get(category.id)
            if totals is None:
                continue
            drifts.extend(
                TotalsDrift(
                    owner_id,
                    event_id,
                    name,
                    stored_value,
                    expected_value,
                    category_id=category.id,
                )
                for name, stored_value, expected_value in (
                    ("scheduledAmount", category.scheduled_amount, totals.scheduled),
                    ("spentAmount", category.spent_amount, totals.spent),
                )
                if Decimal(stored_value) != Decimal(expected_value)
            )
        return drifts


__all__ = [
    "RecalculationResult",
    "TotalsDrift",
    "RecalculateAllEventTotalsUseCase",
    "ValidateEventTotalsUseCase",
]
