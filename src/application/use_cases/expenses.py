"""Expense use cases keeping category and event totals in sync."""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from src.application.ports.document_store import DocumentSnapshot, DocumentStorePort
from src.application.ports.telemetry import TelemetryPort
from src.application.use_cases.actions import ActionRunner
from src.application.use_cases.attachments import AttachmentCleaner
from src.application.use_cases.category_amounts import CategoryAmountsService
from src.application.use_cases.document_converters import (
    amount_to_document,
    category_snapshot_to_document,
    datetime_to_document,
    expense_from_document,
    expense_to_document,
    updated_fields,
    vendor_to_document,
)
from src.application.use_cases.document_paths import (
    category_path,
    event_path,
    expense_path,
    expenses_collection,
)
from src.application.use_cases.dtos import AddExpenseRequest, UpdateExpenseRequest
from src.application.use_cases.event_aggregation import EventAggregationService
from src.application.use_cases.lookups import require_document, require_event_ids
from src.domain.errors import ValidationError
from src.domain.models import (
    AmountChange,
    AuditStamp,
    CategorySnapshot,
    Expense,
    TotalsChanges,
    Vendor,
)
from src.domain.services.aggregation import compute_expense_paid_amount
from src.domain.services.validation import (
    require_id,
    require_positive,
    require_text,
)
from src.infrastructure.logging.logger import get_app_logger
from src.utils.decimal_utils import ZERO
from src.utils.time_utils import EPOCH, utc_now


class ExpenseService:
    """Create, update, delete and read expenses of an event."""

    def __init__(
        self,
        store: DocumentStorePort,
        telemetry: TelemetryPort,
        attachments: AttachmentCleaner | None = None,
        logger=None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Document store holding the event tree.
            telemetry: Port receiving breadcrumbs and exceptions.
            attachments: Optional cleaner removing files of deleted expenses.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional callable returning the current UTC time.
        """
        self._store = store
        self._attachments = attachments
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
        self._categories = CategoryAmountsService(
            store, logger=self._logger, clock=self._clock
        )

    def add_expense(self, request: AddExpenseRequest) -> str:
        """Create an expense and add its amount to the scheduled totals.

        Returns:
            str: Id of the new expense.
        """
        owner_id, event_id = require_event_ids(request.owner_id, request.event_id)
        name = require_text(request.name, "Expense name")
        amount = require_positive(request.amount, "Expense amount")
        category_id = require_id(request.category_id, "Category ID")
        currency = require_text(request.currency, "Currency")

        with self._runner.guard(
            "add expense",
            "expense.add",
            owner_id=owner_id,
            event_id=event_id,
            category_id=category_id,
        ):
            event = require_document(
                self._store, event_path(owner_id, event_id), "Event"
            )
            category = require_document(
                self._store,
                category_path(owner_id, event_id, category_id),
                "Category",
            )
            now = self._clock()
            expense_id = self._store.new_id()
            expense = Expense(
                id=expense_id,
                name=name,
                amount=amount,
                currency=currency,
                category=_snapshot_category(
                    category,
                    fallback_name=request.category_name,
                    fallback_color=request.category_color,
                    fallback_icon=request.category_icon,
                ),
                description=request.description or "",
                vendor=request.vendor or Vendor(),
                date=request.date,
                notes=request.notes or "",
                tags=tuple(request.tags),
                attachments=tuple(request.attachments),
                stamp=AuditStamp(now, owner_id, now, owner_id),
            )
            batch = self._store.batch()
            batch.set(
                expense_path(owner_id, event_id, expense_id),
                expense_to_document(expense),
            )
            self._categories.adjust_category_amounts(
                owner_id,
                event_id,
                category_id,
                scheduled=AmountChange(add=amount),
                batch=batch,
            )
            self._aggregation.stage_event_totals(
                batch,
                owner_id,
                event_id,
                TotalsChanges(scheduled=AmountChange(add=amount)),
                event=event,
            )
            batch.commit()

        self._logger.info(
            f"Added expense {expense_id} ({amount}) to category {category_id} "
            f"of event {event_id}"
        )
        return expense_id

    def update_expense(self, request: UpdateExpenseRequest) -> None:
        """Update an expense, moving amounts when amount or category change."""
        owner_id, event_id = require_event_ids(request.owner_id, request.event_id)
        expense_id = require_id(request.expense_id, "Expense ID")
        if not request.changed_fields():
            raise ValidationError("At least one field must be provided")
        if request.name is not None:
            require_text(request.name, "Expense name")
        if request.amount is not None:
            require_positive(request.amount, "Expense amount")
        if request.currency is not None:
            require_text(request.currency, "Currency")
        if request.category_id is not None:
            require_id(request.category_id, "Category ID")

        with self._runner.guard(
            "update expense",
            "expense.update",
            owner_id=owner_id,
            event_id=event_id,
            expense_id=expense_id,
        ):
            path = expense_path(owner_id, event_id, expense_id)
            current = expense_from_document(
                require_document(self._store, path, "Expense")
            )
            fields = _expense_update_fields(request)
            fields.update(updated_fields(owner_id, self._clock()))

            old_amount = current.amount
            new_amount = (
                require_positive(request.amount, "Expense amount")
                if request.amount is not None
                else old_amount
            )
            old_category_id = current.category.id
            new_category_id = (
                request.category_id.strip()
                if request.category_id is not None
                else old_category_id
            )
            amount_changed = new_amount != old_amount
            category_changed = new_category_id != old_category_id

            if not amount_changed and not category_changed:
                self._store.update(path, fields)
                self._logger.info(f"Updated expense {expense_id}")
                return

            batch = self._store.batch()
            if category_changed:
                new_category = require_document(
                    self._store,
                    category_path(owner_id, event_id, new_category_id),
                    "Category",
                )
                fields["category"] = category_snapshot_to_document(
                    _snapshot_category(new_category)
                )
                self._move_between_categories(
                    batch,
                    owner_id,
                    event_id,
                    current,
                    new_category_id,
                    new_amount,
                )
            else:
                self._categories.adjust_category_amounts(
                    owner_id,
                    event_id,
                    old_category_id,
                    scheduled=AmountChange.of(new_amount - old_amount),
                    batch=batch,
                    missing_ok=True,
                )
            batch.update(path, fields)
            self._aggregation.stage_event_totals(
                batch,
                owner_id,
                event_id,
                TotalsChanges(scheduled=AmountChange.of(new_amount - old_amount)),
            )
            batch.commit()

        self._logger.info(
            f"Updated expense {expense_id}: amount {old_amount} -> {new_amount}, "
            f"category {old_category_id} -> {new_category_id}"
        )

    def delete_expense(self, owner_id: str, event_id: str, expense_id: str) -> None:
        """Delete an expense and subtract its scheduled and paid amounts.

        Attachments are removed first on a best-effort basis.
        """
        owner_id, event_id = require_event_ids(owner_id, event_id)
        expense_id = require_id(expense_id, "Expense ID")

        with self._runner.guard(
            "delete expense",
            "expense.delete",
            owner_id=owner_id,
            event_id=event_id,
            expense_id=expense_id,
        ):
            event = require_document(
                self._store, event_path(owner_id, event_id), "Event"
            )
            path = expense_path(owner_id, event_id, expense_id)
            expense = expense_from_document(
                require_document(self._store, path, "Expense")
            )
            paid = compute_expense_paid_amount(expense)
            if self._attachments is not None:
                self._attachments.delete_all(expense_attachment_urls(expense))

            batch = self._store.batch()
            batch.delete(path)
            self._categories.adjust_category_amounts(
                owner_id,
                event_id,
                expense.category.id,
                scheduled=AmountChange(subtract=expense.amount),
                spent=AmountChange(subtract=paid),
                batch=batch,
                missing_ok=True,
            )
            self._aggregation.stage_event_totals(
                batch,
                owner_id,
                event_id,
                TotalsChanges(
                    scheduled=AmountChange(subtract=expense.amount),
                    spent=AmountChange(subtract=paid),
                ),
                event=event,
            )
            batch.commit()

        self._logger.info(
            f"Deleted expense {expense_id} (amount={expense.amount}, paid={paid})"
        )

    def fetch_expenses(self, owner_id: str, event_id: str) -> list[Expense]:
        """Return the expenses of an event, newest first."""
        owner_id, event_id = require_event_ids(owner_id, event_id)
        expenses = [
            expense_from_document(snapshot)
            for snapshot in self._store.list_collection(
                expenses_collection(owner_id, event_id)
            )
        ]
        return sorted(
            expenses,
            key=lambda expense: (expense.date is not None, expense.date or EPOCH),
            reverse=True,
        )

    def fetch_expense(self, owner_id: str, event_id: str, expense_id: str) -> Expense:
        """Return a single expense.

        Raises:
            NotFoundError: If the expense does not exist.
        """
        owner_id, event_id = require_event_ids(owner_id, event_id)
        expense_id = require_id(expense_id, "Expense ID")
        return expense_from_document(
            require_document(
                self._store,
                expense_path(owner_id, event_id, expense_id),
                "Expense",
            )
        )

    def _move_between_categories(
        self,
        batch,
        owner_id: str,
        event_id: str,
        expense: Expense,
        new_category_id: str,
        new_amount,
    ) -> None:
        paid = compute_expense_paid_amount(expense)
        spent_out = AmountChange(subtract=paid) if paid > ZERO else None
        spent_in = AmountChange(add=paid) if paid > ZERO else None
        self._categories.adjust_category_amounts(
            owner_id,
            event_id,
            expense.category.id,
            scheduled=AmountChange(subtract=expense.amount),
            spent=spent_out,
            batch=batch,
            missing_ok=True,
        )
        self._categories.adjust_category_amounts(
            owner_id,
            event_id,
            new_category_id,
            scheduled=AmountChange(add=new_amount),
            spent=spent_in,
            batch=batch,
        )


def expense_attachment_urls(expense: Expense) -> list[str]:
    """Return the attachment URLs of an expense and of its payments."""
    urls = list(expense.attachments)
    payments = list(expense.payment_schedule or ())
    if expense.one_off_payment is not None:
        payments.append(expense.one_off_payment)
    for payment in payments:
        urls.extend(payment.attachments)
    return urls


def _snapshot_category(
    category: DocumentSnapshot,
    fallback_name: str = "",
    fallback_color: str = "",
    fallback_icon: str = "",
) -> CategorySnapshot:
    data = category.data
    return CategorySnapshot(
        id=category.id,
        name=data.get("name") or fallback_name,
        color=data.get("color") or fallback_color,
        icon=data.get("icon") or fallback_icon,
    )


def _expense_update_fields(request: UpdateExpenseRequest) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if request.name is not None:
        fields["name"] = request.name.strip()
    if request.description is not None:
        fields["description"] = request.description
    if request.amount is not None:
        fields["amount"] = amount_to_document(
            require_positive(request.amount, "Expense amount")
        )
    if request.currency is not None:
        fields["currency"] = request.currency.strip()
    if request.vendor is not None:
        fields["vendor"] = vendor_to_document(request.vendor)
    if request.date is not None:
        fields["date"] = datetime_to_document(request.date)
    if request.notes is not None:
        fields["notes"] = request.notes
    if request.tags is not None:
        fields["tags"] = list(request.tags)
    if request.attachments is not None:
        fields["attachments"] = list(request.attachments)
    return fields


__all__ = ["ExpenseService", "expense_attachment_urls"]
