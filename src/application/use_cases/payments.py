"""Payment use cases.

Payments are embedded in their expense, either as a schedule or as a single
one-off payment. Every operation that changes the paid amount of an expense
adjusts the category and event spent totals by the same delta, in the same
batch as the expense update.
"""

from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
import uuid

from src.application.ports.document_store import DocumentStorePort
from src.application.ports.telemetry import TelemetryPort
from src.application.use_cases.actions import ActionRunner
from src.application.use_cases.category_amounts import CategoryAmountsService
from src.application.use_cases.document_converters import (
    expense_from_document,
    payment_schedule_to_document,
    payment_to_document,
    updated_fields,
)
from src.application.use_cases.document_paths import event_path, expense_path
from src.application.use_cases.dtos import (
    AddPaymentRequest,
    CreatePaymentScheduleRequest,
    CreateSinglePaymentRequest,
    MarkPaymentPaidRequest,
    PaymentInput,
    UpdatePaymentRequest,
)
from src.application.use_cases.event_aggregation import EventAggregationService
from src.application.use_cases.lookups import require_document, require_event_ids
from src.domain.constants import PAYMENT_METHODS
from src.domain.errors import NotFoundError, ValidationError
from src.domain.models import (
    AmountChange,
    AuditStamp,
    Expense,
    Payment,
    TotalsChanges,
)
from src.domain.services.aggregation import compute_expense_paid_amount, paid_amount
from src.domain.services.validation import (
    require_choice,
    require_id,
    require_positive,
    require_text,
)
from src.infrastructure.logging.logger import get_app_logger
from src.utils.time_utils import utc_now


@dataclass(frozen=True)
class _PaymentLocation:
    """Where a payment sits inside its expense."""

    payment: Payment
    index: int | None = None

    @property
    def in_schedule(self) -> bool:
        return self.index is not None


class PaymentService:
    """Create, pay, edit and remove payments embedded in expenses."""

    def __init__(
        self,
        store: DocumentStorePort,
        telemetry: TelemetryPort,
        logger=None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Document store holding the event tree.
            telemetry: Port receiving breadcrumbs and exceptions.
            logger: Optional logger compatible with logging.Logger-like API.
            clock: Optional callable returning the current UTC time.
            id_factory: Optional callable generating payment ids.
        """
        self._store = store
        self._logger = logger or get_app_logger()
        self._clock = clock or utc_now
        self._new_id = id_factory or (lambda: uuid.uuid4().hex)
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

    def create_payment_schedule(
        self,
        request: CreatePaymentScheduleRequest,
    ) -> list[str]:
        """Replace the expense's payments with a new unpaid schedule.

        Returns:
            list[str]: Ids of the scheduled payments, in order.
        """
        return self._store_schedule(request, "create payment schedule")

    def update_payment_schedule(
        self,
        request: CreatePaymentScheduleRequest,
    ) -> list[str]:
        """Rewrite the schedule of an expense.

        Amounts previously paid through the old schedule are subtracted from
        the spent totals.
        """
        return self._store_schedule(request, "update payment schedule")

    def add_payment(self, request: AddPaymentRequest) -> str:
        """Append an unpaid payment to an expense.

        An expense without payments gets the new payment as its one-off
        payment; an existing one-off payment is turned into a schedule.

        Returns:
            str: Id of the new payment.
        """
        owner_id, event_id, expense_id = _require_expense_ids(request)
        payment_input = _validate_payment_input(request.payment)

        with self._runner.guard(
            "add payment",
            "payment.add",
            owner_id=owner_id,
            event_id=event_id,
            expense_id=expense_id,
        ):
            expense = self._load_expense(owner_id, event_id, expense_id)
            now = self._clock()
            payment = self._build_payment(payment_input, owner_id, now)
            fields = updated_fields(owner_id, now)
            if expense.payment_schedule:
                fields["paymentSchedule"] = payment_schedule_to_document(
                    expense.payment_schedule + (payment,)
                )
                fields["hasPaymentSchedule"] = True
            elif expense.one_off_payment is not None:
                fields["paymentSchedule"] = payment_schedule_to_document(
                    (expense.one_off_payment, payment)
                )
                fields["oneOffPayment"] = None
                fields["hasPaymentSchedule"] = True
            else:
                fields["oneOffPayment"] = payment_to_document(payment)
                fields["hasPaymentSchedule"] = True
            self._store.update(expense_path(owner_id, event_id, expense_id), fields)

        self._logger.info(f"Added payment {payment.id} to expense {expense_id}")
        return payment.id

    def create_single_payment(self, request: CreateSinglePaymentRequest) -> str:
        """Record an already-paid payment as the expense's only payment.

        Any previous payments are replaced and their paid amount is taken
        out of the spent totals before the new amount is added.

        Returns:
            str: Id of the new payment.
        """
        owner_id, event_id, expense_id = _require_expense_ids(request)
        name = require_text(request.name, "Payment name")
        amount = require_positive(request.amount, "Payment amount")
        method = require_choice(
            request.payment_method, PAYMENT_METHODS, "Payment method"
        )
        if request.paid_date is None:
            raise ValidationError("Paid date is required")

        with self._runner.guard(
            "create single payment",
            "payment.create.single",
            owner_id=owner_id,
            event_id=event_id,
            expense_id=expense_id,
        ):
            expense = self._load_expense(owner_id, event_id, expense_id)
            now = self._clock()
            payment = Payment(
                id=self._new_id(),
                name=name,
                amount=amount,
                payment_method=method,
                due_date=request.paid_date,
                is_paid=True,
                description=request.description or "",
                paid_date=request.paid_date,
                notes=request.notes or "",
                stamp=AuditStamp(now, owner_id, now, owner_id),
            )
            fields = updated_fields(owner_id, now)
            fields.update(
                {
                    "hasPaymentSchedule": False,
                    "oneOffPayment": payment_to_document(payment),
                    "paymentSchedule": None,
                }
            )
            delta = amount - compute_expense_paid_amount(expense)
            self._commit(owner_id, event_id, expense, fields, delta)

        self._logger.info(
            f"Recorded single payment {payment.id} of {amount} on expense "
            f"{expense_id}"
        )
        return payment.id

    def mark_payment_paid(self, request: MarkPaymentPaidRequest) -> None:
        """Mark a payment as paid and add its amount to the spent totals.

        Marking a payment that is already paid only refreshes its details.
        """
        owner_id, event_id, expense_id = _require_expense_ids(request)
        payment_id = require_id(request.payment_id, "Payment ID")
        if request.paid_date is None or not request.payment_method:
            raise ValidationError("Paid date and payment method are required")
        method = require_choice(
            request.payment_method, PAYMENT_METHODS, "Payment method"
        )

        with self._runner.guard(
            "mark payment as paid",
            "payment.mark.paid",
            owner_id=owner_id,
            event_id=event_id,
            expense_id=expense_id,
            payment_id=payment_id,
        ):
            expense = self._load_expense(owner_id, event_id, expense_id)
            location = _locate_payment(expense, payment_id)
            now = self._clock()
            updated = replace(
                location.payment,
                is_paid=True,
                paid_date=request.paid_date,
                payment_method=method,
                notes=(
                    request.notes
                    if request.notes is not None
                    else location.payment.notes
                ),
                stamp=_touch(location.payment.stamp, owner_id, now),
            )
            fields = _replace_payment_fields(expense, location, updated)
            fields.update(updated_fields(owner_id, now))
            delta = paid_amount(updated) - paid_amount(location.payment)
            self._commit(owner_id, event_id, expense, fields, delta)

        self._logger.info(
            f"Marked payment {payment_id} of expense {expense_id} as paid"
        )

    def clear_all_payments(
        self,
        owner_id: str,
        event_id: str,
        expense_id: str,
    ) -> None:
        """Remove every payment and take their paid amount out of the totals."""
        owner_id, event_id = require_event_ids(owner_id, event_id)
        expense_id = require_id(expense_id, "Expense ID")

        with self._runner.guard(
            "clear payments",
            "payment.clear",
            owner_id=owner_id,
            event_id=event_id,
            expense_id=expense_id,
        ):
            expense = self._load_expense(owner_id, event_id, expense_id)
            paid = compute_expense_paid_amount(expense)
            fields = updated_fields(owner_id, self._clock())
            fields.update(
                {
                    "hasPaymentSchedule": False,
                    "paymentSchedule": None,
                    "oneOffPayment": None,
                }
            )
            self._commit(owner_id, event_id, expense, fields, -paid)

        self._logger.info(
            f"Cleared payments of expense {expense_id} (paid={paid})"
        )

    def delete_payment(
        self,
        owner_id: str,
        event_id: str,
        expense_id: str,
        payment_id: str,
    ) -> None:
        """Remove one payment, subtracting its amount when it was paid."""
        owner_id, event_id = require_event_ids(owner_id, event_id)
        expense_id = require_id(expense_id, "Expense ID")
        payment_id = require_id(payment_id, "Payment ID")

        with self._runner.guard(
            "delete payment",
            "payment.delete",
            owner_id=owner_id,
            event_id=event_id,
            expense_id=expense_id,
            payment_id=payment_id,
        ):
            expense = self._load_expense(owner_id, event_id, expense_id)
            location = _locate_payment(expense, payment_id)
            fields = updated_fields(owner_id, self._clock())
            if location.in_schedule:
                remaining = tuple(
                    payment
                    for index, payment in enumerate(expense.payment_schedule)
                    if index != location.index
                )
                fields["paymentSchedule"] = (
                    payment_schedule_to_document(remaining) if remaining else None
                )
                fields["hasPaymentSchedule"] = bool(remaining)
            else:
                fields["oneOffPayment"] = None
                fields["hasPaymentSchedule"] = False
            delta = -paid_amount(location.payment)
            self._commit(owner_id, event_id, expense, fields, delta)

        self._logger.info(f"Deleted payment {payment_id} of expense {expense_id}")

    def update_payment(self, request: UpdatePaymentRequest) -> None:
        """Update payment fields, adjusting spent totals by the paid delta."""
        owner_id, event_id, expense_id = _require_expense_ids(request)
        payment_id = require_id(request.payment_id, "Payment ID")
        changes = _payment_changes(request)
        if not changes:
            raise ValidationError("At least one field must be provided")

        with self._runner.guard(
            "update payment",
            "payment.update",
            owner_id=owner_id,
            event_id=event_id,
            expense_id=expense_id,
            payment_id=payment_id,
        ):
            expense = self._load_expense(owner_id, event_id, expense_id)
            location = _locate_payment(expense, payment_id)
            now = self._clock()
            if changes.get("is_paid") is False and "paid_date" not in changes:
                changes["paid_date"] = None
            updated = replace(
                location.payment,
                **changes,
                stamp=_touch(location.payment.stamp, owner_id, now),
            )
            fields = _replace_payment_fields(expense, location, updated)
            fields.update(updated_fields(owner_id, now))
            delta = paid_amount(updated) - paid_amount(location.payment)
            self._commit(owner_id, event_id, expense, fields, delta)

        self._logger.info(
            f"Updated payment {payment_id} of expense {expense_id}: "
            f"{', '.join(sorted(changes))}"
        )

    def _store_schedule(
        self,
        request: CreatePaymentScheduleRequest,
        operation: str,
    ) -> list[str]:
        owner_id, event_id, expense_id = _require_expense_ids(request)
        if not request.payments:
            raise ValidationError("At least one payment is required")
        inputs = [_validate_payment_input(item) for item in request.payments]

        with self._runner.guard(
            operation,
            "payment.schedule",
            owner_id=owner_id,
            event_id=event_id,
            expense_id=expense_id,
        ):
            expense = self._load_expense(owner_id, event_id, expense_id)
            now = self._clock()
            schedule = tuple(
                self._build_payment(item, owner_id, now) for item in inputs
            )
            fields = updated_fields(owner_id, now)
            fields.update(
                {
                    "hasPaymentSchedule": True,
                    "paymentSchedule": payment_schedule_to_document(schedule),
                    "oneOffPayment": None,
                }
            )
            previously_paid = compute_expense_paid_amount(expense)
            self._commit(owner_id, event_id, expense, fields, -previously_paid)

        self._logger.info(
            f"Stored schedule of {len(schedule)} payments on expense {expense_id}"
        )
        return [payment.id for payment in schedule]

    def _build_payment(
        self,
        payment_input: PaymentInput,
        owner_id: str,
        now: datetime,
    ) -> Payment:
        return Payment(
            id=self._new_id(),
            name=payment_input.name.strip(),
            amount=payment_input.amount,
            payment_method=payment_input.payment_method,
            due_date=payment_input.due_date,
            is_paid=False,
            description=payment_input.description or "",
            notes=payment_input.notes or "",
            stamp=AuditStamp(now, owner_id, now, owner_id),
        )

    def _load_expense(self, owner_id: str, event_id: str, expense_id: str) -> Expense:
        require_document(self._store, event_path(owner_id, event_id), "Event")
        return expense_from_document(
            require_document(
                self._store,
                expense_path(owner_id, event_id, expense_id),
                "Expense",
            )
        )

    def _commit(
        self,
        owner_id: str,
        event_id: str,
        expense: Expense,
        fields: dict,
        spent_delta: Decimal,
    ) -> None:
        """Write the expense and apply the spent delta in one batch."""
        batch = self._store.batch()
        batch.update(expense_path(owner_id, event_id, expense.id), fields)
        change = AmountChange.of(spent_delta)
        if change is not None:
            self._categories.adjust_category_amounts(
                owner_id,
                event_id,
                expense.category.id,
                spent=change,
                batch=batch,
                missing_ok=True,
            )
            self._aggregation.stage_event_totals(
                batch,
                owner_id,
                event_id,
                TotalsChanges(spent=change),
            )
        batch.commit()


def _require_expense_ids(request) -> tuple[str, str, str]:
    owner_id, event_id = require_event_ids(request.owner_id, request.event_id)
    return owner_id, event_id, require_id(request.expense_id, "Expense ID")


def _validate_payment_input(payment_input: PaymentInput) -> PaymentInput:
    name = require_text(payment_input.name, "Payment name")
    amount = require_positive(payment_input.amount, "Payment amount")
    method = require_choice(
        payment_input.payment_method, PAYMENT_METHODS, "Payment method"
    )
    if payment_input.due_date is None:
        raise ValidationError("Due date is required")
    return replace(payment_input, name=name, amount=amount, payment_method=method)


def _payment_changes(request: UpdatePaymentRequest) -> dict:
    changes: dict = {}
    if request.name is not None:
        changes["name"] = require_text(request.name, "Payment name")
    if request.description is not None:
        changes["description"] = request.description
    if request.amount is not None:
        changes["amount"] = require_positive(request.amount, "Payment amount")
    if request.payment_method is not None:
        changes["payment_method"] = require_choice(
            request.payment_method, PAYMENT_METHODS, "Payment method"
        )
    if request.is_paid is not None:
        changes["is_paid"] = bool(request.is_paid)
    if request.due_date is not None:
        changes["due_date"] = request.due_date
    if request.paid_date is not None:
        changes["paid_date"] = request.paid_date
    if request.notes is not None:
        changes["notes"] = request.notes
    return changes


def _locate_payment(expense: Expense, payment_id: str) -> _PaymentLocation:
    for index, payment in enumerate(expense.payment_schedule or ()):
        if payment.id == payment_id:
            return _PaymentLocation(payment=payment, index=index)
    one_off = expense.one_off_payment
    if one_off is not None and one_off.id == payment_id:
        return _PaymentLocation(payment=one_off)
    raise NotFoundError("Payment not found")


def _replace_payment_fields(
    expense: Expense,
    location: _PaymentLocation,
    updated: Payment,
) -> dict:
    if location.in_schedule:
        schedule = list(expense.payment_schedule)
        schedule[location.index] = updated
        return {"paymentSchedule": payment_schedule_to_document(tuple(schedule))}
    return {"oneOffPayment": payment_to_document(updated)}


def _touch(stamp: AuditStamp, user_id: str, now: datetime) -> AuditStamp:
    return replace(stamp, updated_at=now, updated_by=user_id)


__all__ = ["PaymentService"]
