"""Pure aggregation rules for event, category and expense amounts."""

from collections.abc import Iterable
from decimal import Decimal
from logging import Logger

from src.domain.models import (
    AmountChange,
    Category,
    CategoryTotals,
    EventBreakdown,
    EventStatus,
    EventTotals,
    Expense,
    Payment,
    TotalsAmounts,
    TotalsChanges,
)
from src.domain.services.budget_status import build_event_totals
from src.utils.decimal_utils import ZERO, coerce_decimal, floor_at_zero


def paid_amount(payment: Payment | None) -> Decimal:
    """Return the amount a payment contributes to spent totals."""
    if payment is None or not payment.is_paid:
        return ZERO
    return payment.amount


def compute_expense_paid_amount(expense: Expense) -> Decimal:
    """Return the total paid amount of an expense.

    The schedule wins when present; otherwise the one-off payment counts
    when it is paid.
    """
    if expense.payment_schedule is not None:
        return sum(
            (paid_amount(payment) for payment in expense.payment_schedule),
            start=ZERO,
        )
    return paid_amount(expense.one_off_payment)


def apply_amount_change(
    current: Decimal,
    change: AmountChange | None,
) -> Decimal:
    """Apply ``current + add - subtract`` floored at zero."""
    if change is None:
        return current
    return floor_at_zero(current + change.net)


def add_totals(current: EventTotals, amounts: TotalsAmounts) -> EventTotals:
    """Add deltas to event totals; missing fields count as zero."""
    return build_event_totals(
        current.total_budgeted_amount + coerce_decimal(amounts.budgeted),
        current.total_scheduled_amount + coerce_decimal(amounts.scheduled),
        current.total_spent_amount + coerce_decimal(amounts.spent),
        current_status=current.status,
    )


def subtract_totals(
    current: EventTotals,
    amounts: TotalsAmounts,
) -> EventTotals:
    """Subtract deltas from event totals, flooring every total at zero."""
    return build_event_totals(
        floor_at_zero(
            current.total_budgeted_amount - coerce_decimal(amounts.budgeted)
        ),
        floor_at_zero(
            current.total_scheduled_amount - coerce_decimal(amounts.scheduled)
        ),
        floor_at_zero(current.total_spent_amount - coerce_decimal(amounts.spent)),
        current_status=current.status,
    )


def apply_totals_changes(
    current: EventTotals,
    changes: TotalsChanges,
) -> EventTotals:
    """Apply per-field mixed-sign changes to event totals."""
    return build_event_totals(
        apply_amount_change(current.total_budgeted_amount, changes.budgeted),
        apply_amount_change(current.total_scheduled_amount, changes.scheduled),
        apply_amount_change(current.total_spent_amount, changes.spent),
        current_status=current.status,
    )


def compute_event_breakdown(
    categories: Iterable[Category],
    expenses: Iterable[Expense],
    current_status: EventStatus | None = None,
    logger: Logger | None = None,
) -> EventBreakdown:
    """Recompute category and event totals from scratch.

    Args:
        categories: Every category of the event.
        expenses: Every expense of the event.
        current_status: Stored event status, kept when ``completed``.
        logger: Optional logger used to report orphan expenses.

    Returns:
        EventBreakdown: Event totals, per-category totals and the ids of
        expenses whose category no longer exists.
    """
    accumulators: dict[str, CategoryTotals] = {
        category.id: CategoryTotals(budgeted=category.budgeted_amount)
        for category in categories
    }
    orphans: list[str] = []
    for expense in expenses:
        accumulator = accumulators.get(expense.category.id)
        if accumulator is None:
            orphans.append(expense.id)
            continue
        accumulator.scheduled += expense.amount
        accumulator.spent += compute_expense_paid_amount(expense)

    if orphans and logger is not None:
        logger.warning(
            f"Ignoring {len(orphans)} expenses with unknown categories: "
            f"{', '.join(orphans)}"
        )

    totals = build_event_totals(
        sum((acc.budgeted for acc in accumulators.values()), start=ZERO),
        sum((acc.scheduled for acc in accumulators.values()), start=ZERO),
        sum((acc.spent for acc in accumulators.values()), start=ZERO),
        current_status=current_status,
    )
    return EventBreakdown(
        totals=totals,
        categories=accumulators,
        orphan_expense_ids=tuple(orphans),
    )


__all__ = [
    "paid_amount",
    "compute_expense_paid_amount",
    "apply_amount_change",
    "add_totals",
    "subtract_totals",
    "apply_totals_changes",
    "compute_event_breakdown",
]
