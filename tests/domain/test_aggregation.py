"""Tests for the pure aggregation rules."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

from src.domain.models import (
    AmountChange,
    Category,
    CategorySnapshot,
    EventStatus,
    Expense,
    Payment,
    TotalsAmounts,
    TotalsChanges,
)
from src.domain.services.aggregation import (
    add_totals,
    apply_amount_change,
    apply_totals_changes,
    compute_event_breakdown,
    compute_expense_paid_amount,
    subtract_totals,
)
from src.domain.services.budget_status import build_event_totals

DUE = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _payment(payment_id, amount, is_paid):
    return Payment(
        id=payment_id,
        name=payment_id,
        amount=Decimal(amount),
        payment_method="cash",
        due_date=DUE,
        is_paid=is_paid,
    )


def _expense(expense_id, category_id, amount, schedule=None, one_off=None):
    return Expense(
        id=expense_id,
        name=expense_id,
        amount=Decimal(amount),
        currency="USD",
        category=CategorySnapshot(id=category_id),
        payment_schedule=schedule,
        one_off_payment=one_off,
    )


def _category(category_id, budgeted):
    return Category(
        id=category_id,
        name=category_id,
        budgeted_amount=Decimal(budgeted),
        scheduled_amount=Decimal("999"),
        spent_amount=Decimal("999"),
        color="#000000",
        icon="x",
    )


def test_paid_amount_sums_paid_schedule_entries():
    expense = _expense(
        "e1",
        "c1",
        "300",
        schedule=(
            _payment("p1", "100", True),
            _payment("p2", "100", False),
            _payment("p3", "50", True),
        ),
    )

    assert compute_expense_paid_amount(expense) == Decimal("150")


def test_paid_amount_ignores_one_off_when_schedule_present():
    expense = _expense(
        "e1",
        "c1",
        "300",
        schedule=(_payment("p1", "100", False),),
        one_off=_payment("p2", "300", True),
    )

    assert compute_expense_paid_amount(expense) == Decimal("0")


def test_paid_amount_uses_paid_one_off_payment():
    assert compute_expense_paid_amount(
        _expense("e1", "c1", "300", one_off=_payment("p", "300", True))
    ) == Decimal("300")
    assert compute_expense_paid_amount(
        _expense("e1", "c1", "300", one_off=_payment("p", "300", False))
    ) == Decimal("0")
    assert compute_expense_paid_amount(_expense("e1", "c1", "300")) == Decimal("0")


def test_apply_amount_change_floors_at_zero():
    assert apply_amount_change(Decimal("10"), None) == Decimal("10")
    assert apply_amount_change(
        Decimal("10"), AmountChange(add=Decimal("5"), subtract=Decimal("2"))
    ) == Decimal("13")
    assert apply_amount_change(
        Decimal("10"), AmountChange(subtract=Decimal("50"))
    ) == Decimal("0")


def test_add_totals_treats_missing_fields_as_zero():
    current = build_event_totals(1000, 200, 100)

    totals = add_totals(current, TotalsAmounts(spent=Decimal("700")))

    assert totals.total_budgeted_amount == Decimal("1000")
    assert totals.total_scheduled_amount == Decimal("200")
    assert totals.total_spent_amount == Decimal("800")
    assert totals.status == EventStatus.ON_TRACK


def test_subtract_totals_never_goes_negative():
    totals = build_event_totals(100, 100, 100)
    for _ in range(3):
        totals = subtract_totals(
            totals,
            TotalsAmounts(
                budgeted=Decimal("70"),
                scheduled=Decimal("70"),
                spent=Decimal("70"),
            ),
        )
        assert totals.total_budgeted_amount >= 0
        assert totals.total_scheduled_amount >= 0
        assert totals.total_spent_amount >= 0

    assert totals.total_spent_amount == Decimal("0")


def test_apply_totals_changes_mixes_signs():
    current = build_event_totals(1000, 500, 100)

    totals = apply_totals_changes(
        current,
        TotalsChanges(
            budgeted=AmountChange(add=Decimal("100")),
            scheduled=AmountChange(add=Decimal("50"), subtract=Decimal("300")),
        ),
    )

    assert totals.total_budgeted_amount == Decimal("1100")
    assert totals.total_scheduled_amount == Decimal("250")
    assert totals.total_spent_amount == Decimal("100")


def test_breakdown_recomputes_from_children_and_keeps_budgets():
    categories = [_category("venue", "1000"), _category("food", "500")]
    expenses = [
        _expense("e1", "venue", "600", one_off=_payment("p1", "600", True)),
        _expense(
            "e2",
            "food",
            "300",
            schedule=(_payment("p2", "100", True), _payment("p3", "200", False)),
        ),
    ]

    breakdown = compute_event_breakdown(categories, expenses)

    assert breakdown.categories["venue"].budgeted == Decimal("1000")
    assert breakdown.categories["venue"].scheduled == Decimal("600")
    assert breakdown.categories["venue"].spent == Decimal("600")
    assert breakdown.categories["food"].scheduled == Decimal("300")
    assert breakdown.categories["food"].spent == Decimal("100")
    assert breakdown.totals.total_budgeted_amount == Decimal("1500")
    assert breakdown.totals.total_scheduled_amount == Decimal("900")
    assert breakdown.totals.total_spent_amount == Decimal("700")
    assert breakdown.totals.spent_percentage == 47
    assert breakdown.totals.status == EventStatus.UNDER_BUDGET
    assert breakdown.orphan_expense_ids == ()


def test_breakdown_ignores_and_logs_orphan_expenses():
    logger = MagicMock()

    breakdown = compute_event_breakdown(
        [_category("venue", "100")],
        [_expense("lost", "gone", "50")],
        logger=logger,
    )

    assert breakdown.orphan_expense_ids == ("lost",)
    assert breakdown.totals.total_scheduled_amount == Decimal("0")
    logger.warning.assert_called_once()


def test_breakdown_keeps_completed_status():
    breakdown = compute_event_breakdown(
        [_category("venue", "100")],
        [_expense("e1", "venue", "50", one_off=_payment("p", "500", True))],
        current_status=EventStatus.COMPLETED,
    )

    assert breakdown.totals.status == EventStatus.COMPLETED
