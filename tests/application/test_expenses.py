"""Tests for the expense use cases."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from conftest import NOW, OWNER
from src.application.use_cases.document_paths import category_path, expense_path
from src.application.use_cases.dtos import (
    AddExpenseRequest,
    AddPaymentRequest,
    MarkPaymentPaidRequest,
    PaymentInput,
    UpdateExpenseRequest,
)
from src.application.use_cases.expenses import ExpenseService, expense_attachment_urls
from src.domain.errors import NotFoundError, ValidationError
from src.domain.models import Vendor

DUE = datetime(2024, 7, 1, tzinfo=timezone.utc)


def _request(wedding, category_id, amount="500", **overrides):
    values = dict(
        owner_id=OWNER,
        event_id=wedding.event_id,
        name="Reception hall",
        amount=Decimal(amount),
        category_id=category_id,
        currency="USD",
    )
    values.update(overrides)
    return AddExpenseRequest(**values)


def _pay_one_off(services, wedding, expense_id, amount):
    payment_id = services.payments.add_payment(
        AddPaymentRequest(
            owner_id=OWNER,
            event_id=wedding.event_id,
            expense_id=expense_id,
            payment=PaymentInput("Full", Decimal(amount), "bank-transfer", DUE),
        )
    )
    services.payments.mark_payment_paid(
        MarkPaymentPaidRequest(
            owner_id=OWNER,
            event_id=wedding.event_id,
            expense_id=expense_id,
            payment_id=payment_id,
            paid_date=DUE,
            payment_method="bank-transfer",
        )
    )
    return payment_id


def test_add_then_delete_restores_totals(services, wedding, read):
    before_category = read.category(wedding.event_id, wedding.venue)
    before_event = read.event_totals(wedding.event_id)

    expense_id = services.expenses.add_expense(_request(wedding, wedding.venue))

    assert read.category(wedding.event_id, wedding.venue).scheduled == (
        before_category.scheduled + 500
    )
    assert read.event_totals(wedding.event_id).scheduled == (
        before_event.scheduled + 500
    )

    services.expenses.delete_expense(OWNER, wedding.event_id, expense_id)

    assert read.category(wedding.event_id, wedding.venue) == before_category
    assert read.event_totals(wedding.event_id) == before_event


def test_paid_expense_delete_subtracts_scheduled_and_spent(services, wedding, read):
    expense_id = services.expenses.add_expense(_request(wedding, wedding.venue))
    _pay_one_off(services, wedding, expense_id, "500")

    venue = read.category(wedding.event_id, wedding.venue)
    totals = read.event_totals(wedding.event_id)
    assert (venue.scheduled, venue.spent) == (Decimal("500"), Decimal("500"))
    assert (totals.scheduled, totals.spent) == (Decimal("500"), Decimal("500"))

    services.expenses.delete_expense(OWNER, wedding.event_id, expense_id)

    venue = read.category(wedding.event_id, wedding.venue)
    totals = read.event_totals(wedding.event_id)
    assert (venue.scheduled, venue.spent) == (Decimal("0"), Decimal("0"))
    assert (totals.scheduled, totals.spent) == (Decimal("0"), Decimal("0"))


def test_add_expense_snapshots_live_category(services, wedding, store):
    expense_id = services.expenses.add_expense(
        _request(
            wedding,
            wedding.venue,
            category_name="Ignored",
            vendor=Vendor(name="Grand Hall"),
            tags=("deposit",),
        )
    )

    data = store.get(expense_path(OWNER, wedding.event_id, expense_id)).data
    assert data["category"] == {
        "id": wedding.venue,
        "name": "Venue",
        "color": "#059669",
        "icon": "🏛️",
    }
    assert data["amount"] == "500"
    assert data["vendor"]["name"] == "Grand Hall"
    assert data["tags"] == ["deposit"]
    assert data["createdBy"] == OWNER
    assert data["createdAt"] == NOW.isoformat()
    assert data["hasPaymentSchedule"] is False
    assert data["oneOffPayment"] is None


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"name": "   "}, "Expense name is required"),
        ({"amount": Decimal("0")}, "Expense amount must be greater than 0"),
        ({"amount": Decimal("-5")}, "Expense amount must be greater than 0"),
        ({"amount": "NaN"}, "Expense amount must be a number"),
        ({"amount": float("inf")}, "Expense amount must be a number"),
        ({"currency": ""}, "Currency is required"),
        ({"category_id": ""}, "Category ID is required"),
        ({"event_id": ""}, "Event ID is required"),
    ],
)
def test_add_expense_validation_never_touches_store(
    wedding, telemetry, overrides, message
):
    store = MagicMock()
    service = ExpenseService(store, telemetry, logger=MagicMock())

    with pytest.raises(ValidationError, match=message):
        service.add_expense(
            _request(wedding, **{"category_id": "cat", **overrides})
        )

    store.get.assert_not_called()
    store.batch.assert_not_called()
    telemetry.capture_exception.assert_not_called()


def test_add_expense_requires_existing_category(services, wedding):
    with pytest.raises(NotFoundError, match="Failed to add expense: Category not found"):
        services.expenses.add_expense(_request(wedding, "missing"))


def test_category_move_keeps_event_scheduled(services, wedding, read):
    expense_id = services.expenses.add_expense(
        _request(wedding, wedding.venue, amount="300")
    )
    before_event = read.event_totals(wedding.event_id)

    services.expenses.update_expense(
        UpdateExpenseRequest(
            owner_id=OWNER,
            event_id=wedding.event_id,
            expense_id=expense_id,
            category_id=wedding.catering,
        )
    )

    assert read.category(wedding.event_id, wedding.venue).scheduled == Decimal("0")
    assert read.category(wedding.event_id, wedding.catering).scheduled == Decimal("300")
    assert read.event_totals(wedding.event_id).scheduled == before_event.scheduled
    expense = services.expenses.fetch_expense(OWNER, wedding.event_id, expense_id)
    assert expense.category.id == wedding.catering
    assert expense.category.name == "Catering"


def test_category_move_carries_paid_amount(services, wedding, read):
    expense_id = services.expenses.add_expense(
        _request(wedding, wedding.venue, amount="300")
    )
    _pay_one_off(services, wedding, expense_id, "300")

    services.expenses.update_expense(
        UpdateExpenseRequest(
            owner_id=OWNER,
            event_id=wedding.event_id,
            expense_id=expense_id,
            category_id=wedding.catering,
            amount=Decimal("350"),
        )
    )

    venue = read.category(wedding.event_id, wedding.venue)
    catering = read.category(wedding.event_id, wedding.catering)
    totals = read.event_totals(wedding.event_id)
    assert (venue.scheduled, venue.spent) == (Decimal("0"), Decimal("0"))
    assert (catering.scheduled, catering.spent) == (Decimal("350"), Decimal("300"))
    assert (totals.scheduled, totals.spent) == (Decimal("350"), Decimal("300"))
    recomputed = services.aggregation.compute_event_totals(OWNER, wedding.event_id)
    assert recomputed.totals.total_spent_amount == totals.spent


def test_amount_change_adjusts_by_delta(services, wedding, read):
    expense_id = services.expenses.add_expense(_request(wedding, wedding.venue))

    services.expenses.update_expense(
        UpdateExpenseRequest(
            owner_id=OWNER,
            event_id=wedding.event_id,
            expense_id=expense_id,
            amount=Decimal("420"),
        )
    )

    assert read.category(wedding.event_id, wedding.venue).scheduled == Decimal("420")
    assert read.event_totals(wedding.event_id).scheduled == Decimal("420")


def test_amount_change_tolerates_missing_category(
    services, wedding, read, store, logger
):
    expense_id = services.expenses.add_expense(_request(wedding, wedding.venue))
    store.delete(category_path(OWNER, wedding.event_id, wedding.venue))

    services.expenses.update_expense(
        UpdateExpenseRequest(
            owner_id=OWNER,
            event_id=wedding.event_id,
            expense_id=expense_id,
            amount=Decimal("420"),
        )
    )

    assert read.event_totals(wedding.event_id).scheduled == Decimal("420")
    data = store.get(expense_path(OWNER, wedding.event_id, expense_id)).data
    assert data["amount"] == "420"
    assert any(
        "skipping amount adjustment" in call.args[0]
        for call in logger.warning.call_args_list
    )


def test_metadata_update_leaves_totals_alone(services, wedding, read, store):
    expense_id = services.expenses.add_expense(_request(wedding, wedding.venue))
    before = read.event_totals(wedding.event_id)

    services.expenses.update_expense(
        UpdateExpenseRequest(
            owner_id=OWNER,
            event_id=wedding.event_id,
            expense_id=expense_id,
            name="  Garden venue ",
            notes="Outdoor",
        )
    )

    data = store.get(expense_path(OWNER, wedding.event_id, expense_id)).data
    assert data["name"] == "Garden venue"
    assert data["notes"] == "Outdoor"
    assert read.event_totals(wedding.event_id) == before


def test_update_requires_a_field(services, wedding):
    with pytest.raises(ValidationError, match="At least one field must be provided"):
        services.expenses.update_expense(
            UpdateExpenseRequest(
                owner_id=OWNER, event_id=wedding.event_id, expense_id="x"
            )
        )


def test_update_to_missing_category_writes_nothing(services, wedding, read):
    expense_id = services.expenses.add_expense(_request(wedding, wedding.venue))
    before = read.category(wedding.event_id, wedding.venue)

    with pytest.raises(NotFoundError, match="Category not found"):
        services.expenses.update_expense(
            UpdateExpenseRequest(
                owner_id=OWNER,
                event_id=wedding.event_id,
                expense_id=expense_id,
                category_id="missing",
            )
        )

    assert read.category(wedding.event_id, wedding.venue) == before


def test_delete_removes_attachments_best_effort(services, wedding, store, telemetry):
    cleaner = MagicMock()
    service = ExpenseService(
        store, telemetry, attachments=cleaner, logger=MagicMock()
    )
    expense_id = service.add_expense(
        _request(wedding, wedding.venue, attachments=("file:///a",))
    )

    service.delete_expense(OWNER, wedding.event_id, expense_id)

    cleaner.delete_all.assert_called_once_with(["file:///a"])
    assert store.get(expense_path(OWNER, wedding.event_id, expense_id)) is None


def test_delete_missing_expense(services, wedding):
    with pytest.raises(NotFoundError, match="Failed to delete expense: Expense not found"):
        services.expenses.delete_expense(OWNER, wedding.event_id, "missing")


def test_fetch_expenses_newest_first(services, wedding):
    old = services.expenses.add_expense(
        _request(wedding, wedding.venue, date=datetime(2024, 1, 1, tzinfo=timezone.utc))
    )
    undated = services.expenses.add_expense(_request(wedding, wedding.venue))
    new = services.expenses.add_expense(
        _request(wedding, wedding.venue, date=datetime(2024, 3, 1, tzinfo=timezone.utc))
    )

    expenses = services.expenses.fetch_expenses(OWNER, wedding.event_id)

    assert [expense.id for expense in expenses] == [new, old, undated]


def test_attachment_urls_include_payments(services, wedding, store):
    expense_id = services.expenses.add_expense(
        _request(wedding, wedding.venue, attachments=("file:///invoice",))
    )
    path = expense_path(OWNER, wedding.event_id, expense_id)
    store.update(
        path,
        {
            "oneOffPayment": {
                "id": "p1",
                "amount": "500",
                "attachments": ["file:///receipt"],
            }
        },
    )

    expense = services.expenses.fetch_expense(OWNER, wedding.event_id, expense_id)

    assert expense_attachment_urls(expense) == ["file:///invoice", "file:///receipt"]
