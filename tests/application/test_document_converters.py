"""Tests for document conversions."""

from datetime import datetime, timezone
from decimal import Decimal

from src.application.ports.document_store import DocumentSnapshot
from src.application.use_cases.document_converters import (
    datetime_from_document,
    datetime_to_document,
    event_from_document,
    expense_from_document,
    expense_to_document,
    legacy_payment_id,
)
from src.domain.models import EventStatus


def test_datetime_reader_accepts_every_stored_shape():
    expected = datetime(2024, 1, 1, 0, 0, 0, 123000, tzinfo=timezone.utc)

    assert datetime_from_document("2024-01-01T00:00:00.123Z") == expected
    assert datetime_from_document("2024-01-01T00:00:00.123+00:00") == expected
    assert datetime_from_document(1704067200123) == expected
    assert datetime_from_document(None) is None
    assert datetime_from_document("") is None


def test_datetime_writer_normalizes_to_utc():
    naive = datetime(2024, 3, 1, 8, 30)

    assert datetime_to_document(naive) == "2024-03-01T08:30:00+00:00"
    assert datetime_to_document(None) is None


def test_legacy_payment_id_uses_creation_millis():
    assert legacy_payment_id({"createdAt": "2024-01-01T00:00:00.123Z"}) == (
        "1704067200123"
    )
    assert legacy_payment_id({}) == ""


def test_event_reader_tolerates_numbers_and_unknown_status():
    snapshot = DocumentSnapshot(
        id="e1",
        path="workspaces/u1/events/e1",
        data={
            "name": "Gala",
            "totalBudgetedAmount": 1000,
            "totalScheduledAmount": "250.50",
            "status": "archived",
        },
    )

    event = event_from_document(snapshot)

    assert event.totals.total_budgeted_amount == Decimal("1000")
    assert event.totals.total_scheduled_amount == Decimal("250.50")
    assert event.totals.total_spent_amount == Decimal("0")
    assert event.totals.status == EventStatus.ON_TRACK
    assert event.type == "other"
    assert event.event_date is None


def test_expense_document_keeps_amounts_as_strings():
    snapshot = DocumentSnapshot(
        id="x1",
        path="workspaces/u1/events/e1/expenses/x1",
        data={
            "name": "Flowers",
            "amount": 120.25,
            "currency": "USD",
            "category": {"id": "c1", "name": "Decor"},
            "hasPaymentSchedule": True,
            "paymentSchedule": [
                {"id": "p1", "name": "Deposit", "amount": 20, "isPaid": True},
            ],
        },
    )

    expense = expense_from_document(snapshot)
    document = expense_to_document(expense)

    assert expense.amount == Decimal("120.25")
    assert expense.payment_schedule[0].amount == Decimal("20")
    assert document["amount"] == "120.25"
    assert document["paymentSchedule"][0]["amount"] == "20"
    assert document["paymentSchedule"][0]["isPaid"] is True
    assert document["oneOffPayment"] is None
    assert document["category"] == {
        "id": "c1",
        "name": "Decor",
        "color": "",
        "icon": "",
    }
