"""Tests for the event and workspace use cases."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from conftest import NOW, OWNER
from src.application.use_cases.document_paths import (
    categories_collection,
    event_path,
    expenses_collection,
    workspace_path,
)
from src.application.use_cases.dtos import (
    AddEventRequest,
    AddExpenseRequest,
    UpdateEventRequest,
)
from src.application.use_cases.events import EventService
from src.domain.errors import NotFoundError, ValidationError
from src.domain.models import EventStatus, TotalsAmounts
from src.domain.templates import get_category_templates

EVENT_DATE = datetime(2025, 9, 20, tzinfo=timezone.utc)


def _request(**overrides):
    values = dict(
        owner_id=OWNER,
        name="Sam turns 30",
        type="birthday",
        event_date=EVENT_DATE,
        currency="EUR",
    )
    values.update(overrides)
    return AddEventRequest(**values)


def test_add_event_creates_workspace_and_template_categories(services, store):
    event = services.events.add_event(_request())

    workspace = store.get(workspace_path(OWNER))
    assert workspace is not None
    assert workspace.data["preferences"] == {"currency": "EUR", "language": "en"}
    categories = services.categories.fetch_categories(OWNER, event.id)
    expected = {template.name for template in get_category_templates("birthday")}
    assert {category.name for category in categories} == expected
    assert all(category.budgeted_amount == 0 for category in categories)
    assert event.totals.total_budgeted_amount == Decimal("0")
    assert event.totals.status == EventStatus.ON_TRACK
    assert event.event_date == EVENT_DATE
    assert event.stamp.created_at == NOW
    assert event.stamp.created_by == OWNER


def test_add_event_unknown_type_uses_generic_templates(services):
    event = services.events.add_event(_request(type="  "))

    categories = services.categories.fetch_categories(OWNER, event.id)
    assert event.type == "other"
    assert {category.name for category in categories} == {
        template.name for template in get_category_templates("other")
    }


def test_add_event_without_templates(services):
    event = services.events.add_event(_request(seed_templates=False))

    assert services.categories.fetch_categories(OWNER, event.id) == []


def test_add_event_keeps_existing_workspace(services, store):
    services.events.setup_workspace(OWNER, email="sam@example.com", currency="GBP")

    services.events.add_event(_request())

    assert store.get(workspace_path(OWNER)).data["email"] == "sam@example.com"


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"name": ""}, "Event name is required"),
        ({"event_date": None}, "Event date is required"),
        ({"currency": "JPY"}, "Currency must be one of"),
        ({"owner_id": " "}, "User ID is required"),
    ],
)
def test_add_event_validation(services, store, overrides, message):
    with pytest.raises(ValidationError, match=message):
        services.events.add_event(_request(**overrides))

    assert store.list_collection("workspaces") == []


def test_setup_workspace_is_idempotent(services):
    assert services.events.setup_workspace(OWNER) is True
    assert services.events.setup_workspace(OWNER) is False


def test_update_event_metadata(services, wedding):
    services.events.update_event(
        UpdateEventRequest(
            owner_id=OWNER,
            event_id=wedding.event_id,
            name="Our wedding",
            description="  ",
        )
    )

    event = services.events.fetch_event(OWNER, wedding.event_id)
    assert event.name == "Our wedding"
    assert event.description is None
    assert event.stamp.updated_by == OWNER


def test_completed_status_survives_totals_changes(services, wedding):
    services.events.update_event(
        UpdateEventRequest(
            owner_id=OWNER,
            event_id=wedding.event_id,
            status=EventStatus.COMPLETED,
        )
    )
    services.aggregation.add_to_event_totals(
        OWNER, wedding.event_id, TotalsAmounts(spent=Decimal("5000"))
    )
    services.aggregation.update_event_totals(OWNER, wedding.event_id)

    event = services.events.fetch_event(OWNER, wedding.event_id)
    assert event.totals.status == EventStatus.COMPLETED

    services.events.update_event(
        UpdateEventRequest(owner_id=OWNER, event_id=wedding.event_id, reopen=True)
    )

    event = services.events.fetch_event(OWNER, wedding.event_id)
    assert event.totals.status == EventStatus.UNDER_BUDGET


def test_update_event_rejects_other_statuses(services, wedding):
    with pytest.raises(ValidationError, match="Only the completed status can be set"):
        services.events.update_event(
            UpdateEventRequest(
                owner_id=OWNER,
                event_id=wedding.event_id,
                status=EventStatus.OVER_BUDGET,
            )
        )
    with pytest.raises(ValidationError, match="At least one field must be provided"):
        services.events.update_event(
            UpdateEventRequest(owner_id=OWNER, event_id=wedding.event_id)
        )


def test_delete_event_removes_children(services, wedding, store):
    services.expenses.add_expense(
        AddExpenseRequest(
            owner_id=OWNER,
            event_id=wedding.event_id,
            name="Cake",
            amount=Decimal("80"),
            category_id=wedding.catering,
            currency="USD",
            attachments=("file:///cake.pdf",),
        )
    )
    cleaner = MagicMock()
    service = EventService(
        store, services.telemetry, attachments=cleaner, logger=MagicMock()
    )

    service.delete_event(OWNER, wedding.event_id)

    cleaner.delete_all.assert_called_once_with(["file:///cake.pdf"])
    assert store.get(event_path(OWNER, wedding.event_id)) is None
    assert store.list_collection(expenses_collection(OWNER, wedding.event_id)) == []
    assert store.list_collection(categories_collection(OWNER, wedding.event_id)) == []


def test_delete_event_continues_when_child_delete_fails(services, wedding, store):
    logger = MagicMock()
    service = EventService(store, services.telemetry, logger=logger)
    original_delete = store.delete

    def flaky_delete(path):
        if "/categories/" in path:
            raise RuntimeError("boom")
        original_delete(path)

    store.delete = flaky_delete

    service.delete_event(OWNER, wedding.event_id)

    assert store.get(event_path(OWNER, wedding.event_id)) is None
    assert logger.warning.call_count == 2


def test_delete_missing_event(services):
    with pytest.raises(NotFoundError, match="Failed to delete event: Event not found"):
        services.events.delete_event(OWNER, "missing")


def test_fetch_events_ordered_by_date(services):
    later = services.events.add_event(
        _request(name="Later", event_date=datetime(2026, 1, 1, tzinfo=timezone.utc))
    )
    sooner = services.events.add_event(
        _request(name="Sooner", event_date=datetime(2025, 1, 1, tzinfo=timezone.utc))
    )

    events = services.events.fetch_events(OWNER)

    assert [event.id for event in events] == [sooner.id, later.id]
