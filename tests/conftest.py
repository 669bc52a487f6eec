"""Shared fixtures for the budget tracker tests."""

from datetime import datetime, timezone
from decimal import Decimal
import itertools
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from src.application.use_cases import actions as actions_module
from src.application.use_cases.category_amounts import CategoryAmountsService
from src.application.use_cases.categories import CategoryService
from src.application.use_cases.document_paths import category_path, event_path
from src.application.use_cases.dtos import AddEventRequest, CategorySeed
from src.application.use_cases.event_aggregation import EventAggregationService
from src.application.use_cases.events import EventService
from src.application.use_cases.expenses import ExpenseService
from src.application.use_cases.payments import PaymentService
from src.infrastructure.memory_document_store import InMemoryDocumentStore

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
OWNER = "user-1"


@pytest.fixture(autouse=True)
def _quiet_usage_logger(monkeypatch):
    """Keep the usage logger from writing log files during tests."""
    monkeypatch.setattr(actions_module, "get_usage_logger", lambda: MagicMock())


@pytest.fixture
def store():
    counter = itertools.count(1)
    return InMemoryDocumentStore(id_factory=lambda: f"doc{next(counter)}")


@pytest.fixture
def telemetry():
    return MagicMock()


@pytest.fixture
def logger():
    return MagicMock()


@pytest.fixture
def services(store, telemetry, logger):
    """All use cases wired on one in-memory store with a fixed clock."""
    payment_ids = itertools.count(1)

    def clock():
        return NOW

    return SimpleNamespace(
        store=store,
        telemetry=telemetry,
        logger=logger,
        events=EventService(store, telemetry, logger=logger, clock=clock),
        categories=CategoryService(store, telemetry, logger=logger, clock=clock),
        expenses=ExpenseService(store, telemetry, logger=logger, clock=clock),
        payments=PaymentService(
            store,
            telemetry,
            logger=logger,
            clock=clock,
            id_factory=lambda: f"pay{next(payment_ids)}",
        ),
        aggregation=EventAggregationService(
            store, telemetry, logger=logger, clock=clock
        ),
        category_amounts=CategoryAmountsService(store, logger=logger, clock=clock),
    )


@pytest.fixture
def wedding(services):
    """An event with a 1000 venue budget and a 500 catering budget."""
    event = services.events.add_event(
        AddEventRequest(
            owner_id=OWNER,
            name="Wedding",
            type="wedding",
            event_date=datetime(2025, 6, 1, tzinfo=timezone.utc),
            currency="USD",
            category_seeds=(
                CategorySeed("Venue", "#059669", "🏛️", Decimal("1000")),
                CategorySeed("Catering", "#DC2626", "🍰", Decimal("500")),
            ),
        )
    )
    ids = {
        category.name: category.id
        for category in services.categories.fetch_categories(OWNER, event.id)
    }
    return SimpleNamespace(
        event_id=event.id,
        venue=ids["Venue"],
        catering=ids["Catering"],
    )


@pytest.fixture
def read(store):
    """Readers returning stored amounts as Decimals."""

    def event_totals(event_id):
        data = store.get(event_path(OWNER, event_id)).data
        return SimpleNamespace(
            budgeted=Decimal(data["totalBudgetedAmount"]),
            scheduled=Decimal(data["totalScheduledAmount"]),
            spent=Decimal(data["totalSpentAmount"]),
            percentage=data["spentPercentage"],
            status=data["status"],
        )

    def category(event_id, category_id):
        data = store.get(category_path(OWNER, event_id, category_id)).data
        return SimpleNamespace(
            budgeted=Decimal(data["budgetedAmount"]),
            scheduled=Decimal(data["scheduledAmount"]),
            spent=Decimal(data["spentAmount"]),
        )

    return SimpleNamespace(event_totals=event_totals, category=category)
