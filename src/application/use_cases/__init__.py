"""Application use cases package."""

from .actions import ActionRunner
from .attachments import AttachmentCleaner
from .categories import CategoryService
from .category_amounts import CategoryAmountsService
from .event_aggregation import EventAggregationService
from .event_totals_maintenance import (
    RecalculateAllEventTotalsUseCase,
    RecalculationResult,
    TotalsDrift,
    ValidateEventTotalsUseCase,
)
from .events import EventService
from .expenses import ExpenseService
from .payments import PaymentService

__all__ = [
    "ActionRunner",
    "AttachmentCleaner",
    "CategoryService",
    "CategoryAmountsService",
    "EventAggregationService",
    "RecalculateAllEventTotalsUseCase",
    "RecalculationResult",
    "TotalsDrift",
    "ValidateEventTotalsUseCase",
    "EventService",
    "ExpenseService",
    "PaymentService",
]
