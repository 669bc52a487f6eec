"""Domain package for event budget rules and core models."""

from .constants import EVENT_TYPES, PAYMENT_METHODS, SUPPORTED_CURRENCIES
from .errors import (
    BudgetTrackerError,
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from .models import (
    AmountChange,
    Category,
    CategorySnapshot,
    Event,
    EventStatus,
    EventTotals,
    Expense,
    Payment,
    TotalsAmounts,
    TotalsChanges,
    Vendor,
)
from .services import (
    build_event_totals,
    calculate_event_status,
    calculate_spent_percentage,
    compute_event_breakdown,
    compute_expense_paid_amount,
)

__all__ = [
    "AmountChange",
    "BudgetTrackerError",
    "Category",
    "CategorySnapshot",
    "ConflictError",
    "EVENT_TYPES",
    "Event",
    "EventStatus",
    "EventTotals",
    "Expense",
    "NotFoundError",
    "PAYMENT_METHODS",
    "Payment",
    "SUPPORTED_CURRENCIES",
    "StoreError",
    "TotalsAmounts",
    "TotalsChanges",
    "ValidationError",
    "Vendor",
    "build_event_totals",
    "calculate_event_status",
    "calculate_spent_percentage",
    "compute_event_breakdown",
    "compute_expense_paid_amount",
]
