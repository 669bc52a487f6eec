"""Domain models package."""

from .aggregation import CategoryTotals, EventBreakdown
from .amounts import AmountChange, TotalsAmounts, TotalsChanges
from .budget import (
    AuditStamp,
    Category,
    CategorySnapshot,
    Event,
    EventStatus,
    EventTotals,
    Expense,
    Payment,
    Vendor,
)

__all__ = [
    "AmountChange",
    "AuditStamp",
    "Category",
    "CategorySnapshot",
    "CategoryTotals",
    "Event",
    "EventBreakdown",
    "EventStatus",
    "EventTotals",
    "Expense",
    "Payment",
    "TotalsAmounts",
    "TotalsChanges",
    "Vendor",
]
