"""Domain models produced by totals aggregation."""

from dataclasses import dataclass, field
from decimal import Decimal

from .budget import EventTotals


@dataclass
class CategoryTotals:
    """Running accumulator for one category during a recompute.

    ``budgeted`` is seeded from the stored category and never recomputed.
    """

    budgeted: Decimal
    scheduled: Decimal = Decimal("0")
    spent: Decimal = Decimal("0")


@dataclass(frozen=True)
class EventBreakdown:
    """Recomputed totals of an event and of each of its categories."""

    totals: EventTotals
    categories: dict[str, CategoryTotals]
    orphan_expense_ids: tuple[str, ...] = field(default_factory=tuple)


__all__ = ["CategoryTotals", "EventBreakdown"]
