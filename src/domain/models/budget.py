"""Domain models for events, categories, expenses and payments."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class EventStatus(str, Enum):
    """Budget status of an event."""

    UNDER_BUDGET = "under-budget"
    ON_TRACK = "on-track"
    OVER_BUDGET = "over-budget"
    COMPLETED = "completed"


@dataclass(frozen=True)
class AuditStamp:
    """Creation and last-modification stamps of a document."""

    created_at: datetime | None = None
    created_by: str | None = None
    updated_at: datetime | None = None
    updated_by: str | None = None


@dataclass(frozen=True)
class EventTotals:
    """Denormalized totals stored on an event.

    Attributes:
        total_budgeted_amount: Sum of the categories' budgeted amounts.
        total_scheduled_amount: Sum of the categories' scheduled amounts.
        total_spent_amount: Sum of the categories' spent amounts.
        spent_percentage: Rounded spent / budgeted ratio, in percent.
        status: Status derived from the spent percentage.
    """

    total_budgeted_amount: Decimal
    total_scheduled_amount: Decimal
    total_spent_amount: Decimal
    spent_percentage: int
    status: EventStatus


@dataclass(frozen=True)
class Event:
    """Budgeted event owned by a workspace."""

    id: str
    name: str
    type: str
    event_date: datetime | None
    currency: str
    totals: EventTotals
    description: str | None = None
    stamp: AuditStamp = field(default_factory=AuditStamp)


@dataclass(frozen=True)
class Category:
    """Budget category of an event."""

    id: str
    name: str
    budgeted_amount: Decimal
    scheduled_amount: Decimal
    spent_amount: Decimal
    color: str
    icon: str
    description: str = ""
    stamp: AuditStamp = field(default_factory=AuditStamp)


@dataclass(frozen=True)
class CategorySnapshot:
    """Point-in-time copy of a category stored on an expense.

    The snapshot is taken when the expense is assigned to the category and is
    not kept in sync with later category renames.
    """

    id: str
    name: str = ""
    color: str = ""
    icon: str = ""


@dataclass(frozen=True)
class Vendor:
    """Vendor details attached to an expense."""

    name: str = ""
    address: str = ""
    website: str = ""
    email: str = ""


@dataclass(frozen=True)
class Payment:
    """Payment embedded in an expense."""

    id: str
    name: str
    amount: Decimal
    payment_method: str
    due_date: datetime | None
    is_paid: bool = False
    description: str = ""
    paid_date: datetime | None = None
    notes: str = ""
    attachments: tuple[str, ...] = ()
    stamp: AuditStamp = field(default_factory=AuditStamp)


@dataclass(frozen=True)
class Expense:
    """Expense assigned to a category of an event."""

    id: str
    name: str
    amount: Decimal
    currency: str
    category: CategorySnapshot
    description: str = ""
    vendor: Vendor = field(default_factory=Vendor)
    date: datetime | None = None
    notes: str = ""
    tags: tuple[str, ...] = ()
    attachments: tuple[str, ...] = ()
    has_payment_schedule: bool = False
    payment_schedule: tuple[Payment, ...] | None = None
    one_off_payment: Payment | None = None
    stamp: AuditStamp = field(default_factory=AuditStamp)


__all__ = [
    "EventStatus",
    "AuditStamp",
    "EventTotals",
    "Event",
    "Category",
    "CategorySnapshot",
    "Vendor",
    "Payment",
    "Expense",
]
