"""Request objects accepted by the mutating use cases.

Each request carries the owner (workspace) id and the ids of the documents
it targets. Optional fields left as ``None`` mean "unchanged" on updates.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal

from src.domain.models import EventStatus, Vendor


@dataclass(frozen=True)
class AddExpenseRequest:
    """Request to add an expense under a category.

    The category snapshot is read from the live category; the optional
    ``category_*`` values are used when the stored category lacks them.
    """

    owner_id: str
    event_id: str
    name: str
    amount: Decimal
    category_id: str
    currency: str
    category_name: str = ""
    category_color: str = ""
    category_icon: str = ""
    description: str = ""
    vendor: Vendor | None = None
    date: datetime | None = None
    notes: str = ""
    tags: tuple[str, ...] = ()
    attachments: tuple[str, ...] = ()


@dataclass(frozen=True)
class UpdateExpenseRequest:
    """Partial update of an expense."""

    owner_id: str
    event_id: str
    expense_id: str
    name: str | None = None
    amount: Decimal | None = None
    category_id: str | None = None
    currency: str | None = None
    description: str | None = None
    vendor: Vendor | None = None
    date: datetime | None = None
    notes: str | None = None
    tags: tuple[str, ...] | None = None
    attachments: tuple[str, ...] | None = None

    def changed_fields(self) -> list[str]:
        """Return the names of the fields carrying a new value."""
        ids = {"owner_id", "event_id", "expense_id"}
        return [
            item.name
            for item in fields(self)
            if item.name not in ids and getattr(self, item.name) is not None
        ]


@dataclass(frozen=True)
class PaymentInput:
    """Payment details entered for a schedule or a single payment."""

    name: str
    amount: Decimal
    payment_method: str
    due_date: datetime
    description: str = ""
    notes: str = ""


@dataclass(frozen=True)
class CreatePaymentScheduleRequest:
    owner_id: str
    event_id: str
    expense_id: str
    payments: tuple[PaymentInput, ...]


@dataclass(frozen=True)
class AddPaymentRequest:
    owner_id: str
    event_id: str
    expense_id: str
    payment: PaymentInput


@dataclass(frozen=True)
class CreateSinglePaymentRequest:
    """Request recording a payment that has already been made."""

    owner_id: str
    event_id: str
    expense_id: str
    name: str
    amount: Decimal
    payment_method: str
    paid_date: datetime
    description: str = ""
    notes: str = ""


@dataclass(frozen=True)
class MarkPaymentPaidRequest:
    owner_id: str
    event_id: str
    expense_id: str
    payment_id: str
    paid_date: datetime | None
    payment_method: str | None
    notes: str | None = None


@dataclass(frozen=True)
class UpdatePaymentRequest:
    """Partial update of an embedded payment."""

    owner_id: str
    event_id: str
    expense_id: str
    payment_id: str
    name: str | None = None
    description: str | None = None
    amount: Decimal | None = None
    payment_method: str | None = None
    is_paid: bool | None = None
    due_date: datetime | None = None
    paid_date: datetime | None = None
    notes: str | None = None


@dataclass(frozen=True)
class AddCategoryRequest:
    owner_id: str
    event_id: str
    name: str
    color: str
    icon: str
    budgeted_amount: Decimal = Decimal("0")
    description: str = ""


@dataclass(frozen=True)
class UpdateCategoryRequest:
    """Partial update of a category.

    When ``refresh_snapshots`` is set and the name, color or icon changes,
    the category snapshot stored on each of its expenses is refreshed.
    """

    owner_id: str
    event_id: str
    category_id: str
    name: str | None = None
    description: str | None = None
    budgeted_amount: Decimal | None = None
    color: str | None = None
    icon: str | None = None
    refresh_snapshots: bool = False


@dataclass(frozen=True)
class CategorySeed:
    """Category created together with a new event."""

    name: str
    color: str
    icon: str
    budgeted_amount: Decimal = Decimal("0")
    description: str = ""


@dataclass(frozen=True)
class AddEventRequest:
    """Request to create an event.

    Explicit ``category_seeds`` win over templates. Templates for the event
    type are used when ``seed_templates`` is set and no seeds are given.
    """

    owner_id: str
    name: str
    type: str
    event_date: datetime | None
    currency: str
    description: str | None = None
    category_seeds: tuple[CategorySeed, ...] = ()
    seed_templates: bool = True


@dataclass(frozen=True)
class UpdateEventRequest:
    """Metadata update of an event.

    ``status`` may only be ``completed``; ``reopen`` drops a completed
    status back to the one computed from the totals.
    """

    owner_id: str
    event_id: str
    name: str | None = None
    type: str | None = None
    description: str | None = None
    event_date: datetime | None = None
    currency: str | None = None
    status: EventStatus | None = None
    reopen: bool = False


__all__ = [
    "AddExpenseRequest",
    "UpdateExpenseRequest",
    "PaymentInput",
    "CreatePaymentScheduleRequest",
    "AddPaymentRequest",
    "CreateSinglePaymentRequest",
    "MarkPaymentPaidRequest",
    "UpdatePaymentRequest",
    "AddCategoryRequest",
    "UpdateCategoryRequest",
    "CategorySeed",
    "AddEventRequest",
    "UpdateEventRequest",
]
