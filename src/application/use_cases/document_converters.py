"""Conversions between stored documents and domain models.

Amounts are persisted as decimal strings and timestamps as ISO-8601 UTC
strings. Readers tolerate plain numbers and epoch milliseconds so documents
written by older clients still load.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

from src.application.ports.document_store import DocumentSnapshot
from src.domain.models import (
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
from src.utils.decimal_utils import coerce_decimal
from src.utils.time_utils import EPOCH, ensure_utc, to_millis


def amount_to_document(value: Decimal) -> str:
    return str(value)


def amount_from_document(value) -> Decimal:
    return coerce_decimal(value)


def datetime_to_document(value: datetime | date | None) -> str | None:
    if value is None:
        return None
    return ensure_utc(value).isoformat()


def datetime_from_document(value) -> datetime | None:
    """Decode a stored timestamp.

    Args:
        value: ISO string, datetime or epoch milliseconds.

    Returns:
        datetime | None: Aware UTC datetime, or None when absent.
    """
    if value is None or value == "":
        return None
    if isinstance(value, (datetime, date)):
        return ensure_utc(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return EPOCH + timedelta(milliseconds=value)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


def created_fields(user_id: str, now: datetime) -> dict[str, Any]:
    """Return the stamp fields written when a document is created."""
    stamp = datetime_to_document(now)
    return {
        "createdAt": stamp,
        "createdBy": user_id,
        "updatedAt": stamp,
        "updatedBy": user_id,
    }


def updated_fields(user_id: str, now: datetime) -> dict[str, Any]:
    """Return the stamp fields written when a document changes."""
    return {"updatedAt": datetime_to_document(now), "updatedBy": user_id}


def stamp_from_document(data: dict[str, Any]) -> AuditStamp:
    return AuditStamp(
        created_at=datetime_from_document(data.get("createdAt")),
        created_by=data.get("createdBy"),
        updated_at=datetime_from_document(data.get("updatedAt")),
        updated_by=data.get("updatedBy"),
    )


def stamp_to_document(stamp: AuditStamp) -> dict[str, Any]:
    return {
        "createdAt": datetime_to_document(stamp.created_at),
        "createdBy": stamp.created_by,
        "updatedAt": datetime_to_document(stamp.updated_at),
        "updatedBy": stamp.updated_by,
    }


def event_totals_to_document(totals: EventTotals) -> dict[str, Any]:
    return {
        "totalBudgetedAmount": amount_to_document(totals.total_budgeted_amount),
        "totalScheduledAmount": amount_to_document(
            totals.total_scheduled_amount
        ),
        "totalSpentAmount": amount_to_document(totals.total_spent_amount),
        "spentPercentage": totals.spent_percentage,
        "status": totals.status.value,
    }


def event_status_from_document(value) -> EventStatus | None:
    if not value:
        return None
    try:
        return EventStatus(value)
    except ValueError:
        return None


def event_totals_from_document(data: dict[str, Any]) -> EventTotals:
    """Decode stored event totals.

    Status and percentage are read as stored, falling back to on-track and
    zero so drifted documents can still be compared against recomputed ones.
    """
    return EventTotals(
        total_budgeted_amount=amount_from_document(
            data.get("totalBudgetedAmount")
        ),
        total_scheduled_amount=amount_from_document(
            data.get("totalScheduledAmount")
        ),
        total_spent_amount=amount_from_document(data.get("totalSpentAmount")),
        spent_percentage=int(data.get("spentPercentage") or 0),
        status=event_status_from_document(data.get("status"))
        or EventStatus.ON_TRACK,
    )


def event_from_document(snapshot: DocumentSnapshot) -> Event:
    data = snapshot.data
    return Event(
        id=snapshot.id,
        name=data.get("name", ""),
        type=data.get("type", "other"),
        event_date=datetime_from_document(data.get("eventDate")),
        currency=data.get("currency", ""),
        totals=event_totals_from_document(data),
        description=data.get("description"),
        stamp=stamp_from_document(data),
    )


def category_from_document(snapshot: DocumentSnapshot) -> Category:
    data = snapshot.data
    return Category(
        id=snapshot.id,
        name=data.get("name", ""),
        budgeted_amount=amount_from_document(data.get("budgetedAmount")),
        scheduled_amount=amount_from_document(data.get("scheduledAmount")),
        spent_amount=amount_from_document(data.get("spentAmount")),
        color=data.get("color", ""),
        icon=data.get("icon", ""),
        description=data.get("description") or "",
        stamp=stamp_from_document(data),
    )


def category_snapshot_to_document(snapshot: CategorySnapshot) -> dict[str, Any]:
    return {
        "id": snapshot.id,
        "name": snapshot.name,
        "color": snapshot.color,
        "icon": snapshot.icon,
    }


def category_snapshot_from_document(data: dict[str, Any] | None) -> CategorySnapshot:
    data = data or {}
    return CategorySnapshot(
        id=data.get("id") or "",
        name=data.get("name") or "",
        color=data.get("color") or "",
        icon=data.get("icon") or "",
    )


def vendor_to_document(vendor: Vendor) -> dict[str, Any]:
    return {
        "name": vendor.name,
        "address": vendor.address,
        "website": vendor.website,
        "email": vendor.email,
    }


def vendor_from_document(data: dict[str, Any] | None) -> Vendor:
    data = data or {}
    return Vendor(
        name=data.get("name") or "",
        address=data.get("address") or "",
        website=data.get("website") or "",
        email=data.get("email") or "",
    )


def legacy_payment_id(data: dict[str, Any]) -> str:
    """Return the id of a payment stored before ids were generated.

    Such payments are addressed by their creation time in epoch
    milliseconds.
    """
    created_at = datetime_from_document(data.get("createdAt"))
    if created_at is None:
        return ""
    return str(to_millis(created_at))


def payment_to_document(payment: Payment) -> dict[str, Any]:
    document = {
        "id": payment.id,
        "name": payment.name,
        "description": payment.description,
        "amount": amount_to_document(payment.amount),
        "paymentMethod": payment.payment_method,
        "dueDate": datetime_to_document(payment.due_date),
        "isPaid": payment.is_paid,
        "paidDate": datetime_to_document(payment.paid_date),
        "notes": payment.notes,
        "attachments": list(payment.attachments),
    }
    document.update(stamp_to_document(payment.stamp))
    return document


def payment_from_document(data: dict[str, Any]) -> Payment:
    return Payment(
        id=data.get("id") or legacy_payment_id(data),
        name=data.get("name") or "",
        amount=amount_from_document(data.get("amount")),
        payment_method=data.get("paymentMethod") or "",
        due_date=datetime_from_document(data.get("dueDate")),
        is_paid=bool(data.get("isPaid")),
        description=data.get("description") or "",
        paid_date=datetime_from_document(data.get("paidDate")),
        notes=data.get("notes") or "",
        attachments=tuple(data.get("attachments") or ()),
        stamp=stamp_from_document(data),
    )


def payment_schedule_to_document(
    schedule: tuple[Payment, ...] | None,
) -> list[dict[str, Any]] | None:
    if schedule is None:
        return None
    return [payment_to_document(payment) for payment in schedule]


def expense_from_document(snapshot: DocumentSnapshot) -> Expense:
    data = snapshot.data
    raw_schedule = data.get("paymentSchedule")
    schedule = None
    if raw_schedule:
        schedule = tuple(payment_from_document(item) for item in raw_schedule)
    raw_one_off = data.get("oneOffPayment")
    return Expense(
        id=snapshot.id,
        name=data.get("name", ""),
        amount=amount_from_document(data.get("amount")),
        currency=data.get("currency", ""),
        category=category_snapshot_from_document(data.get("category")),
        description=data.get("description") or "",
        vendor=vendor_from_document(data.get("vendor")),
        date=datetime_from_document(data.get("date")),
        notes=data.get("notes") or "",
        tags=tuple(data.get("tags") or ()),
        attachments=tuple(data.get("attachments") or ()),
        has_payment_schedule=bool(data.get("hasPaymentSchedule")),
        payment_schedule=schedule,
        one_off_payment=(
            payment_from_document(raw_one_off) if raw_one_off else None
        ),
        stamp=stamp_from_document(data),
    )


def expense_to_document(expense: Expense) -> dict[str, Any]:
    document = {
        "name": expense.name,
        "description": expense.description,
        "amount": amount_to_document(expense.amount),
        "currency": expense.currency,
        "category": category_snapshot_to_document(expense.category),
        "vendor": vendor_to_document(expense.vendor),
        "date": datetime_to_document(expense.date),
        "notes": expense.notes,
        "tags": list(expense.tags),
        "attachments": list(expense.attachments),
        "hasPaymentSchedule": expense.has_payment_schedule,
        "paymentSchedule": payment_schedule_to_document(
            expense.payment_schedule
        ),
        "oneOffPayment": (
            payment_to_document(expense.one_off_payment)
            if expense.one_off_payment is not None
            else None
        ),
    }
    document.update(stamp_to_document(expense.stamp))
    return document


__all__ = [
    "amount_to_document",
    "amount_from_document",
    "datetime_to_document",
    "datetime_from_document",
    "created_fields",
    "updated_fields",
    "stamp_from_document",
    "stamp_to_document",
    "event_totals_to_document",
    "event_totals_from_document",
    "event_status_from_document",
    "event_from_document",
    "category_from_document",
    "category_snapshot_to_document",
    "category_snapshot_from_document",
    "vendor_to_document",
    "vendor_from_document",
    "legacy_payment_id",
    "payment_to_document",
    "payment_from_document",
    "payment_schedule_to_document",
    "expense_from_document",
    "expense_to_document",
]
