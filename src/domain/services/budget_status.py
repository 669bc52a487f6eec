"""Spent percentage and budget status calculations."""

from decimal import ROUND_HALF_UP, Decimal

from src.domain.constants import ON_TRACK_LOWER_PERCENT, ON_TRACK_UPPER_PERCENT
from src.domain.models import EventStatus, EventTotals
from src.utils.decimal_utils import ZERO, coerce_decimal

HUNDRED = Decimal("100")


def calculate_spent_percentage(budgeted, spent) -> int:
    """Return the spent percentage rounded half up.

    Args:
        budgeted: Total budgeted amount.
        spent: Total spent amount.

    Returns:
        int: ``0`` when nothing is budgeted, otherwise the rounded ratio. The
        result is unbounded above.
    """
    budgeted = coerce_decimal(budgeted)
    if budgeted <= ZERO:
        return 0
    ratio = coerce_decimal(spent) / budgeted * HUNDRED
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_event_status(budgeted, spent) -> EventStatus:
    """Return the budget status for the given totals.

    Args:
        budgeted: Total budgeted amount.
        spent: Total spent amount.

    Returns:
        EventStatus: on-track between 80% and 100% inclusive, under-budget
        below, over-budget above; on-track when nothing is budgeted.
    """
    budgeted = coerce_decimal(budgeted)
    if budgeted <= ZERO:
        return EventStatus.ON_TRACK
    percentage = coerce_decimal(spent) / budgeted * HUNDRED
    if percentage > ON_TRACK_UPPER_PERCENT:
        return EventStatus.OVER_BUDGET
    if percentage < ON_TRACK_LOWER_PERCENT:
        return EventStatus.UNDER_BUDGET
    return EventStatus.ON_TRACK


def build_event_totals(
    budgeted,
    scheduled,
    spent,
    current_status: EventStatus | None = None,
) -> EventTotals:
    """Bundle totals with their derived percentage and status.

    A ``completed`` event keeps its status whatever the new totals are.
    """
    budgeted = coerce_decimal(budgeted)
    scheduled = coerce_decimal(scheduled)
    spent = coerce_decimal(spent)
    if current_status == EventStatus.COMPLETED:
        status = EventStatus.COMPLETED
    else:
        status = calculate_event_status(budgeted, spent)
    return EventTotals(
        total_budgeted_amount=budgeted,
        total_scheduled_amount=scheduled,
        total_spent_amount=spent,
        spent_percentage=calculate_spent_percentage(budgeted, spent),
        status=status,
    )


__all__ = [
    "calculate_spent_percentage",
    "calculate_event_status",
    "build_event_totals",
]
