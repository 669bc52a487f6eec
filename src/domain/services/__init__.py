"""Domain services package."""

from .aggregation import (
    add_totals,
    apply_amount_change,
    apply_totals_changes,
    compute_event_breakdown,
    compute_expense_paid_amount,
    paid_amount,
    subtract_totals,
)
from .budget_status import (
    build_event_totals,
    calculate_event_status,
    calculate_spent_percentage,
)
from .validation import (
    require_amount,
    require_choice,
    require_id,
    require_non_negative,
    require_positive,
    require_text,
)

__all__ = [
    "add_totals",
    "apply_amount_change",
    "apply_totals_changes",
    "build_event_totals",
    "calculate_event_status",
    "calculate_spent_percentage",
    "compute_event_breakdown",
    "compute_expense_paid_amount",
    "paid_amount",
    "require_amount",
    "require_choice",
    "require_id",
    "require_non_negative",
    "require_positive",
    "require_text",
    "subtract_totals",
]
