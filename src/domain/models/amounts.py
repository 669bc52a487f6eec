"""Value objects describing changes to aggregated amounts."""

from dataclasses import dataclass
from decimal import Decimal

from src.utils.decimal_utils import coerce_decimal


@dataclass(frozen=True)
class TotalsAmounts:
    """Deltas for an incremental add or subtract on event totals.

    ``None`` means the field is absent; an explicit zero is a valid amount.
    """

    budgeted: Decimal | None = None
    scheduled: Decimal | None = None
    spent: Decimal | None = None

    @property
    def is_empty(self) -> bool:
        """Return True when no amount is provided at all."""
        return (
            self.budgeted is None
            and self.scheduled is None
            and self.spent is None
        )


@dataclass(frozen=True)
class AmountChange:
    """Mixed-sign change applied to a single aggregated amount."""

    add: Decimal | None = None
    subtract: Decimal | None = None

    @property
    def net(self) -> Decimal:
        """Return add minus subtract, treating missing sides as zero."""
        return coerce_decimal(self.add) - coerce_decimal(self.subtract)

    @classmethod
    def of(cls, delta: Decimal) -> "AmountChange | None":
        """Build a change from a signed delta, or None when it is zero."""
        if delta > 0:
            return cls(add=delta)
        if delta < 0:
            return cls(subtract=-delta)
        return None


@dataclass(frozen=True)
class TotalsChanges:
    """Per-field changes for a complex event totals update."""

    budgeted: AmountChange | None = None
    scheduled: AmountChange | None = None
    spent: AmountChange | None = None

    @property
    def is_empty(self) -> bool:
        """Return True when no field carries a change."""
        return (
            self.budgeted is None
            and self.scheduled is None
            and self.spent is None
        )


__all__ = ["TotalsAmounts", "AmountChange", "TotalsChanges"]
