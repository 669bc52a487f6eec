"""Domain error taxonomy."""


class BudgetTrackerError(Exception):
    """Base class for errors raised by the budget tracker."""


class ValidationError(BudgetTrackerError):
    """Input is missing or invalid; raised before any store access."""


class NotFoundError(BudgetTrackerError):
    """A referenced workspace, event, category, expense or payment is missing."""


class ConflictError(BudgetTrackerError):
    """The operation is blocked by dependent documents."""


class StoreError(BudgetTrackerError):
    """The underlying document store failed."""


__all__ = [
    "BudgetTrackerError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "StoreError",
]
