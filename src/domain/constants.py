"""Domain constants for event budgets."""

from decimal import Decimal

EVENT_TYPES = (
    "wedding",
    "graduation",
    "birthday",
    "anniversary",
    "baby-shower",
    "retirement",
    "other",
)

PAYMENT_METHODS = (
    "credit-card",
    "debit-card",
    "paypal",
    "bank-transfer",
    "cash",
)

SUPPORTED_CURRENCIES = (
    "USD",
    "AUD",
    "PHP",
    "EUR",
    "GBP",
)

# Spent percentage thresholds; both bounds are inclusive of on-track.
ON_TRACK_LOWER_PERCENT = Decimal("80")
ON_TRACK_UPPER_PERCENT = Decimal("100")

DEFAULT_CATEGORY_ICON = "🎉"


__all__ = [
    "EVENT_TYPES",
    "PAYMENT_METHODS",
    "SUPPORTED_CURRENCIES",
    "ON_TRACK_LOWER_PERCENT",
    "ON_TRACK_UPPER_PERCENT",
    "DEFAULT_CATEGORY_ICON",
]
