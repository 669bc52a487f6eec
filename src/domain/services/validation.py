"""Input validation helpers raising domain ValidationError."""

from decimal import Decimal

from src.domain.errors import ValidationError
from src.utils.decimal_utils import ZERO, coerce_decimal


def require_id(value: str | None, label: str) -> str:
    """Return a stripped identifier or raise when it is empty.

    Args:
        value: Raw identifier.
        label: Human readable name used in the error message.

    Returns:
        str: Identifier without surrounding whitespace.

    Raises:
        ValidationError: If the identifier is missing or blank.
    """
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} is required")
    return str(value).strip()


def require_text(value: str | None, label: str) -> str:
    """Return trimmed text or raise when it is empty after trimming."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} is required")
    return str(value).strip()


def require_amount(value, label: str) -> Decimal:
    """Return ``value`` as a Decimal or raise when it is not a number."""
    if value is None:
        raise ValidationError(f"{label} is required")
    try:
        return coerce_decimal(value)
    except ValueError as exc:
        raise ValidationError(f"{label} must be a number") from exc


def require_positive(value, label: str) -> Decimal:
    """Return a strictly positive amount."""
    amount = require_amount(value, label)
    if amount <= ZERO:
        raise ValidationError(f"{label} must be greater than 0")
    return amount


def require_non_negative(value, label: str) -> Decimal:
    """Return an amount that is zero or above."""
    amount = require_amount(value, label)
    if amount < ZERO:
        raise ValidationError(f"{label} cannot be negative")
    return amount


def require_choice(value: str | None, choices, label: str) -> str:
    """Return ``value`` when it is one of ``choices``."""
    text = require_text(value, label)
    if text not in choices:
        raise ValidationError(
            f"{label} must be one of: {', '.join(choices)}"
        )
    return text


__all__ = [
    "require_id",
    "require_text",
    "require_amount",
    "require_positive",
    "require_non_negative",
    "require_choice",
]
