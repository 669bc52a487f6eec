"""Helpers for Decimal normalization."""

from decimal import Decimal, InvalidOperation

ZERO = Decimal("0")


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from a document or a caller.

    Returns:
        Decimal: Normalized numeric value.

    Raises:
        ValueError: If the value cannot be read as a finite number.
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValueError(f"Invalid amount: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return result


def floor_at_zero(value: Decimal) -> Decimal:
    """Clamp a Decimal so it never drops below zero."""
    return value if value > ZERO else ZERO


__all__ = ["ZERO", "coerce_decimal", "floor_at_zero"]
