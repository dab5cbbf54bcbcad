"""Helpers for Decimal normalization."""

from decimal import Decimal, InvalidOperation


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL, loaders or callers.

    Returns:
        Decimal: Normalized numeric value, zero for missing values.

    Raises:
        ValueError: If the value is not numeric.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, str):
        value = value.replace("'", "").replace(" ", "")
        if not value:
            return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Not a numeric value: {value!r}") from exc


def is_finite_number(value) -> bool:
    """Return True when the value is a finite Decimal, int or float."""
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, (int, float)):
        return value == value and value not in (float("inf"), float("-inf"))
    return False


__all__ = ["coerce_decimal", "is_finite_number"]
