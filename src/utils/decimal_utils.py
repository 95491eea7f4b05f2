"""Decimal coercion for balance amounts."""

from decimal import Decimal


def coerce_decimal(value) -> Decimal:
    """Convert a balance amount to an exact Decimal.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion. Stored amounts are decimal strings
    and convert without loss.

    Args:
        value: Amount from a caller, a store row or a snapshot total.
            ``None`` counts as zero.

    Returns:
        Decimal: The amount.

    Raises:
        decimal.InvalidOperation: If a string is not a number.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


__all__ = ["coerce_decimal"]
