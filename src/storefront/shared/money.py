"""Fixed-point money helpers.

Amounts are stored as integer minor units (cents) and exposed at the HTTP
boundary as two-place ``Decimal`` values. Binary floats never touch money.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean.exceptions import ValidationError

CENT = Decimal("0.01")


def to_minor_units(amount, field="amount") -> int:
    """Convert a decimal-like amount (``Decimal``, ``str`` or ``int``) to cents."""
    if amount is None:
        return 0
    if isinstance(amount, float):
        amount = repr(amount)
    try:
        value = Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError({field: [f"Invalid monetary amount: {amount!r}"]}) from exc
    if not value.is_finite():
        raise ValidationError({field: [f"Invalid monetary amount: {amount!r}"]})
    return int(value * 100)


def to_decimal(minor_units) -> Decimal:
    """Convert cents back to a two-place ``Decimal``."""
    return (Decimal(minor_units or 0) / 100).quantize(CENT)
