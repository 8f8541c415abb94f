"""Fixed-point helpers for monetary amounts.

Amounts are persisted as floats (the JSON contract speaks numbers) but every
computation goes through ``Decimal`` quantized to cents so that summing many
line items never drifts.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Convert a float, int, str or Decimal into a cent-quantized Decimal."""
    if value is None:
        raise ValueError("Amount is required")
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(price, quantity: int) -> Decimal:
    return (to_money(price) * quantity).quantize(CENT, rounding=ROUND_HALF_UP)


def sum_lines(lines) -> Decimal:
    """Sum ``(price, quantity)`` pairs."""
    total = ZERO
    for price, quantity in lines:
        total += line_total(price, quantity)
    return total


def as_float(amount: Decimal) -> float:
    return float(amount.quantize(CENT, rounding=ROUND_HALF_UP))
