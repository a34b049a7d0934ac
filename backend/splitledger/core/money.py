"""
Money helpers.

The ledger works in integer minor units (cents) so that balances can be
compared exactly. Decimals only appear at the edges: when reading amounts
from records and when handing results back to the caller.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENT = Decimal("0.01")

Amount = Union[Decimal, int, float, str]


def to_decimal(value: Amount) -> Decimal:
    """Coerce a value to a Decimal rounded to the cent."""
    if not isinstance(value, Decimal):
        # str() keeps floats like 0.1 from dragging in binary noise
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(value: Amount) -> int:
    """Convert an amount to whole cents."""
    return int(to_decimal(value) * 100)


def from_cents(cents: int) -> Decimal:
    """Convert whole cents back to a 2-place Decimal."""
    return (Decimal(cents) / 100).quantize(CENT)


def round_cents(value: Decimal) -> int:
    """Round a fractional cent amount to the nearest whole cent."""
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))
