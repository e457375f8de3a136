"""Decimal helpers shared by settlement and replay."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Persisted scales (match the ORM column definitions)
NAV_QUANT = Decimal("0.0001")
SHARES_QUANT = Decimal("0.00000001")
COST_QUANT = Decimal("0.00000001")
AMOUNT_QUANT = Decimal("0.0001")

# Presentation scale for replay output
DISPLAY_QUANT = Decimal("0.01")


def to_decimal(value: Union[Decimal, int, str, float, None]) -> Optional[Decimal]:
    """Convert a value to Decimal without going through binary float repr."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize(value: Decimal, quant: Decimal) -> Decimal:
    """Round half-up to the given quantum."""
    return value.quantize(quant, rounding=ROUND_HALF_UP)


def round_display(value: Decimal) -> Decimal:
    """Round to 2 decimal places for output."""
    return quantize(value, DISPLAY_QUANT)
