"""Currency arithmetic helpers"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

CENTS = Decimal("0.01")


def to_decimal(value: Union[str, int, float, Decimal]) -> Decimal:
    """Coerce a JSON number or string to Decimal without float artifacts"""
    if isinstance(value, bool):
        raise ValueError(f"Invalid money amount: {value!r}")
    try:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Invalid money amount: {value!r}") from e


def round_money(amount: Decimal) -> Decimal:
    """Round to whole cents, halves away from zero"""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def plain_number(amount: Decimal) -> str:
    """Render like a JSON number: 50.00 -> '50', 12.50 -> '12.5'"""
    normalized = amount.normalize()
    if normalized == normalized.to_integral_value():
        return str(normalized.quantize(Decimal(1)))
    return format(normalized, "f")
