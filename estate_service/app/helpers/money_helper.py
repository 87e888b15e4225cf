from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable

MONEY_QUANTIZE = Decimal("0.01")  # Round to 2 decimal places
ZERO = Decimal("0.00")


def to_money(value: Any) -> Decimal:
    """Coerce a DB/JSON amount (Decimal, int, float, str, None) to cents."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, float):
        # go through str so 0.1 stays 0.1
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Invalid money amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Invalid money amount: {value!r}")
    return amount.quantize(MONEY_QUANTIZE, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Any]) -> Decimal:
    return sum((to_money(v) for v in values), ZERO)
