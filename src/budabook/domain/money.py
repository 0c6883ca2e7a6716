"""Money helpers shared by the pricing functions.

Amounts are carried as Decimal end to end. Nothing in here rounds a value
that is later stored; rounding only happens in format_currency, which is
display-only.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext

ZERO = Decimal(0)

_TWO_PLACES = Decimal("0.01")


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    """Convert a catalog amount to Decimal.

    Floats go through str() so that 0.1 becomes Decimal("0.1") rather than
    its binary expansion. None is treated as zero (nullable numeric columns).
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def to_json_number(value: Decimal) -> int | float:
    """Render an amount for a JSON payload: integral amounts as int."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def format_currency(amount: Decimal | int | float | str, symbol: str | None = None) -> str:
    """Format an amount for display, e.g. ``"₱5,200"`` or ``"₱1,234.5"``.

    Uses 0-2 fraction digits: rounds half-up to cents, then drops trailing
    zeros. The symbol defaults to the configured currency symbol.
    """
    if symbol is None:
        from budabook.infra.settings import get_settings

        symbol = get_settings().currency_symbol

    value = to_decimal(amount)
    # quantize needs enough digits for the whole part plus cents
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        value = value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    value = abs(value)

    whole, _, fraction = f"{value:f}".partition(".")
    fraction = fraction.rstrip("0")
    text = f"{int(whole):,}"
    if fraction:
        text = f"{text}.{fraction}"
    return f"{sign}{symbol}{text}"
