from __future__ import annotations

from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP


def to_decimal(x) -> Decimal:
    if isinstance(x, Decimal):
        return x
    if x is None:
        return Decimal(0)
    return Decimal(str(x))


def ceil_decimal(x: Decimal) -> int:
    return int(to_decimal(x).to_integral_value(rounding=ROUND_CEILING))


def fixed(x, places: int = 1) -> str:
    """Format a number with a fixed number of decimals (half-up), e.g. for quantity labels."""
    q = Decimal(10) ** -places
    return f"{to_decimal(x).quantize(q, rounding=ROUND_HALF_UP):.{places}f}"


def plain(x) -> str:
    """Render a Decimal without trailing zeros: 400.0 -> '400', 574.60 -> '574.6'."""
    d = to_decimal(x)
    if d == d.to_integral_value():
        return str(d.quantize(Decimal(1)))
    return format(d.normalize(), "f")


def money(amount: Decimal, symbol: str = "TND", places: int = 2) -> str:
    q = Decimal(10) ** -places
    val = to_decimal(amount).quantize(q, rounding=ROUND_HALF_UP)
    parts = f"{val:.{places}f}".split(".")
    whole = parts[0]
    frac = parts[1] if len(parts) > 1 else "00"
    sign = ""
    if whole.startswith("-"):
        sign = "-"
        whole = whole[1:]
    whole_with_commas = "{:,}".format(int(whole))
    return f"{sign}{whole_with_commas}.{frac} {symbol}".rstrip()
