from __future__ import annotations

import logging
from decimal import Decimal

from ..errors import InvalidDimensions
from ..models import BarUsage, StockPlan
from ..utils import ceil_decimal, to_decimal

logger = logging.getLogger(__name__)

BAR_LENGTH_CM = Decimal(650)


def bar_usage(required_length, bar_length=BAR_LENGTH_CM) -> BarUsage:
    """Stock bars needed for a total linear length, by capacity rounding.

    Every required piece is assumed to come out of any bar: no cutting layout,
    no kerf, no offcut reuse between profile families. Waste and utilization
    are therefore a lower bound on what the shop floor will see.
    """
    required = to_decimal(required_length)
    bar = to_decimal(bar_length)
    if bar <= 0:
        raise InvalidDimensions(f"bar length must be positive, got {bar} cm")
    if required < 0:
        raise InvalidDimensions(f"required length must be >= 0, got {required} cm")

    exact = required / bar
    actual = ceil_decimal(exact)
    purchased = actual * bar
    waste = purchased - required
    utilization = (required / purchased * 100) if purchased else Decimal(0)
    logger.debug("%s cm on %s cm bars -> %d bars, %s cm waste", required, bar, actual, waste)
    return BarUsage(
        required_length=required,
        bar_length=bar,
        exact_bars_needed=exact,
        actual_bars_needed=actual,
        waste_length=waste,
        utilization_pct=utilization,
    )


def to_stock_plan(usage: BarUsage) -> StockPlan:
    return StockPlan(
        total_required_length=usage.required_length,
        bars_needed=usage.actual_bars_needed,
        waste_length=usage.waste_length,
        utilization_pct=usage.utilization_pct,
    )
