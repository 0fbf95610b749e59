from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, List

from ..errors import InvalidQuantity, QuoteError
from ..models import BatchStockPlan, OrderLine, RejectedLine
from .bars import BAR_LENGTH_CM, bar_usage, to_stock_plan
from .geometry import frame_perimeter, total_sash_length, validate_dimensions

logger = logging.getLogger(__name__)


def plan_batch_stock(lines: Iterable[OrderLine], bar_length=BAR_LENGTH_CM) -> BatchStockPlan:
    """How many stock bars to buy for a whole order, per profile family.

    Lengths are summed over the order (times each line's quantity) and rounded
    up to whole bars once, at the aggregate. This is a different figure from the
    per-window bar counts shown on a window's BOM, which round each window on
    its own.

    Lines with unusable dimensions or quantity are left out and listed in
    ``rejected``.
    """
    total_frame = Decimal(0)
    total_sash = Decimal(0)
    windows = 0
    rejected: List[RejectedLine] = []

    for i, line in enumerate(lines):
        try:
            if line.quantity < 1:
                raise InvalidQuantity(line.quantity)
            validate_dimensions(line.length_cm, line.width_cm)
        except QuoteError as e:
            logger.warning("order line %d skipped: %s", i + 1, e)
            rejected.append(RejectedLine(index=i, label=line.label, reason=str(e)))
            continue
        total_frame += frame_perimeter(line.length_cm, line.width_cm) * line.quantity
        total_sash += total_sash_length(line.length_cm, line.width_cm) * line.quantity
        windows += line.quantity

    frame = bar_usage(total_frame, bar_length)
    sash = bar_usage(total_sash, bar_length)
    logger.debug(
        "order of %d windows: frame %s cm -> %d bars, sash %s cm -> %d bars",
        windows, total_frame, frame.actual_bars_needed, total_sash, sash.actual_bars_needed,
    )
    return BatchStockPlan(
        frame=to_stock_plan(frame),
        sash=to_stock_plan(sash),
        bar_length=frame.bar_length,
        window_count=windows,
        rejected=rejected,
    )
