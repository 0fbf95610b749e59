from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional

from ..catalog import MaterialCatalog
from ..errors import QuoteError
from ..logic.fallbacks import DEFAULT_FALLBACKS, FallbackPrices
from ..logic.references import DEFAULT_TABLES, ReferenceTables, compatibility_notes
from ..models import CostBreakdown, PolicyConfig, WindowSpecs
from .bars import bar_usage
from .geometry import compute_geometry, validate_dimensions
from .glass import glass_items
from .hardware import hardware_items
from .pricing import PriceBook, QuoteContext, sum_items, validate_margin
from .profiles import frame_items, sash_items, separator_items

logger = logging.getLogger(__name__)

DEFAULT_PROFIT_MARGIN = Decimal("0.30")


def calculate_window_cost(
    specs: WindowSpecs,
    catalog: MaterialCatalog,
    margin=DEFAULT_PROFIT_MARGIN,
    *,
    tables: ReferenceTables = DEFAULT_TABLES,
    fallbacks: FallbackPrices = DEFAULT_FALLBACKS,
    policy: Optional[PolicyConfig] = None,
    strict: bool = False,
) -> CostBreakdown:
    """Itemized, margin-applied bill of materials for one two-sash window.

    The margin is applied to every line separately and the total is the plain
    sum of the lines. Catalog misses and defaulted table lookups do not fail the
    calculation; they are listed in ``CostBreakdown.audit``. With ``strict=True``
    a defaulted lookup raises UnresolvedReference instead.

    Raises InvalidMargin / InvalidDimensions before anything is priced.
    """
    policy = policy or PolicyConfig()
    m = validate_margin(margin)
    validate_dimensions(specs.length_cm, specs.width_cm)

    geometry = compute_geometry(specs)
    bar = policy.bar_length_cm
    usage = {
        "frame": bar_usage(geometry.frame_perimeter, bar),
        "sash": bar_usage(geometry.total_sash_length, bar),
        "separator": bar_usage(geometry.separator_length, bar),
    }

    prices = PriceBook(catalog, fallbacks)
    ctx = QuoteContext(
        specs=specs,
        geometry=geometry,
        tables=tables,
        prices=prices,
        policy=policy,
        margin=m,
        strict=strict,
        notes=compatibility_notes(specs, tables),
    )

    frame = frame_items(ctx, usage["frame"])
    sashes = sash_items(ctx, usage["sash"])
    separator = separator_items(ctx, usage["separator"])
    glass = glass_items(ctx)
    hardware = hardware_items(ctx)

    total = sum_items(frame) + sum_items(sashes) + sum_items(separator) + sum_items(glass) + sum_items(hardware)
    audit = ctx.notes + prices.notes
    logger.debug(
        "window %sx%s %s: total %s (%d audit notes)",
        specs.length_cm, specs.width_cm, specs.color, total, len(audit),
    )
    return CostBreakdown(
        frame=frame,
        sashes=sashes,
        separator=separator,
        glass=glass,
        hardware=hardware,
        total_cost=total,
        specs=specs,
        margin=m,
        geometry=geometry,
        bar_usage=usage,
        audit=audit,
    )


@dataclass(frozen=True)
class WindowQuote:
    index: int
    specs: WindowSpecs
    breakdown: Optional[CostBreakdown] = None
    error: Optional[QuoteError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def quote_windows(
    windows: Iterable[WindowSpecs],
    catalog: MaterialCatalog,
    margin=DEFAULT_PROFIT_MARGIN,
    **kwargs,
) -> List[WindowQuote]:
    """Quote each window independently; one bad window does not stop the rest."""
    out: List[WindowQuote] = []
    for i, specs in enumerate(windows):
        try:
            bd = calculate_window_cost(specs, catalog, margin, **kwargs)
        except QuoteError as e:
            logger.warning("window %d rejected: %s", i + 1, e)
            out.append(WindowQuote(index=i, specs=specs, error=e))
            continue
        out.append(WindowQuote(index=i, specs=specs, breakdown=bd))
    return out


def order_total(quotes: Iterable[WindowQuote]) -> Decimal:
    """Sum of the successfully quoted windows; order lines count `quantity` times."""
    return sum(
        (q.breakdown.total_cost * getattr(q.specs, "quantity", 1) for q in quotes if q.ok),
        Decimal(0),
    )
