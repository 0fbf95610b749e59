from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Tuple

from ..errors import UnresolvedReference
from ..logic import references as r
from ..models import AuditNote, CostItem, PolicyConfig
from ..utils import fixed
from .pricing import QuoteContext

logger = logging.getLogger(__name__)


def glass_price(policy: PolicyConfig, glass_type: str) -> Tuple[Decimal, bool]:
    """(price per m², known) for a glass type; unknown types get the policy default."""
    price = policy.glass_prices_per_m2.get(glass_type)
    if price is None:
        return policy.glass_price_default, False
    return price, True


def glass_items(ctx: QuoteContext) -> List[CostItem]:
    g = ctx.geometry
    price, known = glass_price(ctx.policy, ctx.specs.glass_type)
    if not known:
        if ctx.strict:
            raise UnresolvedReference("glass", (ctx.specs.glass_type,), "default glass price")
        logger.warning("no price for glass type %r, using default %s/m2", ctx.specs.glass_type, price)
        ctx.notes.append(AuditNote(
            kind="unresolved_reference",
            component="glass",
            message=f"no price for glass type {ctx.specs.glass_type!r}; default {price}/m2 used",
            fallback_price=price,
        ))

    gasket_ref = ctx.tables.fixed_ref(r.GLAZING_GASKET)
    gasket_price, gasket_source = ctx.prices.unit_price(r.GLAZING_GASKET, gasket_ref)
    return [
        ctx.item(
            "Glass 4 mm",
            g.total_glass_area_m2,
            price,
            f"{fixed(g.total_glass_area_m2, 2)} m²",
            source="policy",
            specifications=f"2 panes {fixed(g.glass_length, 1)} x {fixed(g.glass_width, 1)} cm",
        ),
        ctx.item(
            "Glazing gasket (joint plat)",
            g.joint_plat_m,
            gasket_price,
            f"{fixed(g.joint_plat_m, 1)} m",
            ref=gasket_ref,
            source=gasket_source,
            specifications="both sides",
        ),
    ]
