from __future__ import annotations

from decimal import Decimal
from typing import List

from ..logic import references as r
from ..models import BarUsage, CostItem
from ..normalize.options import color_label
from ..utils import fixed, plain
from .pricing import QuoteContext


FRAME_CORNER_BRACKETS = 4
FRAME_ALIGNMENT_CORNERS = 4
SASH_CORNER_BRACKETS = 8  # 4 per sash
SASH_ALIGNMENT_CORNERS = 8


def _bar_item(ctx: QuoteContext, name: str, role: str, ref: str, usage: BarUsage) -> CostItem:
    # Displayed as the exact fraction of a bar, billed in whole bars
    price, source = ctx.prices.unit_price(role, ref)
    return ctx.item(
        name,
        usage.actual_bars_needed,
        price,
        f"{fixed(usage.exact_bars_needed, 1)} bars ({fixed(usage.required_length, 1)} cm)",
        ref=ref,
        source=source,
        specifications=(
            f"consumption: {fixed(usage.required_length, 1)} cm - "
            f"billed: {usage.actual_bars_needed} bars x {plain(price)}"
        ),
    )


def _pieces_item(ctx: QuoteContext, name: str, role: str, count: int) -> CostItem:
    ref = ctx.tables.fixed_ref(role)
    price, source = ctx.prices.unit_price(role, ref)
    return ctx.item(name, Decimal(count), price, f"{count} pcs", ref=ref, source=source)


def frame_items(ctx: QuoteContext, usage: BarUsage) -> List[CostItem]:
    specs = ctx.specs
    ref = ctx.resolved(r.FRAME_PROFILE, "frame", ctx.tables.frame_ref(specs.color, specs.frame_style))
    return [
        _bar_item(ctx, f"40100 frame {color_label(specs.color)} {specs.frame_style}", r.FRAME_PROFILE, ref, usage),
        _pieces_item(ctx, "Frame corner brackets (equerre en tole)", r.CORNER_BRACKET, FRAME_CORNER_BRACKETS),
        _pieces_item(ctx, "Alignment corners PM", r.ALIGNMENT_CORNER_PM, FRAME_ALIGNMENT_CORNERS),
    ]


def sash_items(ctx: QuoteContext, usage: BarUsage) -> List[CostItem]:
    specs = ctx.specs
    ref = ctx.resolved(
        r.SASH_PROFILE, "sash", ctx.tables.sash_ref(specs.sash_style, specs.sash_subtype, specs.color)
    )
    name = f"{specs.sash_style} {specs.sash_subtype} {color_label(specs.color)} (2 sashes)"
    return [
        _bar_item(ctx, name, r.SASH_PROFILE, ref, usage),
        _pieces_item(ctx, "Sash corner brackets (equerre en tole)", r.CORNER_BRACKET, SASH_CORNER_BRACKETS),
        _pieces_item(ctx, "Alignment corners GM", r.ALIGNMENT_CORNER_GM, SASH_ALIGNMENT_CORNERS),
    ]


def separator_items(ctx: QuoteContext, usage: BarUsage) -> List[CostItem]:
    color = ctx.specs.color
    ref = ctx.resolved(r.SEPARATOR_PROFILE, "separator", ctx.tables.separator_ref(color))
    return [
        _bar_item(ctx, f"40112 sash separator {color_label(color)}", r.SEPARATOR_PROFILE, ref, usage),
    ]
