from __future__ import annotations

from decimal import Decimal
from typing import List

from ..logic import references as r
from ..models import CostItem
from ..normalize.options import color_label
from ..utils import fixed
from .geometry import CM_PER_M
from .pricing import QuoteContext


HINGES_PER_WINDOW = 4


def hardware_items(ctx: QuoteContext) -> List[CostItem]:
    """Hinges, cremone and kits are flat per window; weatherstrip and rod scale with size.

    The handle ref is resolved with the rest of the hardware but is not billed.
    """
    specs = ctx.specs
    g = ctx.geometry
    refs = ctx.tables.hardware_refs(specs.color)
    hw = "black" if r.hardware_color(specs.color) == "dark" else "white"
    finish_note = f"{hw} hardware for {color_label(specs.color).lower()} windows"

    def priced(role: str, ref: str):
        return (ref,) + ctx.prices.unit_price(role, ref)

    hinge_ref, hinge_price, hinge_src = priced(r.HINGE, refs[r.HINGE])
    cremone_ref, cremone_price, cremone_src = priced(r.CREMONE, refs[r.CREMONE])
    strip_ref, strip_price, strip_src = priced(r.WEATHERSTRIP, ctx.tables.fixed_ref(r.WEATHERSTRIP))
    ckit_ref, ckit_price, ckit_src = priced(r.CREMONE_KIT, ctx.tables.fixed_ref(r.CREMONE_KIT))
    lkit_ref, lkit_price, lkit_src = priced(r.LOCK_KIT, ctx.tables.fixed_ref(r.LOCK_KIT))
    rod_ref, rod_price, rod_src = priced(r.ROD, ctx.tables.fixed_ref(r.ROD))

    rod_m = specs.length_cm / CM_PER_M
    return [
        ctx.item(
            f"Hinges (paumelle {hw})", Decimal(HINGES_PER_WINDOW), hinge_price, f"{HINGES_PER_WINDOW} pcs",
            ref=hinge_ref, source=hinge_src, specifications=finish_note,
        ),
        ctx.item(
            "Weatherstrip (joint battement)", g.joint_battement_m, strip_price, f"{fixed(g.joint_battement_m, 1)} m",
            ref=strip_ref, source=strip_src,
        ),
        ctx.item(
            f"Cremone bolt ({hw})", Decimal(1), cremone_price, "1",
            ref=cremone_ref, source=cremone_src, specifications=finish_note,
        ),
        ctx.item("Cremone kit", Decimal(1), ckit_price, "1", ref=ckit_ref, source=ckit_src),
        ctx.item("Lock kit", Decimal(1), lkit_price, "1", ref=lkit_ref, source=lkit_src),
        ctx.item("Rod (tringle)", rod_m, rod_price, f"{fixed(rod_m, 2)} m", ref=rod_ref, source=rod_src),
    ]
