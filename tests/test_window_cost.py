"""
Window cost tests: BOM groups, margin, totals, fallbacks and audit notes.

Reference window: 100 x 100 cm, white, eurosist frame, 6007 inoforme sashes,
simple glass, bundled catalog, 30% margin. Totals below are exact Decimals.
"""

from dataclasses import replace
from decimal import Decimal

import pytest

from window_quote.calculators.pricing import apply_margin, validate_margin
from window_quote.calculators.window import calculate_window_cost, order_total, quote_windows
from window_quote.catalog import MaterialCatalog
from window_quote.errors import InvalidDimensions, InvalidMargin, UnresolvedReference
from window_quote.logic.references import DEFAULT_TABLES
from window_quote.models import OrderLine, PolicyConfig, WindowSpecs


GROUPS = ("frame", "sashes", "separator", "glass", "hardware")


def _catalog_without(catalog, *refs):
    return MaterialCatalog(m for m in catalog if m.ref not in refs)


# ============================================================
# Reference window
# ============================================================

def test_reference_window_total(catalog, white_window):
    bd = calculate_window_cost(white_window, catalog, Decimal("0.30"))
    assert bd.total_cost == Decimal("340.75396771")
    assert bd.audit == []


def test_reference_window_group_totals(catalog, white_window):
    bd = calculate_window_cost(white_window, catalog)
    assert bd.group_total("frame") == Decimal("102.674")
    assert bd.group_total("sashes") == Decimal("88.023")
    assert bd.group_total("separator") == Decimal("64.09")
    assert bd.group_total("glass") == Decimal("42.76963171")
    assert bd.group_total("hardware") == Decimal("43.197336")


def test_group_layout(catalog, white_window):
    bd = calculate_window_cost(white_window, catalog)
    assert [len(bd.groups()[g]) for g in GROUPS] == [3, 3, 1, 2, 6]
    assert bd.frame[0].name == "40100 frame White eurosist"
    assert bd.sashes[0].name == "6007 inoforme White (2 sashes)"
    assert bd.separator[0].name == "40112 sash separator White"


def test_profile_lines_bill_whole_bars(catalog, white_window):
    bd = calculate_window_cost(white_window, catalog, 0)
    frame = bd.frame[0]
    assert frame.ref == "3"
    assert frame.quantity == 1
    assert frame.unit_price == Decimal("74")
    assert frame.total_cost == Decimal("74")
    assert frame.quantity_description == "0.6 bars (400.0 cm)"
    assert frame.specifications == "consumption: 400.0 cm - billed: 1 bars x 74"
    assert bd.sashes[0].quantity_description == "0.9 bars (574.6 cm)"


def test_boxed_and_rolled_items_are_priced_per_unit(catalog, white_window):
    bd = calculate_window_cost(white_window, catalog, 0)
    pm = bd.frame[2]
    assert pm.unit_price == Decimal("0.045")        # box of 100 at 4.5
    assert pm.total_cost == Decimal("0.18")
    gasket = bd.glass[1]
    assert gasket.unit_price == Decimal("0.4526")   # 50 m roll at 22.63
    assert gasket.quantity_description == "11.5 m"


def test_glass_line(catalog, white_window):
    bd = calculate_window_cost(white_window, catalog, 0)
    glass = bd.glass[0]
    assert glass.unit_price == Decimal("31.25")
    assert glass.quantity == Decimal("0.88635")
    assert glass.quantity_description == "0.89 m²"
    assert glass.specifications == "2 panes 95.0 x 46.7 cm"
    assert glass.price_source == "policy"


def test_rod_scales_with_length(catalog):
    short = calculate_window_cost(WindowSpecs(length_cm=100, width_cm=100), catalog, 0)
    tall = calculate_window_cost(WindowSpecs(length_cm=150, width_cm=100), catalog, 0)
    assert short.hardware[-1].total_cost == Decimal("1.7")
    assert tall.hardware[-1].total_cost == Decimal("2.55")
    assert tall.hardware[-1].quantity_description == "1.50 m"
    # flat items do not move with size
    assert short.hardware[0].total_cost == tall.hardware[0].total_cost


def test_dark_hardware_for_woodgrain(catalog, wood_window):
    bd = calculate_window_cost(wood_window, catalog)
    refs = [i.ref for i in bd.hardware]
    assert refs[0] == "36"   # black hinges
    assert refs[2] == "63"   # black cremone
    assert "black" in bd.hardware[0].name
    assert bd.frame[0].ref == "9"
    assert bd.sashes[0].ref == "11"
    assert bd.separator[0].ref == "96"
    assert bd.audit == []


def test_breakdown_carries_geometry_and_bar_usage(catalog, white_window):
    bd = calculate_window_cost(white_window, catalog)
    assert bd.geometry.total_sash_length == Decimal("574.6")
    assert set(bd.bar_usage) == {"frame", "sash", "separator"}
    assert bd.bar_usage["frame"].waste_length == Decimal(250)
    assert bd.specs == white_window


# ============================================================
# Invariants
# ============================================================

@pytest.mark.parametrize("length,width,color,frame,sash,sub", [
    (100, 100, "white", "eurosist", "6007", "inoforme"),
    (120, 110, "woodgrain", "inter", "40404", "technoline"),
    (215, 180, "gray", "losanzo", "6007", "gray"),
    ("60.5", "45.2", "white", "eco_loranzo", "40404", "inter"),
    (700, 300, "white", "inoforme", "6007", "inoforme_alt"),
])
def test_total_is_sum_of_groups_and_items(catalog, length, width, color, frame, sash, sub):
    specs = WindowSpecs(length_cm=length, width_cm=width, color=color,
                        frame_style=frame, sash_style=sash, sash_subtype=sub)
    bd = calculate_window_cost(specs, catalog, "0.25")
    group_sum = sum(bd.group_total(g) for g in GROUPS)
    item_sum = sum(i.total_cost for g in GROUPS for i in bd.groups()[g])
    assert bd.total_cost == group_sum == item_sum


def test_margin_applied_per_line(catalog, white_window):
    bd = calculate_window_cost(white_window, catalog, "0.2")
    for items in bd.groups().values():
        for item in items:
            assert item.total_cost == item.quantity * item.unit_price * Decimal("1.2")


@pytest.mark.parametrize("low,high", [("0", "0.1"), ("0.1", "0.3"), ("0.3", "1.5")])
def test_margin_monotonicity(catalog, white_window, low, high):
    a = calculate_window_cost(white_window, catalog, low)
    b = calculate_window_cost(white_window, catalog, high)
    assert b.total_cost > a.total_cost


def test_zero_margin_is_raw_cost(catalog, white_window):
    raw = calculate_window_cost(white_window, catalog, 0)
    marked = calculate_window_cost(white_window, catalog, "0.30")
    assert marked.total_cost == apply_margin(raw.total_cost, Decimal("0.30"))


def test_idempotent(catalog, white_window):
    a = calculate_window_cost(white_window, catalog)
    b = calculate_window_cost(white_window, catalog)
    assert a == b
    assert a.model_dump_json() == b.model_dump_json()


def test_default_margin_is_thirty_percent(catalog, white_window):
    assert calculate_window_cost(white_window, catalog).margin == Decimal("0.30")


# ============================================================
# Rejections
# ============================================================

def test_negative_margin_rejected(catalog, white_window):
    with pytest.raises(InvalidMargin):
        calculate_window_cost(white_window, catalog, "-0.1")
    with pytest.raises(InvalidMargin):
        validate_margin(-1)


@pytest.mark.parametrize("length,width", [(0, 100), (100, -1), (100, 6), (4, 100)])
def test_bad_dimensions_rejected_before_pricing(catalog, length, width):
    with pytest.raises(InvalidDimensions):
        calculate_window_cost(WindowSpecs(length_cm=length, width_cm=width), catalog)


# ============================================================
# Fallbacks and audit
# ============================================================

def test_missing_material_uses_fallback_and_is_reported(catalog, white_window):
    cat = _catalog_without(catalog, "3", "89")
    bd = calculate_window_cost(white_window, cat, 0)
    assert bd.frame[0].price_source == "fallback"
    assert bd.frame[0].unit_price == Decimal("74")
    assert bd.glass[1].price_source == "fallback"
    missing = [n for n in bd.audit if n.kind == "material_not_found"]
    assert [n.ref for n in missing] == ["3", "89"]
    assert missing[0].fallback_price == Decimal("74")
    assert bd.used_fallbacks


def test_fallback_price_is_never_zero(white_window):
    """An empty catalog still prices every line from the fallback table."""
    bd = calculate_window_cost(white_window, MaterialCatalog(), 0)
    for items in bd.groups().values():
        for item in items:
            assert item.total_cost > 0
    assert len([n for n in bd.audit if n.kind == "material_not_found"]) == 13


def test_shared_ref_missing_is_noted_once(catalog, white_window):
    """Corner brackets bill on both frame and sashes; one miss, one note."""
    bd = calculate_window_cost(white_window, _catalog_without(catalog, "43"), 0)
    notes = [n for n in bd.audit if n.ref == "43"]
    assert len(notes) == 1
    assert notes[0].component == "corner_bracket"
    assert bd.frame[1].price_source == "fallback"
    assert bd.sashes[1].price_source == "fallback"


def test_default_reference_is_flagged(catalog, white_window):
    frame = {k: v for k, v in DEFAULT_TABLES.frame.items() if k != ("white", "eurosist")}
    tables = replace(DEFAULT_TABLES, frame=frame)
    bd = calculate_window_cost(white_window, catalog, tables=tables)
    assert bd.frame[0].ref == "3"
    notes = [n for n in bd.audit if n.kind == "unresolved_reference"]
    assert len(notes) == 1
    assert notes[0].component == "frame_profile"
    assert notes[0].fallback_ref == "3"
    assert "white/eurosist" in notes[0].message


def test_incompatible_options_still_priced(catalog):
    specs = WindowSpecs(length_cm=100, width_cm=100, color="gray", frame_style="pral",
                        sash_style="40404", sash_subtype="pral")
    bd = calculate_window_cost(specs, catalog)
    kinds = sorted(n.kind for n in bd.audit)
    assert kinds == [
        "incompatible_combination", "incompatible_combination",
        "unresolved_reference", "unresolved_reference",
    ]
    assert bd.frame[0].ref == "3"
    assert bd.sashes[0].ref == "12"
    assert bd.total_cost > 0


def test_strict_mode_refuses_defaults(catalog):
    specs = WindowSpecs(length_cm=100, width_cm=100, frame_style="losanzo")
    with pytest.raises(UnresolvedReference) as exc:
        calculate_window_cost(specs, catalog, strict=True)
    assert exc.value.table == "frame"
    assert exc.value.default_ref == "3"


def test_unknown_glass_type_uses_policy_default(catalog):
    specs = WindowSpecs(length_cm=100, width_cm=100, glass_type="laminated")
    bd = calculate_window_cost(specs, catalog)
    assert bd.glass[0].unit_price == Decimal("31.25")
    assert [n.component for n in bd.audit] == ["glass"]
    with pytest.raises(UnresolvedReference):
        calculate_window_cost(specs, catalog, strict=True)


def test_policy_glass_price_table(catalog):
    policy = PolicyConfig(glass_prices_per_m2={"simple": "31.25", "frosted": "40"})
    specs = WindowSpecs(length_cm=100, width_cm=100, glass_type="Frosted")
    bd = calculate_window_cost(specs, catalog, 0, policy=policy)
    assert bd.glass[0].unit_price == Decimal(40)
    assert bd.audit == []


def test_policy_bar_length_changes_bar_count(catalog):
    policy = PolicyConfig(bar_length_cm=300)
    bd = calculate_window_cost(WindowSpecs(length_cm=100, width_cm=100), catalog, 0, policy=policy)
    assert bd.frame[0].quantity == 2
    assert bd.bar_usage["sash"].actual_bars_needed == 2


# ============================================================
# Several windows
# ============================================================

def test_quote_windows_isolates_failures(catalog):
    windows = [
        WindowSpecs(length_cm=100, width_cm=100),
        WindowSpecs(length_cm=0, width_cm=100),
        WindowSpecs(length_cm=120, width_cm=110),
    ]
    quotes = quote_windows(windows, catalog)
    assert [q.ok for q in quotes] == [True, False, True]
    assert isinstance(quotes[1].error, InvalidDimensions)
    assert order_total(quotes) == quotes[0].breakdown.total_cost + quotes[2].breakdown.total_cost


def test_order_total_counts_quantities(catalog):
    lines = [OrderLine(length_cm=100, width_cm=100, quantity=3)]
    quotes = quote_windows(lines, catalog)
    assert order_total(quotes) == quotes[0].breakdown.total_cost * 3


def test_color_aliases_accepted(catalog):
    a = calculate_window_cost(WindowSpecs(length_cm=100, width_cm=100, color="blanc"), catalog)
    b = calculate_window_cost(WindowSpecs(length_cm=100, width_cm=100, color="white"), catalog)
    assert a.total_cost == b.total_cost
