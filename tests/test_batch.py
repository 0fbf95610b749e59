"""
Order-level stock planning tests: aggregate lengths, bars, waste, rejected lines.
"""

from decimal import Decimal

from window_quote.calculators.batch import plan_batch_stock
from window_quote.models import OrderLine


def _line(length, width, quantity=1, **kw):
    return OrderLine(length_cm=length, width_cm=width, quantity=quantity, **kw)


def test_two_window_order():
    """100x100 + 120x110: 860 cm of frame, 1249.2 cm of sash."""
    plan = plan_batch_stock([_line(100, 100), _line(120, 110)])
    assert plan.window_count == 2
    assert plan.bar_length == Decimal(650)

    assert plan.frame.total_required_length == Decimal(860)
    assert plan.frame.bars_needed == 2
    assert plan.frame.waste_length == Decimal(440)

    assert plan.sash.total_required_length == Decimal("1249.2")
    assert plan.sash.bars_needed == 2
    assert plan.sash.waste_length == Decimal("50.8")
    assert plan.rejected == []


def test_quantity_multiplies_lengths():
    plan = plan_batch_stock([_line(100, 100, quantity=3)])
    assert plan.window_count == 3
    assert plan.frame.total_required_length == Decimal(1200)
    assert plan.frame.bars_needed == 2
    assert plan.sash.total_required_length == Decimal("1723.8")
    assert plan.sash.bars_needed == 3


def test_rounding_happens_once_for_the_whole_order():
    """Five 400 cm frames fit in 4 bars, not the 5 a per-window count would give."""
    plan = plan_batch_stock([_line(100, 100)] * 5)
    assert plan.frame.total_required_length == Decimal(2000)
    assert plan.frame.bars_needed == 4
    assert plan.frame.waste_length == Decimal(600)


def test_custom_bar_length():
    plan = plan_batch_stock([_line(100, 100), _line(120, 110)], bar_length=600)
    assert plan.bar_length == Decimal(600)
    assert plan.frame.bars_needed == 2
    assert plan.frame.waste_length == Decimal(340)
    assert plan.sash.bars_needed == 3


def test_invalid_lines_are_rejected_not_counted():
    lines = [
        _line(100, 100),
        _line(0, 100, label="typo"),
        _line(120, 110, quantity=0),
        _line(120, 110),
    ]
    plan = plan_batch_stock(lines)
    assert plan.window_count == 2
    assert plan.frame.total_required_length == Decimal(860)
    assert [r.index for r in plan.rejected] == [1, 2]
    assert plan.rejected[0].label == "typo"
    assert "positive" in plan.rejected[0].reason
    assert "quantity" in plan.rejected[1].reason


def test_empty_order_needs_nothing():
    plan = plan_batch_stock([])
    assert plan.window_count == 0
    assert plan.frame.bars_needed == 0
    assert plan.sash.bars_needed == 0
    assert plan.frame.utilization_pct == 0


def test_styles_do_not_change_lengths():
    plain_line = plan_batch_stock([_line(100, 100)])
    wood = plan_batch_stock([_line(100, 100, color="woodgrain", frame_style="pral", sash_style="40404")])
    assert plain_line.frame == wood.frame
    assert plain_line.sash == wood.sash
