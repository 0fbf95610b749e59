from __future__ import annotations

from decimal import Decimal

from ..errors import InvalidDimensions
from ..models import WindowGeometry, WindowSpecs
from ..utils import to_decimal


# Fixed manufacturing clearances (cm) for the two-sash window
SASH_LENGTH_CLEARANCE = Decimal(4)
SASH_WIDTH_CLEARANCE = Decimal("4.7")
GLASS_REBATE = Decimal(1)
SASH_COUNT = 2

CM2_PER_M2 = Decimal(10000)
CM_PER_M = Decimal(100)


def validate_dimensions(length_cm, width_cm) -> None:
    """Reject sizes that would leave no room for the sashes or the glass."""
    length = to_decimal(length_cm)
    width = to_decimal(width_cm)
    if length <= 0 or width <= 0:
        raise InvalidDimensions(
            f"length and width must be positive, got {length} x {width} cm", length, width
        )
    sash_width = (width - SASH_WIDTH_CLEARANCE) / SASH_COUNT
    if sash_width <= 0 or sash_width - GLASS_REBATE <= 0:
        raise InvalidDimensions(
            f"width {width} cm is too narrow for two sashes", length, width
        )
    if length - SASH_LENGTH_CLEARANCE - GLASS_REBATE <= 0:
        raise InvalidDimensions(
            f"length {length} cm is too short for the sash glazing", length, width
        )


def frame_perimeter(length_cm, width_cm) -> Decimal:
    return 2 * (to_decimal(length_cm) + to_decimal(width_cm))


def sash_dimensions(length_cm, width_cm) -> tuple[Decimal, Decimal]:
    """(sash_length, sash_width) of one of the two sashes.

    Length takes the 4 cm clearance; the width is split between the two sashes
    after the 4.7 cm clearance, so swapping length and width is not symmetric.
    """
    sash_length = to_decimal(length_cm) - SASH_LENGTH_CLEARANCE
    sash_width = (to_decimal(width_cm) - SASH_WIDTH_CLEARANCE) / SASH_COUNT
    return sash_length, sash_width


def total_sash_length(length_cm, width_cm) -> Decimal:
    sash_length, sash_width = sash_dimensions(length_cm, width_cm)
    return 2 * (sash_length + sash_width) * SASH_COUNT


def compute_geometry(specs: WindowSpecs) -> WindowGeometry:
    """Derive profile lengths (cm), glass sizes and joint lengths (m) for one window.

    Does not validate or clamp; call validate_dimensions first.
    """
    perimeter = frame_perimeter(specs.length_cm, specs.width_cm)
    sash_length, sash_width = sash_dimensions(specs.length_cm, specs.width_cm)
    sash_perimeter = 2 * (sash_length + sash_width)
    sash_total = sash_perimeter * SASH_COUNT

    glass_length = sash_length - GLASS_REBATE
    glass_width = sash_width - GLASS_REBATE
    area_per_sash = (glass_length * glass_width) / CM2_PER_M2

    return WindowGeometry(
        frame_perimeter=perimeter,
        sash_length=sash_length,
        sash_width=sash_width,
        sash_perimeter_single=sash_perimeter,
        total_sash_length=sash_total,
        separator_length=sash_length,
        glass_length=glass_length,
        glass_width=glass_width,
        glass_area_per_sash_m2=area_per_sash,
        total_glass_area_m2=area_per_sash * SASH_COUNT,
        joint_battement_m=(perimeter + sash_total) / CM_PER_M,
        joint_plat_m=(sash_total * 2) / CM_PER_M,
    )
