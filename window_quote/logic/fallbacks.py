from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from ..errors import ConfigError
from ..utils import to_decimal
from . import references as r


# Catalog prices for these items are per box or per roll; the BOM bills
# per piece / per meter.
PACK_SIZES: Dict[str, int] = {
    r.ALIGNMENT_CORNER_PM: 100,  # box of 100
    r.ALIGNMENT_CORNER_GM: 100,  # box of 100
    r.WEATHERSTRIP: 50,          # 50 m roll
    r.GLAZING_GASKET: 50,        # 50 m roll
}


@dataclass(frozen=True)
class FallbackPrices:
    """Prices used when a resolved ref is missing from the catalog.

    Keyed by component role rather than by ref, so a frame profile always
    falls back to the same frame price whatever ref the tables produced.
    Prices are catalog prices (per box / roll where PACK_SIZES applies).
    """

    prices: Dict[str, Decimal] = field(default_factory=lambda: {
        r.FRAME_PROFILE: Decimal("74"),
        r.SASH_PROFILE: Decimal("57.67"),
        r.SEPARATOR_PROFILE: Decimal("49.3"),
        r.CORNER_BRACKET: Decimal("1.2"),
        r.ALIGNMENT_CORNER_PM: Decimal("4.5"),
        r.ALIGNMENT_CORNER_GM: Decimal("5.5"),
        r.HINGE: Decimal("3.33"),
        r.WEATHERSTRIP: Decimal("16"),
        r.GLAZING_GASKET: Decimal("22.63"),
        r.CREMONE: Decimal("9.63"),
        r.CREMONE_KIT: Decimal("2.7"),
        r.LOCK_KIT: Decimal("2.76"),
        r.ROD: Decimal("1.7"),
    })

    def price_for(self, role: str) -> Decimal:
        try:
            return self.prices[role]
        except KeyError:
            raise ConfigError(f"no fallback price configured for component {role!r}") from None

    @classmethod
    def from_mapping(cls, data: Optional[Dict[str, Any]]) -> "FallbackPrices":
        base = cls()
        if not data:
            return base
        prices = dict(base.prices)
        for role, value in data.items():
            try:
                price = to_decimal(value)
            except (InvalidOperation, ValueError) as e:
                raise ConfigError(f"fallback price for {role!r} is not a number: {value!r}") from e
            if price < 0:
                raise ConfigError(f"fallback price for {role!r} is negative")
            prices[str(role)] = price
        return replace(base, prices=prices)


DEFAULT_FALLBACKS = FallbackPrices()
