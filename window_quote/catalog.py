from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .errors import MaterialNotFound
from .models import Material


class MaterialCatalog:
    """Read-only price list keyed by material reference.

    Lookups never invent a price: a missing ref raises MaterialNotFound and the
    caller decides what to fall back on.
    """

    def __init__(self, materials: Iterable[Material] = ()):
        self._by_ref: Dict[str, Material] = {}
        for m in materials:
            if m.ref in self._by_ref:
                raise ValueError(f"duplicate material ref {m.ref!r}")
            self._by_ref[m.ref] = m

    @classmethod
    def from_records(cls, records: Iterable) -> "MaterialCatalog":
        """Build from Material objects or plain dicts (ref, designation, unit_price)."""
        materials: List[Material] = []
        for r in records:
            materials.append(r if isinstance(r, Material) else Material(**r))
        return cls(materials)

    def __len__(self) -> int:
        return len(self._by_ref)

    def __iter__(self) -> Iterator[Material]:
        return iter(list(self._by_ref.values()))

    def __contains__(self, ref) -> bool:
        return str(ref) in self._by_ref

    def get(self, ref: str) -> Optional[Material]:
        return self._by_ref.get(str(ref))

    def lookup(self, ref: str) -> Decimal:
        m = self._by_ref.get(str(ref))
        if m is None:
            raise MaterialNotFound(str(ref))
        return m.unit_price

    def price_or_fallback(self, ref: str, fallback: Decimal) -> Tuple[Decimal, bool]:
        """Return (price, found). `found` is False when `fallback` was used."""
        try:
            return self.lookup(ref), True
        except MaterialNotFound:
            return Decimal(fallback), False

    def refs(self) -> List[str]:
        return list(self._by_ref)
