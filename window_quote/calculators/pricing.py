from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Set, Tuple

from ..catalog import MaterialCatalog
from ..errors import InvalidMargin, UnresolvedReference
from ..logic.fallbacks import PACK_SIZES, FallbackPrices
from ..logic.references import ReferenceTables, Resolution
from ..models import AuditNote, CostItem, PolicyConfig, WindowGeometry, WindowSpecs
from ..utils import to_decimal

logger = logging.getLogger(__name__)


def validate_margin(margin) -> Decimal:
    m = to_decimal(margin)
    if m < 0:
        raise InvalidMargin(margin)
    return m


def apply_margin(cost: Decimal, margin: Decimal) -> Decimal:
    """Sale price of one line: raw cost marked up by the profit margin fraction."""
    return to_decimal(cost) * (1 + to_decimal(margin))


class PriceBook:
    """Catalog prices for BOM components, with every fallback recorded."""

    def __init__(
        self,
        catalog: MaterialCatalog,
        fallbacks: FallbackPrices,
        pack_sizes: Optional[Dict[str, int]] = None,
    ):
        self.catalog = catalog
        self.fallbacks = fallbacks
        self.pack_sizes = PACK_SIZES if pack_sizes is None else pack_sizes
        self.notes: List[AuditNote] = []
        self._missed: Set[Tuple[str, str]] = set()

    def unit_price(self, role: str, ref: str) -> Tuple[Decimal, str]:
        """(price per billed unit, source) for the component `role` resolved to `ref`.

        A missing (role, ref) is noted once however many lines bill it.
        """
        price, found = self.catalog.price_or_fallback(ref, self.fallbacks.price_for(role))
        source = "catalog"
        if not found:
            source = "fallback"
        if not found and (role, ref) not in self._missed:
            self._missed.add((role, ref))
            logger.warning("material %s (%s) not in catalog, using fallback price %s", ref, role, price)
            self.notes.append(AuditNote(
                kind="material_not_found",
                component=role,
                message=f"ref {ref} not in catalog; fallback price {price} used",
                ref=ref,
                fallback_price=price,
            ))
        pack = self.pack_sizes.get(role, 1)
        return price / pack, source


@dataclass
class QuoteContext:
    specs: WindowSpecs
    geometry: WindowGeometry
    tables: ReferenceTables
    prices: PriceBook
    policy: PolicyConfig
    margin: Decimal
    strict: bool = False
    notes: List[AuditNote] = field(default_factory=list)

    def resolved(self, role: str, table: str, resolution: Resolution) -> str:
        """Accept a table resolution, flagging (or refusing, in strict mode) defaults."""
        if resolution.defaulted:
            if self.strict:
                raise UnresolvedReference(table, resolution.key, resolution.ref)
            logger.warning("no %s ref for %s, using default %s", table, resolution.key, resolution.ref)
            self.notes.append(AuditNote(
                kind="unresolved_reference",
                component=role,
                message=f"no {table} entry for {'/'.join(resolution.key)}; default ref {resolution.ref} used",
                fallback_ref=resolution.ref,
            ))
        return resolution.ref

    def item(
        self,
        name: str,
        quantity,
        unit_price: Decimal,
        quantity_description: str,
        *,
        ref: Optional[str] = None,
        source: str = "catalog",
        specifications: Optional[str] = None,
    ) -> CostItem:
        qty = to_decimal(quantity)
        return CostItem(
            name=name,
            quantity_description=quantity_description,
            unit_price=unit_price,
            total_cost=apply_margin(qty * unit_price, self.margin),
            specifications=specifications,
            ref=ref,
            quantity=qty,
            price_source=source,
        )


def sum_items(items: List[CostItem]) -> Decimal:
    return sum((i.total_cost for i in items), Decimal(0))
