from __future__ import annotations

import csv
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models import Material


# Accepted header spellings, including the supplier's French export
REF_HEADERS = ("ref", "reference", "réf")
DESIGNATION_HEADERS = ("designation", "désignation", "description")
PRICE_HEADERS = ("unit price", "unit_price", "prix u moyen", "prixumoyen", "price")


def _norm(s: str) -> str:
    return " ".join((s or "").strip().lower().replace(".", " ").split())


def _pick(row: Dict[str, str], names) -> str:
    for key, val in row.items():
        if _norm(key) in names:
            return (val or "").strip()
    return ""


def _to_decimal(x: str) -> Optional[Decimal]:
    # '1 234,50', '1.234,50', '1,234.50' and '1234.50' all show up in supplier
    # exports; whichever separator comes last is the decimal point
    x = (x or "").strip().replace(" ", "")
    if "," in x and "." in x:
        if x.rfind(",") > x.rfind("."):
            x = x.replace(".", "").replace(",", ".")
        else:
            x = x.replace(",", "")
    else:
        x = x.replace(",", ".")
    try:
        d = Decimal(x)
    except InvalidOperation:
        return None
    return d if d.is_finite() else None


def parse(path: Optional[Path]) -> Dict[str, Any]:
    """Read a price list CSV into Material records.

    Rows without a ref or with an unreadable/negative price are reported in
    ``errors`` rather than loaded with a made-up price.
    """
    if not path:
        return {"materials": [], "errors": []}
    materials: List[Material] = []
    errors: List[str] = []
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        for lineno, row in enumerate(reader, start=2):
            ref = _pick(row, REF_HEADERS)
            if not ref:
                errors.append(f"line {lineno}: missing ref")
                continue
            price = _to_decimal(_pick(row, PRICE_HEADERS))
            if price is None or price < 0:
                errors.append(f"line {lineno}: bad price for ref {ref}")
                continue
            materials.append(Material(ref=ref, designation=_pick(row, DESIGNATION_HEADERS), unit_price=price))
    return {"materials": materials, "errors": errors}
