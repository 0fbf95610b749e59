from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..models import OrderLine


# CSV header -> OrderLine field
COLUMNS = {
    "length": "length_cm",
    "length cm": "length_cm",
    "width": "width_cm",
    "width cm": "width_cm",
    "quantity": "quantity",
    "qty": "quantity",
    "color": "color",
    "colour": "color",
    "frame style": "frame_style",
    "frame": "frame_style",
    "sash style": "sash_style",
    "sash": "sash_style",
    "sash subtype": "sash_subtype",
    "glass type": "glass_type",
    "glass": "glass_type",
    "label": "label",
    "name": "label",
}


def _norm(s: str) -> str:
    s = (s or "").strip().lower().replace("_", " ").replace("(", " ").replace(")", " ")
    return " ".join(s.split())


def _to_number(x: str) -> str:
    return (x or "").strip().replace(",", ".")


def parse(path: Optional[Path]) -> Dict[str, Any]:
    """Parse an order list (one window size per row) into OrderLine records.

    Only Length and Width are required; Quantity defaults to 1 and the style
    columns to the standard white window. Bad rows are collected in ``errors``
    so one typo does not lose the whole order.
    """
    if not path:
        return {"lines": [], "errors": []}
    lines: List[OrderLine] = []
    errors: List[str] = []
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        for lineno, row in enumerate(reader, start=2):
            fields: Dict[str, Any] = {}
            for header, value in row.items():
                key = COLUMNS.get(_norm(header or ""))
                if key and value is not None and value.strip() != "":
                    fields[key] = value.strip()
            if not fields:
                continue
            for key in ("length_cm", "width_cm", "quantity"):
                if key in fields:
                    fields[key] = _to_number(fields[key])
            try:
                lines.append(OrderLine(**fields))
            except ValidationError as e:
                first = e.errors()[0]
                loc = ".".join(str(p) for p in first.get("loc", ()))
                errors.append(f"line {lineno}: {loc}: {first.get('msg')}")
    return {"lines": lines, "errors": errors}
