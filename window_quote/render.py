from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .calculators.window import WindowQuote, order_total
from .models import CostBreakdown, PolicyConfig
from .normalize.options import color_label
from .utils import fixed, money


GROUP_TITLES = {
    "frame": "Frame (dormant)",
    "sashes": "Sashes (ouvrants)",
    "separator": "Separator",
    "glass": "Glass",
    "hardware": "Hardware",
}


def _env() -> Environment:
    templates_dir = Path(__file__).parent / "templates"
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html", "html.j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _window_context(bd: CostBreakdown, title: str) -> Dict[str, Any]:
    groups: List[Dict[str, Any]] = []
    for key, items in bd.groups().items():
        groups.append({"key": key, "title": GROUP_TITLES[key], "items": items, "total": bd.group_total(key)})
    specs = bd.specs
    return {
        "title": title,
        "specs": specs,
        "color": color_label(specs.color) if specs else "",
        "groups": groups,
        "total": bd.total_cost,
        "margin_pct": fixed(bd.margin * 100, 0),
        "audit": bd.audit,
    }


def render_window_quote(
    breakdown: CostBreakdown,
    policy: Optional[PolicyConfig] = None,
    title: str = "Window",
    issued: Optional[date] = None,
) -> str:
    """HTML bill of materials for one window. Money is rounded to 2 decimals here only."""
    return render_order_quote([WindowQuote(index=0, specs=breakdown.specs, breakdown=breakdown)], policy, [title], issued)


def render_order_quote(
    quotes: Sequence[WindowQuote],
    policy: Optional[PolicyConfig] = None,
    titles: Optional[Sequence[str]] = None,
    issued: Optional[date] = None,
) -> str:
    policy = policy or PolicyConfig()
    titles = list(titles or [])
    windows = []
    for i, q in enumerate(quotes):
        title = titles[i] if i < len(titles) else f"Window {q.index + 1}"
        if q.ok:
            windows.append(_window_context(q.breakdown, title))
        else:
            windows.append({"title": title, "error": str(q.error)})

    template = _env().get_template("window_quote.html.j2")
    return template.render(
        windows=windows,
        order_total=order_total(quotes),
        quoted=sum(1 for q in quotes if q.ok),
        issued=(issued or date.today()).isoformat(),
        currency=policy.currency,
        format_money=lambda x: money(x, policy.currency_symbol),
    )


def write_html(html: str, out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(html, encoding="utf-8")
    return out_path
