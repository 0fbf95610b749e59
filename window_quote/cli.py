from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from .config import load_settings, settings_summary
from .errors import ConfigError, QuoteError
from .normalize.options import COLORS, color_label, normalize_color
from .utils import fixed, money

app = typer.Typer(help="Aluminum window quote engine", no_args_is_help=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log fallbacks and calculation details")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _settings(configs: str, catalog: Optional[str]):
    try:
        return load_settings(Path(configs), Path(catalog) if catalog else None)
    except ConfigError as e:
        typer.echo(f"Config error: {e}", err=True)
        raise typer.Exit(code=2)


@app.command()
def quote(
    length: float = typer.Argument(..., help="Window length (cm)"),
    width: float = typer.Argument(..., help="Window width (cm)"),
    color: str = typer.Option("white", help="white | woodgrain | gray (blanc/fbois/gris accepted)"),
    frame_style: str = typer.Option("eurosist", help="40100 frame style"),
    sash_style: str = typer.Option("6007", help="Sash profile series"),
    sash_subtype: str = typer.Option("inoforme", help="Sash subtype"),
    glass_type: str = typer.Option("simple", help="Glass type"),
    margin: Optional[float] = typer.Option(None, help="Profit margin fraction (default from policy)"),
    configs: str = typer.Option("configs", help="Config/catalogs folder"),
    catalog: Optional[str] = typer.Option(None, help="Catalog file (YAML or CSV), overrides configs/materials.yaml"),
    html: Optional[str] = typer.Option(None, help="Also write an HTML quote to this path"),
    as_json: bool = typer.Option(False, "--json", help="Print the full breakdown as JSON"),
    strict: bool = typer.Option(False, help="Fail instead of using default references"),
):
    """Price one window and print its bill of materials."""
    from pydantic import ValidationError

    from .calculators.window import calculate_window_cost
    from .models import WindowSpecs

    settings = _settings(configs, catalog)
    try:
        specs = WindowSpecs(
            length_cm=str(length),
            width_cm=str(width),
            color=color,
            frame_style=frame_style,
            sash_style=sash_style,
            sash_subtype=sash_subtype,
            glass_type=glass_type,
        )
    except ValidationError as e:
        typer.echo(f"Invalid window: {e.errors()[0]['msg']}", err=True)
        raise typer.Exit(code=1)

    m = settings.policy.profit_margin_default if margin is None else str(margin)
    try:
        bd = calculate_window_cost(
            specs,
            settings.catalog,
            m,
            tables=settings.tables,
            fallbacks=settings.fallbacks,
            policy=settings.policy,
            strict=strict,
        )
    except QuoteError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(bd.model_dump_json(indent=2))
    else:
        symbol = settings.policy.currency_symbol
        for group, items in bd.groups().items():
            typer.echo(f"[{group}]")
            for item in items:
                typer.echo(f"  {item.name:<45} {item.quantity_description:<24} {money(item.total_cost, symbol):>14}")
            typer.echo(f"  {'subtotal':<70}{money(bd.group_total(group), symbol):>14}")
        typer.echo(f"TOTAL {money(bd.total_cost, symbol)} (margin {fixed(bd.margin * 100, 0)}%)")
        for note in bd.audit:
            typer.echo(f"[audit] {note.kind}: {note.message}")

    if html:
        from .render import render_window_quote, write_html

        out = write_html(render_window_quote(bd, settings.policy), Path(html))
        typer.echo(f"Wrote {out}")


@app.command()
def plan(
    order_csv: str = typer.Argument(..., help="Order CSV with Length, Width, Quantity columns"),
    bar_length: Optional[float] = typer.Option(None, help="Stock bar length in cm (default from policy)"),
    configs: str = typer.Option("configs", help="Config folder (policy.yaml)"),
    as_json: bool = typer.Option(False, "--json", help="Print the plan as JSON"),
):
    """Estimate stock bars and waste for a whole order."""
    from .calculators.batch import plan_batch_stock
    from .config import load_policy
    from .importers import order_csv as order_importer

    path = Path(order_csv)
    if not path.exists():
        typer.echo(f"Order file not found: {path}", err=True)
        raise typer.Exit(code=2)
    try:
        policy = load_policy(Path(configs) / "policy.yaml")
    except ConfigError as e:
        typer.echo(f"Config error: {e}", err=True)
        raise typer.Exit(code=2)

    parsed = order_importer.parse(path)
    for err in parsed["errors"]:
        typer.echo(f"[skip] {err}", err=True)
    bar = str(bar_length) if bar_length is not None else policy.bar_length_cm
    try:
        result = plan_batch_stock(parsed["lines"], bar)
    except QuoteError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
        return
    typer.echo(f"{result.window_count} windows, bars of {fixed(result.bar_length, 0)} cm")
    for name, sp in (("frame", result.frame), ("sash", result.sash)):
        typer.echo(
            f"  {name:<6} {fixed(sp.total_required_length, 1):>10} cm  "
            f"{sp.bars_needed:>4} bars  waste {fixed(sp.waste_length, 1):>8} cm  "
            f"utilization {fixed(sp.utilization_pct, 1)}%"
        )
    for r in result.rejected:
        typer.echo(f"[rejected] line {r.index + 1}: {r.reason}")


@app.command()
def options(
    color: Optional[str] = typer.Option(None, help="Only show options for this color"),
    configs: str = typer.Option("configs", help="Config folder (references.yaml)"),
):
    """List the frame and sash options offered for each color."""
    from .config import load_reference_tables

    try:
        tables = load_reference_tables(Path(configs) / "references.yaml")
    except ConfigError as e:
        typer.echo(f"Config error: {e}", err=True)
        raise typer.Exit(code=2)
    colors = COLORS
    if color:
        c = normalize_color(color)
        if c not in COLORS:
            typer.echo(f"Unknown color: {color}", err=True)
            raise typer.Exit(code=1)
        colors = (c,)
    for c in colors:
        typer.echo(f"{color_label(c)}:")
        typer.echo(f"  frame: {', '.join(tables.frame_styles_for(c)) or '-'}")
        for sash_style, subs in tables.sash_options_for(c).items():
            typer.echo(f"  sash {sash_style}: {', '.join(subs)}")


@app.command()
def validate(
    configs: str = typer.Option("configs", help="Config/catalogs folder"),
    catalog: Optional[str] = typer.Option(None, help="Catalog file (YAML or CSV)"),
):
    """Check that every ref the decision tables can produce is priced in the catalog."""
    settings = _settings(configs, catalog)
    missing = sorted((ref for ref in settings.tables.all_refs() if ref not in settings.catalog), key=_ref_sort)
    typer.echo(json.dumps(settings_summary(settings)))
    if missing:
        typer.echo(f"Refs missing from catalog (fallback prices will be used): {', '.join(missing)}")
        raise typer.Exit(code=2)
    typer.echo("OK: every referenced material is in the catalog.")


def _ref_sort(ref: str):
    return (0, int(ref), ref) if ref.isdigit() else (1, 0, ref)


if __name__ == "__main__":  # pragma: no cover
    app()
