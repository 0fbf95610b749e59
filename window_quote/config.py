from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .catalog import MaterialCatalog
from .errors import ConfigError
from .logic.fallbacks import DEFAULT_FALLBACKS, FallbackPrices
from .logic.references import DEFAULT_TABLES, ReferenceTables
from .models import PolicyConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIGS_DIR = Path("configs")


def _load_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML: {e}", str(path)) from e


def load_policy(path: Path) -> PolicyConfig:
    if not path.exists():
        logger.debug("%s not found, using default policy", path)
        return PolicyConfig()
    try:
        return PolicyConfig(**_load_yaml(path))
    except (ValidationError, TypeError) as e:
        raise ConfigError(str(e), str(path)) from e


def load_catalog(path: Path) -> MaterialCatalog:
    """materials.yaml holds a list of {ref, designation, unit_price} records."""
    data = _load_yaml(path)
    records = data.get("materials", []) if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise ConfigError("expected a list of materials", str(path))
    try:
        catalog = MaterialCatalog.from_records(records)
    except (ValidationError, TypeError, ValueError) as e:
        raise ConfigError(str(e), str(path)) from e
    logger.debug("loaded %d materials from %s", len(catalog), path)
    return catalog


def load_reference_tables(path: Path) -> ReferenceTables:
    if not path.exists():
        return DEFAULT_TABLES
    data = _load_yaml(path)
    if not isinstance(data, dict):
        raise ConfigError("expected a mapping of tables", str(path))
    return ReferenceTables.from_mapping(data)


def load_fallbacks(path: Path) -> FallbackPrices:
    if not path.exists():
        return DEFAULT_FALLBACKS
    data = _load_yaml(path)
    if not isinstance(data, dict):
        raise ConfigError("expected a mapping of component -> price", str(path))
    return FallbackPrices.from_mapping(data)


@dataclass
class Settings:
    catalog: MaterialCatalog
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    tables: ReferenceTables = DEFAULT_TABLES
    fallbacks: FallbackPrices = DEFAULT_FALLBACKS


def load_settings(configs_dir: Optional[Path] = None, catalog_path: Optional[Path] = None) -> Settings:
    """Load policy, catalog, decision tables and fallback prices from a configs folder.

    Only the catalog is required; the other files default to the built-in values.
    """
    configs_dir = configs_dir or DEFAULT_CONFIGS_DIR
    catalog_path = catalog_path or configs_dir / "materials.yaml"
    if not catalog_path.exists():
        raise ConfigError("material catalog not found", str(catalog_path))
    if catalog_path.suffix.lower() == ".csv":
        from .importers.catalog_csv import parse as parse_catalog_csv

        parsed = parse_catalog_csv(catalog_path)
        if parsed["errors"]:
            raise ConfigError("unreadable price rows: " + "; ".join(parsed["errors"]), str(catalog_path))
        try:
            catalog = MaterialCatalog.from_records(parsed["materials"])
        except ValueError as e:
            raise ConfigError(str(e), str(catalog_path)) from e
    else:
        catalog = load_catalog(catalog_path)
    return Settings(
        catalog=catalog,
        policy=load_policy(configs_dir / "policy.yaml"),
        tables=load_reference_tables(configs_dir / "references.yaml"),
        fallbacks=load_fallbacks(configs_dir / "fallbacks.yaml"),
    )


def settings_summary(settings: Settings) -> Dict[str, Any]:
    return {
        "materials": len(settings.catalog),
        "currency": settings.policy.currency,
        "bar_length_cm": str(settings.policy.bar_length_cm),
        "profit_margin_default": str(settings.policy.profit_margin_default),
    }
