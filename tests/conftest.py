"""
Shared test fixtures: bundled catalog and configs, sample windows.
"""

from pathlib import Path

import pytest

from window_quote.config import load_catalog
from window_quote.models import WindowSpecs

CONFIGS_DIR = Path(__file__).resolve().parents[1] / "configs"


@pytest.fixture
def configs_dir():
    """The configs/ folder shipped with the repo."""
    return CONFIGS_DIR


@pytest.fixture
def catalog():
    """Catalog loaded from configs/materials.yaml (every table ref is priced)."""
    return load_catalog(CONFIGS_DIR / "materials.yaml")


@pytest.fixture
def white_window():
    """100 x 100 cm white window with the calculator's default options."""
    return WindowSpecs(length_cm=100, width_cm=100)


@pytest.fixture
def wood_window():
    return WindowSpecs(
        length_cm=120,
        width_cm=110,
        color="woodgrain",
        frame_style="pral",
        sash_style="40404",
        sash_subtype="pral",
    )
