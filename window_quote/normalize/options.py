from __future__ import annotations

import re
from typing import Dict, Optional


COLORS = ("white", "woodgrain", "gray")

# Separator-only variant, not offered as a window color
ECONOMY = "economy"

# Shop-floor and catalog spellings (French trade names included)
COLOR_ALIASES: Dict[str, str] = {
    "white": "white",
    "blanc": "white",
    "woodgrain": "woodgrain",
    "wood": "woodgrain",
    "fbois": "woodgrain",
    "faux bois": "woodgrain",
    "gray": "gray",
    "grey": "gray",
    "gris": "gray",
    "economy": ECONOMY,
    "economique": ECONOMY,
    "économique": ECONOMY,
}

COLOR_LABELS: Dict[str, str] = {
    "white": "White",
    "woodgrain": "Woodgrain",
    "gray": "Gray",
    ECONOMY: "Economy",
}


def _squash(s: str) -> str:
    s = s.strip().lower().replace("_", " ").replace("-", " ")
    return re.sub(r"\s+", " ", s)


def normalize_color(value: str) -> Optional[str]:
    """Map a color spelling ('Blanc', 'fbois', 'grey') to its canonical name.

    Returns None when the spelling is unknown.
    """
    if value is None:
        return None
    return COLOR_ALIASES.get(_squash(str(value)))


def normalize_style(value: str) -> str:
    """Canonical key for frame/sash style names: 'Eco Loranzo' -> 'eco_loranzo'."""
    return _squash(str(value or "")).replace(" ", "_")


def color_label(color: str) -> str:
    return COLOR_LABELS.get(color, color)
