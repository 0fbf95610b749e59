from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, NamedTuple, Optional, Set, Tuple

from ..errors import ConfigError
from ..models import AuditNote, WindowSpecs
from ..normalize.options import normalize_color, normalize_style


# Component roles. Profiles and hardware resolve from the window's options,
# everything else is a fixed catalog ref.
FRAME_PROFILE = "frame_profile"
SASH_PROFILE = "sash_profile"
SEPARATOR_PROFILE = "separator_profile"
HINGE = "hinge"
CREMONE = "cremone"
HANDLE = "handle"
CORNER_BRACKET = "corner_bracket"
ALIGNMENT_CORNER_PM = "alignment_corner_pm"
ALIGNMENT_CORNER_GM = "alignment_corner_gm"
WEATHERSTRIP = "weatherstrip"
GLAZING_GASKET = "glazing_gasket"
CREMONE_KIT = "cremone_kit"
LOCK_KIT = "lock_kit"
ROD = "rod"


class Resolution(NamedTuple):
    ref: str
    defaulted: bool
    key: Tuple[str, ...]


def hardware_color(color: str) -> str:
    """Woodgrain and gray windows take dark hardware, everything else light."""
    return "dark" if color in ("woodgrain", "gray") else "light"


@dataclass(frozen=True)
class ReferenceTables:
    """Decision tables mapping window options to catalog refs.

    Every lookup is total: a key missing from a table resolves to that table's
    default ref and comes back flagged as defaulted.
    """

    frame: Dict[Tuple[str, str], str] = field(default_factory=lambda: {
        ("white", "eurosist"): "3",
        ("white", "inoforme"): "7",
        ("white", "eco_loranzo"): "216",
        ("woodgrain", "eurosist"): "3",
        ("woodgrain", "pral"): "9",
        ("woodgrain", "inter"): "97",
        ("gray", "losanzo"): "208",
    })
    frame_default: str = "3"

    # (sash_style, sash_subtype, color); 'inoforme_alt' is the second inoforme
    # white profile and must be asked for explicitly
    sash: Dict[Tuple[str, str, str], str] = field(default_factory=lambda: {
        ("6007", "inoforme", "white"): "12",
        ("6007", "inoforme_alt", "white"): "112",
        ("6007", "gray", "gray"): "313",
        ("40404", "eurosist", "white"): "94",
        ("40404", "inter", "white"): "4",
        ("40404", "pral", "woodgrain"): "11",
        ("40404", "technoline", "woodgrain"): "156",
        ("40404", "eurosist", "woodgrain"): "400",
    })
    sash_default: str = "12"

    # 'economy' is only reachable by calling separator_ref directly
    separator: Dict[str, str] = field(default_factory=lambda: {
        "white": "289",
        "woodgrain": "96",
        "gray": "289",
        "economy": "1250",
    })
    separator_default: str = "289"

    hardware: Dict[str, Dict[str, str]] = field(default_factory=lambda: {
        "light": {HINGE: "35", CREMONE: "62", HANDLE: "54"},
        "dark": {HINGE: "36", CREMONE: "63", HANDLE: "55"},
    })

    fixed: Dict[str, str] = field(default_factory=lambda: {
        CORNER_BRACKET: "43",
        ALIGNMENT_CORNER_PM: "239",
        ALIGNMENT_CORNER_GM: "91",
        WEATHERSTRIP: "90",
        GLAZING_GASKET: "89",
        CREMONE_KIT: "31",
        LOCK_KIT: "32",
        ROD: "61",
    })

    # Which options are offered for each color
    offered_frames: Dict[str, Tuple[str, ...]] = field(default_factory=lambda: {
        "eurosist": ("white", "woodgrain"),
        "inoforme": ("white",),
        "eco_loranzo": ("white",),
        "pral": ("woodgrain",),
        "inter": ("woodgrain",),
        "losanzo": ("gray",),
    })
    offered_sashes: Dict[str, Dict[str, Tuple[str, ...]]] = field(default_factory=lambda: {
        "6007": {"inoforme": ("white",), "gray": ("gray",)},
        "40404": {
            "eurosist": ("white", "woodgrain"),
            "inter": ("white",),
            "pral": ("woodgrain",),
            "technoline": ("woodgrain",),
        },
    })

    # ---- resolution ----

    def frame_ref(self, color: str, frame_style: str) -> Resolution:
        key = (color, normalize_style(frame_style))
        ref = self.frame.get(key)
        return Resolution(ref or self.frame_default, ref is None, key)

    def sash_ref(self, sash_style: str, sash_subtype: str, color: str) -> Resolution:
        key = (normalize_style(sash_style), normalize_style(sash_subtype), color)
        ref = self.sash.get(key)
        return Resolution(ref or self.sash_default, ref is None, key)

    def separator_ref(self, color: str) -> Resolution:
        c = normalize_color(color) or color
        ref = self.separator.get(c)
        return Resolution(ref or self.separator_default, ref is None, (c,))

    def hardware_refs(self, color: str) -> Dict[str, str]:
        return dict(self.hardware[hardware_color(color)])

    def fixed_ref(self, role: str) -> str:
        try:
            return self.fixed[role]
        except KeyError:
            raise ConfigError(f"no catalog ref configured for component {role!r}") from None

    def all_refs(self) -> Set[str]:
        refs: Set[str] = {self.frame_default, self.sash_default, self.separator_default}
        refs.update(self.frame.values())
        refs.update(self.sash.values())
        refs.update(self.separator.values())
        for by_role in self.hardware.values():
            refs.update(by_role.values())
        refs.update(self.fixed.values())
        return refs

    # ---- offered options ----

    def frame_styles_for(self, color: str) -> List[str]:
        return [style for style, colors in self.offered_frames.items() if color in colors]

    def sash_options_for(self, color: str) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {}
        for sash_style, subtypes in self.offered_sashes.items():
            allowed = [sub for sub, colors in subtypes.items() if color in colors]
            if allowed:
                out[sash_style] = allowed
        return out

    # ---- loading ----

    @classmethod
    def from_mapping(cls, data: Optional[Dict[str, Any]]) -> "ReferenceTables":
        """Build tables from a nested mapping (usually references.yaml).

        Sections that are present replace the built-in section wholesale;
        absent sections keep the defaults.
        """
        base = cls()
        data = data or {}
        changes: Dict[str, Any] = {}
        try:
            if "frame" in data:
                changes["frame"] = {
                    (_color(c), normalize_style(style)): str(ref)
                    for c, styles in (data["frame"] or {}).items()
                    for style, ref in (styles or {}).items()
                }
            if "sash" in data:
                changes["sash"] = {
                    (normalize_style(sash_style), normalize_style(sub), _color(c)): str(ref)
                    for sash_style, subs in (data["sash"] or {}).items()
                    for sub, by_color in (subs or {}).items()
                    for c, ref in (by_color or {}).items()
                }
            if "separator" in data:
                changes["separator"] = {_color(c): str(ref) for c, ref in (data["separator"] or {}).items()}
            if "hardware" in data:
                changes["hardware"] = {
                    str(hw): {str(role): str(ref) for role, ref in (refs or {}).items()}
                    for hw, refs in (data["hardware"] or {}).items()
                }
                missing = {"light", "dark"} - set(changes["hardware"])
                if missing:
                    raise ConfigError(f"hardware table needs both 'light' and 'dark' (missing {sorted(missing)})")
            if "fixed" in data:
                fixed = dict(base.fixed)
                fixed.update({str(role): str(ref) for role, ref in (data["fixed"] or {}).items()})
                changes["fixed"] = fixed
            if "offered_frames" in data:
                changes["offered_frames"] = {
                    normalize_style(style): tuple(_color(c) for c in colors)
                    for style, colors in (data["offered_frames"] or {}).items()
                }
            if "offered_sashes" in data:
                changes["offered_sashes"] = {
                    normalize_style(sash_style): {
                        normalize_style(sub): tuple(_color(c) for c in colors)
                        for sub, colors in (subs or {}).items()
                    }
                    for sash_style, subs in (data["offered_sashes"] or {}).items()
                }
        except (AttributeError, TypeError) as e:
            raise ConfigError(f"malformed reference table: {e}") from e
        for name in ("frame_default", "sash_default", "separator_default"):
            if data.get(name) is not None:
                changes[name] = str(data[name])
        return replace(base, **changes)


def _color(value) -> str:
    c = normalize_color(value)
    if c is None:
        raise ConfigError(f"unknown color {value!r} in reference table")
    return c


DEFAULT_TABLES = ReferenceTables()


def compatibility_notes(specs: WindowSpecs, tables: ReferenceTables = DEFAULT_TABLES) -> List[AuditNote]:
    """Flag options that the calculator would not normally offer for this color.

    Purely advisory; resolution still succeeds for any combination.
    """
    notes: List[AuditNote] = []
    if specs.frame_style not in tables.frame_styles_for(specs.color):
        notes.append(AuditNote(
            kind="incompatible_combination",
            component=FRAME_PROFILE,
            message=f"frame style {specs.frame_style!r} is not offered in {specs.color}",
        ))
    offered = tables.sash_options_for(specs.color).get(specs.sash_style, [])
    # explicit variants such as 'inoforme_alt' count as their base subtype
    base_subtype = specs.sash_subtype[:-4] if specs.sash_subtype.endswith("_alt") else specs.sash_subtype
    if base_subtype not in offered:
        notes.append(AuditNote(
            kind="incompatible_combination",
            component=SASH_PROFILE,
            message=f"sash {specs.sash_style} {specs.sash_subtype!r} is not offered in {specs.color}",
        ))
    return notes
