from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .normalize.options import normalize_color, normalize_style


Color = Literal["white", "woodgrain", "gray"]
HardwareColor = Literal["light", "dark"]
PriceSource = Literal["catalog", "fallback", "policy"]
AuditKind = Literal["unresolved_reference", "material_not_found", "incompatible_combination"]


class Material(BaseModel):
    model_config = ConfigDict(frozen=True)

    ref: str
    designation: str = ""
    unit_price: Decimal = Field(default=Decimal(0), ge=0)

    @field_validator("ref", mode="before")
    @classmethod
    def _ref_as_text(cls, v):
        # YAML reads bare refs like 43 as int
        return str(v).strip() if v is not None else v


class WindowSpecs(BaseModel):
    """One window as entered by the user. Dimensions are in centimeters.

    Dimensions are not range-checked here; the geometry step rejects unusable
    sizes with InvalidDimensions.
    """

    model_config = ConfigDict(frozen=True)

    length_cm: Decimal
    width_cm: Decimal
    color: Color = "white"
    frame_style: str = "eurosist"
    sash_style: str = "6007"
    sash_subtype: str = "inoforme"
    glass_type: str = "simple"

    @field_validator("color", mode="before")
    @classmethod
    def _canonical_color(cls, v):
        return normalize_color(v) or v

    @field_validator("frame_style", "sash_style", "sash_subtype", "glass_type", mode="before")
    @classmethod
    def _canonical_style(cls, v):
        return normalize_style(v)


class OrderLine(WindowSpecs):
    quantity: int = 1
    label: Optional[str] = None


class WindowGeometry(BaseModel):
    model_config = ConfigDict(frozen=True)

    frame_perimeter: Decimal
    sash_length: Decimal
    sash_width: Decimal
    sash_perimeter_single: Decimal
    total_sash_length: Decimal
    separator_length: Decimal
    glass_length: Decimal
    glass_width: Decimal
    glass_area_per_sash_m2: Decimal
    total_glass_area_m2: Decimal
    joint_battement_m: Decimal
    joint_plat_m: Decimal


class BarUsage(BaseModel):
    model_config = ConfigDict(frozen=True)

    required_length: Decimal
    bar_length: Decimal
    exact_bars_needed: Decimal
    actual_bars_needed: int
    waste_length: Decimal
    utilization_pct: Decimal


class AuditNote(BaseModel):
    """Something the calculation had to assume. Never silently dropped."""

    model_config = ConfigDict(frozen=True)

    kind: AuditKind
    component: str
    message: str
    ref: Optional[str] = None
    fallback_ref: Optional[str] = None
    fallback_price: Optional[Decimal] = None


class CostItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    quantity_description: str
    unit_price: Decimal
    total_cost: Decimal
    specifications: Optional[str] = None
    # Audit fields (not shown on the client-facing BOM)
    ref: Optional[str] = None
    quantity: Decimal = Decimal(0)
    price_source: PriceSource = "catalog"


class CostBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    frame: List[CostItem] = Field(default_factory=list)
    sashes: List[CostItem] = Field(default_factory=list)
    separator: List[CostItem] = Field(default_factory=list)
    glass: List[CostItem] = Field(default_factory=list)
    hardware: List[CostItem] = Field(default_factory=list)
    total_cost: Decimal = Decimal(0)

    specs: Optional[WindowSpecs] = None
    margin: Decimal = Decimal(0)
    geometry: Optional[WindowGeometry] = None
    bar_usage: Dict[str, BarUsage] = Field(default_factory=dict)
    audit: List[AuditNote] = Field(default_factory=list)

    def groups(self) -> Dict[str, List[CostItem]]:
        return {
            "frame": self.frame,
            "sashes": self.sashes,
            "separator": self.separator,
            "glass": self.glass,
            "hardware": self.hardware,
        }

    def group_total(self, group: str) -> Decimal:
        return sum((i.total_cost for i in self.groups()[group]), Decimal(0))

    @property
    def used_fallbacks(self) -> bool:
        return any(n.kind != "incompatible_combination" for n in self.audit)


class StockPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_required_length: Decimal
    bars_needed: int
    waste_length: Decimal
    utilization_pct: Decimal


class RejectedLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    label: Optional[str] = None
    reason: str


class BatchStockPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    frame: StockPlan
    sash: StockPlan
    bar_length: Decimal
    window_count: int = 0
    rejected: List[RejectedLine] = Field(default_factory=list)


class PolicyConfig(BaseModel):
    currency: str = "TND"
    currency_symbol: str = "TND"
    profit_margin_default: Decimal = Decimal("0.30")
    bar_length_cm: Decimal = Decimal(650)
    glass_prices_per_m2: Dict[str, Decimal] = Field(default_factory=lambda: {"simple": Decimal("31.25")})
    glass_price_default: Decimal = Decimal("31.25")
