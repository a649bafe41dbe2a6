from dataclasses import dataclass, field
from typing import List, Optional, Dict, Tuple
from .constants import (
    FOSSIL_GRID_TCO2_PER_MILE, RENEWABLE_GRID_TCO2_PER_MILE, FUEL_TCO2_PER_MILE,
    BATTERY_TCO2_PER_KWH, ICE_MATERIALS_TCO2, PHEV_MATERIALS_TCO2, BEV_MATERIALS_TCO2,
    MANUFACTURING_TCO2, EOL_TCO2, STACK_ORDER,
    DEFAULT_RENEWABLES_MIX, DEFAULT_ELECTRIC_MILE_SHARE, DEFAULT_LIFETIME_MILES,
    DEFAULT_PHEV_BATTERY_KWH, DEFAULT_BEV_BATTERY_KWH, DEFAULT_HYBRID_EFFICIENCY_GAIN,
    VehicleKey, PhaseKey
)


@dataclass(frozen=True)
class InputParameters:
    """
    The six user-adjustable inputs of one computation:
    - renewables_mix: % of charging electricity from renewable sources [0, 100]
    - electric_mile_share: % of PHEV miles driven on electricity [0, 100]
    - lifetime_miles: mileage at end-of-life, shared by all vehicle types
    - phev_battery_kwh / bev_battery_kwh: pack capacities
    - hybrid_efficiency_gain: % more miles per gallon for the PHEV over the ICE when on fuel
    """
    renewables_mix: float = DEFAULT_RENEWABLES_MIX
    electric_mile_share: float = DEFAULT_ELECTRIC_MILE_SHARE
    lifetime_miles: float = DEFAULT_LIFETIME_MILES
    phev_battery_kwh: float = DEFAULT_PHEV_BATTERY_KWH
    bev_battery_kwh: float = DEFAULT_BEV_BATTERY_KWH
    hybrid_efficiency_gain: float = DEFAULT_HYBRID_EFFICIENCY_GAIN


@dataclass(frozen=True)
class FootprintConstants:
    """
    Empirical constants table (metric tons CO2). Defaults come from constants.py,
    i.e. the parameters workbook where present.
    """
    fossil_grid_tco2_per_mile: float = FOSSIL_GRID_TCO2_PER_MILE
    renewable_grid_tco2_per_mile: float = RENEWABLE_GRID_TCO2_PER_MILE
    fuel_tco2_per_mile: float = FUEL_TCO2_PER_MILE
    battery_tco2_per_kwh: float = BATTERY_TCO2_PER_KWH
    ice_materials_tco2: float = ICE_MATERIALS_TCO2
    phev_materials_tco2: float = PHEV_MATERIALS_TCO2
    bev_materials_tco2: float = BEV_MATERIALS_TCO2
    manufacturing_tco2: float = MANUFACTURING_TCO2
    eol_tco2: float = EOL_TCO2


@dataclass(frozen=True)
class PhaseBreakdown:
    """
    Carbon per lifecycle phase (metric tons CO2).
    Phases that do not apply to a vehicle type are None rather than 0.
    """
    materials: float
    manufacturing: float
    eol: float
    battery: Optional[float] = None
    battery_use: Optional[float] = None
    fuel_use: Optional[float] = None

    def items(self) -> List[Tuple[PhaseKey, float]]:
        """Present phases in bottom-to-top stacking order."""
        out = []
        for phase in STACK_ORDER:
            value = getattr(self, phase)
            if value is not None:
                out.append((phase, value))
        return out

    def as_dict(self) -> Dict[str, float]:
        return dict(self.items())

    def total(self) -> float:
        return sum(value for _, value in self.items())


@dataclass(frozen=True)
class VehicleResult:
    key: VehicleKey
    label: str
    phases: PhaseBreakdown
    total: float


@dataclass(frozen=True)
class Dimensions:
    full_height: float
    usable_width: float
    usable_height: float


@dataclass(frozen=True)
class LayoutRect:
    key: str
    phase: PhaseKey
    color: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class AxisTick:
    value: float
    y: float


@dataclass(frozen=True)
class LegendEntry:
    phase: PhaseKey
    label: str
    color: str
    x: float
    y: float


@dataclass(frozen=True)
class VehicleColumn:
    """
    One bar of the chart: anchor (x, y) plus its stacked rectangles, which are
    positioned relative to the anchor.
    """
    key: VehicleKey
    label: str
    total: float
    x: float
    y: float
    rects: List[LayoutRect] = field(default_factory=list)


@dataclass(frozen=True)
class ChartRender:
    """
    Everything needed to draw one chart. Recomputed wholesale whenever an input changes.
    """
    dimensions: Dimensions
    max: float
    ticks: List[AxisTick]
    legend: List[LegendEntry]
    ice: VehicleColumn
    phev: VehicleColumn
    bev: VehicleColumn
    padding: float
    legend_padding: float
    # Outer size of the drawing surface the layout was computed for
    width: float
    height: float

    @property
    def columns(self) -> List[VehicleColumn]:
        return [self.ice, self.phev, self.bev]
