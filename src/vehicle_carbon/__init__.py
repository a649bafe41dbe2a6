from .models import (
    InputParameters,
    FootprintConstants,
    PhaseBreakdown,
    VehicleResult,
    LayoutRect,
    ChartRender
)
from .footprint import compute_footprints, break_even_miles
from .layout import layout_chart, build_render

__all__ = [
    "InputParameters",
    "FootprintConstants",
    "PhaseBreakdown",
    "VehicleResult",
    "LayoutRect",
    "ChartRender",
    "compute_footprints",
    "break_even_miles",
    "layout_chart",
    "build_render"
]
