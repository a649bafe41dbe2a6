import logging
from typing import Dict, List, Optional

from .constants import (
    PADDING, LEGEND_PADDING, SCALE_MARGIN_TCO2, ANTIALIAS_GAP_PX, TICK_CANDIDATES,
    VEHICLE_SLOTS, BAR_WIDTH_DIVISOR, LEGEND_SLOT, LEGEND_ROW_PX,
    PHASE_COLORS, LEGEND_LABELS, VEHICLE_LABELS
)
from .models import (
    InputParameters, FootprintConstants, VehicleResult, Dimensions, LayoutRect,
    AxisTick, LegendEntry, VehicleColumn, ChartRender
)
from .footprint import compute_footprints

logger = logging.getLogger(__name__)

# Shown until a real drawing area is available
PLACEHOLDER_DIMENSIONS = Dimensions(full_height=100, usable_width=50, usable_height=50)
PLACEHOLDER_MAX = 100


def compute_dimensions(
    width: float,
    height: float,
    padding: float = PADDING,
    legend_padding: float = LEGEND_PADDING
) -> Dimensions:
    """Drawable area left after the outer padding and the axis-label gutter."""
    return Dimensions(
        full_height=width * 0.5,
        usable_width=width - 2 * padding - legend_padding,
        usable_height=height - 2 * padding - legend_padding,
    )


def chart_scale(results: List[VehicleResult], margin: float = SCALE_MARGIN_TCO2) -> float:
    """Vertical scale: tallest bar plus a fixed headroom margin (tCO2)."""
    return max(r.total for r in results) + margin


def axis_ticks(scale_max: float, usable_height: float) -> List[AxisTick]:
    return [
        AxisTick(value=value, y=usable_height * (1 - value / scale_max))
        for value in TICK_CANDIDATES
        if value < scale_max
    ]


def legend_entries(dimensions: Dimensions, padding: float = PADDING) -> List[LegendEntry]:
    """Fixed colour key, independent of the data, stacked top-down to the right of the bars."""
    x = dimensions.usable_width * LEGEND_SLOT / 15
    return [
        LegendEntry(phase=phase, label=label, color=PHASE_COLORS[phase], x=x, y=padding + i * LEGEND_ROW_PX)
        for i, (phase, label) in enumerate(LEGEND_LABELS)
    ]


def stack_rects(
    result: VehicleResult,
    dimensions: Dimensions,
    scale_max: float,
    gap: float = ANTIALIAS_GAP_PX
) -> List[LayoutRect]:
    """
    Stack the phases of one vehicle bottom-up. Each layer's top edge sits at the
    cumulative total of everything up to and including it, nudged up by one gap per
    layer so adjacent fills do not bleed into each other.
    """
    width = dimensions.usable_width / BAR_WIDTH_DIVISOR
    rects = []
    cumulative = 0.0
    for i, (phase, value) in enumerate(result.phases.items()):
        cumulative += value
        rects.append(LayoutRect(
            key=f"{result.key}-{phase}",
            phase=phase,
            color=PHASE_COLORS[phase],
            x=0,
            y=dimensions.usable_height * (1 - cumulative / scale_max) - i * gap,
            width=width,
            height=dimensions.usable_height * value / scale_max,
        ))
    return rects


def _placeholder_column(result: VehicleResult) -> VehicleColumn:
    return VehicleColumn(
        key=result.key,
        label=result.label,
        total=result.total,
        x=0,
        y=0,
        rects=[LayoutRect(
            key=f"{result.key}-manufacturing",
            phase="manufacturing",
            color=PHASE_COLORS["manufacturing"],
            x=10,
            y=10,
            width=5,
            height=10,
        )],
    )


def placeholder_render(
    results: Dict[str, VehicleResult],
    width: float,
    height: float,
    padding: float = PADDING,
    legend_padding: float = LEGEND_PADDING
) -> ChartRender:
    """Fixed geometry used while the drawing area is not measurable."""
    return ChartRender(
        dimensions=PLACEHOLDER_DIMENSIONS,
        max=PLACEHOLDER_MAX,
        ticks=[],
        legend=legend_entries(PLACEHOLDER_DIMENSIONS, padding),
        ice=_placeholder_column(results["ice"]),
        phev=_placeholder_column(results["phev"]),
        bev=_placeholder_column(results["bev"]),
        padding=padding,
        legend_padding=legend_padding,
        width=width,
        height=height,
    )


def layout_chart(
    results: Dict[str, VehicleResult],
    width: float,
    height: float,
    padding: float = PADDING,
    legend_padding: float = LEGEND_PADDING
) -> ChartRender:
    """
    Map the three vehicle results onto chart geometry for a width x height drawing area.
    Falls back to the placeholder render when the usable area is not positive.
    """
    dimensions = compute_dimensions(width, height, padding, legend_padding)
    if dimensions.usable_width <= 0 or dimensions.usable_height <= 0:
        logger.warning(
            f"Drawing area {width}x{height} leaves no usable space "
            f"({dimensions.usable_width}x{dimensions.usable_height}). Using placeholder layout."
        )
        return placeholder_render(results, width, height, padding, legend_padding)

    scale_max = chart_scale(list(results.values()))

    columns = {}
    for key, slot in VEHICLE_SLOTS.items():
        result = results[key]
        columns[key] = VehicleColumn(
            key=key,
            label=VEHICLE_LABELS[key],
            total=result.total,
            x=legend_padding + dimensions.usable_width * slot / 15,
            y=0,
            rects=stack_rects(result, dimensions, scale_max),
        )

    return ChartRender(
        dimensions=dimensions,
        max=scale_max,
        ticks=axis_ticks(scale_max, dimensions.usable_height),
        legend=legend_entries(dimensions, padding),
        ice=columns["ice"],
        phev=columns["phev"],
        bev=columns["bev"],
        padding=padding,
        legend_padding=legend_padding,
        width=width,
        height=height,
    )


def build_render(
    params: InputParameters,
    width: float,
    height: float,
    constants: Optional[FootprintConstants] = None
) -> ChartRender:
    """Inputs to drawable chart in one pure step; re-run on every input change."""
    return layout_chart(compute_footprints(params, constants), width, height)
