import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import html
import os
from datetime import datetime
from typing import Dict, Optional
from .models import ChartRender, VehicleResult, VehicleColumn
from .constants import (
    PHASE_COLORS, LEGEND_COLOR, LEGEND_LABELS, STACK_ORDER, TICK_LENGTH,
    X_AXIS_END_SLOT, LEGEND_SWATCH_PX, TOTAL_LABEL_OFFSET_PX
)
import logging

logger = logging.getLogger(__name__)

# 1. Load Report Save Location
current_directory = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Build the path to reports relative to the current directory
report_directory = os.path.join(current_directory, 'reports')

PHASE_LABELS = dict(LEGEND_LABELS)


def _fmt(v: float) -> str:
    """Compact coordinate for SVG attributes."""
    return f"{v:.2f}".rstrip("0").rstrip(".")


def _svg_rect(x, y, w, h, fill="", extra="") -> str:
    parts = [f'<rect x="{_fmt(x)}" y="{_fmt(y)}" width="{_fmt(w)}" height="{_fmt(h)}"']
    if fill:
        parts.append(f' fill="{fill}"')
    if extra:
        parts.append(f" {extra}")
    parts.append("/>")
    return "".join(parts)


def _svg_line(x1, y1, x2, y2, stroke=LEGEND_COLOR) -> str:
    return f'<line x1="{_fmt(x1)}" y1="{_fmt(y1)}" x2="{_fmt(x2)}" y2="{_fmt(y2)}" stroke="{stroke}"/>'


def _svg_text(x, y, text, fill="", anchor="start", font_size="") -> str:
    # x / y may be preformatted strings with units (e.g. "0.375em")
    x = x if isinstance(x, str) else _fmt(x)
    y = y if isinstance(y, str) else _fmt(y)
    parts = [f'<text x="{x}" y="{y}"']
    if font_size:
        parts.append(f' font-size="{font_size}"')
    parts.append(f' text-anchor="{anchor}"')
    if fill:
        parts.append(f' fill="{fill}"')
    parts.append(f">{html.escape(str(text))}</text>")
    return "".join(parts)


def _svg_column(column: VehicleColumn, render: ChartRender) -> str:
    dims = render.dimensions
    bar_width = column.rects[0].width if column.rects else 0.0
    parts = [f'<g transform="translate({_fmt(column.x)},{_fmt(column.y)})">']
    parts.append(_svg_text(
        bar_width / 2, dims.usable_height + render.legend_padding / 2 + 2,
        column.label, fill=LEGEND_COLOR, anchor="middle", font_size="1em"
    ))
    parts.append(_svg_text(
        bar_width / 2, dims.usable_height * (1 - column.total / render.max) - TOTAL_LABEL_OFFSET_PX,
        f"{column.total:.1f}", fill=LEGEND_COLOR, anchor="middle"
    ))
    for r in column.rects:
        parts.append(_svg_rect(r.x, r.y, r.width, r.height, fill=r.color, extra=f'data-key="{r.key}"'))
    parts.append("</g>")
    return "".join(parts)


def render_svg(render: ChartRender) -> str:
    """
    Serialise a ChartRender into a standalone SVG document sized to its drawing surface.
    """
    width = render.width
    height = render.height
    dims = render.dimensions
    lp = render.legend_padding
    out = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_fmt(width)}" height="{_fmt(height)}" '
        f'viewBox="0 0 {_fmt(width)} {_fmt(height)}" role="img">',
        f'<title>Total Lifecycle Metric Tons CO2</title>',
        f'<g transform="translate({_fmt(render.padding)},{_fmt(render.padding)})">',
        # Axes
        _svg_line(lp, 0, lp, dims.usable_height),
        _svg_line(lp, dims.usable_height, dims.usable_width * X_AXIS_END_SLOT / 15, dims.usable_height),
    ]

    for tick in render.ticks:
        out.append(f'<g transform="translate({_fmt(lp - TICK_LENGTH)},{_fmt(tick.y)})">')
        out.append(_svg_line(0, 0, TICK_LENGTH, 0))
        out.append(_svg_text("-2", "0.375em", f"{tick.value:g}", fill=LEGEND_COLOR, anchor="end", font_size="0.75em"))
        out.append("</g>")

    if render.legend:
        origin = render.legend[0]
        out.append(f'<g transform="translate({_fmt(origin.x)},{_fmt(origin.y)})">')
        for entry in render.legend:
            out.append(f'<g transform="translate(0,{_fmt(entry.y - origin.y)})">')
            out.append(_svg_rect(0, 0, LEGEND_SWATCH_PX, LEGEND_SWATCH_PX, fill=entry.color))
            out.append(_svg_text(22, 13, entry.label))
            out.append("</g>")
        out.append("</g>")

    for column in render.columns:
        out.append(_svg_column(column, render))

    out.append("</g>")
    out.append("</svg>")
    return "\n".join(out)


class Visualizer:
    def __init__(self, mode: str = "single_run", output_root: Optional[str] = None):
        """
        Initialize Visualizer.
        mode: 'single_run' (one input tuple) or 'sweep_run' (parameter sweep)
        """
        self.mode = mode
        self.output_root = output_root or report_directory
        self._setup_style()
        self.session_dir = self._create_session_dir()

    def _setup_style(self):
        """Configure matplotlib for clean, publication-quality plots."""
        # Clean foundation (keep the Agg backend selected above)
        plt.rcParams.update({k: v for k, v in plt.rcParamsDefault.items() if k != "backend"})

        plt.rcParams.update({
            'font.family': 'sans-serif',
            'font.sans-serif': ['Arial', 'Helvetica', 'Calibri', 'DejaVu Sans'],
            'font.size': 12,
            'axes.titlesize': 16,
            'axes.titleweight': 'bold',
            'axes.labelsize': 13,
            'xtick.labelsize': 11,
            'ytick.labelsize': 11,
            'legend.fontsize': 11,
            'text.color': '#2C3E50',
            'axes.labelcolor': '#2C3E50',
            'xtick.color': '#2C3E50',
            'ytick.color': '#2C3E50'
        })

        plt.rcParams.update({
            'axes.spines.top': False,
            'axes.spines.right': False,
            'axes.spines.left': False,
            'axes.spines.bottom': True,
            'axes.linewidth': 1.2,
            'grid.color': '#E0E0E0',
            'grid.linestyle': ':',
            'grid.linewidth': 1.0,
            'axes.grid': True,
            'axes.grid.axis': 'y',
            'axes.axisbelow': True
        })

        self.colors = {
            'text': '#2C3E50',
            'ice': '#5D6D7E',
            'phev': '#768fb1',
            'bev': '#388E3C',
        }

    def _create_session_dir(self) -> str:
        """Create the specific directory for this session's outputs."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        subdir = "sweep_run" if self.mode == "sweep_run" else "single_run"
        path = os.path.join(self.output_root, subdir, timestamp)
        os.makedirs(path, exist_ok=True)
        return path

    def get_save_path(self, filename: str) -> str:
        return os.path.join(self.session_dir, filename)

    def save_svg(self, render: ChartRender, filename: str = "lifecycle_carbon.svg") -> str:
        filepath = self.get_save_path(filename)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(render_svg(render))
        logger.info(f"   [Chart] Saved SVG to: {filepath}")
        return filepath

    def plot_footprint_breakdown(self, results: Dict[str, VehicleResult], filename: str = "lifecycle_breakdown.png") -> Optional[str]:
        """Stacked bars of lifecycle phases, one bar per vehicle."""
        if not results:
            return None

        labels = [r.label for r in results.values()]
        # rows: phases in stacking order, cols: vehicles
        values = np.array([
            [r.phases.as_dict().get(phase, 0.0) for r in results.values()]
            for phase in STACK_ORDER
        ])
        bottoms = np.vstack([np.zeros(len(labels)), np.cumsum(values, axis=0)[:-1]])

        fig, ax = plt.subplots(figsize=(10, 6), dpi=150)
        for phase, row, bottom in zip(STACK_ORDER, values, bottoms):
            ax.bar(labels, row, bottom=bottom, color=PHASE_COLORS[phase], width=0.5,
                   label=PHASE_LABELS[phase], edgecolor='white', linewidth=0.8)

        totals = values.sum(axis=0)
        for i, total in enumerate(totals):
            ax.text(i, total + totals.max() * 0.01, f'{total:.1f}',
                    ha='center', va='bottom', fontsize=11, fontweight='bold', color=self.colors['text'])

        ax.set_ylabel("Metric tons CO2", fontweight='bold')
        ax.set_title("Total Lifecycle Carbon Footprint", pad=20, loc='left')
        # Legend top-down matches the stack read from the top
        handles, legend_labels = ax.get_legend_handles_labels()
        ax.legend(handles[::-1], legend_labels[::-1], bbox_to_anchor=(1.02, 1), loc='upper left', frameon=False)

        plt.tight_layout()
        filepath = self.get_save_path(filename)
        plt.savefig(filepath, dpi=300, bbox_inches='tight')
        plt.close(fig)
        logger.info(f"   [Plot] Saved breakdown to: {filepath}")
        return filepath

    def plot_sweep(self, df: pd.DataFrame, parameter: str, filename: Optional[str] = None) -> Optional[str]:
        """Line chart of vehicle totals against one swept input."""
        if df.empty:
            logger.warning("No data to plot for sweep.")
            return None

        fig, ax = plt.subplots(figsize=(11, 7), dpi=150)
        ordered = df.sort_values(parameter)
        for vehicle, subset in ordered.groupby("Vehicle", sort=False):
            ax.plot(subset[parameter], subset["Total (tCO2)"], marker='o', linewidth=2.5, markersize=6,
                    markerfacecolor='white', markeredgewidth=2, label=vehicle,
                    color=self.colors.get(vehicle.lower(), self.colors['text']))

        ax.set_xlabel(parameter.replace("_", " ").capitalize(), fontweight='bold')
        ax.set_ylabel("Total lifecycle tCO2", fontweight='bold')
        ax.set_title(f"Lifecycle Carbon vs {parameter.replace('_', ' ')}", loc='left', pad=15)
        ax.legend(title="Vehicle", frameon=False)

        plt.tight_layout()
        filepath = self.get_save_path(filename or f"sweep_{parameter}.png")
        plt.savefig(filepath, dpi=300, bbox_inches='tight')
        plt.close(fig)
        logger.info(f"   [Plot] Saved sweep to: {filepath}")
        return filepath
