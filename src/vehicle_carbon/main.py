import logging
import os
import sys
from dataclasses import replace
from datetime import datetime
from typing import Optional

import pandas as pd

from .constants import DEFAULT_SVG_WIDTH, DEFAULT_SVG_HEIGHT, DECIMALS, SweepParameter
from .models import InputParameters, FootprintConstants
from .footprint import compute_footprints, break_even_miles
from .layout import layout_chart
from .utils.input_helpers import (
    PARAMETER_FIELDS, prompt_choice, prompt_input_parameters, parse_query_params, to_query_string,
    results_to_dataframe, print_results_overview, print_header, C_SUCCESS, C_RESET
)
from .logging_conf import setup_logging
from .visualization import Visualizer

logger = logging.getLogger(__name__)


def save_report(df: pd.DataFrame, directory: str, basename: str) -> str:
    """
    Write a CSV report; if the file is locked, fall back to a timestamped name.
    """
    out_file = os.path.join(directory, f"{basename}.csv")
    try:
        df.to_csv(out_file, index=False)
    except PermissionError:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        fallback_file = os.path.join(directory, f"{basename}_{ts}.csv")
        logger.warning(f"Could not save to {out_file} (File Locked?). Saving to {fallback_file} instead.")
        df.to_csv(fallback_file, index=False)
        out_file = fallback_file
    logger.info(f"Report saved to: {out_file}")
    return out_file


def run_single(
    params: InputParameters,
    output_root: Optional[str] = None,
    width: float = DEFAULT_SVG_WIDTH,
    height: float = DEFAULT_SVG_HEIGHT,
    constants: Optional[FootprintConstants] = None
) -> Visualizer:
    """
    Compute one input tuple and write the SVG chart, the matplotlib breakdown and a CSV report.
    """
    results = compute_footprints(params, constants)
    print_results_overview(results, params)

    render = layout_chart(results, width, height)

    vis = Visualizer(mode="single_run", output_root=output_root)
    vis.save_svg(render)
    try:
        vis.plot_footprint_breakdown(results)
    except (OSError, ValueError) as e:
        logger.error(f"Breakdown plot failed: {e}")

    save_report(results_to_dataframe(results), vis.session_dir, "lifecycle_carbon_report")
    logger.info(f"Share this configuration with: ?{to_query_string(params)}")
    return vis


def run_parameter_sweep(
    base: InputParameters,
    parameter: SweepParameter,
    constants: Optional[FootprintConstants] = None
) -> pd.DataFrame:
    """
    Run the model for every allowed value of one input, holding the others at `base`.
    One row per (value, vehicle).
    """
    if parameter not in PARAMETER_FIELDS:
        raise ValueError(f"Unknown sweep parameter: {parameter}")

    _, _, options, _ = PARAMETER_FIELDS[parameter]
    frames = []
    for value, _ in options:
        results = compute_footprints(replace(base, **{parameter: value}), constants)
        df = results_to_dataframe(results)
        df.insert(0, parameter, value)
        frames.append(df)

    sweep_df = pd.concat(frames, ignore_index=True)
    logger.info(f"Sweep over {parameter}: {len(options)} values x {len(sweep_df) // len(options)} vehicles")
    return sweep_df


def log_break_even(params: InputParameters, constants: Optional[FootprintConstants] = None):
    for a, b in (("bev", "ice"), ("bev", "phev"), ("phev", "ice")):
        miles = break_even_miles(a, b, params, constants)
        if miles is None:
            logger.info(f"  {a.upper()} vs {b.upper()}: no break-even at positive mileage")
        else:
            logger.info(f"  {a.upper()} vs {b.upper()}: break-even at {miles:,.0f} miles")


def run_sweep(base: InputParameters, parameter: SweepParameter, output_root: Optional[str] = None) -> pd.DataFrame:
    print_header(f"Parameter Sweep: {parameter}")
    sweep_df = run_parameter_sweep(base, parameter)

    vis = Visualizer(mode="sweep_run", output_root=output_root)
    save_report(sweep_df, vis.session_dir, f"sweep_{parameter}")
    try:
        vis.plot_sweep(sweep_df, parameter)
    except (OSError, ValueError) as e:
        logger.error(f"Sweep visualization failed: {e}")

    logger.info("Break-even lifetime mileage at the base inputs:")
    log_break_even(base)

    pivot = sweep_df.pivot_table(index=parameter, columns="Vehicle", values="Total (tCO2)", sort=False)
    print(pivot.round(DECIMALS).to_string())
    return sweep_df


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    # 1. LOGGING SETUP
    setup_logging(console_level=logging.INFO)

    # Non-interactive: a query string such as "rx=43&ex=60&lt=125000"
    if argv:
        run_single(parse_query_params(argv[0]))
        return

    # 2. PROCESS START BANNER
    print_header("Vehicle lifecycle carbon comparison - Start")

    mode = prompt_choice("Mode", ["Single Run", "Parameter Sweep"], default="Single Run")

    print_header("Step 1: Inputs")
    params = prompt_input_parameters()

    if mode == "Parameter Sweep":
        parameter = prompt_choice("Parameter to sweep", list(PARAMETER_FIELDS.keys()), default="renewables_mix")
        run_sweep(params, parameter)
    else:
        vis = run_single(params)
        print(f"\n{C_SUCCESS}Outputs saved to: {vis.session_dir}{C_RESET}")


if __name__ == "__main__":
    main()
