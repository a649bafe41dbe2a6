import logging
import pandas as pd
from typing import List, Tuple, Dict, Callable
from urllib.parse import parse_qs, urlencode

from colorama import Fore, Style
from ..models import InputParameters, VehicleResult
from ..constants import (
    DECIMALS, STACK_ORDER,
    KEY_RENEWABLES_MIX, KEY_PHEV_MIX, KEY_VEHICLE_LIFETIME, KEY_PHEV_BATT_SIZE,
    KEY_EV_BATT_SIZE, KEY_HYBRID_EFFICIENCY,
    RENEWABLES_OPTIONS, ELECTRIC_SHARE_OPTIONS, LIFETIME_OPTIONS, PHEV_BATTERY_OPTIONS,
    BEV_BATTERY_OPTIONS, HYBRID_GAIN_OPTIONS,
)

logger = logging.getLogger(__name__)

# Style Constants
C_HEADER = Fore.CYAN + Style.BRIGHT
C_PROMPT = Fore.YELLOW
C_CHOICE = Fore.MAGENTA
C_ERROR = Fore.RED
C_SUCCESS = Fore.GREEN
C_RESET = Style.RESET_ALL


def _parse_int(text: str) -> int:
    # "125000.0" and "76.5" are accepted and truncated toward zero
    return int(float(text))


# field name -> (query key, parser, options, prompt label)
PARAMETER_FIELDS: Dict[str, Tuple[str, Callable[[str], float], List[Tuple[float, str]], str]] = {
    "lifetime_miles": (KEY_VEHICLE_LIFETIME, _parse_int, LIFETIME_OPTIONS, "Vehicle lifetime (miles)"),
    "renewables_mix": (KEY_RENEWABLES_MIX, _parse_int, RENEWABLES_OPTIONS, "Share of electricity from renewable sources"),
    "bev_battery_kwh": (KEY_EV_BATT_SIZE, float, BEV_BATTERY_OPTIONS, "BEV battery size (kWh)"),
    "phev_battery_kwh": (KEY_PHEV_BATT_SIZE, float, PHEV_BATTERY_OPTIONS, "PHEV battery size (kWh)"),
    "electric_mile_share": (KEY_PHEV_MIX, _parse_int, ELECTRIC_SHARE_OPTIONS, "PHEV % EV miles"),
    "hybrid_efficiency_gain": (KEY_HYBRID_EFFICIENCY, _parse_int, HYBRID_GAIN_OPTIONS, "PHEV hybrid MPG increase"),
}


def style_prompt(prompt_text: str) -> str:
    """Helper to wrap input prompt in color."""
    return f"{C_PROMPT}{prompt_text}{C_RESET}"


def print_header(text: str):
    """Print a styled header."""
    # Direct print for visual flair, bypassing the logger formatter
    print(f"\n{C_HEADER}{'='*60}")
    print(f"{text.center(60)}")
    print(f"{'='*60}{C_RESET}")


def prompt_choice(label: str, options: List[str], default: str) -> str:
    """
    Prompt user to pick one value from a list of options; returns the chosen option.
    Supports selecting by index (1-based) or typing the name.
    """
    display_parts = []
    for idx, opt in enumerate(options, 1):
        display_parts.append(f"[{C_SUCCESS}{idx}{C_PROMPT}] {C_CHOICE}{opt}{C_PROMPT}")

    opts_str = " / ".join(display_parts)

    while True:
        print(f"\n{C_PROMPT}{label} options:{C_RESET} {opts_str}")
        s = input(style_prompt(f"Select option (name or number) [default={default}]: ")).strip().lower()

        if not s:
            return default

        if s.isdigit():
            idx = int(s)
            if 1 <= idx <= len(options):
                return options[idx-1]

        for opt in options:
            if s == opt.lower():
                return opt

        logger.warning(f"Invalid choice '{s}'. Please enter a number 1-{len(options)} or the option name.")


def prompt_option_value(label: str, options: List[Tuple[float, str]], default: float) -> float:
    """
    prompt_choice over an enumerated (value, label) list; returns the chosen value.
    """
    labels = [text for _, text in options]
    by_label = {text: value for value, text in options}
    default_label = next((text for value, text in options if value == default), labels[0])
    return by_label[prompt_choice(label, labels, default=default_label)]


def prompt_input_parameters(base: InputParameters = None) -> InputParameters:
    """
    Walk the user through every model input, offering only the enumerated values.
    """
    if base is None:
        base = InputParameters()
    chosen = {}
    for field_name, (_, _, options, label) in PARAMETER_FIELDS.items():
        chosen[field_name] = prompt_option_value(label, options, getattr(base, field_name))
    return InputParameters(**chosen)


def parse_option(text: str, parser: Callable[[str], float], options: List[Tuple[float, str]], default: float, key: str) -> float:
    """
    Parse one external value. Anything unparseable or outside the allowed options
    falls back to the default.
    """
    try:
        value = parser(text.strip())
    except (ValueError, OverflowError, AttributeError):
        logger.warning(f"Could not parse '{key}={text}'. Using default {default}.")
        return default

    if value not in [v for v, _ in options]:
        logger.warning(f"Value '{key}={text}' is not an allowed option. Using default {default}.")
        return default
    return value


def parse_query_params(query: str) -> InputParameters:
    """
    Build InputParameters from a query string such as 'rx=43&ex=60&lt=125000'.
    Missing keys take their defaults.
    """
    defaults = InputParameters()
    raw = parse_qs(query.lstrip("?"), keep_blank_values=True)

    values = {}
    for field_name, (key, parser, options, _) in PARAMETER_FIELDS.items():
        default = getattr(defaults, field_name)
        if key in raw:
            values[field_name] = parse_option(raw[key][0], parser, options, default, key)
        else:
            values[field_name] = default
    return InputParameters(**values)


def _format_value(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def to_query_string(params: InputParameters) -> str:
    """Inverse of parse_query_params, for sharing a configuration as a link."""
    return urlencode([
        (key, _format_value(getattr(params, field_name)))
        for field_name, (key, _, _, _) in PARAMETER_FIELDS.items()
    ])


def results_to_dataframe(results: Dict[str, VehicleResult]) -> pd.DataFrame:
    """
    One row per vehicle with a column per phase (absent phases as 0) and the total.
    """
    rows = []
    for r in results.values():
        row = {"Vehicle": r.label}
        phases = r.phases.as_dict()
        for phase in STACK_ORDER:
            row[f"{phase} (tCO2)"] = phases.get(phase, 0.0)
        row["Total (tCO2)"] = r.total
        rows.append(row)

    df = pd.DataFrame(rows)
    numeric_cols = df.select_dtypes(include='number').columns
    df[numeric_cols] = df[numeric_cols].round(DECIMALS)
    return df


def print_results_overview(results: Dict[str, VehicleResult], params: InputParameters):
    """Console summary of one run."""
    print_header("Total Lifecycle Metric Tons CO2")
    logger.info(
        f"Renewables {params.renewables_mix:g}% | PHEV EV miles {params.electric_mile_share:g}% | "
        f"Lifetime {params.lifetime_miles:,.0f} mi | PHEV {params.phev_battery_kwh:g} kWh | "
        f"BEV {params.bev_battery_kwh:g} kWh | Hybrid gain {params.hybrid_efficiency_gain:g}%"
    )
    lowest = min(results.values(), key=lambda r: r.total)
    for r in results.values():
        marker = f" {C_SUCCESS}<- lowest{C_RESET}" if r is lowest else ""
        print(f"  {r.label:<5} {r.total:7.1f}{marker}")
        for phase, value in r.phases.items():
            print(f"        {phase:<14} {value:7.2f}")
