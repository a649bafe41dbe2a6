import logging
from dataclasses import replace
from ..constants import DECIMALS
from ..models import InputParameters, FootprintConstants

logger = logging.getLogger(__name__)


def f3(x: float) -> str:
    """
    Format a float with a fixed number of decimal places (DECIMALS).
    """
    return f"{x:.{DECIMALS}f}"


def clamp(value: float, lower: float, upper: float = None) -> float:
    if value < lower:
        return lower
    if upper is not None and value > upper:
        return upper
    return value


def clamp_inputs(params: InputParameters) -> InputParameters:
    """
    Bring every input into its valid range:
      - percentages (renewables mix, electric share, hybrid gain) into [0, 100]
      - lifetime miles and battery sizes to >= 0
    Keeps the hybrid efficiency factor >= 1 so the PHEV fuel term never divides by zero.
    """
    clamped = replace(
        params,
        renewables_mix=clamp(params.renewables_mix, 0.0, 100.0),
        electric_mile_share=clamp(params.electric_mile_share, 0.0, 100.0),
        lifetime_miles=clamp(params.lifetime_miles, 0.0),
        phev_battery_kwh=clamp(params.phev_battery_kwh, 0.0),
        bev_battery_kwh=clamp(params.bev_battery_kwh, 0.0),
        hybrid_efficiency_gain=clamp(params.hybrid_efficiency_gain, 0.0, 100.0),
    )
    if clamped != params:
        logger.warning(f"Inputs clamped into range: {params} -> {clamped}")
    return clamped


def grid_intensity_per_mile(renewables_mix: float, constants: FootprintConstants) -> float:
    """
    Carbon per electric mile (tCO2/mile) for a grid with the given renewables share (%).
    Linear blend of the fossil and renewable generation factors.
    """
    fraction = renewables_mix / 100
    return (
        (1 - fraction) * constants.fossil_grid_tco2_per_mile
        + fraction * constants.renewable_grid_tco2_per_mile
    )


def battery_manufacturing_carbon(capacity_kwh: float, constants: FootprintConstants) -> float:
    """Embodied carbon of a battery pack (tCO2), linear in capacity."""
    return capacity_kwh * constants.battery_tco2_per_kwh


def hybrid_efficiency_factor(efficiency_gain: float) -> float:
    """Miles-per-gallon multiplier of the PHEV over the ICE when running on fuel."""
    return 1 + efficiency_gain / 100
