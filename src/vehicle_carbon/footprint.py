import logging
from dataclasses import replace
from typing import Dict, Optional

from .constants import VEHICLE_LABELS, VehicleKey
from .models import InputParameters, FootprintConstants, PhaseBreakdown, VehicleResult
from .utils.calculations import (
    clamp_inputs, grid_intensity_per_mile, battery_manufacturing_carbon, hybrid_efficiency_factor
)
from .audit import audit_logger

logger = logging.getLogger(__name__)


def _vehicle_result(key: VehicleKey, phases: PhaseBreakdown) -> VehicleResult:
    total = phases.total()
    audit_logger.log_calculation(
        context=f"{VEHICLE_LABELS[key]}: Lifecycle total",
        formula=" + ".join(phase for phase, _ in phases.items()),
        variables={phase: round(value, 4) for phase, value in phases.items()},
        result=total,
        unit="tCO2"
    )
    return VehicleResult(key=key, label=VEHICLE_LABELS[key], phases=phases, total=total)


def compute_ice(params: InputParameters, constants: FootprintConstants) -> VehicleResult:
    """
    Internal-combustion baseline: materials, manufacturing, fuel use and end of life.
    Independent of the electricity mix, battery sizes and hybrid settings.
    """
    fuel_use = constants.fuel_tco2_per_mile * params.lifetime_miles

    audit_logger.log_calculation(
        context="ICE: Fuel use phase",
        formula="FuelEF * LifetimeMiles",
        variables={"FuelEF": constants.fuel_tco2_per_mile, "LifetimeMiles": params.lifetime_miles},
        result=fuel_use,
        unit="tCO2"
    )

    phases = PhaseBreakdown(
        materials=constants.ice_materials_tco2,
        manufacturing=constants.manufacturing_tco2,
        eol=constants.eol_tco2,
        fuel_use=fuel_use,
    )
    return _vehicle_result("ice", phases)


def compute_phev(params: InputParameters, constants: FootprintConstants) -> VehicleResult:
    """
    Plug-in hybrid: small battery, electric miles at grid intensity for the electric
    share, remaining miles on fuel improved by the hybrid efficiency factor.
    """
    share = params.electric_mile_share / 100
    intensity = grid_intensity_per_mile(params.renewables_mix, constants)
    factor = hybrid_efficiency_factor(params.hybrid_efficiency_gain)

    battery = battery_manufacturing_carbon(params.phev_battery_kwh, constants)
    battery_use = intensity * params.lifetime_miles * share
    fuel_use = constants.fuel_tco2_per_mile * params.lifetime_miles * (1 - share) / factor

    audit_logger.log_calculation(
        context="PHEV: Electricity use phase",
        formula="GridIntensity * LifetimeMiles * ElectricShare",
        variables={
            "GridIntensity": round(intensity, 10),
            "LifetimeMiles": params.lifetime_miles,
            "ElectricShare": share
        },
        result=battery_use,
        unit="tCO2"
    )
    audit_logger.log_calculation(
        context="PHEV: Fuel use phase",
        formula="FuelEF * LifetimeMiles * (1 - ElectricShare) / HybridFactor",
        variables={
            "FuelEF": constants.fuel_tco2_per_mile,
            "LifetimeMiles": params.lifetime_miles,
            "ElectricShare": share,
            "HybridFactor": factor
        },
        result=fuel_use,
        unit="tCO2"
    )

    phases = PhaseBreakdown(
        materials=constants.phev_materials_tco2,
        manufacturing=constants.manufacturing_tco2,
        eol=constants.eol_tco2,
        battery=battery,
        battery_use=battery_use,
        fuel_use=fuel_use,
    )
    return _vehicle_result("phev", phases)


def compute_bev(params: InputParameters, constants: FootprintConstants) -> VehicleResult:
    """
    Battery-electric: large battery, every mile at grid intensity.
    """
    intensity = grid_intensity_per_mile(params.renewables_mix, constants)
    battery = battery_manufacturing_carbon(params.bev_battery_kwh, constants)
    battery_use = intensity * params.lifetime_miles

    audit_logger.log_calculation(
        context="BEV: Electricity use phase",
        formula="((1 - Renewables) * FossilEF + Renewables * RenewableEF) * LifetimeMiles",
        variables={
            "Renewables": params.renewables_mix / 100,
            "FossilEF": constants.fossil_grid_tco2_per_mile,
            "RenewableEF": constants.renewable_grid_tco2_per_mile,
            "LifetimeMiles": params.lifetime_miles
        },
        result=battery_use,
        unit="tCO2"
    )

    phases = PhaseBreakdown(
        materials=constants.bev_materials_tco2,
        manufacturing=constants.manufacturing_tco2,
        eol=constants.eol_tco2,
        battery=battery,
        battery_use=battery_use,
    )
    return _vehicle_result("bev", phases)


def compute_footprints(
    params: InputParameters,
    constants: Optional[FootprintConstants] = None
) -> Dict[str, VehicleResult]:
    """
    Compute all three vehicles for one input tuple.
    Returns results keyed 'ice', 'phev', 'bev' (in that order).
    """
    if constants is None:
        constants = FootprintConstants()
    params = clamp_inputs(params)

    logger.debug(f"Computing footprints for {params}")
    results = {
        "ice": compute_ice(params, constants),
        "phev": compute_phev(params, constants),
        "bev": compute_bev(params, constants),
    }
    for r in results.values():
        logger.debug(f"  {r.label}: {r.total:.3f} tCO2")
    return results


def _fixed_and_rate(result: VehicleResult, lifetime_miles: float):
    """Split a result into its mileage-independent part and its tCO2 per mile."""
    phases = result.phases
    use = (phases.battery_use or 0.0) + (phases.fuel_use or 0.0)
    fixed = result.total - use
    rate = use / lifetime_miles if lifetime_miles > 0 else 0.0
    return fixed, rate


def break_even_miles(
    a: VehicleKey,
    b: VehicleKey,
    params: InputParameters,
    constants: Optional[FootprintConstants] = None
) -> Optional[float]:
    """
    Lifetime mileage at which vehicle `a` and vehicle `b` have equal lifecycle totals,
    holding every other input fixed. Use-phase terms are linear in mileage, so this is
    closed-form. Returns None when the two lines never meet at positive mileage.
    """
    if constants is None:
        constants = FootprintConstants()
    params = clamp_inputs(params)

    # Evaluate the per-mile rates at a reference mileage; they are mileage-independent.
    reference = params if params.lifetime_miles > 0 else replace(params, lifetime_miles=1.0)
    results = compute_footprints(reference, constants)
    fixed_a, rate_a = _fixed_and_rate(results[a], reference.lifetime_miles)
    fixed_b, rate_b = _fixed_and_rate(results[b], reference.lifetime_miles)

    if rate_a == rate_b:
        return None
    miles = (fixed_b - fixed_a) / (rate_a - rate_b)
    if miles <= 0:
        return None
    return miles
