from dataclasses import replace

import pytest

from vehicle_carbon.models import InputParameters, FootprintConstants
from vehicle_carbon.footprint import compute_footprints, break_even_miles
from vehicle_carbon.utils.calculations import grid_intensity_per_mile, clamp_inputs

BASE = InputParameters(
    renewables_mix=43,
    electric_mile_share=60,
    lifetime_miles=125000,
    phev_battery_kwh=10.7,
    bev_battery_kwh=79,
    hybrid_efficiency_gain=25,
)


def test_reference_scenario_ice():
    print("Testing reference scenario (ICE)...")
    ice = compute_footprints(BASE)["ice"]

    # 14 materials + 1.4 manufacturing + 0.5 EOL + 0.00034600896 * 125000 fuel
    assert ice.phases.materials == 14
    assert ice.phases.manufacturing == 1.4
    assert ice.phases.eol == 0.5
    assert ice.phases.fuel_use == pytest.approx(43.25112)
    assert ice.total == pytest.approx(59.15112)
    assert ice.phases.battery is None
    assert ice.phases.battery_use is None


def test_reference_scenario_phev_and_bev():
    results = compute_footprints(BASE)
    intensity = 0.57 * 0.0002722191604 + 0.43 * 0.000003218688

    phev = results["phev"]
    assert phev.phases.battery == pytest.approx(10.7 * 0.0886075949367089)
    assert phev.phases.battery_use == pytest.approx(intensity * 125000 * 0.6)
    assert phev.phases.fuel_use == pytest.approx(0.00034600896 * 125000 * 0.4 / 1.25)
    assert phev.phases.materials == 16

    bev = results["bev"]
    assert bev.phases.battery == pytest.approx(7.0)
    assert bev.phases.battery_use == pytest.approx(intensity * 125000)
    assert bev.phases.fuel_use is None
    assert bev.phases.materials == 17


def test_totals_equal_sum_of_phases():
    cases = [
        BASE,
        replace(BASE, renewables_mix=100, electric_mile_share=0),
        replace(BASE, renewables_mix=3, lifetime_miles=300000, bev_battery_kwh=131),
        replace(BASE, hybrid_efficiency_gain=0, phev_battery_kwh=20),
    ]
    for params in cases:
        for r in compute_footprints(params).values():
            assert abs(r.total - sum(v for _, v in r.phases.items())) < 1e-9


def test_result_order_and_labels():
    results = compute_footprints(BASE)
    assert list(results.keys()) == ["ice", "phev", "bev"]
    assert [r.label for r in results.values()] == ["ICE", "PHEV", "BEV"]


def test_ice_invariant_to_electric_inputs():
    reference = compute_footprints(BASE)["ice"].total
    variants = [
        replace(BASE, renewables_mix=100),
        replace(BASE, electric_mile_share=0),
        replace(BASE, phev_battery_kwh=20, bev_battery_kwh=24),
        replace(BASE, hybrid_efficiency_gain=60),
    ]
    for params in variants:
        assert compute_footprints(params)["ice"].total == reference


def test_efficiency_gain_only_affects_phev():
    low = compute_footprints(replace(BASE, hybrid_efficiency_gain=0))
    high = compute_footprints(replace(BASE, hybrid_efficiency_gain=60))
    assert low["bev"].total == high["bev"].total
    assert low["ice"].total == high["ice"].total
    assert high["phev"].phases.fuel_use < low["phev"].phases.fuel_use


def test_bev_use_phase_decreases_with_renewables():
    previous = None
    for mix in range(0, 101, 10):
        use = compute_footprints(replace(BASE, renewables_mix=mix))["bev"].phases.battery_use
        if previous is not None:
            assert use < previous
        previous = use


def test_phev_fuel_use_at_share_extremes():
    all_electric = compute_footprints(replace(BASE, electric_mile_share=100))
    assert all_electric["phev"].phases.fuel_use == 0

    all_fuel = compute_footprints(replace(BASE, electric_mile_share=0))
    expected = all_fuel["ice"].phases.fuel_use / 1.25
    assert all_fuel["phev"].phases.fuel_use == pytest.approx(expected, abs=1e-12)
    assert all_fuel["phev"].phases.battery_use == 0


def test_doubling_lifetime_doubles_use_phase_only():
    short = compute_footprints(BASE)
    long = compute_footprints(replace(BASE, lifetime_miles=250000))

    for key in ("ice", "phev", "bev"):
        a = short[key].phases
        b = long[key].phases
        for phase in ("battery_use", "fuel_use"):
            if getattr(a, phase) is not None:
                assert getattr(b, phase) == pytest.approx(2 * getattr(a, phase))
        assert b.materials == a.materials
        assert b.manufacturing == a.manufacturing
        assert b.eol == a.eol
        assert b.battery == a.battery


def test_grid_intensity_endpoints():
    constants = FootprintConstants()
    assert grid_intensity_per_mile(0, constants) == pytest.approx(0.0002722191604)
    assert grid_intensity_per_mile(100, constants) == pytest.approx(0.000003218688)


def test_out_of_range_inputs_are_clamped():
    wild = InputParameters(
        renewables_mix=150,
        electric_mile_share=-20,
        lifetime_miles=-5,
        phev_battery_kwh=-1,
        bev_battery_kwh=79,
        hybrid_efficiency_gain=-50,
    )
    clamped = clamp_inputs(wild)
    assert clamped.renewables_mix == 100
    assert clamped.electric_mile_share == 0
    assert clamped.lifetime_miles == 0
    assert clamped.phev_battery_kwh == 0
    assert clamped.hybrid_efficiency_gain == 0

    # Hybrid factor stays >= 1, so this must not raise
    results = compute_footprints(wild)
    assert results["phev"].phases.fuel_use == 0


def test_phev_materials_is_configurable():
    conservative = FootprintConstants(phev_materials_tco2=17.0)
    default = compute_footprints(BASE)["phev"].total
    adjusted = compute_footprints(BASE, conservative)["phev"].total
    assert adjusted == pytest.approx(default + 1.0)


def test_break_even_bev_vs_ice():
    miles = break_even_miles("bev", "ice", BASE)
    assert miles is not None and miles > 0

    at_break_even = compute_footprints(replace(BASE, lifetime_miles=miles))
    assert at_break_even["bev"].total == pytest.approx(at_break_even["ice"].total)


def test_break_even_none_when_lines_never_cross():
    # With 100% EV miles the PHEV and BEV share a per-mile rate, so the fixed gap never closes
    params = replace(BASE, electric_mile_share=100)
    assert break_even_miles("phev", "bev", params) is None


if __name__ == "__main__":
    test_reference_scenario_ice()
    test_totals_equal_sum_of_phases()
    print("PASS")
