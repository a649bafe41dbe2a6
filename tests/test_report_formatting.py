import logging
import os
import xml.etree.ElementTree as ET

import pandas as pd
import pytest

from vehicle_carbon.constants import LIFETIME_OPTIONS
from vehicle_carbon.models import InputParameters
from vehicle_carbon.footprint import compute_footprints
from vehicle_carbon.layout import build_render
from vehicle_carbon.visualization import Visualizer, render_svg
from vehicle_carbon.main import main, run_parameter_sweep, run_single, run_sweep, save_report

SVG_NS = "{http://www.w3.org/2000/svg}"


def test_svg_document():
    render = build_render(InputParameters(), 900, 500)
    svg = render_svg(render)

    root = ET.fromstring(svg)
    assert root.tag == f"{SVG_NS}svg"
    assert root.attrib["width"] == "900"

    keys = [r.attrib.get("data-key") for r in root.iter(f"{SVG_NS}rect") if "data-key" in r.attrib]
    assert "ice-materials" in keys
    assert "phev-fuel_use" in keys
    assert "bev-battery_use" in keys
    assert len(keys) == 4 + 6 + 5

    texts = [t.text for t in root.iter(f"{SVG_NS}text")]
    for label in ("ICE", "PHEV", "BEV", "End of Life", "Materials", "59.2"):
        assert label in texts
    # One label per tick
    for tick in render.ticks:
        assert f"{tick.value:g}" in texts


def test_svg_placeholder_is_still_valid():
    render = build_render(InputParameters(), 0, 0)
    root = ET.fromstring(render_svg(render))
    assert root.tag == f"{SVG_NS}svg"


def test_svg_sized_from_render():
    root = ET.fromstring(render_svg(build_render(InputParameters(), 640, 360)))
    assert root.attrib["width"] == "640"
    assert root.attrib["height"] == "360"
    assert root.attrib["viewBox"] == "0 0 640 360"


def test_visualizer_outputs(tmp_path):
    vis = Visualizer(mode="single_run", output_root=str(tmp_path))
    assert vis.session_dir.startswith(os.path.join(str(tmp_path), "single_run"))

    results = compute_footprints(InputParameters())
    png = vis.plot_footprint_breakdown(results)
    svg = vis.save_svg(build_render(InputParameters(), 900, 500))
    assert os.path.exists(png)
    assert os.path.exists(svg)


def test_parameter_sweep():
    df = run_parameter_sweep(InputParameters(), "renewables_mix")

    # 17 renewables options x 3 vehicles
    assert len(df) == 17 * 3
    assert df.columns[0] == "renewables_mix"

    ice = df[df["Vehicle"] == "ICE"]["Total (tCO2)"]
    assert ice.nunique() == 1

    bev = df[df["Vehicle"] == "BEV"].sort_values("renewables_mix")["Total (tCO2)"]
    assert bev.is_monotonic_decreasing


def test_parameter_sweep_unknown_parameter():
    with pytest.raises(ValueError):
        run_parameter_sweep(InputParameters(), "colour")


def test_single_run_writes_report(tmp_path):
    vis = run_single(InputParameters(), output_root=str(tmp_path))
    files = os.listdir(vis.session_dir)
    assert "lifecycle_carbon.svg" in files
    assert "lifecycle_breakdown.png" in files
    assert "lifecycle_carbon_report.csv" in files

    report = pd.read_csv(os.path.join(vis.session_dir, "lifecycle_carbon_report.csv"))
    assert list(report["Vehicle"]) == ["ICE", "PHEV", "BEV"]


def test_save_report_falls_back_when_locked(tmp_path, monkeypatch):
    df = pd.DataFrame({"Vehicle": ["ICE"], "Total (tCO2)": [59.15]})
    original = pd.DataFrame.to_csv
    calls = []

    def locked_once(self, path, *args, **kwargs):
        calls.append(path)
        if len(calls) == 1:
            raise PermissionError("locked")
        return original(self, path, *args, **kwargs)

    monkeypatch.setattr(pd.DataFrame, "to_csv", locked_once)
    out = save_report(df, str(tmp_path), "report")
    assert out != os.path.join(str(tmp_path), "report.csv")
    assert os.path.exists(out)


def test_visualizer_defaults_to_report_directory(reports_in_tmp):
    vis = Visualizer(mode="sweep_run")
    assert vis.session_dir.startswith(os.path.join(str(reports_in_tmp), "sweep_run"))


def test_sweep_writes_report_and_plot(tmp_path, caplog):
    caplog.set_level(logging.INFO, logger="vehicle_carbon")
    df = run_sweep(InputParameters(), "lifetime_miles", output_root=str(tmp_path))
    assert len(df) == len(LIFETIME_OPTIONS) * 3

    sweep_root = tmp_path / "sweep_run"
    sessions = os.listdir(sweep_root)
    assert len(sessions) == 1
    files = os.listdir(sweep_root / sessions[0])
    assert "sweep_lifetime_miles.csv" in files
    assert "sweep_lifetime_miles.png" in files

    assert "BEV vs ICE: break-even at" in caplog.text
    assert "PHEV vs ICE" in caplog.text


def test_main_runs_from_query_string(reports_in_tmp, monkeypatch):
    # Leave the root handlers (and caplog) alone
    monkeypatch.setattr("vehicle_carbon.main.setup_logging", lambda **kwargs: None)
    main(["rx=43&ex=100"])

    single_root = reports_in_tmp / "single_run"
    sessions = os.listdir(single_root)
    assert len(sessions) == 1
    session = single_root / sessions[0]
    for name in ("lifecycle_carbon.svg", "lifecycle_breakdown.png", "lifecycle_carbon_report.csv"):
        assert (session / name).exists()

    # All PHEV miles electric: no fuel burned
    report = pd.read_csv(session / "lifecycle_carbon_report.csv").set_index("Vehicle")
    assert report.loc["PHEV", "fuel_use (tCO2)"] == 0
