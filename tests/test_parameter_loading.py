import logging

import pandas as pd

from vehicle_carbon.config import load_excel_config
from vehicle_carbon import constants


def test_param_loading(tmp_path):
    print("Testing Parameter Loading...")
    path = tmp_path / "model_parameters.xlsx"
    pd.DataFrame([
        {"Section": "3. Embodied Carbon", "Key": "PHEV_MATERIALS_TCO2", "Value": 17.0, "Unit": "tCO2", "Description": "-"},
        {"Section": "2. Use Phase", "Key": " FUEL_TCO2_PER_MILE ", "Value": 0.0004, "Unit": "tCO2/mile", "Description": "-"},
    ]).to_excel(path, index=False)

    config = load_excel_config(str(path))

    assert config["PHEV_MATERIALS_TCO2"] == 17.0
    # Keys are stripped
    assert config["FUEL_TCO2_PER_MILE"] == 0.0004
    assert len(config) == 2


def test_missing_file_returns_empty(tmp_path):
    assert load_excel_config(str(tmp_path / "nope.xlsx")) == {}


def test_missing_file_is_not_a_warning(tmp_path, caplog):
    # The workbook is optional; built-in defaults cover every constant
    caplog.set_level(logging.INFO, logger="vehicle_carbon.config")
    load_excel_config(str(tmp_path / "nope.xlsx"))
    assert "Using built-in defaults" in caplog.text
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


def test_missing_columns_returns_empty(tmp_path):
    path = tmp_path / "bad.xlsx"
    pd.DataFrame([{"Name": "EOL_TCO2", "Amount": 0.5}]).to_excel(path, index=False)
    assert load_excel_config(str(path)) == {}


def test_blank_values_are_skipped(tmp_path):
    path = tmp_path / "blank.xlsx"
    pd.DataFrame([
        {"Key": "EOL_TCO2", "Value": None},
        {"Key": "MANUFACTURING_TCO2", "Value": 1.5},
    ]).to_excel(path, index=False)
    assert load_excel_config(str(path)) == {"MANUFACTURING_TCO2": 1.5}


def test_builtin_defaults_are_complete():
    # Without a workbook every constant still resolves to a number
    for name in (
        "FOSSIL_GRID_TCO2_PER_MILE", "RENEWABLE_GRID_TCO2_PER_MILE", "FUEL_TCO2_PER_MILE",
        "BATTERY_TCO2_PER_KWH", "ICE_MATERIALS_TCO2", "PHEV_MATERIALS_TCO2",
        "BEV_MATERIALS_TCO2", "MANUFACTURING_TCO2", "EOL_TCO2",
    ):
        assert isinstance(getattr(constants, name), float)
