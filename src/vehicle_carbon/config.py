import os
import pandas as pd
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)

# Workbook lives in <project root>/data/parameters_config/.
# This file is <project root>/src/vehicle_carbon/config.py, so the root is two levels up.
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_CONFIG_PATH = os.path.join(PROJECT_ROOT, "data", "parameters_config", "model_parameters.xlsx")

# Environment override so alternative constants tables can be swapped in without editing code
CONFIG_PATH_ENV = "VEHICLE_CARBON_CONFIG"


def resolve_config_path() -> str:
    return os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH)


def load_excel_config(path: str = None) -> Dict[str, Any]:
    """
    Load model parameters from an Excel workbook.
    Expected columns: Key, Value (Unit, Section, Description are informational).
    Returns a dictionary of Key -> Value; empty if the workbook is missing or unreadable.
    """
    if path is None:
        path = resolve_config_path()

    config = {}
    if not os.path.exists(path):
        logger.info(f"Config file not found at {path}. Using built-in defaults.")
        return config

    try:
        df = pd.read_excel(path, engine="openpyxl")
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config from {path}: {e}")
        return config

    if "Key" not in df.columns or "Value" not in df.columns:
        logger.warning(f"Excel file {path} missing 'Key' or 'Value' columns.")
        return config

    for _, row in df.iterrows():
        key = str(row["Key"]).strip()
        val = row["Value"]
        if pd.isna(val):
            logger.warning(f"Parameter '{key}' has no value in {path}; ignoring.")
            continue
        config[key] = val
    logger.info(f"Loaded {len(config)} parameters from {path}")

    return config
