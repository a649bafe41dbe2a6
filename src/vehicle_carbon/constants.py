from typing import Literal, List, Tuple
from .config import load_excel_config

# ============================================================================
# SETTINGS & CONSTANTS
# ============================================================================

# Load configuration immediately (blocking).
# Any key present in model_parameters.xlsx overrides the built-in value below.
_config = load_excel_config()


def _get(key, default):
    return _config.get(key, default)


# Electricity (metric tons CO2 per mile driven on grid power)
FOSSIL_GRID_TCO2_PER_MILE = float(_get("FOSSIL_GRID_TCO2_PER_MILE", 0.0002722191604))
RENEWABLE_GRID_TCO2_PER_MILE = float(_get("RENEWABLE_GRID_TCO2_PER_MILE", 0.000003218688))

# Fuel (metric tons CO2 per mile driven on fuel)
FUEL_TCO2_PER_MILE = float(_get("FUEL_TCO2_PER_MILE", 0.00034600896))

# Battery manufacturing (7 t for the 79 kWh XC-40 Recharge pack)
BATTERY_TCO2_PER_KWH = float(_get("BATTERY_TCO2_PER_KWH", 0.0886075949367089))

# Materials baselines
ICE_MATERIALS_TCO2 = float(_get("ICE_MATERIALS_TCO2", 14.0))
PHEV_MATERIALS_TCO2 = float(_get("PHEV_MATERIALS_TCO2", 16.0))
BEV_MATERIALS_TCO2 = float(_get("BEV_MATERIALS_TCO2", 17.0))

# Shared by all vehicle types
MANUFACTURING_TCO2 = float(_get("MANUFACTURING_TCO2", 1.4))
EOL_TCO2 = float(_get("EOL_TCO2", 0.5))

DECIMALS = int(_get("DECIMALS", 2))

# ============================================================================
# CHART GEOMETRY
# ============================================================================

PADDING = float(_get("CHART_PADDING", 20))
LEGEND_PADDING = float(_get("CHART_LEGEND_PADDING", 30))
TICK_LENGTH = float(_get("CHART_TICK_LENGTH", 10))
SCALE_MARGIN_TCO2 = float(_get("CHART_SCALE_MARGIN_TCO2", 6))
ANTIALIAS_GAP_PX = float(_get("CHART_ANTIALIAS_GAP_PX", 1))
TICK_CANDIDATES = [0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 100, 110, 120, 130]

# Horizontal placement in fifteenths of the usable width
VEHICLE_SLOTS = {"ice": 1, "phev": 4, "bev": 7}
BAR_WIDTH_DIVISOR = 9
X_AXIS_END_SLOT = 10
LEGEND_SLOT = 11
LEGEND_SWATCH_PX = 15
LEGEND_ROW_PX = 25
TOTAL_LABEL_OFFSET_PX = 8

DEFAULT_SVG_WIDTH = 900
DEFAULT_SVG_HEIGHT = 500

PHASE_COLORS = {
    "materials": "#939392",
    "manufacturing": "#567890",
    "battery": "#768fb1",
    "eol": "#2e2e2c",
    "battery_use": "#c0c9d2",
    "fuel_use": "#e9e2c0",
}
LEGEND_COLOR = "#777"

# Bottom-to-top stacking order
STACK_ORDER = ["materials", "battery", "manufacturing", "battery_use", "fuel_use", "eol"]

# Top-to-bottom legend order
LEGEND_LABELS = [
    ("eol", "End of Life"),
    ("fuel_use", "Use phase - Fuel"),
    ("battery_use", "Use phase - Electricity"),
    ("manufacturing", "Vehicle manufacturing"),
    ("battery", "Battery"),
    ("materials", "Materials"),
]

VEHICLE_LABELS = {"ice": "ICE", "phev": "PHEV", "bev": "BEV"}

# ============================================================================
# INPUT OPTIONS (value, label) and query-string keys
# ============================================================================

KEY_RENEWABLES_MIX = "rx"
KEY_PHEV_MIX = "ex"
KEY_VEHICLE_LIFETIME = "lt"
KEY_PHEV_BATT_SIZE = "pb"
KEY_EV_BATT_SIZE = "eb"
KEY_HYBRID_EFFICIENCY = "he"

DEFAULT_RENEWABLES_MIX = 43
DEFAULT_ELECTRIC_MILE_SHARE = 60
DEFAULT_LIFETIME_MILES = 125000
DEFAULT_PHEV_BATTERY_KWH = 10.7
DEFAULT_BEV_BATTERY_KWH = 79.0
DEFAULT_HYBRID_EFFICIENCY_GAIN = 25

LIFETIME_OPTIONS: List[Tuple[float, str]] = [
    (miles, f"{miles:,}") for miles in range(300000, 25000, -25000)
]

RENEWABLES_OPTIONS: List[Tuple[float, str]] = [
    (100, "100% - VT"), (90, "90%"), (80, "80%"), (76, "76% - WA"), (70, "70%"),
    (60, "60%"), (50, "50%"), (43, "43% - CA"), (40, "40%"), (30, "30%"),
    (28, "28% - NY"), (26, "26% - TX"), (21, "21% - US Avg"), (20, "20%"),
    (18, "18% - Global Avg"), (10, "10% - RI"), (3, "3% - MS"),
]

BEV_BATTERY_OPTIONS: List[Tuple[float, str]] = [
    (131, "131 - F150 Lightning Extended Range"),
    (100, "100 - Tesla Model X, Kia EV9"),
    (98, "98 - F150 Lightning"),
    (79, "79 - Volvo XC-40 Recharge"),
    (75, "75 - Tesla Model Y Long Range"),
    (65, "65 - Chevy Bolt EV and EUV"),
    (62, "62 - Nissan Leaf 2017 Long range"),
    (56, "56 - Tesla Model Y"),
    (40, "40 - Nissan Leaf 2017"),
    (30, "30 - Nissan Leaf 2016"),
    (24, "24 - Nissan Leaf 2010-2015"),
]

PHEV_BATTERY_OPTIONS: List[Tuple[float, str]] = [
    (20, "20 - Mitsubishi Outlander"),
    (18.1, "18.1 - RAV4 Prime"),
    (16, "16 - Chevy Volt"),
    (13.8, "13.8 - Kia PHEV models"),
    (10.7, "10.7 - XC-40 PHEV"),
    (8.8, "8.8 - Prius Prime"),
]

ELECTRIC_SHARE_OPTIONS: List[Tuple[float, str]] = [
    (share, f"{share}%") for share in range(100, -5, -5)
]

HYBRID_GAIN_OPTIONS: List[Tuple[float, str]] = [
    (60, "60%"), (55, "55%"), (50, "50%"), (45, "45%"), (41, "41% - Average (City)"),
    (40, "40%"), (35, "35%"), (30, "30%"), (28, "28%"), (25, "25% - Average (Combined)"),
    (20, "20%"), (15, "15%"), (12, "12% - Average (Highway)"), (10, "10%"), (5, "5%"),
    (0, "0%"),
]

# ============================================================================
# TYPES (Code constructs, not excel parameters)
# ============================================================================

VehicleKey = Literal["ice", "phev", "bev"]
PhaseKey = Literal["materials", "battery", "manufacturing", "battery_use", "fuel_use", "eol"]
SweepParameter = Literal[
    "renewables_mix", "electric_mile_share", "lifetime_miles",
    "phev_battery_kwh", "bev_battery_kwh", "hybrid_efficiency_gain",
]
