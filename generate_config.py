import os
import sys
import pandas as pd

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))
from vehicle_carbon.config import DEFAULT_CONFIG_PATH

# Every Key matches the name looked up in vehicle_carbon/constants.py.

PARAMS = [
    # --- SECTION: GLOBAL ---
    {
        "Key": "DECIMALS",
        "Value": 2,
        "Unit": "Integer",
        "Section": "1. Global Settings",
        "Description": "Number of decimal places used in CSV reports."
    },

    # --- SECTION: USE PHASE ---
    {
        "Key": "FOSSIL_GRID_TCO2_PER_MILE",
        "Value": 0.0002722191604,
        "Unit": "tCO2/mile",
        "Section": "2. Use Phase",
        "Description": "Carbon per electric mile charged from non-renewable grid generation."
    },
    {
        "Key": "RENEWABLE_GRID_TCO2_PER_MILE",
        "Value": 0.000003218688,
        "Unit": "tCO2/mile",
        "Section": "2. Use Phase",
        "Description": "Carbon per electric mile charged from renewable generation."
    },
    {
        "Key": "FUEL_TCO2_PER_MILE",
        "Value": 0.00034600896,
        "Unit": "tCO2/mile",
        "Section": "2. Use Phase",
        "Description": "Tailpipe and fuel supply carbon per mile for the ICE (PHEV divides by its hybrid factor)."
    },

    # --- SECTION: EMBODIED ---
    {
        "Key": "BATTERY_TCO2_PER_KWH",
        "Value": 0.0886075949367089,
        "Unit": "tCO2/kWh",
        "Section": "3. Embodied Carbon",
        "Description": "Battery manufacturing carbon per kWh of capacity (7 t for a 79 kWh pack)."
    },
    {
        "Key": "ICE_MATERIALS_TCO2",
        "Value": 14.0,
        "Unit": "tCO2",
        "Section": "3. Embodied Carbon",
        "Description": "Materials footprint of the internal-combustion vehicle."
    },
    {
        "Key": "PHEV_MATERIALS_TCO2",
        "Value": 16.0,
        "Unit": "tCO2",
        "Section": "3. Embodied Carbon",
        "Description": "Materials footprint of the plug-in hybrid. Set equal to BEV_MATERIALS_TCO2 for the conservative case."
    },
    {
        "Key": "BEV_MATERIALS_TCO2",
        "Value": 17.0,
        "Unit": "tCO2",
        "Section": "3. Embodied Carbon",
        "Description": "Materials footprint of the battery-electric vehicle (excluding the battery)."
    },
    {
        "Key": "MANUFACTURING_TCO2",
        "Value": 1.4,
        "Unit": "tCO2",
        "Section": "3. Embodied Carbon",
        "Description": "Vehicle assembly carbon, identical for all powertrains."
    },
    {
        "Key": "EOL_TCO2",
        "Value": 0.5,
        "Unit": "tCO2",
        "Section": "3. Embodied Carbon",
        "Description": "End-of-life carbon, identical for all powertrains."
    },

    # --- SECTION: CHART ---
    {
        "Key": "CHART_PADDING",
        "Value": 20,
        "Unit": "px",
        "Section": "4. Chart Layout",
        "Description": "Outer padding around the chart."
    },
    {
        "Key": "CHART_LEGEND_PADDING",
        "Value": 30,
        "Unit": "px",
        "Section": "4. Chart Layout",
        "Description": "Gutter reserved for the y-axis labels and vehicle names."
    },
    {
        "Key": "CHART_TICK_LENGTH",
        "Value": 10,
        "Unit": "px",
        "Section": "4. Chart Layout",
        "Description": "Length of y-axis tick marks."
    },
    {
        "Key": "CHART_SCALE_MARGIN_TCO2",
        "Value": 6,
        "Unit": "tCO2",
        "Section": "4. Chart Layout",
        "Description": "Headroom added above the tallest bar when scaling the y-axis."
    },
    {
        "Key": "CHART_ANTIALIAS_GAP_PX",
        "Value": 1,
        "Unit": "px",
        "Section": "4. Chart Layout",
        "Description": "Upward offset per stacked layer so adjacent fills do not bleed."
    },
]


def create_formatted_excel(output_path: str = DEFAULT_CONFIG_PATH):
    df = pd.DataFrame(PARAMS)

    # Reorder
    df = df[["Section", "Key", "Value", "Unit", "Description"]]

    os.makedirs(os.path.dirname(output_path), exist_ok=True)

    # Use xlsxwriter for formatting
    writer = pd.ExcelWriter(output_path, engine='xlsxwriter')
    df.to_excel(writer, index=False, sheet_name='Parameters')

    workbook = writer.book
    worksheet = writer.sheets['Parameters']

    header_fmt = workbook.add_format({
        'bold': True,
        'text_wrap': True,
        'valign': 'top',
        'fg_color': '#4F81BD',
        'font_color': '#FFFFFF',
        'border': 1
    })
    section_fmt = workbook.add_format({'bold': True, 'bg_color': '#DCE6F1', 'border': 1})
    key_fmt = workbook.add_format({'bold': True, 'font_color': '#333333', 'bg_color': '#F2F2F2', 'border': 1})
    value_fmt = workbook.add_format({'bg_color': '#FFFFCC', 'border': 1})  # editable cells
    text_fmt = workbook.add_format({'text_wrap': True, 'valign': 'top', 'border': 1})

    worksheet.set_column('A:A', 25)  # Section
    worksheet.set_column('B:B', 35)  # Key
    worksheet.set_column('C:C', 22, value_fmt)  # Value
    worksheet.set_column('D:D', 12)  # Unit
    worksheet.set_column('E:E', 70, text_fmt)  # Description

    for col_num, value in enumerate(df.columns.values):
        worksheet.write(0, col_num, value, header_fmt)

    # Rewrite each row with its cell formats (pandas output carries none)
    for row_num, row_data in enumerate(PARAMS):
        r = row_num + 1
        worksheet.write(r, 0, row_data["Section"], section_fmt)
        worksheet.write(r, 1, row_data["Key"], key_fmt)
        worksheet.write(r, 2, row_data["Value"], value_fmt)
        worksheet.write(r, 3, row_data["Unit"], text_fmt)
        worksheet.write(r, 4, row_data["Description"], text_fmt)

    writer.close()
    print(f"Formatted Excel created at {output_path}")


if __name__ == "__main__":
    create_formatted_excel(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_CONFIG_PATH)
