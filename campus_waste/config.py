"""
Configuration constants for the campus waste data pipeline.
"""

import os
from typing import Dict, List, Tuple

# ======================================================
#  DATA SOURCES / CONSTANTS
# ======================================================
DEFAULT_DATA_SOURCE: str = "data/assign2_25S_wastedata.csv"

# Path or URL; WASTE_DATA_SOURCE overrides the default.
DATA_SOURCE: str = os.getenv("WASTE_DATA_SOURCE", DEFAULT_DATA_SOURCE)

DEFAULT_SEP: str = ","
HTTP_TIMEOUT: int = 30

# Source header -> record frame column
SOURCE_COLUMNS: Dict[str, str] = {
    "Year": "year",
    "Month": "month",
    "Day": "day",
    "Category": "category",
    "Material Type": "material_type",
    "Weight (lbs)": "weight",
    "Vendor": "vendor",
    "Date Updated": "date_updated",
    "Cost": "cost",
}

RECORD_COLUMNS: List[str] = list(SOURCE_COLUMNS.values())

# ======================================================
#  CATEGORIES
# ======================================================
LANDFILL: str = "Landfill"
RECYCLING: str = "Recycling"
COMPOST: str = "Compost"
REUSE: str = "Reuse"

# Canonical order, also the order of category nodes in the composition tree
CATEGORIES: Tuple[str, ...] = (LANDFILL, RECYCLING, COMPOST, REUSE)

# Lower-cased source spelling -> canonical name
CATEGORY_ALIASES: Dict[str, str] = {
    "landfill": LANDFILL,
    "recycle": RECYCLING,
    "recycling": RECYCLING,
    "compost": COMPOST,
    "reuse": REUSE,
}

# Canonical name -> column in yearly/monthly totals
CATEGORY_COLUMNS: Dict[str, str] = {
    LANDFILL: "landfill",
    RECYCLING: "recycling",
    COMPOST: "compost",
    REUSE: "reuse",
}

# Unrecognised categories are summed here in yearly/monthly totals
OTHER_COLUMN: str = "other"
TOTAL_COLUMN: str = "total"

TOTALS_COLUMNS: List[str] = [*CATEGORY_COLUMNS.values(), OTHER_COLUMN, TOTAL_COLUMN]

# ======================================================
#  MONTHS
# ======================================================
MONTH_NAMES: Tuple[str, ...] = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

# Accepts both "Jan" and "January" (plus "Sept")
MONTH_NUMBERS: Dict[str, int] = {
    **{name: i for i, name in enumerate(MONTH_NAMES, start=1)},
    **{name[:3]: i for i, name in enumerate(MONTH_NAMES, start=1)},
    "sept": 9,
}

# ======================================================
#  SHAPE DEFAULTS
# ======================================================
ROOT_NAME: str = "Total Waste"

DEFAULT_TOP_MATERIALS: int = 10

STACK_ORDERS: Tuple[str, ...] = ("none", "ascending", "descending", "inside-out")
STACK_OFFSETS: Tuple[str, ...] = ("none", "silhouette", "wiggle")

DEFAULT_STACK_ORDER: str = "inside-out"
DEFAULT_STACK_OFFSET: str = "wiggle"
