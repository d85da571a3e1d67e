"""
Data ingestion layer for citybudget.

Line-oriented CSV loaders for zones and budget items, the save-format
writer, and the built-in default datasets.
"""

from citybudget.ingestion.defaults import default_budget, default_zones
from citybudget.ingestion.loaders import (
    BudgetLoader,
    LoadResult,
    RowError,
    ZoneLoader,
    load_budget,
    load_zones,
    parse_zone_row,
    save_budget,
    save_zones,
    zones_to_frame,
)

__all__ = [
    "BudgetLoader",
    "LoadResult",
    "RowError",
    "ZoneLoader",
    "default_budget",
    "default_zones",
    "load_budget",
    "load_zones",
    "parse_zone_row",
    "save_budget",
    "save_zones",
    "zones_to_frame",
]
