"""
Core module for citybudget.

Provides the canonical data contracts and exception types that every
other layer builds on.
"""

from citybudget.core.contracts import (
    BASE_ALPHA,
    CATEGORY_COLORS,
    SELECTED_ALPHA,
    BudgetItem,
    Zone,
    ZoneCategory,
    category_color,
)
from citybudget.core.stores import BudgetStore, ZoneStore
from citybudget.core.exceptions import (
    CityBudgetError,
    DataValidationError,
    InputValidationError,
    PoolExhaustedError,
    ZeroCostError,
)

__all__ = [
    "BASE_ALPHA",
    "CATEGORY_COLORS",
    "SELECTED_ALPHA",
    "BudgetItem",
    "Zone",
    "ZoneCategory",
    "BudgetStore",
    "ZoneStore",
    "category_color",
    "CityBudgetError",
    "DataValidationError",
    "InputValidationError",
    "PoolExhaustedError",
    "ZeroCostError",
]
