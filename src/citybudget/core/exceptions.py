"""
Custom exception types for citybudget.

Every exception carries a machine-readable code so callers (the host
scene, the CLI) can handle specific failure modes programmatically.
"""


class CityBudgetError(Exception):
    """Base exception for all citybudget errors."""

    def __init__(self, message: str, code: str = "CITY_BUDGET_ERROR"):
        self.code = code
        super().__init__(message)


class DataValidationError(CityBudgetError):
    """Raised when a CSV row or field cannot be parsed."""

    def __init__(self, message: str, field: str | None = None, line: int | None = None):
        self.field = field
        self.line = line
        super().__init__(message, code="DATA_VALIDATION_ERROR")


class ZeroCostError(CityBudgetError):
    """Raised when projecting impact for a zone whose cost is zero."""

    def __init__(self, zone_name: str = ""):
        self.zone_name = zone_name
        msg = "undefined impact: zero-cost zone"
        if zone_name:
            msg = f"{msg} '{zone_name}'"
        super().__init__(msg, code="ZERO_COST")


class InputValidationError(CityBudgetError):
    """Raised when user-entered simulation fields are not numeric."""

    def __init__(self, message: str, field: str = ""):
        self.field = field
        super().__init__(message, code="INPUT_VALIDATION_ERROR")


class PoolExhaustedError(CityBudgetError):
    """Raised when a pool with a hard ceiling has no handle to give."""

    def __init__(self, max_handles: int):
        self.max_handles = max_handles
        msg = f"Handle pool exhausted: ceiling of {max_handles} handles reached"
        super().__init__(msg, code="POOL_EXHAUSTED")
