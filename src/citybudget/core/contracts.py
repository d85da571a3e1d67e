"""
Canonical data contracts for citybudget.

These Pydantic models are the single source of truth for the records
that flow between the CSV loaders, the scene controller and the impact
projector.

Design principles:
  - Money amounts are floats in millions of the city's currency.
  - Positions are map-local coordinates; world space is the host's concern.
  - A zone keeps its raw type string so it saves back exactly as loaded;
    the enumerated category is derived from it.
"""

from __future__ import annotations

import math
from enum import Enum

from pydantic import BaseModel, Field, field_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ZoneCategory(str, Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    PARK = "park"
    CULTURAL = "cultural"
    TRANSPORTATION = "transportation"
    EDUCATION = "education"
    ENTERTAINMENT = "entertainment"
    OTHER = "other"

    @classmethod
    def from_type(cls, zone_type: str) -> "ZoneCategory":
        """Map a free-form type string onto a category (case-insensitive)."""
        key = zone_type.strip().lower()
        if key == "open space":
            return cls.PARK
        try:
            return cls(key)
        except ValueError:
            return cls.OTHER


RGBA = tuple[float, float, float, float]

BASE_ALPHA = 0.7
SELECTED_ALPHA = 0.9

CATEGORY_COLORS: dict[ZoneCategory, RGBA] = {
    ZoneCategory.RESIDENTIAL: (0.0, 0.5, 1.0, BASE_ALPHA),
    ZoneCategory.COMMERCIAL: (1.0, 0.5, 0.0, BASE_ALPHA),
    ZoneCategory.INDUSTRIAL: (0.5, 0.5, 0.5, BASE_ALPHA),
    ZoneCategory.PARK: (0.0, 1.0, 0.0, BASE_ALPHA),
    ZoneCategory.CULTURAL: (1.0, 0.0, 1.0, BASE_ALPHA),
    ZoneCategory.TRANSPORTATION: (1.0, 1.0, 0.0, BASE_ALPHA),
    ZoneCategory.EDUCATION: (0.0, 1.0, 1.0, BASE_ALPHA),
    ZoneCategory.ENTERTAINMENT: (1.0, 0.0, 0.0, BASE_ALPHA),
    ZoneCategory.OTHER: (0.8, 0.8, 0.8, BASE_ALPHA),
}


def category_color(category: ZoneCategory, selected: bool = False) -> RGBA:
    """Display colour for a category, with the selection alpha applied."""
    r, g, b, a = CATEGORY_COLORS[category]
    return (r, g, b, SELECTED_ALPHA if selected else a)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class Zone(BaseModel):
    """A placeable city-budget item with position, cost, and impact scores."""

    name: str = Field(min_length=1)
    position: tuple[float, float] = (0.0, 0.0)
    type: str = ""
    cost: float = 0.0
    impacts: dict[str, float] = Field(default_factory=dict)

    @field_validator("name", "type", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("cost")
    @classmethod
    def _finite_cost(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("cost must be a finite number")
        return v

    @field_validator("position")
    @classmethod
    def _finite_position(cls, v: tuple[float, float]) -> tuple[float, float]:
        if not all(math.isfinite(c) for c in v):
            raise ValueError(f"position must be finite, got {v}")
        return v

    @field_validator("impacts")
    @classmethod
    def _finite_impacts(cls, v: dict[str, float]) -> dict[str, float]:
        for name, value in v.items():
            if not math.isfinite(value):
                raise ValueError(f"impact '{name}' must be a finite number")
        return v

    @property
    def category(self) -> ZoneCategory:
        return ZoneCategory.from_type(self.type)

    @property
    def x(self) -> float:
        return self.position[0]

    @property
    def y(self) -> float:
        return self.position[1]

    def move_to(self, x: float, y: float) -> None:
        position = (float(x), float(y))
        if not all(math.isfinite(c) for c in position):
            raise ValueError(f"Zone '{self.name}' cannot move to non-finite position {position}")
        self.position = position

    def top_impacts(self, limit: int = 3) -> list[tuple[str, float]]:
        """First *limit* impacts in insertion order (the persisted subset)."""
        return list(self.impacts.items())[:limit]


class BudgetItem(BaseModel):
    """One budget line item."""

    name: str = Field(min_length=1)
    allocated: float = 0.0
    spent: float = 0.0
    category: str = ""

    @field_validator("name", "category", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @property
    def remaining(self) -> float:
        return self.allocated - self.spent
