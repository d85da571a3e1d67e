"""
Linear impact projection for a proposed zone budget.

A zone's impact on a category scales with the ratio of the proposed
budget to the zone's nominal cost, and accumulates linearly over the
years::

    yearly = base_impact * (proposed_budget / zone_cost)
    total  = yearly * years

Projections are read-only; nothing is written back to the zone.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import pandas as pd

from citybudget.core.contracts import Zone
from citybudget.core.exceptions import InputValidationError, ZeroCostError

INVALID_BUDGET_MSG = "Please enter a valid budget amount"
INVALID_YEARS_MSG = "Please enter a valid number of years"


@dataclass
class ImpactProjection:
    """Result of projecting one zone's impact on one category."""

    zone_name: str
    impact_name: str
    base_impact: float
    proposed_budget: float
    zone_cost: float
    years: int
    yearly_impact: float
    total_impact: float

    @property
    def effect(self) -> str:
        if self.total_impact > 0:
            return "positive"
        if self.total_impact < 0:
            return "negative"
        return "none"

    def to_dict(self) -> dict:
        return {
            "zone_name": self.zone_name,
            "impact_name": self.impact_name,
            "base_impact": self.base_impact,
            "proposed_budget": self.proposed_budget,
            "zone_cost": self.zone_cost,
            "years": self.years,
            "yearly_impact": self.yearly_impact,
            "total_impact": self.total_impact,
            "effect": self.effect,
        }


def project_impact(
    base_impact: float,
    proposed_budget: float,
    zone_cost: float,
    years: int,
) -> tuple[float, float]:
    """
    Return ``(yearly_impact, total_impact)``.

    Raises:
        ZeroCostError: if ``zone_cost`` is zero.
    """
    if zone_cost == 0:
        raise ZeroCostError()
    yearly = base_impact * (proposed_budget / zone_cost)
    return yearly, yearly * years


def project_zone_impact(
    zone: Zone,
    impact_name: str,
    proposed_budget: float,
    years: int,
) -> ImpactProjection:
    """Project *zone*'s impact on *impact_name*; an unknown impact has base 0."""
    base = zone.impacts.get(impact_name, 0.0)
    try:
        yearly, total = project_impact(base, proposed_budget, zone.cost, years)
    except ZeroCostError:
        raise ZeroCostError(zone.name) from None
    return ImpactProjection(
        zone_name=zone.name,
        impact_name=impact_name,
        base_impact=base,
        proposed_budget=proposed_budget,
        zone_cost=zone.cost,
        years=years,
        yearly_impact=yearly,
        total_impact=total,
    )


def parse_budget_text(text: str) -> float:
    try:
        value = float(text)
    except (TypeError, ValueError):
        raise InputValidationError(INVALID_BUDGET_MSG, field="budget") from None
    if not math.isfinite(value):
        raise InputValidationError(INVALID_BUDGET_MSG, field="budget")
    return value


def parse_years_text(text: str) -> int:
    try:
        value = int(str(text).strip())
    except (TypeError, ValueError):
        raise InputValidationError(INVALID_YEARS_MSG, field="years") from None
    if value < 0:
        raise InputValidationError(INVALID_YEARS_MSG, field="years")
    return value


def simulate_impact(zone: Zone, impact_name: str, budget_text: str, years_text: str) -> ImpactProjection:
    """
    Validate the simulation form fields and run the projection.

    Raises:
        InputValidationError: with the message to show next to the form.
        ZeroCostError: when the zone has no cost to scale against.
    """
    budget = parse_budget_text(budget_text)
    years = parse_years_text(years_text)
    return project_zone_impact(zone, impact_name, budget, years)


def format_projection(projection: ImpactProjection) -> str:
    """Human-readable results block."""
    lines = [
        "Simulation Results:",
        "",
        f"Base Impact: {projection.base_impact:.1f}",
        f"Yearly Impact: {projection.yearly_impact:.1f}",
        f"Total Impact over {projection.years} years: {projection.total_impact:.1f}",
        "",
    ]
    effect = {
        "positive": "a positive effect",
        "negative": "a negative effect",
        "none": "no significant effect",
    }[projection.effect]
    lines.append(f"This investment will have {effect} on {projection.impact_name}")
    return "\n".join(lines)


def impact_schedule(projection: ImpactProjection) -> pd.DataFrame:
    """Year-by-year and cumulative impact for a projection."""
    years = list(range(1, projection.years + 1))
    return pd.DataFrame({
        "year": years,
        "yearly_impact": [projection.yearly_impact] * len(years),
        "cumulative_impact": [projection.yearly_impact * y for y in years],
    })
