"""
Impact simulation and reporting for citybudget.
"""

from citybudget.simulation.impact import (
    ImpactProjection,
    format_projection,
    impact_schedule,
    project_impact,
    project_zone_impact,
    simulate_impact,
)
from citybudget.simulation.reports import (
    budget_summary,
    format_budget_summary,
    impact_options,
    top_impact_categories,
    zone_summary,
)

__all__ = [
    "ImpactProjection",
    "format_projection",
    "impact_schedule",
    "project_impact",
    "project_zone_impact",
    "simulate_impact",
    "budget_summary",
    "format_budget_summary",
    "impact_options",
    "top_impact_categories",
    "zone_summary",
]
