"""
Text and table reports for the budget and zone panels.
"""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from citybudget.core.contracts import Zone
from citybudget.core.stores import BudgetStore


def budget_summary(store: BudgetStore) -> pd.DataFrame:
    """
    Allocated, spent and remaining per category.

    Categories keep the order in which they first appear in the store.
    """
    records = [
        {
            "name": item.name,
            "category": item.category,
            "allocated": item.allocated,
            "spent": item.spent,
            "remaining": item.remaining,
        }
        for item in store
    ]
    df = pd.DataFrame(records, columns=["name", "category", "allocated", "spent", "remaining"])
    if df.empty:
        return pd.DataFrame(columns=["category", "allocated", "spent", "remaining"])

    summary = (
        df.groupby("category", sort=False)[["allocated", "spent", "remaining"]]
        .sum()
        .reset_index()
    )
    return summary


def format_budget_summary(store: BudgetStore, title: str = "San Jose City Budget") -> str:
    lines = [title, "", f"Total: ${store.total_allocated:,.0f} million", ""]
    for category, allocated in store.category_totals().items():
        lines.append(f"{category}: ${allocated:,.0f} million")
    return "\n".join(lines)


def zone_summary(zone: Zone | None) -> str:
    if zone is None:
        return "No zone selected"
    lines = [
        f"Selected: {zone.name}",
        f"Type: {zone.type}",
        f"Cost: ${zone.cost:,.0f} million",
        "",
        "Impacts:",
    ]
    lines.extend(f"{name}: {value:.1f}" for name, value in zone.impacts.items())
    return "\n".join(lines)


def impact_totals(zones: Iterable[Zone], per_zone: int = 3) -> dict[str, float]:
    """Sum of each zone's first *per_zone* impacts, by impact name."""
    totals: dict[str, float] = {}
    for zone in zones:
        for name, value in zone.top_impacts(per_zone):
            totals[name] = totals.get(name, 0.0) + value
    return totals


def top_impact_categories(zones: Iterable[Zone], n: int = 3) -> list[str]:
    """City-wide highest-scoring impact names; ties keep first-seen order."""
    totals = impact_totals(zones)
    ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
    return [name for name, _ in ranked[:n]]


def impact_options(zone: Zone, zones: Iterable[Zone], city_wide: bool = False, n: int = 3) -> list[str]:
    """Impact names offered in the simulation form."""
    if city_wide:
        return top_impact_categories(zones, n)
    return list(zone.impacts)
