"""Built-in datasets used when a CSV file is missing."""

from __future__ import annotations

from citybudget.core.contracts import BudgetItem, Zone


def default_zones() -> list[Zone]:
    """Four sample zones around the map origin."""
    return [
        Zone(
            name="Downtown",
            position=(0, 0),
            type="Commercial",
            cost=150,
            impacts={"Economy": 5.0, "Environment": -2.0},
        ),
        Zone(
            name="Residential District",
            position=(100, 0),
            type="Residential",
            cost=100,
            impacts={"Housing": 4.0, "Traffic": 3.0},
        ),
        Zone(
            name="Central Park",
            position=(50, 50),
            type="Park",
            cost=50,
            impacts={"Environment": 5.0, "Recreation": 4.0},
        ),
        Zone(
            name="Industrial Area",
            position=(-100, -50),
            type="Industrial",
            cost=120,
            impacts={"Economy": 4.0, "Environment": -3.0, "Jobs": 5.0},
        ),
    ]


def default_budget() -> list[BudgetItem]:
    """Six sample line items (2,200 allocated in total)."""
    rows = [
        ("Public Safety", 500, 450, "Safety"),
        ("Parks & Recreation", 200, 180, "Recreation"),
        ("Infrastructure", 400, 350, "Infrastructure"),
        ("Public Transportation", 300, 290, "Transportation"),
        ("Education", 450, 430, "Education"),
        ("Healthcare", 350, 320, "Healthcare"),
    ]
    return [
        BudgetItem(name=name, allocated=allocated, spent=spent, category=category)
        for name, allocated, spent, category in rows
    ]
