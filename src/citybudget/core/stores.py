"""
In-memory stores for zones and budget line items.

Both stores are keyed by name.  A name that shows up twice replaces the
earlier record (last write wins) so that the active-set map, which is
keyed by zone name, never sees two zones with the same identity.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from loguru import logger

from citybudget.core.contracts import BudgetItem, Zone


class ZoneStore:
    """Ordered collection of zones, unique by name."""

    def __init__(self, zones: Iterable[Zone] | None = None):
        self._zones: dict[str, Zone] = {}
        if zones is not None:
            self.replace_all(zones)

    def __iter__(self) -> Iterator[Zone]:
        return iter(list(self._zones.values()))

    def __len__(self) -> int:
        return len(self._zones)

    def __contains__(self, name: object) -> bool:
        return name in self._zones

    def get(self, name: str) -> Zone | None:
        return self._zones.get(name)

    def add(self, zone: Zone) -> None:
        if zone.name in self._zones:
            logger.warning(f"Duplicate zone '{zone.name}' replaces the earlier record")
        self._zones[zone.name] = zone

    def replace_all(self, zones: Iterable[Zone]) -> None:
        self._zones.clear()
        for zone in zones:
            self.add(zone)

    def clear(self) -> None:
        self._zones.clear()

    def names(self) -> list[str]:
        return list(self._zones)


class BudgetStore:
    """Budget line items keyed by name."""

    def __init__(self, items: Iterable[BudgetItem] | None = None):
        self._items: dict[str, BudgetItem] = {}
        if items is not None:
            self.replace_all(items)

    def __iter__(self) -> Iterator[BudgetItem]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def get(self, name: str) -> BudgetItem | None:
        return self._items.get(name)

    def set(self, item: BudgetItem) -> None:
        if item.name in self._items:
            logger.warning(f"Duplicate budget item '{item.name}' replaces the earlier record")
        self._items[item.name] = item

    def replace_all(self, items: Iterable[BudgetItem]) -> None:
        self._items.clear()
        for item in items:
            self.set(item)

    def clear(self) -> None:
        self._items.clear()

    @property
    def total_allocated(self) -> float:
        return sum(item.allocated for item in self._items.values())

    @property
    def total_spent(self) -> float:
        return sum(item.spent for item in self._items.values())

    def category_totals(self) -> dict[str, float]:
        """Allocated amount per category, in first-appearance order."""
        totals: dict[str, float] = {}
        for item in self._items.values():
            totals[item.category] = totals.get(item.category, 0.0) + item.allocated
        return totals
