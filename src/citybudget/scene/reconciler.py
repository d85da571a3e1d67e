"""
Active-set reconciliation.

Each pass diffs the zones that currently hold a display handle against
the zones that are visible now: handles of zones that scrolled away go
back to the pool, zones that scrolled in get a handle from the pool.
A handle is owned by exactly one of the pool or the active set.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field, replace
from typing import Any

from loguru import logger

from citybudget.core.contracts import Zone, category_color
from citybudget.scene.handles import ZoneView
from citybudget.scene.pool import HandlePool
from citybudget.scene.visibility import VisibilityTracker

Configurator = Callable[[Any, ZoneView, int], None]


def build_view(zone: Zone, selected: bool = False) -> ZoneView:
    """Visual state for *zone*: colour by category, brighter and raised when selected."""
    return ZoneView(
        zone_name=zone.name,
        position=zone.position,
        color=category_color(zone.category, selected=selected),
        label=zone.name,
        selected=selected,
        elevated=selected,
    )


def apply_view(handle: Any, view: ZoneView, z_order: int) -> None:
    handle.apply(view, z_order)


@dataclass
class ReconcileReport:
    """What one reconciliation pass did."""

    visible: list[str] = field(default_factory=list)
    acquired: list[str] = field(default_factory=list)
    released: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.acquired or self.released)

    def to_dict(self) -> dict:
        return {
            "visible": self.visible,
            "acquired": self.acquired,
            "released": self.released,
            "failed": self.failed,
        }


class ActiveSet:
    """Zone name -> display handle for every zone currently on screen."""

    def __init__(self):
        self._handles: dict[str, Any] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._handles))

    def get(self, name: str) -> Any | None:
        return self._handles.get(name)

    def add(self, name: str, handle: Any) -> None:
        if name in self._handles:
            raise KeyError(f"Zone '{name}' already has a display handle")
        self._handles[name] = handle

    def pop(self, name: str) -> Any | None:
        return self._handles.pop(name, None)

    def items(self) -> list[tuple[str, Any]]:
        return list(self._handles.items())


class Reconciler:
    """
    Keeps the active set in step with what the tracker says is visible.

    Args:
        pool: Source and sink of display handles.
        tracker: Visibility test.
        configure: Pushes a :class:`ZoneView` and a draw order into a
            handle. Defaults to ``handle.apply(view, z_order)``.
    """

    def __init__(
        self,
        pool: HandlePool,
        tracker: VisibilityTracker,
        configure: Configurator | None = None,
    ):
        self.pool = pool
        self.tracker = tracker
        self.active = ActiveSet()
        self._configure = configure or apply_view
        self._views: dict[str, ZoneView] = {}
        self._z_orders: dict[str, int] = {}
        self._z = itertools.count(1)

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def reconcile(self, zones: Iterable[Zone], selected: str | None = None) -> ReconcileReport:
        """Run one pass over *zones* and return what changed."""
        report = ReconcileReport()
        visible = self.tracker.visible_zones(zones)
        visible_names = {z.name for z in visible}
        report.visible = [z.name for z in visible]

        for name in self.active:
            if name not in visible_names:
                self.release(name)
                report.released.append(name)

        for zone in visible:
            if zone.name in self.active:
                continue
            try:
                self._show(zone, selected == zone.name)
                report.acquired.append(zone.name)
            except Exception:
                logger.exception(f"Failed to show zone '{zone.name}'")
                report.failed.append(zone.name)

        if selected is not None and selected in self.active:
            self.bring_to_front(selected)

        if report.changed or report.failed:
            logger.debug(
                f"Reconciled: {len(report.visible)} visible, +{len(report.acquired)} "
                f"-{len(report.released)}, {len(report.failed)} failed"
            )
        return report

    def _apply(self, name: str, handle: Any, view: ZoneView, z_order: int | None = None) -> None:
        """Configure *handle* and record the view and draw order it was given."""
        if z_order is None:
            z_order = next(self._z)
        self._configure(handle, view, z_order)
        self._views[name] = view
        self._z_orders[name] = z_order

    def _show(self, zone: Zone, selected: bool) -> None:
        handle = self.pool.acquire()
        try:
            self._apply(zone.name, handle, build_view(zone, selected))
        except Exception:
            self.pool.release(handle)
            raise
        self.active.add(zone.name, handle)

    def release(self, name: str) -> bool:
        """Return the handle of zone *name* to the pool."""
        handle = self.active.pop(name)
        self._views.pop(name, None)
        self._z_orders.pop(name, None)
        if handle is None:
            return False
        self.pool.release(handle)
        return True

    def release_all(self) -> int:
        names = list(self.active)
        for name in names:
            self.release(name)
        return len(names)

    # ------------------------------------------------------------------
    # Restyling active handles
    # ------------------------------------------------------------------

    def bring_to_front(self, name: str) -> None:
        handle = self.active.get(name)
        view = self._views.get(name)
        if handle is None or view is None:
            return
        self._apply(name, handle, view)

    def restyle(self, zones: Iterable[Zone], selected: str | None) -> None:
        """Re-apply highlight state after the selection changed."""
        by_name = {z.name: z for z in zones}
        for name, handle in self.active.items():
            zone = by_name.get(name)
            if zone is None:
                continue
            view = build_view(zone, name == selected)
            if self._views.get(name) == view:
                continue
            try:
                self._apply(name, handle, view)
            except Exception:
                logger.exception(f"Failed to restyle zone '{name}'")
        if selected is not None:
            self.bring_to_front(selected)

    def move(self, zone: Zone) -> None:
        """Push a dragged zone's new position into its handle, keeping its draw order."""
        handle = self.active.get(zone.name)
        view = self._views.get(zone.name)
        if handle is None or view is None:
            return
        self._apply(zone.name, handle, replace(view, position=zone.position), self._z_orders[zone.name])

    def view_of(self, name: str) -> ZoneView | None:
        return self._views.get(name)

    def z_order_of(self, name: str) -> int | None:
        return self._z_orders.get(name)
