"""
Display handles and the visual state pushed into them.

The host owns the real display objects (sprites, widgets, scene nodes).
The scene core treats them as opaque: it only creates them through a
factory, hands them a :class:`ZoneView`, and deactivates them on release.
:class:`DisplayHandle` is the in-memory stand-in used when no host is
attached (CLI, tests).
"""

from __future__ import annotations

from dataclasses import dataclass

from citybudget.core.contracts import RGBA


@dataclass(frozen=True)
class ZoneView:
    """Everything a handle needs to draw one zone."""

    zone_name: str
    position: tuple[float, float]
    color: RGBA
    label: str
    selected: bool = False
    elevated: bool = False


@dataclass(eq=False)
class DisplayHandle:
    """Headless display object."""

    handle_id: int
    active: bool = False
    view: ZoneView | None = None
    z_order: int = 0

    def apply(self, view: ZoneView, z_order: int = 0) -> None:
        self.view = view
        self.z_order = z_order
        self.active = True

    def deactivate(self) -> None:
        self.active = False
        self.view = None
        self.z_order = 0
