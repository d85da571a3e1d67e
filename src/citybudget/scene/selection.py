"""
Selection and drag state.

One zone can be selected at a time.  Pointer-down on a zone selects it
and captures the offset between the zone and the pointer, so a drag
keeps the zone under the same spot of the pointer.  Two pointer-downs
on the same zone inside ``double_click_window`` seconds count as a
double click, which the scene uses to open the impact simulation.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from citybudget.core.contracts import Zone
from citybudget.scene.visibility import Point


class InteractionState(str, Enum):
    IDLE = "idle"
    SELECTED = "selected"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class ClickResult:
    zone_name: str
    double_click: bool


class SelectionController:
    """Idle -> Selected on pointer-down; Selected <-> Dragging on drag / drag end."""

    def __init__(
        self,
        double_click_window: float = 0.3,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.double_click_window = double_click_window
        self._clock = clock
        self.state = InteractionState.IDLE
        self.selected: str | None = None
        self.drag_offset: Point | None = None
        self._last_click_time: float | None = None
        self._last_clicked: str | None = None

    def pointer_down(self, zone: Zone, pointer_local: Point, now: float | None = None) -> ClickResult:
        now = self._clock() if now is None else now
        double_click = (
            self._last_click_time is not None
            and self._last_clicked == zone.name
            and now - self._last_click_time < self.double_click_window
        )
        self._last_click_time = now
        self._last_clicked = zone.name

        self.selected = zone.name
        self.state = InteractionState.SELECTED
        self.drag_offset = (zone.x - pointer_local[0], zone.y - pointer_local[1])
        logger.debug(f"Selected '{zone.name}'" + (" (double click)" if double_click else ""))
        return ClickResult(zone_name=zone.name, double_click=double_click)

    def drag(self, zone: Zone, pointer_local: Point) -> bool:
        """Move the selected zone under the pointer; False when the event is ignored."""
        if zone.name != self.selected or self.drag_offset is None:
            return False
        dx, dy = self.drag_offset
        try:
            zone.move_to(pointer_local[0] + dx, pointer_local[1] + dy)
        except ValueError as e:
            logger.warning(f"Ignoring drag event: {e}")
            return False
        self.state = InteractionState.DRAGGING
        return True

    def end_drag(self, zone: Zone) -> bool:
        """Finish a drag on the selected zone; True when the budget view should refresh."""
        if zone.name != self.selected:
            return False
        self.state = InteractionState.SELECTED
        self.drag_offset = None
        return True

    def clear(self) -> None:
        self.state = InteractionState.IDLE
        self.selected = None
        self.drag_offset = None

    @property
    def is_dragging(self) -> bool:
        return self.state is InteractionState.DRAGGING
