"""
Viewport culling and scroll debouncing.

Zones live in map-local coordinates.  The map content is scrolled by
moving it inside a fixed viewport, so a zone's world position is
``offset + scale * local`` where ``offset`` is the current scroll
position.  A zone is visible when its world position falls inside the
viewport rectangle grown by a margin on every side.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

import numpy as np
from loguru import logger

from citybudget.core.contracts import Zone

Point = tuple[float, float]


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle with half-open containment."""

    x: float
    y: float
    width: float
    height: float

    @property
    def x_max(self) -> float:
        return self.x + self.width

    @property
    def y_max(self) -> float:
        return self.y + self.height

    def contains(self, point: Point) -> bool:
        px, py = point
        return self.x <= px < self.x_max and self.y <= py < self.y_max

    def expand(self, margin: float) -> "Rect":
        return Rect(
            self.x - margin,
            self.y - margin,
            self.width + 2 * margin,
            self.height + 2 * margin,
        )

    @classmethod
    def from_corners(cls, corners: Sequence[Point]) -> "Rect":
        """Bounding rectangle of a set of corner points."""
        pts = np.asarray(corners, dtype=float)
        if pts.ndim != 2 or pts.shape[1] != 2 or len(pts) == 0:
            raise ValueError("corners must be a non-empty sequence of (x, y) points")
        (min_x, min_y), (max_x, max_y) = pts.min(axis=0), pts.max(axis=0)
        return cls(float(min_x), float(min_y), float(max_x - min_x), float(max_y - min_y))


FALLBACK_RECT = Rect(-5000.0, -5000.0, 10000.0, 10000.0)


@dataclass(frozen=True)
class Viewport:
    """The four world-space corners of the visible window."""

    corners: tuple[Point, Point, Point, Point]

    @classmethod
    def from_size(cls, width: float, height: float, origin: Point = (0.0, 0.0)) -> "Viewport":
        ox, oy = origin
        return cls((
            (ox, oy),
            (ox, oy + height),
            (ox + width, oy + height),
            (ox + width, oy),
        ))


@dataclass(frozen=True)
class MapTransform:
    """Map-local to world-space mapping: ``world = offset + scale * local``."""

    offset: Point = (0.0, 0.0)
    scale: float = 1.0

    def to_world(self, local: Point) -> Point:
        return (
            self.offset[0] + self.scale * local[0],
            self.offset[1] + self.scale * local[1],
        )

    def to_local(self, world: Point) -> Point:
        return (
            (world[0] - self.offset[0]) / self.scale,
            (world[1] - self.offset[1]) / self.scale,
        )

    def scrolled_to(self, offset: Point) -> "MapTransform":
        return MapTransform(offset=(float(offset[0]), float(offset[1])), scale=self.scale)


class VisibilityTracker:
    """
    Decides which zones are on screen.

    ``compute_visible_rect`` must run before ``is_visible``; the
    reconciler does this once per pass so every zone is tested against
    the same rectangle.
    """

    def __init__(
        self,
        viewport: Viewport | None = None,
        transform: MapTransform | None = None,
        margin: float = 100.0,
        fallback: Rect = FALLBACK_RECT,
    ):
        if margin < 0:
            raise ValueError("margin must be non-negative")
        self.viewport = viewport
        self.transform = transform or MapTransform()
        self.margin = margin
        self.fallback = fallback
        self.visible_rect: Rect | None = None

    def compute_visible_rect(self) -> Rect:
        if self.viewport is None:
            self.visible_rect = self.fallback
        else:
            self.visible_rect = Rect.from_corners(self.viewport.corners).expand(self.margin)
        return self.visible_rect

    def is_visible(self, zone: Zone) -> bool:
        rect = self.visible_rect or self.compute_visible_rect()
        return rect.contains(self.transform.to_world(zone.position))

    def visible_zones(self, zones: Iterable[Zone]) -> list[Zone]:
        self.compute_visible_rect()
        return [z for z in zones if self.is_visible(z)]


class ScrollDebouncer:
    """
    Rate limit for visibility passes.

    A pass is due only when the scroll position has moved more than
    ``threshold`` since the last pass AND at least ``interval`` seconds
    have gone by.  Calls that are not due are dropped.
    """

    def __init__(
        self,
        threshold: float = 50.0,
        interval: float = 0.1,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.threshold = threshold
        self.interval = interval
        self._clock = clock
        self.last_position: Point = (0.0, 0.0)
        self.last_update: float | None = None

    def reset(self, position: Point, now: float | None = None) -> None:
        self.last_position = (float(position[0]), float(position[1]))
        self.last_update = self._clock() if now is None else now

    def should_update(self, position: Point, now: float | None = None) -> bool:
        now = self._clock() if now is None else now
        moved = math.dist(position, self.last_position)
        if moved <= self.threshold:
            return False
        if self.last_update is not None and now - self.last_update < self.interval:
            logger.debug(f"Visibility update deferred: {now - self.last_update:.3f}s since last pass")
            return False
        self.reset(position, now)
        return True
