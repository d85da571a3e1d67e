"""
Scene layer for citybudget.

Handle pooling, viewport culling, active-set reconciliation, selection
and drag state, and the controller that ties them to host events.
"""

from citybudget.scene.controller import CityScene, SceneState
from citybudget.scene.handles import DisplayHandle, ZoneView
from citybudget.scene.pool import HandlePool
from citybudget.scene.reconciler import ActiveSet, ReconcileReport, Reconciler, build_view
from citybudget.scene.selection import ClickResult, InteractionState, SelectionController
from citybudget.scene.visibility import (
    FALLBACK_RECT,
    MapTransform,
    Rect,
    ScrollDebouncer,
    Viewport,
    VisibilityTracker,
)

__all__ = [
    "CityScene",
    "SceneState",
    "DisplayHandle",
    "ZoneView",
    "HandlePool",
    "ActiveSet",
    "ReconcileReport",
    "Reconciler",
    "build_view",
    "ClickResult",
    "InteractionState",
    "SelectionController",
    "FALLBACK_RECT",
    "MapTransform",
    "Rect",
    "ScrollDebouncer",
    "Viewport",
    "VisibilityTracker",
]
