"""
Scene controller -- the entry points a host calls.

The host (game engine, GUI toolkit, or the CLI's headless replay) owns
rendering and input.  It calls into :class:`CityScene`:

  1. ``start``      -- open the session log, warm the pool, load data,
                       run the first visibility pass
  2. ``tick``       -- every frame, with the current scroll offset
  3. pointer events -- ``pointer_down`` / ``drag`` / ``end_drag``
  4. ``simulate``   -- the impact simulation form's submit
  5. ``quit``       -- save and stop
  6. ``teardown``   -- release every handle and close the log

All mutable state lives in one :class:`SceneState` so nothing is shared
through module globals.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from citybudget.config import CityBudgetConfig, get_config
from citybudget.core.contracts import Zone
from citybudget.core.exceptions import CityBudgetError, InputValidationError, ZeroCostError
from citybudget.core.stores import BudgetStore, ZoneStore
from citybudget.ingestion.loaders import LoadResult, load_budget, load_zones, save_zones
from citybudget.logs import SessionLog
from citybudget.scene.pool import HandlePool
from citybudget.scene.reconciler import Configurator, ReconcileReport, Reconciler
from citybudget.scene.selection import ClickResult, SelectionController
from citybudget.scene.visibility import (
    MapTransform,
    Point,
    Rect,
    ScrollDebouncer,
    Viewport,
    VisibilityTracker,
)
from citybudget.simulation.impact import ImpactProjection, format_projection, simulate_impact
from citybudget.simulation.reports import format_budget_summary, impact_options, zone_summary


@dataclass
class SceneState:
    """Every piece of mutable scene state, passed explicitly."""

    zones: ZoneStore
    budget: BudgetStore
    pool: HandlePool
    tracker: VisibilityTracker
    debouncer: ScrollDebouncer
    selection: SelectionController
    reconciler: Reconciler
    simulation_open: bool = False
    city_wide_impacts: bool = False
    last_projection: ImpactProjection | None = None
    quitting: bool = False
    load_results: dict[str, LoadResult] = field(default_factory=dict)

    @classmethod
    def from_config(
        cls,
        config: CityBudgetConfig,
        viewport: Viewport | None = None,
        transform: MapTransform | None = None,
        handle_factory: Callable[[], Any] | None = None,
        configure: Configurator | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "SceneState":
        pool = HandlePool(
            factory=handle_factory,
            capacity=config.pool.size,
            max_handles=config.pool.max_handles,
        )
        tracker = VisibilityTracker(
            viewport=viewport,
            transform=transform,
            margin=config.visibility.margin,
            fallback=Rect(*config.visibility.fallback_rect),
        )
        return cls(
            zones=ZoneStore(),
            budget=BudgetStore(),
            pool=pool,
            tracker=tracker,
            debouncer=ScrollDebouncer(
                threshold=config.visibility.scroll_threshold,
                interval=config.visibility.update_interval,
                clock=clock,
            ),
            selection=SelectionController(
                double_click_window=config.interaction.double_click_window,
                clock=clock,
            ),
            reconciler=Reconciler(pool, tracker, configure=configure),
        )


class CityScene:
    """
    Headless controller for the city-budget map.

    Example::

        config = load_config()
        state = SceneState.from_config(config, viewport=Viewport.from_size(800, 600))
        with CityScene(state, config) as scene:
            scene.tick((0, -120))
            scene.pointer_down("Central Park", (50, 50))
    """

    def __init__(self, state: SceneState, config: CityBudgetConfig | None = None):
        self.state = state
        self.config = config or get_config()
        self.session_log = SessionLog(
            self.config.logging.log_path,
            level=self.config.logging.level,
            enabled=self.config.logging.debug,
        )
        self.started = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, load: bool = True) -> "CityScene":
        self.session_log.open()
        logger.info("CitySimulator starting...")

        try:
            self.state.pool.warm_up()
            if load:
                self.load_data()
            self.refresh_visible()
            self.state.debouncer.reset(self.state.tracker.transform.offset)
        except Exception:
            logger.exception("CitySimulator failed to start")
            self.teardown()
            raise

        self.started = True
        logger.info("CitySimulator initialization complete")
        return self

    def load_data(self) -> None:
        data = self.config.data
        zones = load_zones(data.active_map_path, strict=data.strict)
        budget = load_budget(data.budget_path, strict=data.strict)

        self.state.zones.replace_all(zones.records)
        self.state.budget.replace_all(budget.records)
        self.state.load_results = {"zones": zones, "budget": budget}
        logger.info(f"Scene data: {len(self.state.zones)} zones, {len(self.state.budget)} budget items")

    def teardown(self) -> None:
        logger.info("Cleaning up CitySimulator")
        released = self.state.reconciler.release_all()
        drained = self.state.pool.drain()
        logger.info(f"Released {released} active handles, drained {len(drained)} idle handles")
        self.state.selection.clear()
        self.started = False
        self.session_log.close()

    def __enter__(self) -> "CityScene":
        return self.start()

    def __exit__(self, *exc) -> None:
        self.teardown()

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    def refresh_visible(self) -> ReconcileReport:
        if len(self.state.zones) == 0:
            logger.warning("Cannot update visible zones - no zones loaded")
            return ReconcileReport()
        return self.state.reconciler.reconcile(self.state.zones, self.state.selection.selected)

    def tick(self, scroll_offset: Point, now: float | None = None) -> ReconcileReport | None:
        """Per-frame update; returns a report when a visibility pass ran."""
        tracker = self.state.tracker
        tracker.transform = tracker.transform.scrolled_to(scroll_offset)
        if not self.state.debouncer.should_update(scroll_offset, now):
            return None
        logger.debug("Updating visible zones due to scroll")
        return self.refresh_visible()

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    @property
    def selected_zone(self) -> Zone | None:
        name = self.state.selection.selected
        return self.state.zones.get(name) if name else None

    def _zone(self, name: str) -> Zone | None:
        zone = self.state.zones.get(name)
        if zone is None:
            logger.warning(f"Pointer event for unknown zone '{name}'")
        return zone

    def pointer_down(self, zone_name: str, pointer_local: Point, now: float | None = None) -> ClickResult | None:
        zone = self._zone(zone_name)
        if zone is None:
            return None
        result = self.state.selection.pointer_down(zone, pointer_local, now)
        self.state.reconciler.restyle(self.state.zones, zone.name)
        self.state.simulation_open = result.double_click
        if result.double_click:
            self.state.last_projection = None
        return result

    def drag(self, zone_name: str, pointer_local: Point) -> bool:
        zone = self._zone(zone_name)
        if zone is None or not self.state.selection.drag(zone, pointer_local):
            return False
        self.state.reconciler.move(zone)
        return True

    def end_drag(self, zone_name: str) -> str | None:
        """Finish a drag; returns the refreshed budget text."""
        zone = self._zone(zone_name)
        if zone is None or not self.state.selection.end_drag(zone):
            return None
        return self.budget_text()

    # ------------------------------------------------------------------
    # Panels
    # ------------------------------------------------------------------

    def budget_text(self) -> str:
        return format_budget_summary(self.state.budget, title=self.config.project_name)

    def selected_zone_text(self) -> str:
        return zone_summary(self.selected_zone)

    def set_city_wide_impacts(self, enabled: bool) -> list[str]:
        self.state.city_wide_impacts = enabled
        return self.simulation_options()

    def simulation_options(self) -> list[str]:
        zone = self.selected_zone
        if zone is None:
            return []
        return impact_options(
            zone,
            self.state.zones,
            city_wide=self.state.city_wide_impacts,
            n=self.config.simulation.top_impacts,
        )

    def simulate(self, impact_name: str, budget_text: str, years_text: str | None = None) -> str:
        """
        Run the simulation form for the selected zone.

        Validation problems come back as the message to show inline;
        the scene state is left untouched in that case.
        """
        zone = self.selected_zone
        if zone is None:
            return "No zone selected"
        if years_text is None:
            years_text = str(self.config.simulation.default_years)
        try:
            projection = simulate_impact(zone, impact_name, budget_text, years_text)
        except InputValidationError as e:
            logger.info(f"Simulation input rejected: {e}")
            return str(e)
        except ZeroCostError as e:
            logger.warning(f"Simulation for '{zone.name}': {e}")
            return f"Cannot simulate: {e}"
        self.state.last_projection = projection
        return format_projection(projection)

    # ------------------------------------------------------------------
    # Save / quit
    # ------------------------------------------------------------------

    def save(self, dest: str | Path | None = None) -> Path:
        path = Path(dest) if dest is not None else self.config.data.active_map_path
        saved = save_zones(self.state.zones, path)
        logger.info(f"State saved to {saved}")
        return saved

    def quit(self, dest: str | Path | None = None) -> Path | None:
        """Save and flag the scene as quitting; a failed save is logged, not raised."""
        logger.info("Quit requested - saving and quitting")
        saved = None
        try:
            saved = self.save(dest)
        except (CityBudgetError, OSError) as e:
            logger.error(f"Error saving state: {e}")
        self.state.quitting = True
        return saved
