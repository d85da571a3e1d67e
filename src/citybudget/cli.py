"""
Command-line interface for citybudget.

Headless access to the data, the impact projector and the scene: inspect
the budget and zones, run a simulation, re-save a map, or replay a
scroll across the map and report what the handle pool did.
"""

from pathlib import Path
from typing import Optional
import json

import typer
from loguru import logger
import numpy as np

from citybudget.config import load_config

app = typer.Typer(
    name="citybudget",
    help="City budget map CLI",
    add_completion=False,
)


class _FrameClock:
    """Simulated time for headless replays."""

    def __init__(self):
        self.now = 0.0

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


def _load_scene_data(config_path: Optional[Path]):
    from citybudget.core.stores import BudgetStore, ZoneStore
    from citybudget.ingestion import load_budget, load_zones

    config = load_config(config_path)
    zones = load_zones(config.data.active_map_path, strict=config.data.strict)
    budget = load_budget(config.data.budget_path, strict=config.data.strict)
    for result in (zones, budget):
        for err in result.errors:
            logger.warning(f"{result.source}:{err.line}: {err.message}")
    return config, ZoneStore(zones.records), BudgetStore(budget.records)


@app.command()
def summary(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config file"
    ),
):
    """Print the budget totals by category."""
    from citybudget.simulation import budget_summary, format_budget_summary

    config, _, budget = _load_scene_data(config_path)
    typer.echo(format_budget_summary(budget, title=config.project_name))
    typer.echo("")
    typer.echo(budget_summary(budget).to_string(index=False))


@app.command()
def zones(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config file"
    ),
):
    """List zones with position, type and cost."""
    from citybudget.ingestion import zones_to_frame

    _, zone_store, _ = _load_scene_data(config_path)
    typer.echo(zones_to_frame(zone_store).to_string(index=False))


@app.command()
def simulate(
    zone: str = typer.Option(..., "--zone", "-z", help="Zone name"),
    impact: str = typer.Option(..., "--impact", "-i", help="Impact category"),
    budget: str = typer.Option(..., "--budget", "-b", help="Proposed budget (millions)"),
    years: Optional[str] = typer.Option(
        None, "--years", "-y", help="Number of years (defaults to simulation.default_years)"
    ),
    schedule: bool = typer.Option(False, "--schedule", help="Also print the year-by-year table"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config file"
    ),
):
    """Project a zone's impact for a proposed budget."""
    from citybudget.core.exceptions import CityBudgetError
    from citybudget.simulation import format_projection, impact_schedule, simulate_impact

    config, zone_store, _ = _load_scene_data(config_path)
    target = zone_store.get(zone)
    if target is None:
        logger.error(f"Unknown zone: {zone}")
        raise typer.Exit(code=1)

    if years is None:
        years = str(config.simulation.default_years)
    try:
        projection = simulate_impact(target, impact, budget, years)
    except CityBudgetError as e:
        logger.error(f"Simulation failed [{e.code}]: {e}")
        typer.echo(str(e))
        raise typer.Exit(code=2)

    typer.echo(format_projection(projection))
    if schedule:
        typer.echo("")
        typer.echo(impact_schedule(projection).to_string(index=False))


@app.command()
def top_impacts(
    n: int = typer.Option(3, "--top", "-n", help="How many categories"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config file"
    ),
):
    """Show the city-wide highest-scoring impact categories."""
    from citybudget.simulation import top_impact_categories

    _, zone_store, _ = _load_scene_data(config_path)
    for rank, name in enumerate(top_impact_categories(zone_store, n), start=1):
        typer.echo(f"{rank}. {name}")


@app.command()
def save(
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Destination (defaults to the active map file)"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config file"
    ),
):
    """Load the active map and write it back in save format."""
    from citybudget.ingestion import save_zones

    config, zone_store, _ = _load_scene_data(config_path)
    path = save_zones(zone_store, output or config.data.active_map_path)
    logger.info(f"Saved map to {path}")


@app.command()
def sweep(
    width: float = typer.Option(800, "--width", help="Viewport width"),
    height: float = typer.Option(600, "--height", help="Viewport height"),
    distance: float = typer.Option(2000, "--distance", "-d", help="Total horizontal scroll"),
    steps: int = typer.Option(40, "--steps", "-s", help="Number of frames"),
    frame_time: float = typer.Option(0.05, "--frame-time", help="Seconds between frames"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config file"
    ),
):
    """Replay a horizontal scroll over the map and report pool statistics."""
    from citybudget.scene import CityScene, SceneState, Viewport

    config = load_config(config_path)
    clock = _FrameClock()
    state = SceneState.from_config(
        config,
        viewport=Viewport.from_size(width, height, origin=(-width / 2, -height / 2)),
        clock=clock,
    )

    passes = 0
    with CityScene(state, config) as scene:
        for offset_x in np.linspace(0, -distance, steps):
            clock.advance(frame_time)
            if scene.tick((float(offset_x), 0.0)) is not None:
                passes += 1
        stats = state.pool.stats()
        stats["active"] = len(state.reconciler.active)

    stats["passes"] = passes
    typer.echo(json.dumps(stats, indent=2))


@app.command()
def generate_demo(
    output: Path = typer.Option(
        Path("data"), "--output", "-o", help="Output directory"
    ),
    n_zones: int = typer.Option(60, "--zones", help="Number of zones"),
    seed: int = typer.Option(42, "--seed", help="Random seed"),
):
    """Write demo zone and budget CSVs."""
    from citybudget.core.contracts import Zone, ZoneCategory
    from citybudget.ingestion import default_budget, save_budget, save_zones

    logger.info(f"Generating {n_zones} demo zones...")
    output.mkdir(parents=True, exist_ok=True)

    rng = np.random.default_rng(seed)
    types = [c.value.title() for c in ZoneCategory if c is not ZoneCategory.OTHER]
    impact_names = ["Economy", "Environment", "Housing", "Traffic", "Recreation", "Jobs", "Safety"]

    demo = []
    for i in range(n_zones):
        picked = rng.choice(impact_names, size=3, replace=False)
        demo.append(Zone(
            name=f"Zone {i + 1:03d}",
            position=(float(rng.integers(-2000, 2000)), float(rng.integers(-1500, 1500))),
            type=str(rng.choice(types)),
            cost=float(rng.integers(20, 200)),
            impacts={str(name): float(rng.integers(-5, 6)) for name in picked},
        ))

    save_zones(demo, output / "san_jose_map_2024.csv")
    save_budget(default_budget(), output / "san_jose_budget.csv")
    logger.info(f"Generated demo data in {output}")


if __name__ == "__main__":
    app()
