"""
Configuration management for citybudget.

Centralised configuration with YAML loading and sensible defaults.
The config drives data file locations, pool sizing, visibility
thresholds, interaction timing and the persisted debug log.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Section configs
# ---------------------------------------------------------------------------

class DataConfig(BaseModel):
    """Where zone and budget CSVs live."""

    map_path: Path = Field(default=Path("data/san_jose_map_data.csv"))
    map_2024_path: Path = Field(default=Path("data/san_jose_map_2024.csv"))
    use_2024_map: bool = Field(default=True)
    budget_path: Path = Field(default=Path("data/san_jose_budget.csv"))
    strict: bool = Field(default=False, description="Fail the whole file on the first malformed row")

    @property
    def active_map_path(self) -> Path:
        return self.map_2024_path if self.use_2024_map else self.map_path


class PoolConfig(BaseModel):
    """Display-handle pool sizing."""

    size: int = Field(default=30, ge=0, description="Handles created at warm-up")
    max_handles: int | None = Field(
        default=None, ge=1, description="Hard ceiling; None lets overflow grow unbounded"
    )


class VisibilityConfig(BaseModel):
    """Viewport culling and debounce thresholds."""

    margin: float = Field(default=100.0, ge=0, description="Extra margin around the viewport")
    scroll_threshold: float = Field(default=50.0, ge=0, description="Scroll distance before re-evaluating")
    update_interval: float = Field(default=0.1, ge=0, description="Minimum seconds between re-evaluations")
    fallback_rect: tuple[float, float, float, float] = Field(default=(-5000.0, -5000.0, 10000.0, 10000.0))


class InteractionConfig(BaseModel):
    """Pointer interaction timing."""

    double_click_window: float = Field(default=0.3, gt=0)


class SimulationConfig(BaseModel):
    """Impact simulation defaults."""

    default_years: int = Field(default=5, ge=0)
    top_impacts: int = Field(default=3, ge=1)


class LoggingConfig(BaseModel):
    """Persisted debug log."""

    debug: bool = Field(default=True)
    log_path: Path = Field(default=Path("city_simulator_debug.log"))
    level: str = Field(default="DEBUG")


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------

class CityBudgetConfig(BaseModel):
    """Root configuration for citybudget."""

    project_name: str = Field(default="San Jose City Budget")

    data: DataConfig = Field(default_factory=DataConfig)
    pool: PoolConfig = Field(default_factory=PoolConfig)
    visibility: VisibilityConfig = Field(default_factory=VisibilityConfig)
    interaction: InteractionConfig = Field(default_factory=InteractionConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "CityBudgetConfig":
        """Load config from a YAML file."""
        with open(Path(path)) as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: Path | str) -> None:
        """Write config to a YAML file."""
        with open(Path(path), "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)

    def to_flat_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


# ---------------------------------------------------------------------------
# Global singleton
# ---------------------------------------------------------------------------

_config: CityBudgetConfig | None = None


def get_config() -> CityBudgetConfig:
    """Return the global config instance (creates default if needed)."""
    global _config
    if _config is None:
        _config = CityBudgetConfig()
    return _config


def set_config(config: CityBudgetConfig) -> None:
    """Override the global config instance."""
    global _config
    _config = config


def load_config(path: Path | str | None = None) -> CityBudgetConfig:
    """
    Load config from file, falling back to standard locations, then defaults.
    """
    global _config

    if path is not None:
        _config = CityBudgetConfig.from_yaml(path)
    else:
        for candidate in [Path("config.yaml"), Path("config/config.yaml")]:
            if candidate.exists():
                _config = CityBudgetConfig.from_yaml(candidate)
                break
        else:
            _config = CityBudgetConfig()

    return _config
