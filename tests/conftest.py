"""Shared fixtures for citybudget tests."""

import pytest

from citybudget.config import CityBudgetConfig, DataConfig, LoggingConfig
from citybudget.core.contracts import Zone
from citybudget.ingestion import default_zones


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def zones():
    return default_zones()


@pytest.fixture
def central_park():
    return Zone(
        name="Central Park",
        position=(50, 50),
        type="Park",
        cost=50,
        impacts={"Environment": 5.0, "Recreation": 4.0},
    )


@pytest.fixture
def config(tmp_path):
    return CityBudgetConfig(
        data=DataConfig(
            map_path=tmp_path / "map.csv",
            map_2024_path=tmp_path / "map_2024.csv",
            budget_path=tmp_path / "budget.csv",
        ),
        logging=LoggingConfig(log_path=tmp_path / "logs" / "debug.log"),
    )
