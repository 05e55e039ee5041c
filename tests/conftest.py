"""Shared fixtures for the physarum test suite."""

from __future__ import annotations

import pytest

from physarum.simulation.config import FoodPlacement, SimulationConfig
from physarum.world.grid import Grid


@pytest.fixture
def small_grid() -> Grid:
    """A 4x5 grid: big enough to have corner, edge and interior cells."""
    return Grid(rows=4, cols=5)


@pytest.fixture
def pair_grid() -> Grid:
    """Two horizontally adjacent cells."""
    return Grid(rows=1, cols=2)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def centre_food_config() -> SimulationConfig:
    """A 3x3 grid with a single 100-unit food source in the centre."""
    return SimulationConfig(
        rows=3,
        cols=3,
        food=[FoodPlacement(row=1, col=1, amount=100.0)],
    )
