"""SimulationEngine — the main tick loop.

Owns the grid and advances it one tick per call to ``step``.  The
visualization shell calls ``step`` once per rendered frame and reads the
grid between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator

from physarum.pheromones.fields import Food
from physarum.simulation.config import SimulationConfig
from physarum.world.grid import Grid

logger = logging.getLogger(__name__)


@dataclass
class SimulationEngine:
    """Drives the simulation forward tick by tick.

    Attributes:
        config: Loaded simulation configuration.
        grid: The cell grid and its pheromone state.
        rng: Seeded random generator used for food placement.
        tick: Current tick count.
    """

    config: SimulationConfig
    grid: Grid = field(init=False)
    rng: Generator = field(init=False)
    tick: int = 0

    def __post_init__(self) -> None:
        """Build the grid and place the configured food."""
        self.rng = np.random.default_rng(self.config.seed)
        self.grid = Grid(rows=self.config.rows, cols=self.config.cols)
        self._place_food()

    def _place_food(self) -> None:
        """Place fixed food sources, then scatter the random ones."""
        for placement in self.config.food:
            self.add_food(placement.row, placement.col, placement.amount)

        for _ in range(self.config.random_food):
            row = int(self.rng.integers(0, self.grid.rows))
            col = int(self.rng.integers(0, self.grid.cols))
            self.add_food(row, col, self.config.food_amount)

        logger.info(
            "Placed %d food sources on a %dx%d grid",
            len(self.config.food) + self.config.random_food,
            self.grid.rows,
            self.grid.cols,
        )

    def add_food(self, row: int, col: int, amount: float) -> Food:
        """Put a new food source in the cell at ``(row, col)``.

        Args:
            row: Row index.
            col: Column index.
            amount: Attractant secreted per tick.

        Returns:
            The placed Food, for later removal.
        """
        food = Food(amount)
        self.grid.add_occupant(row, col, food)
        logger.debug("Food(%s) placed at (%d, %d)", amount, row, col)
        return food

    def step(self) -> None:
        """Advance the simulation by one tick."""
        self.update_model()
        self.tick += 1

    def update_model(self) -> None:
        """Update every part of the model for one tick."""
        self.update_pheromone()

    def update_pheromone(self) -> None:
        """Run decay, secretion and dissipation over the whole grid."""
        self.grid.update_pheromone(
            beta=self.config.decay_constant,
            kappa=self.config.dissipation_constant,
            mode=self.config.exchange_mode,
        )

    def run(self, ticks: int) -> None:
        """Run the simulation for a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.

        Raises:
            ValueError: If ``ticks`` is negative.
        """
        if ticks < 0:
            msg = f"ticks must be non-negative, got {ticks}"
            raise ValueError(msg)
        for _ in range(ticks):
            self.step()
        logger.debug("Ran %d ticks, now at tick %d", ticks, self.tick)
