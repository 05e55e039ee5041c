"""Grid — the spatial container for the pheromone model.

The Grid owns every Cell in a flat arena addressed by integer index and
builds the Moore-neighbourhood graph once at construction.  Each tick it
drives the cells through local update, snapshot and dissipation as three
separate grid-wide passes.
"""

from __future__ import annotations

import itertools
import logging
import numbers
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from physarum.pheromones.diffusion import (
    DISSIPATION_CONSTANT,
    ExchangeMode,
    dissipate,
)
from physarum.world.cell import DECAY_CONSTANT, Cell

if TYPE_CHECKING:
    from physarum.pheromones.fields import OdorSource, Pheromone

logger = logging.getLogger(__name__)

_OFFSETS = (-1, 0, 1)


class InvalidDimensionsError(ValueError):
    """Raised when a grid is requested with a non-positive size."""


@dataclass
class Grid:
    """A fixed rows x cols arrangement of connected cells.

    Attributes:
        rows: Number of rows.
        cols: Number of columns.
        cells: Flat cell arena, ``cells[row * cols + col]``.
    """

    rows: int
    cols: int
    cells: list[Cell] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate dimensions, create the cells and connect them."""
        for name, value in (("rows", self.rows), ("cols", self.cols)):
            integral = isinstance(value, numbers.Integral) and not isinstance(value, bool)
            if not integral or value <= 0:
                msg = f"{name} must be a positive integer, got {value!r}"
                raise InvalidDimensionsError(msg)
        self.rows, self.cols = int(self.rows), int(self.cols)

        self.cells = [
            Cell(index=row * self.cols + col, row=row, col=col)
            for row in range(self.rows)
            for col in range(self.cols)
        ]
        self._connect()
        logger.debug(
            "Built %dx%d grid with %d edges",
            self.rows,
            self.cols,
            self.edge_count,
        )

    def _connect(self) -> None:
        """Connect every cell to its in-bounds Moore neighbours.

        Each unordered pair is visited once from either endpoint; the
        neighbour sets absorb the repeat.
        """
        for cell in self.cells:
            for dr, dc in itertools.product(_OFFSETS, _OFFSETS):
                if dr == 0 and dc == 0:
                    continue
                r, c = cell.row + dr, cell.col + dc
                if 0 <= r < self.rows and 0 <= c < self.cols:
                    cell.connect_to(self.cells[r * self.cols + c])

    @property
    def edge_count(self) -> int:
        """Number of undirected edges in the neighbour graph."""
        return sum(len(cell.neighbors) for cell in self.cells) // 2

    def cell_at(self, row: int, col: int) -> Cell:
        """Return the cell at grid coordinates ``(row, col)``.

        Args:
            row: Row index.
            col: Column index.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            msg = f"({row}, {col}) out of bounds for {self.rows}x{self.cols}"
            raise IndexError(msg)
        return self.cells[row * self.cols + col]

    def neighbours(self, row: int, col: int) -> list[Cell]:
        """Return the cells adjacent to ``(row, col)`` in index order."""
        cell = self.cell_at(row, col)
        return [self.cells[index] for index in sorted(cell.neighbors)]

    def concentration(self, row: int, col: int, pheromone: Pheromone) -> float:
        """Read a pheromone level without mutating the cell."""
        return self.cell_at(row, col).concentration(pheromone)

    def occupants(self, row: int, col: int) -> frozenset[OdorSource]:
        """Return the odor sources located at ``(row, col)``."""
        return frozenset(self.cell_at(row, col).occupants)

    def add_occupant(self, row: int, col: int, source: OdorSource) -> None:
        """Place an odor source; it secretes from the next local update on."""
        self.cell_at(row, col).occupants.add(source)

    def remove_occupant(self, row: int, col: int, source: OdorSource) -> None:
        """Remove an odor source.

        Raises:
            KeyError: If ``source`` is not in that cell.
        """
        self.cell_at(row, col).occupants.remove(source)

    def layer(self, pheromone: Pheromone) -> NDArray[np.float64]:
        """Return a ``(rows, cols)`` array of current concentrations."""
        values = np.fromiter(
            (cell.concentration(pheromone) for cell in self.cells),
            dtype=np.float64,
            count=len(self.cells),
        )
        return values.reshape(self.rows, self.cols)

    def total(self, pheromone: Pheromone) -> float:
        """Sum a pheromone over the whole grid."""
        return sum(cell.concentration(pheromone) for cell in self.cells)

    def update_pheromone(
        self,
        beta: float = DECAY_CONSTANT,
        kappa: float = DISSIPATION_CONSTANT,
        mode: ExchangeMode = ExchangeMode.DIRECTED,
    ) -> None:
        """Advance every cell's pheromone state by one tick.

        Runs three passes, each finishing over the whole grid before the
        next begins:

        1. Local decay followed by secretion.
        2. Snapshot of the post-secretion levels.
        3. Dissipation across every edge, read from the snapshots.

        Args:
            beta: Decay factor.
            kappa: Dissipation constant.
            mode: Edge exchange strategy.
        """
        for cell in self.cells:
            cell.update_local(beta)

        for cell in self.cells:
            cell.save_snapshot()

        dissipate(self.cells, kappa, mode)
