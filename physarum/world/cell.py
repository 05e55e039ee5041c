"""Cell — a single tile in the pheromone grid.

Each cell stores the pheromone concentrations in its chunk of space, the
odor sources sitting in it, and the arena indices of its neighbours.
Levels change every tick through three events:

- Decay: every level is multiplied by a constant ``0 < beta < 1``.
- Secretion: occupants deposit their scent into the cell.
- Dissipation: flux between neighbours proportional to the gradient
  (see ``physarum.pheromones.diffusion``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from physarum.pheromones.fields import OdorSource, Pheromone

DECAY_CONSTANT = 0.8


@dataclass(eq=False)
class Cell:
    """A single tile in the grid.

    Attributes:
        index: Stable arena index (``row * cols + col``).
        row: Row position.
        col: Column position.
        pheromones: Current concentrations, mutated during the tick.
        snapshot: Concentrations frozen right before dissipation.
        occupants: Odor sources located here (not owned by the cell).
        neighbors: Arena indices of adjacent cells.
    """

    index: int
    row: int
    col: int
    pheromones: dict[Pheromone, float] = field(default_factory=dict)
    snapshot: dict[Pheromone, float] = field(default_factory=dict)
    occupants: set[OdorSource] = field(default_factory=set)
    neighbors: set[int] = field(default_factory=set)

    def connect_to(self, other: Cell) -> None:
        """Link this cell and ``other`` in both directions.

        Connecting twice leaves the same edge set; a cell is never its
        own neighbour.
        """
        if other is self:
            return
        self.neighbors.add(other.index)
        other.neighbors.add(self.index)

    def concentration(self, pheromone: Pheromone) -> float:
        """Return the current level, ``0.0`` when the pheromone is absent."""
        return self.pheromones.get(pheromone, 0.0)

    def add_pheromone(self, pheromone: Pheromone, amount: float) -> None:
        self.pheromones[pheromone] = self.pheromones.get(pheromone, 0.0) + amount

    def decay(self, beta: float = DECAY_CONSTANT) -> None:
        """Exponential decay of every pheromone already present.

        Args:
            beta: Multiplicative decay factor applied once.
        """
        for pheromone in self.pheromones:
            self.pheromones[pheromone] *= beta

    def secrete(self) -> None:
        """Add each occupant's scent to the current levels."""
        for source in self.occupants:
            for pheromone, amount in source.scent.items():
                self.add_pheromone(pheromone, amount)

    def update_local(self, beta: float = DECAY_CONSTANT) -> None:
        """Decay, then secrete.

        Secretion comes second so that this tick's emission is not
        decayed in the same step.
        """
        self.decay(beta)
        self.secrete()

    def save_snapshot(self) -> None:
        """Freeze the current levels for the dissipation pass."""
        self.snapshot = dict(self.pheromones)
