"""Dissipation of pheromone between neighbouring cells.

Based on Newton's law of cooling: the flux of a pheromone across an
edge is proportional to the concentration gradient along it, with
constant of proportionality ``kappa``.  Gradients are always computed
from snapshots, so every cell sees the pre-dissipation state of its
neighbours regardless of iteration order.

Separated from ``physarum.world`` so that the exchange strategy can be
swapped without touching cell or grid construction.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from physarum.pheromones.fields import Pheromone
    from physarum.world.cell import Cell

DISSIPATION_CONSTANT = 0.5 / 8


class ExchangeMode(Enum):
    """How many times an undirected edge is exchanged per tick.

    ``DIRECTED`` processes every (cell, neighbour) ordered pair, so each
    edge carries two exchanges per tick.  ``UNDIRECTED`` processes each
    edge once, halving the effective rate.
    """

    DIRECTED = "directed"
    UNDIRECTED = "undirected"


def pheromone_gradient(
    a: Mapping[Pheromone, float],
    b: Mapping[Pheromone, float],
) -> dict[Pheromone, float]:
    """Return the gradient from concentration map ``a`` to ``b``.

    A pheromone present in only one map is treated as zero in the other,
    so the result covers the union of both key sets and nothing else.

    Args:
        a: Snapshot of the acting cell.
        b: Snapshot of the neighbour.

    Returns:
        Mapping from pheromone to ``b - a``.
    """
    gradient: dict[Pheromone, float] = {}
    for pheromone in a.keys() & b.keys():
        gradient[pheromone] = b[pheromone] - a[pheromone]
    for pheromone in a.keys() - b.keys():
        gradient[pheromone] = -a[pheromone]
    for pheromone in b.keys() - a.keys():
        gradient[pheromone] = b[pheromone]
    return gradient


def dissipate(
    cells: Sequence[Cell],
    kappa: float = DISSIPATION_CONSTANT,
    mode: ExchangeMode = ExchangeMode.DIRECTED,
) -> None:
    """Exchange pheromone across every edge of the neighbour graph.

    Flux is accumulated per cell and committed after all gradients have
    been computed.  Snapshots must already be saved for every cell.

    Args:
        cells: The cell arena, indexed by ``Cell.index``.
        kappa: Dissipation constant.
        mode: Whether each edge is processed from both endpoints or once.
    """
    deltas: list[defaultdict[Pheromone, float]] = [
        defaultdict(float) for _ in cells
    ]

    for cell in cells:
        for index in sorted(cell.neighbors):
            if mode is ExchangeMode.UNDIRECTED and index < cell.index:
                continue
            neighbour = cells[index]
            gradient = pheromone_gradient(cell.snapshot, neighbour.snapshot)
            for pheromone, level in gradient.items():
                deltas[cell.index][pheromone] += kappa * level
                deltas[index][pheromone] -= kappa * level

    for cell, delta in zip(cells, deltas, strict=True):
        for pheromone, amount in delta.items():
            cell.add_pheromone(pheromone, amount)
