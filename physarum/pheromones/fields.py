"""Pheromone kinds and the objects that emit them.

A pheromone is an opaque key; concentrations live on ``Cell`` objects.
Anything exposing a ``scent`` mapping can sit in a cell and secrete
into it each tick.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum, auto
from typing import Protocol, runtime_checkable


class Pheromone(Enum):
    """Distinct chemical signal kinds, tracked independently per cell."""

    ATTRACT = auto()


@runtime_checkable
class OdorSource(Protocol):
    """An occupant that emits a fixed scent every tick."""

    @property
    def scent(self) -> Mapping[Pheromone, float]:
        """Pheromone intensities secreted per tick (all ≥ 0)."""
        ...


class Food:
    """A food source, secreting attractant at a constant rate.

    Food is compared by identity so that two equal sources placed in the
    same cell both secrete.

    Attributes:
        amount: Attractant secreted per tick.
    """

    __slots__ = ("amount",)

    def __init__(self, amount: float) -> None:
        if not amount >= 0:
            msg = f"food amount must be non-negative, got {amount}"
            raise ValueError(msg)
        self.amount = float(amount)

    @property
    def scent(self) -> dict[Pheromone, float]:
        return {Pheromone.ATTRACT: self.amount}

    def __repr__(self) -> str:
        return f"Food(amount={self.amount})"
