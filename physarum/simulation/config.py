"""Config — load simulation parameters from YAML files.

Grid size, the decay and dissipation constants, the edge exchange mode
and the initial food layout live in YAML and are parsed into a typed
dataclass here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from physarum.pheromones.diffusion import DISSIPATION_CONSTANT, ExchangeMode
from physarum.world.cell import DECAY_CONSTANT


@dataclass
class FoodPlacement:
    """A food source to place at start-up.

    Attributes:
        row: Row of the containing cell.
        col: Column of the containing cell.
        amount: Attractant secreted per tick.
    """

    row: int
    col: int
    amount: float = 100.0


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for random food placement.
        rows: Number of grid rows.
        cols: Number of grid columns.
        decay_constant: Per-tick multiplicative decay (beta).
        dissipation_constant: Flux per unit gradient per exchange (kappa).
        exchange_mode: ``"directed"`` exchanges each edge from both
            endpoints per tick; ``"undirected"`` exchanges it once.
        food: Food sources at fixed positions.
        random_food: Extra food sources placed at random cells.
        food_amount: Secretion rate of randomly placed food.
    """

    seed: int = 42
    rows: int = 10
    cols: int = 10
    decay_constant: float = DECAY_CONSTANT
    dissipation_constant: float = DISSIPATION_CONSTANT
    exchange_mode: ExchangeMode = ExchangeMode.DIRECTED
    food: list[FoodPlacement] = field(default_factory=list)
    random_food: int = 0
    food_amount: float = 100.0

    def __post_init__(self) -> None:
        """Coerce ``exchange_mode`` given as a string."""
        if not isinstance(self.exchange_mode, ExchangeMode):
            try:
                self.exchange_mode = ExchangeMode(self.exchange_mode)
            except ValueError:
                valid = ", ".join(m.value for m in ExchangeMode)
                msg = f"exchange_mode must be one of {valid}, got {self.exchange_mode!r}"
                raise ValueError(msg) from None

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If ``exchange_mode`` is not recognised.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            seed=data.get("seed", cls.seed),
            rows=data.get("rows", cls.rows),
            cols=data.get("cols", cls.cols),
            decay_constant=data.get("decay_constant", cls.decay_constant),
            dissipation_constant=data.get(
                "dissipation_constant",
                cls.dissipation_constant,
            ),
            exchange_mode=data.get("exchange_mode", cls.exchange_mode),
            food=[FoodPlacement(**entry) for entry in data.get("food") or []],
            random_food=data.get("random_food", cls.random_food),
            food_amount=data.get("food_amount", cls.food_amount),
        )
