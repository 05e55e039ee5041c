"""Pygame 2D visualization for the physarum pheromone field.

Paints the attractant concentration of every cell over a dark
background and marks cells holding food.  The simulation steps at a
configurable tick rate while the display refreshes at the Pygame frame
rate.  Rendering only reads grid state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import numpy as np
import pygame

if TYPE_CHECKING:
    from physarum.simulation.engine import SimulationEngine

from physarum.pheromones.fields import Pheromone

# Colour palette
_BG = (0x20, 0x20, 0x20)
_FOOD = (240, 220, 80)
_TEXT = (200, 200, 200)

# Attractant colour ramp (background -> slime yellow)
_ATTRACT_LO = np.array(_BG, dtype=np.float64)
_ATTRACT_HI = np.array([255, 200, 40], dtype=np.float64)


class PygameRenderer:
    """Renders a SimulationEngine state into a Pygame window.

    Attributes:
        engine: The simulation engine to visualise.
        cell_size: Pixel size of each grid cell.
        screen: The Pygame display surface.
    """

    # Speed presets: ticks per second
    _SPEED_STEPS: ClassVar[list[float]] = [
        0.5,
        1.0,
        2.0,
        5.0,
        10.0,
        30.0,
        60.0,
    ]

    def __init__(
        self,
        engine: SimulationEngine,
        cell_size: int = 40,
        ticks_per_second: float = 5.0,
    ) -> None:
        """Initialise the renderer.

        Args:
            engine: The simulation engine to render.
            cell_size: Pixel width/height per grid cell.
            ticks_per_second: Simulation ticks per real-time second.
        """
        self.engine = engine
        self.cell_size = cell_size
        self.ticks_per_second = ticks_per_second
        self._speed_index = self._nearest_speed(ticks_per_second)
        self._tick_accumulator = 0.0

        self._panel_width = 220
        self._win_w = engine.grid.cols * cell_size + self._panel_width
        self._win_h = max(engine.grid.rows * cell_size, 200)

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("Physarum")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True
        self.paused = False

    def _nearest_speed(self, tps: float) -> int:
        """Return the index of the closest speed preset."""
        diffs = [abs(s - tps) for s in self._SPEED_STEPS]
        return diffs.index(min(diffs))

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, step sim, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0
            self._handle_events()
            if not self.paused:
                self._tick_accumulator += self.ticks_per_second * dt
                steps = int(self._tick_accumulator)
                self._tick_accumulator -= steps
                for _ in range(steps):
                    self.engine.step()
            self._draw()

        pygame.quit()

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._speed_index = min(
                        len(self._SPEED_STEPS) - 1,
                        self._speed_index + 1,
                    )
                    self.ticks_per_second = self._SPEED_STEPS[self._speed_index]
                elif event.key == pygame.K_MINUS:
                    self._speed_index = max(0, self._speed_index - 1)
                    self.ticks_per_second = self._SPEED_STEPS[self._speed_index]

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self._draw_attractant()
        self._draw_food()
        self._draw_info_panel()
        pygame.display.flip()

    def _draw_attractant(self) -> None:
        """Shade each cell by its attractant level relative to the peak."""
        cs = self.cell_size
        layer = self.engine.grid.layer(Pheromone.ATTRACT)
        max_val = layer.max()
        if max_val <= 0:
            return

        for row in range(layer.shape[0]):
            for col in range(layer.shape[1]):
                t = float(np.clip(layer[row, col] / max_val, 0.0, 1.0))
                colour = _ATTRACT_LO + t * (_ATTRACT_HI - _ATTRACT_LO)
                pygame.draw.rect(
                    self.screen,
                    colour.astype(int).tolist(),
                    (col * cs, row * cs, cs, cs),
                )

    def _draw_food(self) -> None:
        """Draw a dot in every cell that holds an occupant."""
        cs = self.cell_size
        radius = max(2, cs // 5)
        for cell in self.engine.grid.cells:
            if cell.occupants:
                centre = (cell.col * cs + cs // 2, cell.row * cs + cs // 2)
                pygame.draw.circle(self.screen, _FOOD, centre, radius)

    def _draw_info_panel(self) -> None:
        """Draw a stats panel on the right side of the window."""
        grid = self.engine.grid
        panel_x = grid.cols * self.cell_size + 10
        y = 10

        lines = [
            f"Tick: {self.engine.tick}",
            f"Speed: {self.ticks_per_second:.1f} t/s",
            f"{'PAUSED' if self.paused else 'RUNNING'}",
            "",
            "--- Attractant ---",
            f"Total: {grid.total(Pheromone.ATTRACT):.2f}",
            f"Peak: {grid.layer(Pheromone.ATTRACT).max():.2f}",
            f"Mode: {self.engine.config.exchange_mode.value}",
            "",
            "--- Controls ---",
            "SPACE: pause",
            "+/-: speed",
            "ESC: quit",
        ]

        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (panel_x, y))
            y += 18
