"""Tests for physarum.world.cell and physarum.world.grid."""

import itertools

import numpy as np
import pytest

from physarum.pheromones.fields import Food, Pheromone
from physarum.world.cell import DECAY_CONSTANT, Cell
from physarum.world.grid import Grid, InvalidDimensionsError

ATTRACT = Pheromone.ATTRACT


class TestCell:
    """Tests for per-cell decay, secretion and snapshots."""

    def test_absent_pheromone_reads_zero(self) -> None:
        assert Cell(index=0, row=0, col=0).concentration(ATTRACT) == 0.0

    def test_decay_multiplies_by_beta(self) -> None:
        cell = Cell(index=0, row=0, col=0, pheromones={ATTRACT: 10.0})
        cell.decay()
        assert DECAY_CONSTANT == 0.8
        assert cell.concentration(ATTRACT) == pytest.approx(8.0)

    def test_decay_creates_no_entries(self) -> None:
        cell = Cell(index=0, row=0, col=0)
        cell.decay()
        assert cell.pheromones == {}

    def test_secretion_sums_occupants(self) -> None:
        cell = Cell(index=0, row=0, col=0)
        cell.occupants.update({Food(1.5), Food(2.25), Food(4.0)})
        cell.secrete()
        assert cell.concentration(ATTRACT) == pytest.approx(7.75)

    def test_secretion_order_independent(self) -> None:
        sources = [Food(0.1), Food(0.2), Food(0.3), Food(0.7)]
        secreted = Cell(index=0, row=0, col=0, pheromones={ATTRACT: 1.0})
        secreted.occupants.update(sources)
        secreted.secrete()
        expected = 1.0 + sum(source.amount for source in sources)

        for order in itertools.permutations(sources):
            cell = Cell(index=1, row=0, col=1, pheromones={ATTRACT: 1.0})
            for source in order:
                for pheromone, amount in source.scent.items():
                    cell.add_pheromone(pheromone, amount)
            assert cell.concentration(ATTRACT) == pytest.approx(expected)
            assert cell.pheromones == pytest.approx(secreted.pheromones)

        assert secreted.concentration(ATTRACT) == pytest.approx(expected)

    def test_update_local_decays_before_secreting(self) -> None:
        cell = Cell(index=0, row=0, col=0, pheromones={ATTRACT: 10.0})
        cell.occupants.add(Food(5.0))
        cell.update_local()
        assert cell.concentration(ATTRACT) == pytest.approx(13.0)

    def test_snapshot_is_independent_copy(self) -> None:
        cell = Cell(index=0, row=0, col=0, pheromones={ATTRACT: 10.0})
        cell.save_snapshot()
        cell.add_pheromone(ATTRACT, 5.0)
        assert cell.snapshot == {ATTRACT: 10.0}
        assert cell.snapshot is not cell.pheromones

    def test_connect_is_symmetric_and_idempotent(self) -> None:
        a = Cell(index=0, row=0, col=0)
        b = Cell(index=1, row=0, col=1)
        a.connect_to(b)
        b.connect_to(a)
        assert a.neighbors == {1}
        assert b.neighbors == {0}

    def test_connect_to_self_is_ignored(self) -> None:
        a = Cell(index=0, row=0, col=0)
        a.connect_to(a)
        assert a.neighbors == set()


class TestGrid:
    """Tests for grid construction and the read/occupant interface."""

    def test_dimensions(self, small_grid: Grid) -> None:
        assert small_grid.rows == 4
        assert small_grid.cols == 5
        assert len(small_grid.cells) == 20

    @pytest.mark.parametrize(("rows", "cols"), [(0, 3), (3, 0), (-1, 2)])
    def test_invalid_dimensions(self, rows: int, cols: int) -> None:
        with pytest.raises(InvalidDimensionsError):
            Grid(rows=rows, cols=cols)

    @pytest.mark.parametrize(("rows", "cols"), [(True, 3), (2.0, 3), ("3", 3)])
    def test_non_integer_dimensions(self, rows: object, cols: int) -> None:
        with pytest.raises(InvalidDimensionsError):
            Grid(rows=rows, cols=cols)

    def test_numpy_integer_dimensions(self) -> None:
        grid = Grid(rows=np.int64(3), cols=np.int32(2))
        assert (grid.rows, grid.cols) == (3, 2)
        assert type(grid.rows) is int
        assert len(grid.neighbours(1, 0)) == 5

    def test_invalid_dimensions_is_value_error(self) -> None:
        assert issubclass(InvalidDimensionsError, ValueError)

    def test_cell_at_valid(self, small_grid: Grid) -> None:
        cell = small_grid.cell_at(2, 3)
        assert (cell.row, cell.col) == (2, 3)
        assert cell.index == 2 * 5 + 3

    def test_cell_at_out_of_bounds(self, small_grid: Grid) -> None:
        with pytest.raises(IndexError):
            small_grid.cell_at(4, 0)

    def test_neighbours_corner(self, small_grid: Grid) -> None:
        assert len(small_grid.neighbours(0, 0)) == 3
        assert len(small_grid.neighbours(3, 4)) == 3

    def test_neighbours_edge(self, small_grid: Grid) -> None:
        assert len(small_grid.neighbours(0, 2)) == 5
        assert len(small_grid.neighbours(2, 0)) == 5

    def test_neighbours_interior(self, small_grid: Grid) -> None:
        assert len(small_grid.neighbours(1, 1)) == 8
        assert len(small_grid.neighbours(2, 3)) == 8

    def test_neighbours_symmetric_no_self(self, small_grid: Grid) -> None:
        for cell in small_grid.cells:
            assert cell.index not in cell.neighbors
            for index in cell.neighbors:
                assert cell.index in small_grid.cells[index].neighbors

    def test_neighbours_are_adjacent(self, small_grid: Grid) -> None:
        for cell in small_grid.cells:
            for other in small_grid.neighbours(cell.row, cell.col):
                assert max(abs(cell.row - other.row), abs(cell.col - other.col)) == 1

    def test_edge_count(self) -> None:
        assert Grid(rows=3, cols=3).edge_count == 20
        assert Grid(rows=1, cols=1).edge_count == 0

    def test_occupant_management(self, small_grid: Grid) -> None:
        food = Food(3.0)
        small_grid.add_occupant(1, 1, food)
        assert small_grid.occupants(1, 1) == frozenset({food})

        small_grid.remove_occupant(1, 1, food)
        assert small_grid.occupants(1, 1) == frozenset()

    def test_remove_missing_occupant(self, small_grid: Grid) -> None:
        with pytest.raises(KeyError):
            small_grid.remove_occupant(0, 0, Food(1.0))

    def test_layer(self, small_grid: Grid) -> None:
        small_grid.cell_at(3, 1).pheromones[ATTRACT] = 2.5
        layer = small_grid.layer(ATTRACT)
        assert layer.shape == (4, 5)
        assert layer[3, 1] == 2.5
        assert np.count_nonzero(layer) == 1


class TestGridTick:
    """Tests for the three-pass pheromone update."""

    def test_decay_without_neighbours(self) -> None:
        grid = Grid(rows=1, cols=1)
        grid.cells[0].pheromones[ATTRACT] = 10.0
        grid.update_pheromone()
        assert grid.concentration(0, 0, ATTRACT) == pytest.approx(8.0)

    def test_decay_never_reaches_zero(self) -> None:
        grid = Grid(rows=1, cols=1)
        grid.cells[0].pheromones[ATTRACT] = 10.0
        previous = 10.0
        for _ in range(100):
            grid.update_pheromone()
            current = grid.concentration(0, 0, ATTRACT)
            assert 0.0 < current < previous
            previous = current
        assert previous == pytest.approx(10.0 * 0.8**100)

    def test_secretion_is_not_decayed_same_tick(self) -> None:
        grid = Grid(rows=1, cols=1)
        grid.add_occupant(0, 0, Food(4.0))
        grid.update_pheromone()
        assert grid.concentration(0, 0, ATTRACT) == pytest.approx(4.0)

    def test_snapshot_taken_after_local_update(self, pair_grid: Grid) -> None:
        pair_grid.cells[0].pheromones[ATTRACT] = 12.5
        pair_grid.update_pheromone()
        # decayed to 10.0 before the snapshot, then exchanged
        assert pair_grid.concentration(0, 0, ATTRACT) == pytest.approx(8.75)
        assert pair_grid.concentration(0, 1, ATTRACT) == pytest.approx(1.25)
