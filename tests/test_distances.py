"""
Tests for the planar distance grid.
"""

import pytest

from brickcalc.distances.grid import compute_distance_grid, grid_center
from brickcalc.models.inputs import DistanceInputs


def _cell(grid, x, y):
    for row in grid.cells:
        for cell in row:
            if cell.x == x and cell.y == y:
                return cell
    raise AssertionError(f"no cell at ({x}, {y})")


class TestGridLayout:
    """Tests for grid coordinates."""

    def test_whole_studs(self):
        """Eleven columns centred on the floored target."""
        grid = compute_distance_grid(DistanceInputs(x=3.5, y=2))

        assert (grid.center_x, grid.center_y) == (3, 2)
        assert grid.columns == [float(x) for x in range(-2, 9)]
        assert grid.rows == [float(y) for y in range(7, -4, -1)]
        assert len(grid.cells) == 11
        assert all(len(row) == 11 for row in grid.cells)

    def test_half_studs(self):
        """Half-stud grids have 21 columns half a stud apart."""
        grid = compute_distance_grid(DistanceInputs(x=3.7, y=0, half_studs=True))

        assert grid.step == 0.5
        assert grid.center_x == 3.5
        assert len(grid.columns) == 21
        assert grid.columns[0] == pytest.approx(-1.5)

    @pytest.mark.parametrize("value,step,expected", [
        (-1.5, 1.0, -2.0),
        (-1.5, 0.5, -1.5),
        (2.99, 0.5, 2.5),
    ])
    def test_grid_center(self, value, step, expected):
        assert grid_center(value, step) == expected


class TestCells:
    """Tests for cell values."""

    def test_distances(self):
        grid = compute_distance_grid(DistanceInputs(x=3.5, y=2))

        assert _cell(grid, 3, 2).distance == 0.5
        assert _cell(grid, 0, -2).distance == pytest.approx(5.315)

    def test_axis_flags(self):
        grid = compute_distance_grid(DistanceInputs(x=1, y=1))

        assert _cell(grid, 0, 3).on_axis_x is True
        assert _cell(grid, 2, 0).on_axis_y is True
        assert _cell(grid, 2, 3).on_axis_x is False

    def test_highlight_range(self):
        """Cells within [min, max] are highlighted, bounds included."""
        grid = compute_distance_grid(DistanceInputs(x=0, y=0, min_highlight=1, max_highlight=2))

        highlighted = [c for row in grid.cells for c in row if c.highlighted]

        assert highlighted
        assert all(1 <= c.distance <= 2 for c in highlighted)
        assert _cell(grid, 2, 0).highlighted is True
        assert _cell(grid, 0, 0).highlighted is False

    def test_highlight_disabled(self):
        """Both bounds zero means no highlighting."""
        grid = compute_distance_grid(DistanceInputs(x=0, y=0))

        assert not any(c.highlighted for row in grid.cells for c in row)
