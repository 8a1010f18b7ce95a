"""
Planar distance grid.

Distances from every point of a square stud grid to a target point.
The grid is centred on the target floored to the grid step and extends
five studs each way.
"""

import math

from brickcalc.geometry.primitives import Point
from brickcalc.geometry.rounding import eq, gte, lte, round_fixed
from brickcalc.models.inputs import DistanceInputs
from brickcalc.models.outputs import DistanceCell, DistanceGrid

# Grid half-width in studs
GRID_EXTENT = 5


def grid_center(value: float, step: float) -> float:
    """Floor a coordinate to a multiple of the grid step."""
    return math.floor(value / step) * step


def compute_distance_grid(inputs: DistanceInputs) -> DistanceGrid:
    """
    Build the distance grid around a target point.

    Args:
        inputs: Target coordinates, grid step and highlight range

    Returns:
        DistanceGrid with rows from top (largest y) to bottom
    """
    step = 0.5 if inputs.half_studs else 1.0
    cells_each_way = int(GRID_EXTENT / step)
    offsets = range(-cells_each_way, cells_each_way + 1)

    center_x = grid_center(inputs.x, step)
    center_y = grid_center(inputs.y, step)
    target = Point(inputs.x, inputs.y)

    columns = [center_x + o * step for o in offsets]
    rows = [center_y + o * step for o in reversed(offsets)]

    lo, hi = inputs.min_highlight, inputs.max_highlight
    highlighting = not eq(lo, 0) or not eq(hi, 0)

    cells = []
    for y in rows:
        row = []
        for x in columns:
            d = Point(x, y).distance_to(target)
            row.append(DistanceCell(
                x=x,
                y=y,
                distance=round_fixed(d, 3),
                on_axis_x=eq(x, 0),
                on_axis_y=eq(y, 0),
                highlighted=highlighting and gte(d, lo) and lte(d, hi),
            ))
        cells.append(row)

    return DistanceGrid(
        target_x=inputs.x,
        target_y=inputs.y,
        center_x=center_x,
        center_y=center_y,
        step=step,
        columns=columns,
        rows=rows,
        cells=cells,
    )
