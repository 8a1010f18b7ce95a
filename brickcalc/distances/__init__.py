"""
Planar distance grid.
"""

from brickcalc.distances.grid import compute_distance_grid, grid_center

__all__ = ["compute_distance_grid", "grid_center"]
