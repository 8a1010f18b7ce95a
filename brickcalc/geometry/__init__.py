"""
Geometry kernel for the Technic calculators.

This module provides:
- Circle intersection and angle primitives
- Fixed-decimal rounding and tolerant comparisons
- A pint unit registry that knows the Technic stud
"""

from brickcalc.geometry.primitives import (
    Point,
    ORIGIN,
    circle_intersections,
    angle_between,
    angle_at,
    direction_deg,
)
from brickcalc.geometry.rounding import round_fixed, format_fixed, eq, gte, lte
from brickcalc.geometry.units import ureg, Q_, studs_to_mm, mm_to_studs

__all__ = [
    # Primitives
    "Point",
    "ORIGIN",
    "circle_intersections",
    "angle_between",
    "angle_at",
    "direction_deg",
    # Rounding
    "round_fixed",
    "format_fixed",
    "eq",
    "gte",
    "lte",
    # Units
    "ureg",
    "Q_",
    "studs_to_mm",
    "mm_to_studs",
]
