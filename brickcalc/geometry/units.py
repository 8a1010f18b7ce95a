"""
Unit registry and helpers for Technic dimensions.

Uses pint so that stud-based lengths can be reported in millimetres
without hand-written conversion factors.
"""

import pint

# Create a shared unit registry for the entire application
ureg = pint.UnitRegistry()

# One Technic stud is 8 mm centre to centre
ureg.define("stud = 8 * millimeter")

# Shorthand for creating quantities
Q_ = ureg.Quantity

stud = ureg.stud
millimeter = ureg.millimeter


def studs_to_mm(length_studs: float) -> float:
    """Convert a length in studs to millimetres."""
    return Q_(length_studs, "stud").to("millimeter").magnitude


def mm_to_studs(length_mm: float) -> float:
    """Convert a length in millimetres to studs."""
    return Q_(length_mm, "millimeter").to("stud").magnitude
