"""
Gear catalog and coupling calculator.
"""

from brickcalc.gears.catalog import (
    GearSpec,
    WORM_1L,
    WORM_2L,
    STANDARD_TEETH,
    DEFAULT_SELECTION,
    gear_radius,
    parse_gear,
    parse_gear_list,
    is_valid_teeth,
    snap_teeth,
)
from brickcalc.gears.couplings import (
    GearCouplingCalculator,
    center_distance,
    gear_ratio,
    classify_fit,
    overfit_tier,
    find_mounting_positions,
    enumerate_gear_couplings,
)

__all__ = [
    "GearSpec",
    "WORM_1L",
    "WORM_2L",
    "STANDARD_TEETH",
    "DEFAULT_SELECTION",
    "gear_radius",
    "parse_gear",
    "parse_gear_list",
    "is_valid_teeth",
    "snap_teeth",
    "GearCouplingCalculator",
    "center_distance",
    "gear_ratio",
    "classify_fit",
    "overfit_tier",
    "find_mounting_positions",
    "enumerate_gear_couplings",
]
