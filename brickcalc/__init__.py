"""
Technic Brick calculators (brickcalc)

Design helpers for Technic Brick models:
- liftarm connection geometry
- gear coupling mounting distances
- planar stud distances
- gearbox speed/torque propagation across operating modes

Usage:
    python -m brickcalc liftarms --max-a 4 --max-b 4
    python -m brickcalc gear-couplings --gears 8,16,24
    python -m brickcalc make-example
    python -m brickcalc gearbox --input example_gearbox.json
    python -m brickcalc serve --port 8000
"""

__version__ = "0.1.0"
__author__ = "Technic Tools"

from brickcalc.models.inputs import (
    LiftarmInputs,
    GearCouplingInputs,
    DistanceInputs,
    GearboxDocument,
    ToolKind,
    SelectorMode,
)
from brickcalc.models.outputs import (
    LiftarmResult,
    GearCouplingResult,
    DistanceGrid,
    GearboxResult,
)
from brickcalc.liftarms.enumerator import LiftarmEnumerator, enumerate_liftarms
from brickcalc.gears.couplings import GearCouplingCalculator, enumerate_gear_couplings
from brickcalc.distances.grid import compute_distance_grid
from brickcalc.gearbox.model import Gearbox
from brickcalc.gearbox.engine import GearboxEngine, propagate

__all__ = [
    "LiftarmInputs",
    "GearCouplingInputs",
    "DistanceInputs",
    "GearboxDocument",
    "ToolKind",
    "SelectorMode",
    "LiftarmResult",
    "GearCouplingResult",
    "DistanceGrid",
    "GearboxResult",
    "LiftarmEnumerator",
    "enumerate_liftarms",
    "GearCouplingCalculator",
    "enumerate_gear_couplings",
    "compute_distance_grid",
    "Gearbox",
    "GearboxEngine",
    "propagate",
]
