"""
Gear coupling calculator.

For every driver/follower pair, finds the axle offsets on the stud grid
whose center distance matches the ideal meshing distance exactly, or
within the accepted overfit/underfit tolerances.

ASSUMPTIONS:
- Ideal center distance is the sum of pitch radii
- Offsets are symmetric, so only 0 <= y <= x is searched
- Overfit tiers are presentational only
"""

import logging
import math

from brickcalc.gears.catalog import GearSpec, parse_gear
from brickcalc.geometry.units import studs_to_mm
from brickcalc.models.inputs import GearCouplingInputs
from brickcalc.models.outputs import (
    FitClass,
    GearCouplingResult,
    GearCouplingRow,
    MountingPosition,
    OverfitTier,
)

logger = logging.getLogger(__name__)

EXACT_TOLERANCE = 1e-4
BOUND_TOLERANCE = 1e-9

# Overfit tier limits in studs
GOOD_OVERFIT = 0.05
MARGINAL_OVERFIT = 0.10


def center_distance(gear_a: GearSpec, gear_b: GearSpec) -> float:
    """Ideal center distance in studs."""
    return gear_a.radius + gear_b.radius


def gear_ratio(driver: GearSpec, follower: GearSpec) -> float:
    """
    Driver teeth / follower teeth.

    A worm advances the follower by one tooth per turn.
    """
    if driver.is_worm:
        return 1 / follower.teeth
    return driver.teeth / follower.teeth


def overfit_tier(delta: float) -> OverfitTier:
    """Presentation tier of an overfit by how far it exceeds the ideal."""
    if delta <= GOOD_OVERFIT:
        return OverfitTier.GOOD
    if delta <= MARGINAL_OVERFIT:
        return OverfitTier.MARGINAL
    return OverfitTier.POOR


def classify_fit(
    x: float,
    y: float,
    ideal: float,
    max_overfit: float,
    max_underfit: float,
) -> MountingPosition | None:
    """
    Classify an offset against the ideal center distance.

    Returns:
        MountingPosition, or None when the offset is degenerate (0, 0)
        or outside the accepted tolerances
    """
    actual = math.hypot(x, y)
    if actual < BOUND_TOLERANCE:
        return None
    if actual > ideal + max_overfit + BOUND_TOLERANCE:
        return None
    if actual < ideal - max_underfit - BOUND_TOLERANCE:
        return None

    delta = actual - ideal
    if abs(delta) < EXACT_TOLERANCE:
        return MountingPosition(x=x, y=y, distance=actual, fit=FitClass.EXACT, delta=delta)
    if delta > 0:
        return MountingPosition(
            x=x, y=y, distance=actual, fit=FitClass.OVERFIT, delta=delta,
            tier=overfit_tier(delta),
        )
    return MountingPosition(x=x, y=y, distance=actual, fit=FitClass.UNDERFIT, delta=delta)


def find_mounting_positions(
    ideal: float,
    max_overfit: float,
    max_underfit: float,
    step: float = 0.5,
) -> list[MountingPosition]:
    """
    Search the grid 0 <= y <= x <= ideal + max_overfit.

    Returns:
        Positions in search order (x ascending, then y)
    """
    positions = []
    limit = ideal + max_overfit + BOUND_TOLERANCE
    ix = 0
    while ix * step <= limit:
        x = ix * step
        for iy in range(ix + 1):
            position = classify_fit(x, iy * step, ideal, max_overfit, max_underfit)
            if position is not None:
                positions.append(position)
        ix += 1
    return positions


class GearCouplingCalculator:
    """
    Enumerates couplings between every pair of selected gears.

    Worm gears only appear as the driver (gear A).
    """

    def __init__(self, inputs: GearCouplingInputs):
        """
        Initialize calculator.

        Args:
            inputs: Selected gears and fit tolerances
        """
        self.inputs = inputs
        self.gears = [parse_gear(g) for g in inputs.gears]

    def build_row(self, gear_a: GearSpec, gear_b: GearSpec) -> GearCouplingRow:
        """Compute distance, ratio and mounting positions for one pair."""
        ideal = center_distance(gear_a, gear_b)
        positions = find_mounting_positions(
            ideal,
            self.inputs.max_overfit,
            self.inputs.max_underfit,
            self.inputs.step,
        )
        return GearCouplingRow(
            gear_a=gear_a.gear_id,
            gear_b=gear_b.teeth,
            ratio=gear_ratio(gear_a, gear_b),
            center_distance=ideal,
            center_distance_mm=studs_to_mm(ideal),
            exact=[p for p in positions if p.fit == FitClass.EXACT],
            overfit=[p for p in positions if p.fit == FitClass.OVERFIT],
            underfit=[p for p in positions if p.fit == FitClass.UNDERFIT],
        )

    def calculate(self) -> GearCouplingResult:
        """
        Enumerate all pairs.

        Returns:
            GearCouplingResult sorted by gear A (worms by radius), then gear B
        """
        pairs = [
            (gear_a, gear_b)
            for gear_a in self.gears
            for gear_b in self.gears
            if not gear_b.is_worm
        ]
        pairs.sort(key=lambda p: (p[0].sort_value, p[1].teeth))

        rows = [self.build_row(a, b) for a, b in pairs]
        logger.debug(f"Gear couplings: {len(rows)} pairs from {len(self.gears)} gears")

        return GearCouplingResult(
            rows=rows,
            max_overfit=self.inputs.max_overfit,
            max_underfit=self.inputs.max_underfit,
        )


def enumerate_gear_couplings(inputs: GearCouplingInputs) -> GearCouplingResult:
    """Convenience wrapper around GearCouplingCalculator.calculate()."""
    return GearCouplingCalculator(inputs).calculate()
