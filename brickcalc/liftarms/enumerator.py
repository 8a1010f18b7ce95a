"""
Two-liftarm position enumerator.

Liftarm A pivots at the origin, liftarm B pivots at a target point T,
and the two are pinned together where they meet (point I). Every stud
hole S along A is a position reachable with that liftarm pair.

The search is brute force over target points, lengths and stud indices;
results can be delivered in batches for responsive consumers.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterator, Optional

from brickcalc.geometry.primitives import (
    ORIGIN,
    Point,
    angle_at,
    circle_intersections,
    direction_deg,
)
from brickcalc.geometry.rounding import round_fixed
from brickcalc.models.inputs import LiftarmInputs, LiftarmPreset
from brickcalc.models.outputs import LiftarmPosition, LiftarmResult

logger = logging.getLogger(__name__)

# Two lengths sums closer than this are treated as equal
LENGTH_SUM_TOLERANCE = 0.001

# Tolerance for preset matching on rounded values
PRESET_TOLERANCE = 0.001


@dataclass
class RawPosition:
    """A position before rounding, with its duplicate-removal key."""
    target: Point
    intersection: Point
    stud: Point
    s_num: float
    a_len: float
    b_len: float

    @property
    def key(self) -> tuple[float, float]:
        """Rounded stud coordinates used to group equivalent positions."""
        return (round_fixed(self.stud.x, 3), round_fixed(self.stud.y, 3))

    @property
    def length_sum(self) -> float:
        return self.a_len + self.b_len

    def to_position(self) -> LiftarmPosition:
        """Round to the output record."""
        t, i, s = self.target, self.intersection, self.stud
        return LiftarmPosition(
            sx=round_fixed(s.x, 3),
            sy=round_fixed(s.y, 3),
            s_num=self.s_num,
            a_len=self.a_len,
            b_len=self.b_len,
            c_len=round_fixed(ORIGIN.distance_to(t), 3),
            tx=round_fixed(t.x, 3),
            ty=round_fixed(t.y, 3),
            ix=round_fixed(i.x, 3),
            iy=round_fixed(i.y, 3),
            angle_a=round_fixed(direction_deg(ORIGIN, i), 1),
            angle_b=round_fixed(direction_deg(i, t), 1),
            angle_c=round_fixed(direction_deg(ORIGIN, t), 1),
            angle_ab=round_fixed(angle_at(i, ORIGIN, t), 1),
            angle_ac=round_fixed(angle_at(ORIGIN, i, t), 1),
            angle_bc=round_fixed(angle_at(t, ORIGIN, i), 1),
        )


def _frange(start: float, stop: float, step: float) -> Iterator[float]:
    """Inclusive float range computed by index to avoid drift."""
    count = int(math.floor((stop - start) / step + 1e-9))
    for k in range(count + 1):
        yield start + k * step


class LiftarmEnumerator:
    """
    Enumerates stud positions reachable by two pinned liftarms.

    Target points are searched over [-reach, reach] on both axes, where
    reach = max_a + max_b. The x sweep ends at the first positive x whose
    full y sweep produced no intersection at all.
    """

    BATCH_SIZE = 2000

    def __init__(self, inputs: LiftarmInputs):
        """
        Initialize enumerator with search parameters.

        Args:
            inputs: Validated liftarm search parameters
        """
        self.inputs = inputs
        self.step = inputs.step
        self.reach = inputs.max_a + inputs.max_b
        self.targets_searched = 0

    def iter_raw(self) -> Iterator[RawPosition]:
        """
        Yield every position passing the quadrant, diagonal and decimal
        filters, in search order. Duplicate removal is not applied.
        """
        inp = self.inputs
        self.targets_searched = 0
        a_lengths = list(_frange(inp.min_a, inp.max_a, self.step))
        b_lengths = list(_frange(inp.min_b, inp.max_b, self.step))

        for tx in _frange(-self.reach, self.reach, self.step):
            found_for_tx = False
            for ty in _frange(-self.reach, self.reach, self.step):
                target = Point(tx, ty)
                self.targets_searched += 1
                for a_len in a_lengths:
                    for b_len in b_lengths:
                        intersections = circle_intersections(ORIGIN, a_len, target, b_len)
                        if not intersections:
                            continue
                        found_for_tx = True
                        for inter in intersections:
                            yield from self._stud_positions(target, inter, a_len, b_len)
            if not found_for_tx and tx > 0:
                break

    def _stud_positions(
        self,
        target: Point,
        inter: Point,
        a_len: float,
        b_len: float,
    ) -> Iterator[RawPosition]:
        """Stud holes along liftarm A for one intersection."""
        if inter.x < 0 or inter.y < 0:
            return
        if self.inputs.remove_y_greater_x and inter.y > inter.x:
            return

        for s_num in _frange(self.step, a_len, self.step):
            stud = inter.scaled(s_num / a_len)
            if not self._passes_decimal_filter(stud):
                continue
            yield RawPosition(
                target=target,
                intersection=inter,
                stud=stud,
                s_num=s_num,
                a_len=a_len,
                b_len=b_len,
            )

    def _passes_decimal_filter(self, stud: Point) -> bool:
        """
        Keep a stud when the decimal part of x or y falls in the
        configured range (or its complement when enabled).
        """
        lo, hi = self.inputs.min_decimal, self.inputs.max_decimal
        dx, dy = stud.x % 1, stud.y % 1

        if lo <= dx <= hi or lo <= dy <= hi:
            return True
        if not self.inputs.include_complementary_decimal:
            return False
        c_lo, c_hi = 1 - hi, 1 - lo
        return c_lo <= dx <= c_hi or c_lo <= dy <= c_hi

    def iter_batches(self, batch_size: Optional[int] = None) -> Iterator[list[LiftarmPosition]]:
        """
        Yield rounded positions in batches, in search order.

        Duplicate removal and sorting need the complete result set, so
        batches are unfiltered by `remove_larger` and unsorted.
        """
        size = batch_size or self.BATCH_SIZE
        batch: list[LiftarmPosition] = []
        for raw in self.iter_raw():
            batch.append(raw.to_position())
            if len(batch) >= size:
                yield batch
                batch = []
        if batch:
            yield batch

    def calculate(self) -> LiftarmResult:
        """
        Run the full search.

        Returns:
            LiftarmResult with positions filtered and sorted by
            sx, sy, a_len, b_len
        """
        raw = list(self.iter_raw())

        if self.inputs.remove_larger:
            kept = remove_larger_pairs(raw)
        else:
            kept = raw

        positions = [r.to_position() for r in kept]
        positions.sort(key=lambda p: (p.sx, p.sy, p.a_len, p.b_len))

        logger.debug(
            f"Liftarm search: {len(raw)} raw rows, {len(positions)} kept, "
            f"{self.targets_searched} targets"
        )

        return LiftarmResult(
            positions=positions,
            raw_count=len(raw),
            targets_searched=self.targets_searched,
        )


def remove_larger_pairs(rows: list[RawPosition]) -> list[RawPosition]:
    """
    Keep, for each rounded stud position, only the rows with the smallest
    A + B length. Ties are all kept.
    """
    min_sum: dict[tuple[float, float], float] = {}
    for row in rows:
        current = min_sum.get(row.key)
        if current is None or row.length_sum < current:
            min_sum[row.key] = row.length_sum
    return [
        row for row in rows
        if row.length_sum < min_sum[row.key] + LENGTH_SUM_TOLERANCE
    ]


def apply_preset(positions: list[LiftarmPosition], preset: LiftarmPreset) -> list[LiftarmPosition]:
    """
    Filter positions with a named preset.

    - hypotenuses: A lies on the x axis and B is vertical (iy = 0, tx = ix)
    - catheti: B is vertical from a target on the x axis (ix = tx, ty = 0)
    - right-angle: A and B are perpendicular (angle at I = 90)
    """
    tol = PRESET_TOLERANCE
    if preset == LiftarmPreset.ALL:
        return list(positions)
    if preset == LiftarmPreset.HYPOTENUSES:
        return [p for p in positions if abs(p.iy) < tol and abs(p.tx - p.ix) < tol]
    if preset == LiftarmPreset.CATHETI:
        return [p for p in positions if abs(p.ix - p.tx) < tol and abs(p.ty) < tol]
    if preset == LiftarmPreset.RIGHT_ANGLE:
        return [p for p in positions if abs(p.angle_ab - 90) < tol]
    raise ValueError(f"Unknown preset: {preset}")


def enumerate_liftarms(inputs: LiftarmInputs) -> LiftarmResult:
    """Convenience wrapper around LiftarmEnumerator.calculate()."""
    return LiftarmEnumerator(inputs).calculate()
