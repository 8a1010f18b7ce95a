"""
Tests for the two-liftarm position enumerator.
"""

import pytest

from brickcalc.liftarms.enumerator import (
    LiftarmEnumerator,
    apply_preset,
    enumerate_liftarms,
)
from brickcalc.models.inputs import LiftarmInputs, LiftarmPreset


def _rows_at_target(positions, tx, ty):
    return [p for p in positions if p.tx == tx and p.ty == ty]


class TestTargetOnXAxis:
    """End-to-end check with the target at (3, 0)."""

    @pytest.fixture
    def positions(self):
        inputs = LiftarmInputs(max_a=3, max_b=3, remove_larger=False)
        return enumerate_liftarms(inputs).positions

    def test_tangent_intersections_on_axis(self, positions):
        """A+B = 3 meets on the x axis at the end of A."""
        on_axis = [p for p in _rows_at_target(positions, 3, 0) if p.iy == 0]

        pairs = sorted({(p.a_len, p.b_len, p.ix) for p in on_axis})
        assert pairs == [(1, 2, 1), (2, 1, 2)]

    def test_angles_along_axis(self, positions):
        """Everything lies on the x axis: A and C point along it."""
        on_axis = [p for p in _rows_at_target(positions, 3, 0) if p.iy == 0]

        for p in on_axis:
            assert p.angle_a == 0
            assert p.angle_c == 0
            assert p.angle_ab == 180
            assert p.angle_ac == 0

    def test_stud_positions_along_a(self, positions):
        """A of length 2 gives studs 1 and 2 along the axis."""
        rows = [p for p in _rows_at_target(positions, 3, 0) if p.a_len == 2 and p.iy == 0]

        assert sorted((p.s_num, p.sx, p.sy) for p in rows) == [(1, 1, 0), (2, 2, 0)]

    def test_no_zero_length_b(self, positions):
        """B is at least one stud long."""
        assert all(p.b_len >= 1 for p in positions)


class TestFilters:
    """Tests for quadrant, diagonal, duplicate and decimal filters."""

    def test_first_quadrant_only(self, small_liftarm_inputs):
        positions = enumerate_liftarms(small_liftarm_inputs).positions

        assert positions
        assert all(p.ix >= 0 and p.iy >= 0 for p in positions)

    def test_below_diagonal_by_default(self, small_liftarm_inputs):
        positions = enumerate_liftarms(small_liftarm_inputs).positions

        assert all(p.iy <= p.ix for p in positions)

    def test_keep_above_diagonal(self):
        inputs = LiftarmInputs(max_a=3, max_b=3, remove_y_greater_x=False)

        positions = enumerate_liftarms(inputs).positions

        assert any(p.iy > p.ix for p in positions)

    def test_remove_larger_keeps_shortest_pairs(self, small_liftarm_inputs):
        """Every stud position keeps only its minimal A+B."""
        positions = enumerate_liftarms(small_liftarm_inputs).positions

        by_stud = {}
        for p in positions:
            by_stud.setdefault((p.sx, p.sy), set()).add(p.a_len + p.b_len)
        assert all(len(sums) == 1 for sums in by_stud.values())

    def test_remove_larger_reduces_rows(self):
        kept = enumerate_liftarms(LiftarmInputs(max_a=3, max_b=3))
        full = enumerate_liftarms(LiftarmInputs(max_a=3, max_b=3, remove_larger=False))

        assert len(kept.positions) < len(full.positions)
        assert kept.raw_count == full.raw_count == len(full.positions)

    def test_decimal_range(self):
        """Only studs with a coordinate decimal in [0.4, 0.6] are kept."""
        inputs = LiftarmInputs(max_a=3, max_b=3, min_decimal=0.4, max_decimal=0.6)

        positions = enumerate_liftarms(inputs).positions

        assert positions

        def in_range(v):
            return 0.4 - 0.001 <= v % 1 <= 0.6 + 0.001

        assert all(in_range(p.sx) or in_range(p.sy) for p in positions)

    def test_complementary_decimal_adds_rows(self):
        narrow = LiftarmInputs(max_a=3, max_b=3, min_decimal=0.1, max_decimal=0.2)
        both = narrow.model_copy(update={"include_complementary_decimal": True})

        assert len(enumerate_liftarms(both).positions) > len(enumerate_liftarms(narrow).positions)


class TestOrderingAndRounding:
    """Tests for result order and rounding."""

    def test_sorted(self, small_liftarm_inputs):
        positions = enumerate_liftarms(small_liftarm_inputs).positions

        keys = [(p.sx, p.sy, p.a_len, p.b_len) for p in positions]
        assert keys == sorted(keys)

    def test_rounded(self, small_liftarm_inputs):
        """Coordinates have at most 3 decimals, angles 1."""
        positions = enumerate_liftarms(small_liftarm_inputs).positions

        for p in positions:
            assert round(p.sx, 3) == p.sx
            assert round(p.angle_ab, 1) == p.angle_ab

    def test_half_studs(self):
        """Half-stud search steps lengths and stud numbers by 0.5."""
        inputs = LiftarmInputs(max_a=2, max_b=2, half_studs=True, remove_larger=False)

        positions = enumerate_liftarms(inputs).positions

        assert any(p.s_num == 0.5 for p in positions)
        assert any(p.a_len == 1.5 for p in positions)


class TestBatches:
    """Tests for batched delivery."""

    def test_batches_cover_raw_rows(self, small_liftarm_inputs):
        enumerator = LiftarmEnumerator(small_liftarm_inputs)

        batches = list(enumerator.iter_batches(batch_size=50))
        total = sum(len(b) for b in batches)

        assert all(len(b) <= 50 for b in batches)
        assert total == enumerate_liftarms(small_liftarm_inputs).raw_count

    def test_targets_counted(self, small_liftarm_inputs):
        result = LiftarmEnumerator(small_liftarm_inputs).calculate()

        assert result.targets_searched > 0


class TestPresets:
    """Tests for named row filters."""

    @pytest.fixture
    def positions(self):
        return enumerate_liftarms(LiftarmInputs(max_a=5, max_b=5)).positions

    def test_all(self, positions):
        assert apply_preset(positions, LiftarmPreset.ALL) == positions

    def test_right_angle(self, positions):
        rows = apply_preset(positions, LiftarmPreset.RIGHT_ANGLE)

        assert rows
        assert all(p.angle_ab == pytest.approx(90) for p in rows)

    def test_hypotenuses(self, positions):
        rows = apply_preset(positions, LiftarmPreset.HYPOTENUSES)

        assert all(p.iy == 0 and p.tx == p.ix for p in rows)

    def test_catheti(self, positions):
        rows = apply_preset(positions, LiftarmPreset.CATHETI)

        assert all(p.ty == 0 and p.tx == p.ix for p in rows)
