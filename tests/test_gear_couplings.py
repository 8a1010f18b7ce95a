"""
Tests for the gear catalog and coupling enumeration.
"""

import pytest
from pydantic import ValidationError

from brickcalc.gears.catalog import parse_gear, parse_gear_list
from brickcalc.gears.couplings import (
    GearCouplingCalculator,
    center_distance,
    classify_fit,
    enumerate_gear_couplings,
    find_mounting_positions,
    gear_ratio,
    overfit_tier,
)
from brickcalc.models.inputs import GearCouplingInputs
from brickcalc.models.outputs import FitClass, OverfitTier


class TestCatalog:
    """Tests for gear parsing."""

    def test_standard_gear(self):
        gear = parse_gear(24)

        assert gear.radius == 1.5
        assert gear.is_worm is False
        assert gear.sort_value == 24

    def test_worms(self):
        """Worms carry fixed radii and sort as their radius."""
        one_l = parse_gear("1(1L)")
        two_l = parse_gear("1(2l)")

        assert (one_l.radius, one_l.teeth, one_l.is_worm) == (0.75, 1, True)
        assert two_l.gear_id == "1(2L)"
        assert two_l.sort_value == 0.5

    def test_numeric_string(self):
        assert parse_gear(" 16 ").gear_id == 16

    @pytest.mark.parametrize("value", ["abc", 0, -8, True])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_gear(value)

    def test_parse_list_dedups(self):
        assert parse_gear_list("8, 16,,8, 1(1L)") == [8, 16, "1(1L)"]

    def test_inputs_normalise_gears(self):
        inputs = GearCouplingInputs(gears=["16", 16, "1(2l)"])

        assert inputs.gears == [16, "1(2L)"]

    def test_inputs_reject_unknown_gear(self):
        with pytest.raises(ValidationError):
            GearCouplingInputs(gears=["big"])


class TestFitClassification:
    """Tests for offset classification."""

    def test_center_distance_and_ratio(self):
        a, b = parse_gear(16), parse_gear(16)

        assert center_distance(a, b) == 2.0
        assert gear_ratio(a, b) == 1.0

    def test_worm_ratio(self):
        assert gear_ratio(parse_gear("1(1L)"), parse_gear(24)) == pytest.approx(1 / 24)

    def test_exact(self):
        position = classify_fit(2.0, 0.0, ideal=2.0, max_overfit=0.2, max_underfit=0.1)

        assert position.fit == FitClass.EXACT
        assert position.tier is None

    def test_poor_overfit(self):
        """Half a stud over is an overfit in the poor tier."""
        position = classify_fit(2.5, 0.0, ideal=2.0, max_overfit=0.5, max_underfit=0.1)

        assert position.fit == FitClass.OVERFIT
        assert position.delta == pytest.approx(0.5)
        assert position.tier == OverfitTier.POOR

    def test_underfit(self):
        position = classify_fit(1.0, 1.0, ideal=1.5, max_overfit=0.2, max_underfit=0.1)

        assert position.fit == FitClass.UNDERFIT
        assert position.delta == pytest.approx(2 ** 0.5 - 1.5)

    @pytest.mark.parametrize("x,y", [(0.0, 0.0), (3.0, 0.0), (1.0, 0.0)])
    def test_outside_tolerance(self, x, y):
        assert classify_fit(x, y, ideal=2.0, max_overfit=0.2, max_underfit=0.1) is None

    @pytest.mark.parametrize("delta,tier", [
        (0.01, OverfitTier.GOOD),
        (0.05, OverfitTier.GOOD),
        (0.08, OverfitTier.MARGINAL),
        (0.10, OverfitTier.MARGINAL),
        (0.15, OverfitTier.POOR),
    ])
    def test_overfit_tiers(self, delta, tier):
        assert overfit_tier(delta) == tier

    def test_search_stays_below_diagonal(self):
        positions = find_mounting_positions(2.0, 0.5, 0.5)

        assert positions
        assert all(p.y <= p.x for p in positions)
        assert (0.0, 0.0) not in [(p.x, p.y) for p in positions]


class TestCouplingRows:
    """Tests for the full enumeration."""

    def test_sixteen_sixteen(self):
        """16:16 meshes exactly two studs apart."""
        result = enumerate_gear_couplings(GearCouplingInputs(gears=[16], max_overfit=0.5))

        row = result.rows[0]
        assert (row.gear_a, row.gear_b) == (16, 16)
        assert row.center_distance == 2.0
        assert row.center_distance_mm == pytest.approx(16.0)
        assert [(p.x, p.y) for p in row.exact] == [(2.0, 0.0)]
        overfit = {(p.x, p.y): p for p in row.overfit}
        assert overfit[(2.5, 0.0)].tier == OverfitTier.POOR

    def test_worms_never_follow(self):
        """Worms appear as gear A only."""
        result = enumerate_gear_couplings(GearCouplingInputs(gears=["1(1L)", 8]))

        assert [(r.gear_a, r.gear_b) for r in result.rows] == [("1(1L)", 8), (8, 8)]
        assert result.rows[0].ratio == pytest.approx(1 / 8)

    def test_sort_order(self):
        """Gear A by sort value (worms by radius), then gear B."""
        result = enumerate_gear_couplings(GearCouplingInputs(gears=[24, "1(2L)", 8, "1(1L)"]))

        pairs = [(r.gear_a, r.gear_b) for r in result.rows]
        assert pairs == [
            ("1(2L)", 8), ("1(2L)", 24),
            ("1(1L)", 8), ("1(1L)", 24),
            (8, 8), (8, 24),
            (24, 8), (24, 24),
        ]

    def test_whole_studs(self):
        inputs = GearCouplingInputs(gears=[8, 16, 24], half_studs=False)

        for row in enumerate_gear_couplings(inputs).rows:
            for p in row.exact + row.overfit + row.underfit:
                assert p.x == int(p.x) and p.y == int(p.y)

    def test_default_selection(self, default_coupling_inputs):
        """Two worms and five gears: 7 drivers x 5 followers."""
        calculator = GearCouplingCalculator(default_coupling_inputs)

        result = calculator.calculate()

        assert len(result.rows) == 35
        assert result.max_overfit == 0.2

    def test_tolerances_respected(self, default_coupling_inputs):
        result = enumerate_gear_couplings(default_coupling_inputs)

        for row in result.rows:
            for p in row.overfit:
                assert 0 < p.delta <= 0.2 + 1e-9
            for p in row.underfit:
                assert -0.1 - 1e-9 <= p.delta < 0
