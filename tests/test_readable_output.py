"""
Tests for CSV serialisation and console summaries.
"""

from brickcalc.cli.readable_output import (
    Column,
    coupling_rows_to_csv,
    format_distance_grid,
    format_position_list,
    liftarm_rows_to_csv,
    print_gearbox_summary,
    to_csv,
)
from brickcalc.distances.grid import compute_distance_grid
from brickcalc.gears.couplings import enumerate_gear_couplings
from brickcalc.liftarms.enumerator import enumerate_liftarms
from brickcalc.models.inputs import DistanceInputs, GearCouplingInputs


class TestToCsv:
    """Tests for to_csv."""

    def test_header_and_rows(self):
        columns = [Column("name", "Name"), Column("value", "Value")]

        text = to_csv([{"name": "a", "value": 1}, {"name": "b", "value": 2}], columns)

        assert text == "Name,Value\na,1\nb,2"

    def test_comma_fields_quoted(self):
        columns = [Column("name", "Name"), Column("value", "Value")]

        text = to_csv([{"name": "x,y", "value": 1}], columns)

        assert text.splitlines()[1] == '"x,y",1'

    def test_formatter_applied(self):
        columns = [Column("value", "Value", lambda v: f"{v:.2f}")]

        assert to_csv([{"value": 1}], columns) == "Value\n1.00"

    def test_empty(self):
        assert to_csv([], [Column("a", "A")]) == ""


class TestTables:
    """Tests for the standard liftarm and coupling tables."""

    def test_liftarm_csv(self, small_liftarm_inputs):
        positions = enumerate_liftarms(small_liftarm_inputs).positions

        lines = liftarm_rows_to_csv(positions).splitlines()

        assert lines[0].startswith("Stud.x,Stud.y,Stud # (in A),A Length,B Length")
        assert len(lines) == len(positions) + 1
        assert len(lines[1].split(",")) == 16

    def test_coupling_csv(self):
        rows = enumerate_gear_couplings(GearCouplingInputs(gears=[16])).rows

        lines = coupling_rows_to_csv(rows).splitlines()

        assert lines[0] == "A,B,Ratio,Dist,Exact,Overfit,Underfit"
        assert lines[1].startswith("16,16,1.00,2.000,2.0×0.0,")

    def test_empty_position_list(self):
        assert format_position_list([]) == "--"


class TestSummaries:
    """Tests for console output."""

    def test_gearbox_summary(self, example_gearbox, capsys):
        print_gearbox_summary(example_gearbox.result)

        out = capsys.readouterr().out
        assert "Two-speed box" in out
        assert "[Mode 1]" in out
        assert "[Mode 2]" in out
        assert "Axle 4: speed -0.333" in out

    def test_gearbox_summary_lists_problems(self, gearbox, capsys):
        gearbox.add_tool("coupling")

        print_gearbox_summary(gearbox.result)

        assert "? tool_1: No input" in capsys.readouterr().out

    def test_distance_grid_text(self):
        grid = compute_distance_grid(DistanceInputs(x=0, y=0, min_highlight=1, max_highlight=1))

        lines = format_distance_grid(grid).splitlines()

        assert len(lines) == 12
        assert "1.000*" in lines[5]
