"""
Helpers to turn calculator results into CSV text and compact,
human-readable console summaries.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, TextIO

from brickcalc.geometry.rounding import format_fixed
from brickcalc.models.outputs import (
    DistanceGrid,
    GearboxResult,
    GearCouplingResult,
    GearCouplingRow,
    LiftarmPosition,
    LiftarmResult,
    MountingPosition,
    ToolState,
)


@dataclass
class Column:
    """A table column: attribute key, header label and optional formatter."""
    key: str
    label: str
    formatter: Optional[Callable[[Any], str]] = None

    def render(self, row: Any) -> Any:
        value = row[self.key] if isinstance(row, dict) else getattr(row, self.key)
        return self.formatter(value) if self.formatter else value


def _fixed(places: int) -> Callable[[Any], str]:
    return lambda value: format_fixed(float(value), places)


def liftarm_columns(half_studs: bool = False) -> list[Column]:
    """Liftarm table columns; stud counts show one decimal with half studs."""
    studs = _fixed(1 if half_studs else 0)
    dec3 = _fixed(3)
    return [
        Column("sx", "Stud.x", dec3),
        Column("sy", "Stud.y", dec3),
        Column("s_num", "Stud # (in A)", studs),
        Column("a_len", "A Length", studs),
        Column("b_len", "B Length", studs),
        Column("c_len", "C Length", dec3),
        Column("tx", "Target.x", dec3),
        Column("ty", "Target.y", dec3),
        Column("ix", "Intersection.x", dec3),
        Column("iy", "Intersection.y", dec3),
        Column("angle_a", "∠A° (to x-axis)", dec3),
        Column("angle_b", "∠B° (to x-axis)", dec3),
        Column("angle_c", "∠C° (to x-axis)", dec3),
        Column("angle_ab", "∠AB° (at I)", dec3),
        Column("angle_ac", "∠AC° (at 0)", dec3),
        Column("angle_bc", "∠BC° (at T)", dec3),
    ]


def format_position(position: MountingPosition, with_distance: bool = True) -> str:
    """Format an offset as "3.0×1.5" or "3.0×1.5 (3.354)"."""
    if not with_distance:
        return position.label
    return f"{position.label} ({format_fixed(position.distance, 3)})"


def format_position_list(positions: list[MountingPosition], with_distance: bool = True) -> str:
    """Join positions with "; ", or "--" when there are none."""
    if not positions:
        return "--"
    return "; ".join(format_position(p, with_distance) for p in positions)


GEAR_COUPLING_COLUMNS = [
    Column("gear_a", "A", str),
    Column("gear_b", "B", str),
    Column("ratio", "Ratio", _fixed(2)),
    Column("center_distance", "Dist", _fixed(3)),
    Column("exact", "Exact", lambda ps: format_position_list(ps, with_distance=False)),
    Column("overfit", "Overfit", format_position_list),
    Column("underfit", "Underfit", format_position_list),
]


def to_csv(rows: Iterable[Any], columns: list[Column]) -> str:
    """
    Serialise rows as CSV: a header row of column labels, then one line
    per row. Fields containing a comma are quoted. No rows gives "".

    Args:
        rows: Models, objects or dicts exposing the column keys
        columns: Columns to write, in order
    """
    rows = list(rows)
    if not rows:
        return ""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow([col.label for col in columns])
    for row in rows:
        writer.writerow([col.render(row) for col in columns])
    return buffer.getvalue().rstrip("\n")


# ==================== Console summaries ====================

def _fmt_value(value: Optional[float], places: int = 3) -> str:
    """Format an optional float, "--" when absent."""
    if value is None:
        return "--"
    return format_fixed(value, places)


def print_liftarm_summary(result: LiftarmResult, max_rows: int = 10, file: TextIO | None = None) -> None:
    """Print counts and the first positions of a liftarm search."""
    print(
        f"Liftarm positions: {len(result.positions)} "
        f"(raw {result.raw_count}, targets searched {result.targets_searched})",
        file=file,
    )
    for p in result.positions[:max_rows]:
        print(
            f"  S=({_fmt_value(p.sx)}, {_fmt_value(p.sy)}) "
            f"A={p.a_len:g} B={p.b_len:g} stud {p.s_num:g} "
            f"T=({_fmt_value(p.tx)}, {_fmt_value(p.ty)}) "
            f"∠AB {_fmt_value(p.angle_ab, 1)}°",
            file=file,
        )
    if len(result.positions) > max_rows:
        print(f"  ... {len(result.positions) - max_rows} more", file=file)


def _coupling_line(row: GearCouplingRow) -> str:
    return (
        f"  {row.gear_a}:{row.gear_b} ratio {format_fixed(row.ratio, 2)} "
        f"dist {format_fixed(row.center_distance, 3)} "
        f"({format_fixed(row.center_distance_mm, 1)} mm) | "
        f"exact {format_position_list(row.exact, with_distance=False)}"
    )


def print_coupling_summary(result: GearCouplingResult, file: TextIO | None = None) -> None:
    """Print one line per gear pair with its exact positions."""
    print(
        f"Gear couplings: {len(result.rows)} pairs "
        f"(max overfit {result.max_overfit}, max underfit {result.max_underfit})",
        file=file,
    )
    for row in result.rows:
        print(_coupling_line(row), file=file)


def format_distance_grid(grid: DistanceGrid) -> str:
    """
    Render the grid as text: column header, then one row per y.
    Highlighted cells are marked with '*'.
    """
    places = 1 if grid.step < 1 else 0
    width = 8
    lines = [" " * width + "".join(format_fixed(x, places).rjust(width) for x in grid.columns)]
    for y, row in zip(grid.rows, grid.cells):
        cells = []
        for cell in row:
            text = format_fixed(cell.distance, 3) + ("*" if cell.highlighted else "")
            cells.append(text.rjust(width))
        lines.append(format_fixed(y, places).rjust(width) + "".join(cells))
    return "\n".join(lines)


def print_gearbox_summary(result: GearboxResult, file: TextIO | None = None) -> None:
    """
    Print a per-mode table of axle speed/torque followed by tool problems.

    Args:
        result: Gearbox computation result
        file: Stream to print to (stdout by default)
    """
    print(f"Gearbox: {result.name} | Modes: {result.mode_count}", file=file)

    for mode_result in result.modes:
        settled = "" if mode_result.converged else " (did not settle)"
        print(f"\n[Mode {mode_result.mode}] sweeps {mode_result.sweeps}{settled}", file=file)
        for axle_id, axle_name in sorted(result.axle_names.items()):
            reading = mode_result.axles.get(axle_id)
            if reading is None:
                print(f"  {axle_name}: --", file=file)
                continue
            print(
                f"  {axle_name}: speed {_fmt_value(reading.speed)} "
                f"torque {_fmt_value(reading.torque)} (from {reading.produced_by})",
                file=file,
            )
        for tool_id, status in mode_result.statuses.items():
            if status.state == ToolState.OK:
                continue
            marker = "!" if status.state == ToolState.ERROR else "?"
            print(f"  {marker} {tool_id}: {status.message}", file=file)


def liftarm_rows_to_csv(positions: list[LiftarmPosition], half_studs: bool = False) -> str:
    """CSV of liftarm positions with the standard columns."""
    return to_csv(positions, liftarm_columns(half_studs))


def coupling_rows_to_csv(rows: list[GearCouplingRow]) -> str:
    """CSV of gear coupling rows with the standard columns."""
    return to_csv(rows, GEAR_COUPLING_COLUMNS)
