"""
Command-line interface for the Technic calculators.

Usage:
    python -m brickcalc liftarms [--max-a 4 --max-b 4 --half-studs --preset right-angle --csv]
    python -m brickcalc gear-couplings [--gears 8,16,24,1(1L) --custom 56 --csv]
    python -m brickcalc distances --x 3.5 --y 2 [--half-studs]
    python -m brickcalc make-example [--output example_gearbox.json]
    python -m brickcalc gearbox --input example_gearbox.json [--output result.json]
    python -m brickcalc serve [--port 8000]
"""

import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from brickcalc import __version__
from brickcalc.cli.readable_output import (
    coupling_rows_to_csv,
    format_distance_grid,
    liftarm_rows_to_csv,
    print_coupling_summary,
    print_gearbox_summary,
    print_liftarm_summary,
)
from brickcalc.distances.grid import compute_distance_grid
from brickcalc.gearbox.model import Gearbox
from brickcalc.gears.catalog import DEFAULT_SELECTION, parse_gear_list
from brickcalc.gears.couplings import enumerate_gear_couplings
from brickcalc.liftarms.enumerator import apply_preset, enumerate_liftarms
from brickcalc.models.inputs import (
    DistanceInputs,
    GearboxDocument,
    GearCouplingInputs,
    LiftarmInputs,
    LiftarmPreset,
)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="brickcalc",
        description="Technic Brick calculators - liftarm geometry, gear couplings, "
                    "planar distances and gearbox speed/torque propagation.",
    )
    parser.add_argument("--version", action="version", version=f"brickcalc {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # liftarms command
    liftarm_parser = subparsers.add_parser(
        "liftarms",
        help="Enumerate stud positions reachable with two pinned liftarms",
    )
    liftarm_parser.add_argument("--min-a", type=float, default=1, help="Minimum length of A (default: 1)")
    liftarm_parser.add_argument("--max-a", type=float, default=4, help="Maximum length of A (default: 4)")
    liftarm_parser.add_argument("--min-b", type=float, default=1, help="Minimum length of B (default: 1)")
    liftarm_parser.add_argument("--max-b", type=float, default=4, help="Maximum length of B (default: 4)")
    liftarm_parser.add_argument(
        "--half-studs",
        action="store_true",
        help="Search half-stud lengths and positions",
    )
    liftarm_parser.add_argument(
        "--keep-larger",
        action="store_true",
        help="Keep rows whose A+B is larger than the smallest for the same stud",
    )
    liftarm_parser.add_argument(
        "--keep-y-greater-x",
        action="store_true",
        help="Keep intersections above the diagonal (y > x)",
    )
    liftarm_parser.add_argument("--min-decimal", type=float, default=0, help="Minimum stud decimal (default: 0)")
    liftarm_parser.add_argument("--max-decimal", type=float, default=1, help="Maximum stud decimal (default: 1)")
    liftarm_parser.add_argument(
        "--complementary",
        action="store_true",
        help="Also accept decimals in the complementary range [1-max, 1-min]",
    )
    liftarm_parser.add_argument(
        "--preset",
        choices=[p.value for p in LiftarmPreset],
        default=LiftarmPreset.ALL.value,
        help="Row filter preset (default: all)",
    )
    _add_output_arguments(liftarm_parser)

    # gear-couplings command
    gears_parser = subparsers.add_parser(
        "gear-couplings",
        help="Find mounting offsets for gear pairs",
    )
    gears_parser.add_argument(
        "--gears",
        default=",".join(str(g) for g in DEFAULT_SELECTION),
        help="Comma-separated gears, e.g. '8,16,24,1(1L)' (default: both worms and 8-24)",
    )
    gears_parser.add_argument(
        "--custom",
        default="",
        help="Extra comma-separated teeth counts",
    )
    gears_parser.add_argument("--max-overfit", type=float, default=0.2, help="Max overfit in studs (default: 0.2)")
    gears_parser.add_argument("--max-underfit", type=float, default=0.1, help="Max underfit in studs (default: 0.1)")
    gears_parser.add_argument(
        "--whole-studs",
        action="store_true",
        help="Search whole-stud offsets only",
    )
    _add_output_arguments(gears_parser)

    # distances command
    dist_parser = subparsers.add_parser(
        "distances",
        help="Print distances from grid points around a target",
    )
    dist_parser.add_argument("--x", type=float, required=True, help="Target x in studs")
    dist_parser.add_argument("--y", type=float, required=True, help="Target y in studs")
    dist_parser.add_argument("--half-studs", action="store_true", help="Use a half-stud grid")
    dist_parser.add_argument("--min-highlight", type=float, default=0.0, help="Lowest highlighted distance")
    dist_parser.add_argument("--max-highlight", type=float, default=0.0, help="Highest highlighted distance")

    # make-example command
    example_parser = subparsers.add_parser(
        "make-example",
        help="Generate an example gearbox JSON file",
    )
    example_parser.add_argument(
        "--output", "-o",
        type=Path,
        default=Path("example_gearbox.json"),
        help="Output path for example file (default: example_gearbox.json)",
    )

    # gearbox command
    gearbox_parser = subparsers.add_parser(
        "gearbox",
        help="Compute speed and torque of every axle in every mode",
    )
    gearbox_parser.add_argument(
        "--input", "-i",
        type=Path,
        required=True,
        help="Path to JSON gearbox description",
    )
    gearbox_parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Path to save JSON output (prints to stdout if not specified)",
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Start the FastAPI web server",
    )
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port", "-p",
        type=int,
        default=8000,
        help="Port to listen on (default: 8000)",
    )
    serve_parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )

    return parser


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--csv",
        action="store_true",
        help="Write CSV instead of JSON",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Path to save output (prints to stdout if not specified)",
    )


def _write_output(text: str, output: Path | None) -> None:
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text)
        print(f"\nResults saved to {output}", file=sys.stderr)
    else:
        print(text)


def cmd_liftarms(args: argparse.Namespace) -> int:
    """Enumerate liftarm positions."""
    try:
        inputs = LiftarmInputs(
            min_a=args.min_a,
            max_a=args.max_a,
            min_b=args.min_b,
            max_b=args.max_b,
            half_studs=args.half_studs,
            remove_larger=not args.keep_larger,
            remove_y_greater_x=not args.keep_y_greater_x,
            min_decimal=args.min_decimal,
            max_decimal=args.max_decimal,
            include_complementary_decimal=args.complementary,
        )

        print("\nLiftarm positions", file=sys.stderr)
        print(f"A: {inputs.min_a:g}-{inputs.max_a:g} | B: {inputs.min_b:g}-{inputs.max_b:g} | "
              f"step {inputs.step:g}", file=sys.stderr)
        print("Searching...", file=sys.stderr)

        result = enumerate_liftarms(inputs)
        result.positions = apply_preset(result.positions, LiftarmPreset(args.preset))

        if args.csv:
            _write_output(liftarm_rows_to_csv(result.positions, inputs.half_studs), args.output)
        else:
            _write_output(result.model_dump_json(indent=2), args.output)

        print_liftarm_summary(result, max_rows=5, file=sys.stderr)
        return 0

    except ValidationError as e:
        print(f"Validation Error: {e}", file=sys.stderr)
        return 1
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_gear_couplings(args: argparse.Namespace) -> int:
    """Enumerate gear couplings."""
    try:
        gears = parse_gear_list(args.gears) + parse_gear_list(args.custom)
        inputs = GearCouplingInputs(
            gears=gears,
            max_overfit=args.max_overfit,
            max_underfit=args.max_underfit,
            half_studs=not args.whole_studs,
        )

        result = enumerate_gear_couplings(inputs)

        if args.csv:
            _write_output(coupling_rows_to_csv(result.rows), args.output)
        else:
            _write_output(result.model_dump_json(indent=2), args.output)

        print(file=sys.stderr)
        print_coupling_summary(result, file=sys.stderr)
        return 0

    except ValidationError as e:
        print(f"Validation Error: {e}", file=sys.stderr)
        return 1
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_distances(args: argparse.Namespace) -> int:
    """Print the planar distance grid."""
    try:
        inputs = DistanceInputs(
            x=args.x,
            y=args.y,
            half_studs=args.half_studs,
            min_highlight=args.min_highlight,
            max_highlight=args.max_highlight,
        )
    except ValidationError as e:
        print(f"Validation Error: {e}", file=sys.stderr)
        return 1

    grid = compute_distance_grid(inputs)
    print(format_distance_grid(grid))
    return 0


def cmd_make_example(args: argparse.Namespace) -> int:
    """Generate an example gearbox JSON file."""
    example = GearboxDocument.example()

    output_json = example.model_dump_json(indent=2)

    with open(args.output, "w", encoding="utf-8") as f:
        f.write(output_json)

    print(f"Created example gearbox file: {args.output}")
    print("\nCompute it with:")
    print(f"  python -m brickcalc gearbox --input {args.output}")

    return 0


def cmd_gearbox(args: argparse.Namespace) -> int:
    """Compute a gearbox described in a JSON file."""
    try:
        # Load input
        with open(args.input, encoding="utf-8") as f:
            input_data = json.load(f)

        # Parse and validate
        doc = GearboxDocument(**input_data)

        print("\nGearbox propagation", file=sys.stderr)
        print(f"Gearbox: {doc.name} | Modes: {doc.mode_count} | Tools: {len(doc.tools)}", file=sys.stderr)

        box = Gearbox.from_document(doc)
        result = box.result

        _write_output(result.model_dump_json(indent=2), args.output)

        print(file=sys.stderr)
        print_gearbox_summary(result, file=sys.stderr)
        return 0

    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {args.input}: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Validation Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the FastAPI web server."""
    import uvicorn

    print("\nStarting Technic Calculators API", file=sys.stderr)
    print(f"API: http://{args.host}:{args.port}/", file=sys.stderr)
    print(f"Docs: http://{args.host}:{args.port}/docs", file=sys.stderr)
    print("\nPress Ctrl+C to stop\n", file=sys.stderr)

    uvicorn.run(
        "brickcalc.api.server:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )
    return 0


def cli(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "liftarms": cmd_liftarms,
        "gear-couplings": cmd_gear_couplings,
        "distances": cmd_distances,
        "make-example": cmd_make_example,
        "gearbox": cmd_gearbox,
        "serve": cmd_serve,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


def main():
    """Console script entrypoint wrapper."""
    return cli()


if __name__ == "__main__":
    sys.exit(cli())
