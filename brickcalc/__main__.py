"""
Entry point for running brickcalc as a module.

Usage:
    python -m brickcalc liftarms --max-a 4 --max-b 4
    python -m brickcalc gearbox --input example_gearbox.json
    python -m brickcalc serve --port 8000
"""

import sys

from brickcalc.cli.main import cli

if __name__ == "__main__":
    sys.exit(cli())
