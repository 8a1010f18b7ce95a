"""
Fixed-decimal rounding and tolerant float comparisons.

Results are rounded the same way fixed-point formatting rounds them:
half away from zero on the exact binary value of the float, so 2.675
becomes 2.67 (its binary value is slightly below 2.675) and 0.125
becomes 0.13. Negative zero is normalised to 0.
"""

from decimal import ROUND_HALF_UP, Decimal

TOLERANCE = 1e-6


def round_fixed(value: float, places: int) -> float:
    """
    Round a float to a fixed number of decimals.

    Args:
        value: Value to round
        places: Number of decimals to keep

    Returns:
        Rounded value, never -0.0
    """
    quantum = Decimal(1).scaleb(-places)
    rounded = float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
    if rounded == 0:
        return 0.0
    return rounded


def format_fixed(value: float, places: int) -> str:
    """Format a float with a fixed number of decimals (no '-0.000')."""
    return f"{round_fixed(value, places):.{places}f}"


def eq(a: float, b: float) -> bool:
    """Tolerant equality: |a - b| < TOLERANCE."""
    return abs(a - b) < TOLERANCE


def gte(a: float, b: float) -> bool:
    """Tolerant a >= b."""
    return a >= b - TOLERANCE


def lte(a: float, b: float) -> bool:
    """Tolerant a <= b."""
    return a <= b + TOLERANCE
