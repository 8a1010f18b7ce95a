"""
Two-liftarm position enumeration.
"""

from brickcalc.liftarms.enumerator import (
    LiftarmEnumerator,
    RawPosition,
    remove_larger_pairs,
    apply_preset,
    enumerate_liftarms,
)

__all__ = [
    "LiftarmEnumerator",
    "RawPosition",
    "remove_larger_pairs",
    "apply_preset",
    "enumerate_liftarms",
]
