"""
Pydantic models for calculator inputs and outputs.
"""

from brickcalc.models.inputs import (
    LiftarmInputs,
    LiftarmPreset,
    GearCouplingInputs,
    DistanceInputs,
    ToolKind,
    SelectorMode,
    AxleDocument,
    ToolDocument,
    GearboxDocument,
)
from brickcalc.models.outputs import (
    LiftarmPosition,
    LiftarmResult,
    FitClass,
    OverfitTier,
    MountingPosition,
    GearCouplingRow,
    GearCouplingResult,
    DistanceCell,
    DistanceGrid,
    ToolState,
    AxleReading,
    ToolStatusReport,
    ModeResult,
    AxleSeriesPoint,
    GearboxResult,
)

__all__ = [
    "LiftarmInputs",
    "LiftarmPreset",
    "GearCouplingInputs",
    "DistanceInputs",
    "ToolKind",
    "SelectorMode",
    "AxleDocument",
    "ToolDocument",
    "GearboxDocument",
    "LiftarmPosition",
    "LiftarmResult",
    "FitClass",
    "OverfitTier",
    "MountingPosition",
    "GearCouplingRow",
    "GearCouplingResult",
    "DistanceCell",
    "DistanceGrid",
    "ToolState",
    "AxleReading",
    "ToolStatusReport",
    "ModeResult",
    "AxleSeriesPoint",
    "GearboxResult",
]
