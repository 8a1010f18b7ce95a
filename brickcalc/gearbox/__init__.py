"""
Gearbox graph and speed/torque propagation.
"""

from brickcalc.gearbox.model import (
    Axle,
    Connection,
    Tool,
    SourceTool,
    CouplingTool,
    SelectorTool,
    DifferentialTool,
    ToolOk,
    ToolFlagged,
    ToolError,
    ToolStatus,
    Gearbox,
    SOURCE_ID,
    NEW_AXLE,
)
from brickcalc.gearbox.engine import (
    AxleValue,
    Evaluation,
    GearboxEngine,
    propagate,
)

__all__ = [
    "Axle",
    "Connection",
    "Tool",
    "SourceTool",
    "CouplingTool",
    "SelectorTool",
    "DifferentialTool",
    "ToolOk",
    "ToolFlagged",
    "ToolError",
    "ToolStatus",
    "Gearbox",
    "SOURCE_ID",
    "NEW_AXLE",
    "AxleValue",
    "Evaluation",
    "GearboxEngine",
    "propagate",
]
