"""
Output models for the Technic calculators.

These models define the flat records returned by the enumerators and
the per-mode results of the gearbox engine. They are suitable for
tabular display, JSON responses and CSV export.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


class LiftarmPosition(BaseModel):
    """
    One reachable stud position S on liftarm A.

    Coordinates and lengths are in studs (3 decimals), angles in
    degrees (1 decimal).
    """
    sx: float = Field(..., description="Stud position x")
    sy: float = Field(..., description="Stud position y")
    s_num: float = Field(..., description="Stud index along liftarm A")
    a_len: float = Field(..., description="Liftarm A length")
    b_len: float = Field(..., description="Liftarm B length")
    c_len: float = Field(..., description="Distance from origin to target (virtual side C)")
    tx: float = Field(..., description="Target x")
    ty: float = Field(..., description="Target y")
    ix: float = Field(..., description="Intersection x")
    iy: float = Field(..., description="Intersection y")
    angle_a: float = Field(..., description="Direction of A relative to the x axis")
    angle_b: float = Field(..., description="Direction of B (I to T) relative to the x axis")
    angle_c: float = Field(..., description="Direction of C (origin to T) relative to the x axis")
    angle_ab: float = Field(..., description="Interior angle at I")
    angle_ac: float = Field(..., description="Interior angle at the origin")
    angle_bc: float = Field(..., description="Interior angle at T")


class LiftarmResult(BaseModel):
    """Complete output of a liftarm enumeration."""
    positions: list[LiftarmPosition] = Field(default_factory=list)
    raw_count: int = Field(..., ge=0, description="Rows found before duplicate removal")
    targets_searched: int = Field(..., ge=0, description="Target points evaluated")


class FitClass(str, Enum):
    """How a mounting offset compares to the ideal center distance."""
    EXACT = "exact"
    OVERFIT = "overfit"
    UNDERFIT = "underfit"


class OverfitTier(str, Enum):
    """Presentation tier for overfit offsets."""
    GOOD = "good"
    MARGINAL = "marginal"
    POOR = "poor"


class MountingPosition(BaseModel):
    """An axle offset (x, y) in studs and its fit against the ideal distance."""
    x: float
    y: float
    distance: float = Field(..., description="Actual center distance in studs")
    fit: FitClass
    delta: float = Field(..., description="distance - ideal distance")
    tier: Optional[OverfitTier] = Field(default=None, description="Only set for overfit")

    @property
    def label(self) -> str:
        return f"{self.x:.1f}×{self.y:.1f}"


class GearCouplingRow(BaseModel):
    """All mounting positions for one driver/follower pair."""
    gear_a: Union[int, str] = Field(..., description="Driver gear (teeth or worm id)")
    gear_b: int = Field(..., description="Follower gear teeth")
    ratio: float = Field(..., description="Driver teeth / follower teeth")
    center_distance: float = Field(..., description="Ideal center distance in studs")
    center_distance_mm: float = Field(..., description="Ideal center distance in mm")
    exact: list[MountingPosition] = Field(default_factory=list)
    overfit: list[MountingPosition] = Field(default_factory=list)
    underfit: list[MountingPosition] = Field(default_factory=list)


class GearCouplingResult(BaseModel):
    """Complete output of a gear coupling enumeration."""
    rows: list[GearCouplingRow] = Field(default_factory=list)
    max_overfit: float
    max_underfit: float


class DistanceCell(BaseModel):
    """One cell of the planar distance grid."""
    x: float
    y: float
    distance: float = Field(..., description="Distance to the target, 3 decimals")
    on_axis_x: bool = Field(default=False, description="Cell lies on x = 0")
    on_axis_y: bool = Field(default=False, description="Cell lies on y = 0")
    highlighted: bool = Field(default=False)


class DistanceGrid(BaseModel):
    """Distances from every grid point around the target."""
    target_x: float
    target_y: float
    center_x: float
    center_y: float
    step: float
    columns: list[float] = Field(..., description="Column x coordinates, left to right")
    rows: list[float] = Field(..., description="Row y coordinates, top to bottom")
    cells: list[list[DistanceCell]] = Field(..., description="cells[row][column]")


class ToolState(str, Enum):
    """Per-mode status of a gearbox tool."""
    OK = "ok"
    FLAGGED = "flagged"
    ERROR = "error"


class AxleReading(BaseModel):
    """Speed and torque of an axle in one mode."""
    speed: float
    torque: float
    produced_by: str = Field(..., description="Id of the tool that wrote the value")


class ToolStatusReport(BaseModel):
    """Status of a tool in one mode."""
    state: ToolState
    message: Optional[str] = Field(default=None, description="Error text or flag reason")


class ModeResult(BaseModel):
    """Result of propagating one mode."""
    mode: int = Field(..., ge=1, le=9)
    axles: dict[int, AxleReading] = Field(default_factory=dict)
    statuses: dict[str, ToolStatusReport] = Field(default_factory=dict)
    sweeps: int = Field(..., ge=0, description="Sweeps performed")
    converged: bool = Field(..., description="False when the sweep cap was reached")

    @property
    def errors(self) -> dict[str, str]:
        """Tool id -> error message for tools in error."""
        return {
            tool_id: status.message or ""
            for tool_id, status in self.statuses.items()
            if status.state == ToolState.ERROR
        }


class AxleSeriesPoint(BaseModel):
    """An axle's value in one mode; None when the axle has no value."""
    mode: int
    speed: Optional[float] = None
    torque: Optional[float] = None


class GearboxResult(BaseModel):
    """
    Complete output of a gearbox computation: one ModeResult per mode.
    """
    name: str = Field(default="Gearbox")
    mode_count: int = Field(..., ge=1, le=9)
    axle_names: dict[int, str] = Field(default_factory=dict)
    modes: list[ModeResult] = Field(default_factory=list)

    def mode(self, mode: int) -> ModeResult:
        """Result for a 1-based mode number."""
        if not 1 <= mode <= len(self.modes):
            raise ValueError(f"Mode must be between 1 and {len(self.modes)}, got {mode}")
        return self.modes[mode - 1]

    def axle_series(self, axle_id: int) -> list[AxleSeriesPoint]:
        """Speed/torque of one axle across all modes."""
        series = []
        for mode_result in self.modes:
            reading = mode_result.axles.get(axle_id)
            if reading is None:
                series.append(AxleSeriesPoint(mode=mode_result.mode))
            else:
                series.append(AxleSeriesPoint(
                    mode=mode_result.mode,
                    speed=reading.speed,
                    torque=reading.torque,
                ))
        return series

    @property
    def has_errors(self) -> bool:
        return any(m.errors for m in self.modes)
