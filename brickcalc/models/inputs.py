"""
Input models for the Technic calculators.

These models carry the parameters a caller (CLI, API, UI) supplies to the
enumerators and the gearbox engine. Range checks live here, on the caller
side; the engines themselves do not re-validate.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class LiftarmPreset(str, Enum):
    """Named row filters for liftarm results."""
    ALL = "all"
    HYPOTENUSES = "hypotenuses"
    CATHETI = "catheti"
    RIGHT_ANGLE = "right-angle"


class LiftarmInputs(BaseModel):
    """
    Parameters for the two-liftarm position search.

    Liftarm A starts at the origin, liftarm B ends at the target point T,
    and both meet at the intersection point I. Lengths are in studs.
    """
    min_a: float = Field(default=1, ge=1, le=15, description="Minimum length of liftarm A")
    max_a: float = Field(default=4, ge=1, le=15, description="Maximum length of liftarm A")
    min_b: float = Field(default=1, ge=0, le=15, description="Minimum length of liftarm B")
    max_b: float = Field(default=4, ge=0, le=15, description="Maximum length of liftarm B")
    half_studs: bool = Field(default=False, description="Step lengths and targets by half studs")
    remove_larger: bool = Field(
        default=True,
        description="Keep only the shortest liftarm pair reaching each stud position",
    )
    remove_y_greater_x: bool = Field(
        default=True,
        description="Drop intersections above the x = y diagonal (mirror duplicates)",
    )
    min_decimal: float = Field(default=0.0, ge=0, le=1, description="Minimum decimal part of Sx/Sy")
    max_decimal: float = Field(default=1.0, ge=0, le=1, description="Maximum decimal part of Sx/Sy")
    include_complementary_decimal: bool = Field(
        default=False,
        description="Also accept decimal parts in [1 - max_decimal, 1 - min_decimal]",
    )

    @model_validator(mode="after")
    def check_ranges(self) -> "LiftarmInputs":
        """Ensure every min is not above its max."""
        if self.min_a > self.max_a:
            raise ValueError("min_a must be <= max_a")
        if self.min_b > self.max_b:
            raise ValueError("min_b must be <= max_b")
        if self.min_decimal > self.max_decimal:
            raise ValueError("min_decimal must be <= max_decimal")
        return self

    @property
    def step(self) -> float:
        """Search step in studs."""
        return 0.5 if self.half_studs else 1.0

    model_config = {
        "json_schema_extra": {
            "example": {
                "min_a": 1,
                "max_a": 4,
                "min_b": 1,
                "max_b": 4,
                "half_studs": False,
                "remove_larger": True,
                "remove_y_greater_x": True,
                "min_decimal": 0.0,
                "max_decimal": 1.0,
                "include_complementary_decimal": False,
            }
        }
    }


GearId = Union[int, str]


class GearCouplingInputs(BaseModel):
    """
    Parameters for the gear coupling enumeration.

    Gears are given by teeth count, or by the worm identifiers "1(1L)"
    and "1(2L)". Tolerances are in studs.
    """
    gears: list[GearId] = Field(
        default_factory=lambda: ["1(1L)", "1(2L)", 8, 12, 16, 20, 24],
        min_length=1,
        description="Gears to pair with each other (teeth count or worm id)",
    )
    max_overfit: float = Field(default=0.2, ge=0, le=1, description="Largest accepted overfit")
    max_underfit: float = Field(default=0.1, ge=0, le=1, description="Largest accepted underfit")
    half_studs: bool = Field(default=True, description="Search offsets on a half-stud grid")

    @field_validator("gears")
    @classmethod
    def validate_gears(cls, v: list[GearId]) -> list[GearId]:
        """Normalise gear ids and drop duplicates, keeping order."""
        from brickcalc.gears.catalog import parse_gear

        seen: list[GearId] = []
        for raw in v:
            gear_id = parse_gear(raw).gear_id
            if gear_id not in seen:
                seen.append(gear_id)
        return seen

    @property
    def step(self) -> float:
        """Offset grid step in studs."""
        return 0.5 if self.half_studs else 1.0


class DistanceInputs(BaseModel):
    """Parameters for the planar distance grid."""
    x: float = Field(default=0.0, ge=-100, le=100, description="Target x in studs")
    y: float = Field(default=0.0, ge=-100, le=100, description="Target y in studs")
    half_studs: bool = Field(default=False, description="Use a half-stud grid")
    min_highlight: float = Field(default=0.0, description="Lower bound of highlighted distances")
    max_highlight: float = Field(default=0.0, description="Upper bound of highlighted distances")


class ToolKind(str, Enum):
    """Gearbox tool variants."""
    SOURCE = "source"
    COUPLING = "coupling"
    SELECTOR = "selector"
    DIFFERENTIAL = "differential"


class SelectorMode(str, Enum):
    """Per-mode selector position."""
    A = "A"
    LOCKED = "Locked"
    B = "B"


class AxleDocument(BaseModel):
    """An axle in a serialised gearbox."""
    id: int = Field(..., ge=1, description="Stable axle id")
    name: str = Field(..., description="Display name")


class ToolDocument(BaseModel):
    """A tool in a serialised gearbox."""
    id: str = Field(..., description="Tool id ('source' for the source tool)")
    kind: ToolKind = Field(..., description="Tool type")
    connections: dict[str, Optional[int]] = Field(
        default_factory=dict,
        description="Connection name -> axle id (null = disconnected)",
    )
    params: dict[str, Union[bool, int, str]] = Field(
        default_factory=dict,
        description="Type-specific parameters (teeth_a, teeth_b, invert_direction, mode1..)",
    )


class GearboxDocument(BaseModel):
    """
    JSON description of a gearbox graph.

    The source tool may be omitted; it is then created and connected
    to axle 1.
    """
    name: str = Field(default="Gearbox", description="Gearbox name")
    mode_count: int = Field(default=3, ge=1, le=9, description="Number of operating modes")
    axles: list[AxleDocument] = Field(default_factory=list)
    tools: list[ToolDocument] = Field(default_factory=list)

    @field_validator("tools")
    @classmethod
    def validate_unique_ids(cls, v: list[ToolDocument]) -> list[ToolDocument]:
        """Tool ids must be unique."""
        ids = [t.id for t in v]
        if len(ids) != len(set(ids)):
            raise ValueError("tool ids must be unique")
        return v

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Two-speed box",
                "mode_count": 2,
                "axles": [
                    {"id": 1, "name": "Axle 1"},
                    {"id": 2, "name": "Axle 2"},
                    {"id": 3, "name": "Axle 3"},
                    {"id": 4, "name": "Axle 4"},
                ],
                "tools": [
                    {"id": "source", "kind": "source", "connections": {"Output": 1}},
                    {
                        "id": "tool_1",
                        "kind": "coupling",
                        "connections": {"Gear A": 1, "Gear B": 2},
                        "params": {"teeth_a": 8, "teeth_b": 24, "invert_direction": True},
                    },
                    {
                        "id": "tool_2",
                        "kind": "coupling",
                        "connections": {"Gear A": 1, "Gear B": 3},
                        "params": {"teeth_a": 16, "teeth_b": 16, "invert_direction": True},
                    },
                    {
                        "id": "tool_3",
                        "kind": "selector",
                        "connections": {"Center": 4, "A": 2, "B": 3},
                        "params": {"mode1": "A", "mode2": "B"},
                    },
                ],
            }
        }
    }

    @classmethod
    def example(cls) -> "GearboxDocument":
        """The documented two-speed example."""
        return cls(**cls.model_config["json_schema_extra"]["example"])
