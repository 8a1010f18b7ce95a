"""
Gearbox graph: axles, tools and their connections.

A gearbox is a graph of tools (source, couplings, selectors,
differentials) whose connections are bound to shared axles. The graph is
owned by a Gearbox object and mutated only through its methods; the
propagation engine reads it and writes nothing back except the tools'
per-mode status records.

TERMINOLOGY:
- "mode" is an operating configuration of the whole gearbox (gear 1,
  gear 2, ...). Only selectors behave differently per mode.
- "gear A" / "gear B" are the two gear pieces of a coupling.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union

from brickcalc.gears.catalog import is_valid_teeth, snap_teeth
from brickcalc.models.inputs import (
    AxleDocument,
    GearboxDocument,
    SelectorMode,
    ToolDocument,
    ToolKind,
)
from brickcalc.models.outputs import ToolState, ToolStatusReport

MIN_MODES = 1
MAX_MODES = 9

SOURCE_ID = "source"
DEFAULT_AXLE_ID = 1

# Request a freshly created axle in set_connection()
NEW_AXLE = "new"


@dataclass
class Axle:
    """A shared rotating shaft. Values live in the engine, not here."""
    id: int
    name: str


@dataclass
class Connection:
    """A port on a tool, optionally bound to an axle."""
    name: str  # Role label, e.g. "Gear A", "Center", "Body"
    tool_id: str
    axle_id: Optional[int] = None

    @property
    def is_connected(self) -> bool:
        return self.axle_id is not None


# ==================== Status ====================

@dataclass(frozen=True)
class ToolOk:
    """The tool wrote its output(s) without conflict."""

    def to_report(self) -> ToolStatusReport:
        return ToolStatusReport(state=ToolState.OK)


@dataclass(frozen=True)
class ToolFlagged:
    """Nothing to do: not enough known inputs, or output disconnected."""
    reason: str = "No input"

    def to_report(self) -> ToolStatusReport:
        return ToolStatusReport(state=ToolState.FLAGGED, message=self.reason)


@dataclass(frozen=True)
class ToolError:
    """Over-constrained: another tool already produces a value here."""
    message: str

    def to_report(self) -> ToolStatusReport:
        return ToolStatusReport(state=ToolState.ERROR, message=self.message)


ToolStatus = Union[ToolOk, ToolFlagged, ToolError]


# ==================== Tools ====================

@dataclass
class Tool:
    """
    Base gearbox tool.

    Connection roles are fixed by the tool kind at construction; only
    axle bindings and parameters change afterwards.
    """
    id: str
    connections: list[Connection] = field(default_factory=list)
    status: dict[int, ToolStatus] = field(default_factory=dict)

    kind: ClassVar[ToolKind]
    CONNECTION_NAMES: ClassVar[tuple[str, ...]] = ()

    def __post_init__(self):
        if not self.connections:
            self.connections = [Connection(name, self.id) for name in self.CONNECTION_NAMES]

    def connection(self, name: str) -> Connection:
        """Look up a connection by role name."""
        for conn in self.connections:
            if conn.name == name:
                return conn
        raise KeyError(f"{self.kind.value} has no connection named {name!r}")

    @property
    def label(self) -> str:
        """Human-readable label used in conflict messages."""
        return f"{self.kind.value.title()} {self.id}"

    def params(self) -> dict[str, Union[bool, int, str]]:
        """Type-specific parameters, as stored in a document."""
        return {}


@dataclass
class SourceTool(Tool):
    """Fixed reference drive: speed 1, torque 1 on its output axle."""
    kind: ClassVar[ToolKind] = ToolKind.SOURCE
    CONNECTION_NAMES: ClassVar[tuple[str, ...]] = ("Output",)

    @property
    def label(self) -> str:
        return "Source"


@dataclass
class CouplingTool(Tool):
    """Two meshing gear pieces on two axles."""
    teeth_a: int = 16
    teeth_b: int = 16
    invert_direction: bool = True

    kind: ClassVar[ToolKind] = ToolKind.COUPLING
    CONNECTION_NAMES: ClassVar[tuple[str, ...]] = ("Gear A", "Gear B")

    def params(self) -> dict[str, Union[bool, int, str]]:
        return {
            "teeth_a": self.teeth_a,
            "teeth_b": self.teeth_b,
            "invert_direction": self.invert_direction,
        }


@dataclass
class SelectorTool(Tool):
    """
    Clutch that joins Center to A or B, or locks all three, per mode.
    """
    modes: dict[int, SelectorMode] = field(default_factory=dict)

    kind: ClassVar[ToolKind] = ToolKind.SELECTOR
    CONNECTION_NAMES: ClassVar[tuple[str, ...]] = ("Center", "A", "B")

    def selection(self, mode: int) -> SelectorMode:
        """Selected side for a mode; unset modes are locked."""
        return self.modes.get(mode, SelectorMode.LOCKED)

    def params(self) -> dict[str, Union[bool, int, str]]:
        return {f"mode{m}": sel.value for m, sel in sorted(self.modes.items())}


@dataclass
class DifferentialTool(Tool):
    """Open differential: body speed is the mean of the two side speeds."""
    kind: ClassVar[ToolKind] = ToolKind.DIFFERENTIAL
    CONNECTION_NAMES: ClassVar[tuple[str, ...]] = ("Body", "A", "B")


TOOL_CLASSES: dict[ToolKind, type[Tool]] = {
    ToolKind.SOURCE: SourceTool,
    ToolKind.COUPLING: CouplingTool,
    ToolKind.SELECTOR: SelectorTool,
    ToolKind.DIFFERENTIAL: DifferentialTool,
}

PARAM_ALIASES = {
    "teethA": "teeth_a",
    "teethB": "teeth_b",
    "invertDirection": "invert_direction",
}


def parse_mode_param(name: str) -> int:
    """Mode number from a selector param name such as "mode2"."""
    if not name.startswith("mode"):
        raise ValueError(f"Unknown selector parameter: {name!r}")
    try:
        mode = int(name[len("mode"):])
    except ValueError:
        raise ValueError(f"Unknown selector parameter: {name!r}")
    if not MIN_MODES <= mode <= MAX_MODES:
        raise ValueError(f"Mode must be between {MIN_MODES} and {MAX_MODES}, got {mode}")
    return mode


# ==================== Gearbox ====================

class Gearbox:
    """
    Owned gearbox graph with its mutation operations.

    The source tool always exists, cannot be removed and starts connected
    to Axle 1. When auto_compute is on, every mutation runs a full fresh
    propagation and stores it in `result`.
    """

    def __init__(self, mode_count: int = 3, name: str = "Gearbox", auto_compute: bool = True):
        """
        Initialize an empty gearbox.

        Args:
            mode_count: Number of operating modes (1-9)
            name: Display name
            auto_compute: Recompute after every mutation
        """
        self._check_mode_count(mode_count)
        self.name = name
        self.mode_count = mode_count
        self.auto_compute = auto_compute
        self.axles: list[Axle] = [Axle(DEFAULT_AXLE_ID, f"Axle {DEFAULT_AXLE_ID}")]
        self.source = SourceTool(SOURCE_ID)
        self.source.connection("Output").axle_id = DEFAULT_AXLE_ID
        self.tools: list[Tool] = [self.source]
        self._next_tool_id = 1
        self._next_axle_id = DEFAULT_AXLE_ID + 1
        self.result = None
        self._changed()

    @staticmethod
    def _check_mode_count(mode_count: int) -> None:
        if not MIN_MODES <= mode_count <= MAX_MODES:
            raise ValueError(f"Mode count must be between {MIN_MODES} and {MAX_MODES}, got {mode_count}")

    # ---------- lookup ----------

    def get_tool(self, tool_id: str) -> Optional[Tool]:
        """Tool by id, or None."""
        for tool in self.tools:
            if tool.id == tool_id:
                return tool
        return None

    def get_axle(self, axle_id: int) -> Optional[Axle]:
        """Axle by id, or None."""
        for axle in self.axles:
            if axle.id == axle_id:
                return axle
        return None

    def tool_label(self, tool_id: str) -> str:
        """Label of a tool id as used in status messages."""
        tool = self.get_tool(tool_id)
        return tool.label if tool is not None else tool_id

    # ---------- mutation ----------

    def add_tool(self, kind: Union[ToolKind, str]) -> Tool:
        """
        Add a tool with its type-default connections and parameters.

        Raises:
            ValueError: For unknown kinds or a second source
        """
        kind = ToolKind(kind)
        if kind == ToolKind.SOURCE:
            raise ValueError("A gearbox has exactly one source")

        tool_id = f"tool_{self._next_tool_id}"
        self._next_tool_id += 1
        tool = TOOL_CLASSES[kind](tool_id)
        if isinstance(tool, SelectorTool):
            for mode in range(1, self.mode_count + 1):
                tool.modes[mode] = SelectorMode.LOCKED

        self.tools.append(tool)
        self._changed()
        return tool

    def remove_tool(self, tool_id: str) -> None:
        """Remove a tool. The source and unknown ids are ignored."""
        if tool_id == SOURCE_ID:
            return
        tool = self.get_tool(tool_id)
        if tool is None:
            return
        self.tools.remove(tool)
        self.cleanup_unused_axles()
        self._changed()

    def set_connection(
        self,
        tool_id: str,
        connection_name: str,
        axle: Union[int, str, None],
    ) -> Optional[int]:
        """
        Bind a connection to an axle.

        Args:
            tool_id: Tool to change
            connection_name: Role name of the connection
            axle: Existing axle id, None to disconnect, or "new" to create
                  a fresh axle

        Returns:
            The bound axle id (None when disconnected or ignored)

        Raises:
            ValueError: If the axle id does not exist
        """
        tool = self.get_tool(tool_id)
        if tool is None:
            return None
        try:
            conn = tool.connection(connection_name)
        except KeyError:
            return None

        if axle == NEW_AXLE:
            axle_id = self._create_axle().id
        elif axle is None:
            axle_id = None
        else:
            axle_id = int(axle)
            if self.get_axle(axle_id) is None:
                raise ValueError(f"Unknown axle: {axle_id}")

        conn.axle_id = axle_id
        self.cleanup_unused_axles()
        self._changed()
        return axle_id

    def set_param(
        self,
        tool_id: str,
        name: str,
        value: Union[bool, int, str],
        snap: bool = True,
    ) -> None:
        """
        Change a tool parameter.

        Coupling teeth counts are snapped to valid Technic values, or
        rejected when `snap` is False.

        Raises:
            ValueError: For parameters the tool kind does not have, values
                        of the wrong type, or invalid teeth with snap=False
        """
        tool = self.get_tool(tool_id)
        if tool is None:
            return
        name = PARAM_ALIASES.get(name, name)

        if isinstance(tool, CouplingTool):
            if name in ("teeth_a", "teeth_b"):
                side = name[-1].upper()
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ValueError(f"{name} must be an integer, got {value!r}")
                if not snap and not is_valid_teeth(value, side):
                    raise ValueError(f"Invalid teeth count for gear {side}: {value}")
                previous = tool.teeth_a if side == "A" else tool.teeth_b
                setattr(tool, name, snap_teeth(value, previous, side=side))
            elif name == "invert_direction":
                if not isinstance(value, bool):
                    raise ValueError(f"invert_direction must be true or false, got {value!r}")
                tool.invert_direction = value
            else:
                raise ValueError(f"Unknown coupling parameter: {name!r}")
        elif isinstance(tool, SelectorTool):
            tool.modes[parse_mode_param(name)] = SelectorMode(value)
        else:
            raise ValueError(f"{tool.kind.value} has no parameters")

        self._changed()

    def set_mode_count(self, mode_count: int) -> None:
        """
        Change the number of modes; selectors default new modes to Locked.
        """
        self._check_mode_count(mode_count)
        self.mode_count = mode_count
        for tool in self.tools:
            if isinstance(tool, SelectorTool):
                for mode in range(1, mode_count + 1):
                    tool.modes.setdefault(mode, SelectorMode.LOCKED)
        self._changed()

    def cleanup_unused_axles(self) -> None:
        """
        Drop axles no connection references. If none remain, the default
        axle is recreated.
        """
        used = {
            conn.axle_id
            for tool in self.tools
            for conn in tool.connections
            if conn.axle_id is not None
        }
        self.axles = [a for a in self.axles if a.id in used]
        if not self.axles:
            self.axles.append(Axle(DEFAULT_AXLE_ID, f"Axle {DEFAULT_AXLE_ID}"))

    def _create_axle(self) -> Axle:
        axle = Axle(self._next_axle_id, f"Axle {self._next_axle_id}")
        self._next_axle_id += 1
        self.axles.append(axle)
        return axle

    def _changed(self) -> None:
        if self.auto_compute:
            self.compute()

    # ---------- computation ----------

    def compute(self):
        """Run a full propagation over all modes and store it in `result`."""
        from brickcalc.gearbox.engine import GearboxEngine

        self.result = GearboxEngine(self).compute()
        return self.result

    # ---------- serialisation ----------

    def to_document(self) -> GearboxDocument:
        """Serialise the graph (not the results)."""
        return GearboxDocument(
            name=self.name,
            mode_count=self.mode_count,
            axles=[AxleDocument(id=a.id, name=a.name) for a in self.axles],
            tools=[
                ToolDocument(
                    id=tool.id,
                    kind=tool.kind,
                    connections={c.name: c.axle_id for c in tool.connections},
                    params=tool.params(),
                )
                for tool in self.tools
            ],
        )

    @classmethod
    def from_document(cls, doc: GearboxDocument, auto_compute: bool = True) -> "Gearbox":
        """
        Build a gearbox from its JSON description.

        Raises:
            ValueError: For unknown connection names, axle ids or params,
                        invalid teeth counts, or more than one source
        """
        box = cls(mode_count=doc.mode_count, name=doc.name, auto_compute=False)
        if doc.axles:
            box.axles = [Axle(a.id, a.name) for a in doc.axles]
        sources = [t for t in doc.tools if t.kind == ToolKind.SOURCE]
        if len(sources) > 1:
            raise ValueError("A gearbox has exactly one source")
        # An unlisted source output keeps its default binding to axle 1
        source_bound = bool(sources) and "Output" in sources[0].connections
        if not source_bound and box.get_axle(DEFAULT_AXLE_ID) is None:
            box.axles.insert(0, Axle(DEFAULT_AXLE_ID, f"Axle {DEFAULT_AXLE_ID}"))

        axle_ids = {a.id for a in box.axles}
        box._next_axle_id = max(axle_ids) + 1

        for tool_doc in doc.tools:
            if tool_doc.kind == ToolKind.SOURCE:
                tool = box.source
            else:
                if tool_doc.id == SOURCE_ID:
                    raise ValueError(f"Tool id {SOURCE_ID!r} is reserved for the source")
                tool = TOOL_CLASSES[tool_doc.kind](tool_doc.id)
                if isinstance(tool, SelectorTool):
                    for mode in range(1, box.mode_count + 1):
                        tool.modes[mode] = SelectorMode.LOCKED
                box.tools.append(tool)

            for conn_name, axle_id in tool_doc.connections.items():
                try:
                    conn = tool.connection(conn_name)
                except KeyError as e:
                    raise ValueError(str(e.args[0]))
                if axle_id is not None and axle_id not in axle_ids:
                    raise ValueError(f"Tool {tool_doc.id} references unknown axle {axle_id}")
                conn.axle_id = axle_id

            for param, value in tool_doc.params.items():
                box.set_param(tool.id, param, value, snap=False)

            suffix = tool_doc.id.removeprefix("tool_")
            if suffix.isdigit():
                box._next_tool_id = max(box._next_tool_id, int(suffix) + 1)

        box.cleanup_unused_axles()
        box.auto_compute = auto_compute
        box._changed()
        return box
