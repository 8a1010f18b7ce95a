"""
Gearbox propagation engine.

Computes speed and torque for every axle of a gearbox, separately for
each operating mode, by fixed-point iteration:

1. Start from an empty axle-value map and seed the source axle with
   speed 1, torque 1.
2. Sweep all tools in order. Each tool looks at the values currently
   known on its axles and may produce value(s) for its other axles.
3. An axle keeps the first value written to it. A tool writing to an
   axle another tool already produces is in conflict.
4. Repeat until a sweep adds no value, or MAX_SWEEPS is reached.

Tool outcomes are data (ok / flagged / error), never exceptions: a
conflict on one tool does not stop the rest of the gearbox or the other
modes.

ASSUMPTIONS:
- Ideal rigid gears: no friction, backlash or inertia
- Torque scales inversely with speed through every tool
"""

import logging
from dataclasses import dataclass, field
from typing import Callable

from brickcalc.gearbox.model import (
    Connection,
    CouplingTool,
    DifferentialTool,
    Gearbox,
    SelectorTool,
    SOURCE_ID,
    Tool,
    ToolError,
    ToolFlagged,
    ToolOk,
    ToolStatus,
)
from brickcalc.models.inputs import SelectorMode, ToolKind
from brickcalc.models.outputs import AxleReading, GearboxResult, ModeResult

logger = logging.getLogger(__name__)

SOURCE_SPEED = 1.0
SOURCE_TORQUE = 1.0


@dataclass
class AxleValue:
    """Value of an axle in one mode and the tool that produced it."""
    speed: float
    torque: float
    produced_by: str


@dataclass
class Output:
    """A value a tool wants to write to an axle."""
    axle_id: int
    speed: float
    torque: float


@dataclass
class Evaluation:
    """
    Result of evaluating one tool against the current axle values.

    `exclusive` outputs claim authority over their axle: writing one to
    an axle produced by another tool is a conflict. Non-exclusive outputs
    (a locked selector's zeros) are simply skipped in that case.
    """
    status: ToolStatus
    outputs: list[Output] = field(default_factory=list)
    exclusive: bool = True


AxleValues = dict[int, AxleValue]


class GearboxEngine:
    """
    Fixed-point solver over a gearbox graph.

    The graph is read-only here; each call to compute() starts every
    mode from an empty value map and replaces every tool's status.
    """

    MAX_SWEEPS = 100

    def __init__(self, gearbox: Gearbox, max_sweeps: int | None = None):
        """
        Initialize engine.

        Args:
            gearbox: Graph to compute
            max_sweeps: Override for the sweep cap (at least 1)
        """
        if max_sweeps is not None and max_sweeps < 1:
            raise ValueError(f"max_sweeps must be at least 1, got {max_sweeps}")
        self.gearbox = gearbox
        self.max_sweeps = max_sweeps if max_sweeps is not None else self.MAX_SWEEPS
        self._evaluators: dict[ToolKind, Callable[[Tool, int, AxleValues], Evaluation]] = {
            ToolKind.COUPLING: self.evaluate_coupling,
            ToolKind.SELECTOR: self.evaluate_selector,
            ToolKind.DIFFERENTIAL: self.evaluate_differential,
        }

    def compute(self) -> GearboxResult:
        """
        Propagate every mode.

        Returns:
            GearboxResult with one ModeResult per mode
        """
        for tool in self.gearbox.tools:
            tool.status = {}

        modes = [
            self.compute_mode(mode)
            for mode in range(1, self.gearbox.mode_count + 1)
        ]

        return GearboxResult(
            name=self.gearbox.name,
            mode_count=self.gearbox.mode_count,
            axle_names={a.id: a.name for a in self.gearbox.axles},
            modes=modes,
        )

    def compute_mode(self, mode: int) -> ModeResult:
        """
        Propagate one mode from a fresh state.

        Args:
            mode: 1-based mode number

        Returns:
            ModeResult with axle values, tool statuses and sweep count
        """
        values: AxleValues = {}

        source = self.gearbox.source
        source_axle = source.connection("Output").axle_id
        if source_axle is not None:
            values[source_axle] = AxleValue(SOURCE_SPEED, SOURCE_TORQUE, SOURCE_ID)
        source.status[mode] = ToolOk()

        tools = [t for t in self.gearbox.tools if t.kind != ToolKind.SOURCE]
        changed = True
        sweeps = 0

        while changed and sweeps < self.max_sweeps:
            changed = False
            sweeps += 1
            for tool in tools:
                if self._apply(tool, mode, values):
                    changed = True

        converged = not changed
        if not converged:
            logger.warning(
                f"Gearbox {self.gearbox.name!r} mode {mode} did not settle "
                f"after {sweeps} sweeps; returning partial values"
            )
        logger.debug(f"Mode {mode}: {len(values)} axles known after {sweeps} sweeps")

        return ModeResult(
            mode=mode,
            axles={
                axle_id: AxleReading(speed=v.speed, torque=v.torque, produced_by=v.produced_by)
                for axle_id, v in values.items()
            },
            statuses={t.id: t.status[mode].to_report() for t in self.gearbox.tools},
            sweeps=sweeps,
            converged=converged,
        )

    def _apply(self, tool: Tool, mode: int, values: AxleValues) -> bool:
        """
        Evaluate one tool and write its outputs.

        Returns:
            True when a new axle value was written
        """
        evaluation = self.evaluate(tool, mode, values)
        status = evaluation.status
        changed = False

        for out in evaluation.outputs:
            existing = values.get(out.axle_id)
            if existing is None:
                values[out.axle_id] = AxleValue(out.speed, out.torque, tool.id)
                changed = True
            elif existing.produced_by != tool.id and evaluation.exclusive:
                status = ToolError(f"Conflict with {self.gearbox.tool_label(existing.produced_by)}")

        tool.status[mode] = status
        return changed

    def evaluate(self, tool: Tool, mode: int, values: AxleValues) -> Evaluation:
        """Dispatch to the evaluator for the tool's kind."""
        evaluator = self._evaluators.get(tool.kind)
        if evaluator is None:
            return Evaluation(ToolFlagged())
        return evaluator(tool, mode, values)

    # ==================== Evaluators ====================

    def _known(self, conn: Connection, tool: Tool, values: AxleValues) -> bool:
        """True when the connection's axle carries a value from another tool."""
        if conn.axle_id is None:
            return False
        value = values.get(conn.axle_id)
        return value is not None and value.produced_by != tool.id

    def _conflict(self, conns: list[Connection], values: AxleValues) -> ToolError:
        """Conflict naming the tools that produce the given axles."""
        labels = []
        for conn in conns:
            label = self.gearbox.tool_label(values[conn.axle_id].produced_by)
            if label not in labels:
                labels.append(label)
        return ToolError(f"Conflicting outputs ({', '.join(labels)})")

    def _pass_through(
        self,
        tool: Tool,
        side_a: Connection,
        side_b: Connection,
        values: AxleValues,
        ratio_a: float,
        ratio_b: float,
        invert: bool,
    ) -> Evaluation:
        """
        Two-port transfer: whichever side is known drives the other.

        Speed scales by input/output ratio, torque by its inverse, and
        the speed sign flips when `invert` is set.
        """
        known_a = self._known(side_a, tool, values)
        known_b = self._known(side_b, tool, values)

        if known_a and known_b:
            return Evaluation(self._conflict([side_a, side_b], values))
        if not known_a and not known_b:
            return Evaluation(ToolFlagged("No input"))

        if known_a:
            inp, out, in_ratio, out_ratio = side_a, side_b, ratio_a, ratio_b
        else:
            inp, out, in_ratio, out_ratio = side_b, side_a, ratio_b, ratio_a

        if out.axle_id is None:
            return Evaluation(ToolFlagged("Output not connected"))

        source = values[inp.axle_id]
        direction = -1 if invert else 1
        return Evaluation(ToolOk(), [Output(
            axle_id=out.axle_id,
            speed=direction * source.speed * (in_ratio / out_ratio),
            torque=source.torque * (out_ratio / in_ratio),
        )])

    def evaluate_coupling(self, tool: CouplingTool, mode: int, values: AxleValues) -> Evaluation:
        """
        Coupling: two meshing gears.

        output speed = ±input speed × input teeth / output teeth
        output torque = input torque × output teeth / input teeth
        """
        return self._pass_through(
            tool,
            tool.connection("Gear A"),
            tool.connection("Gear B"),
            values,
            tool.teeth_a,
            tool.teeth_b,
            tool.invert_direction,
        )

    def evaluate_selector(self, tool: SelectorTool, mode: int, values: AxleValues) -> Evaluation:
        """
        Selector: joins Center 1:1 to the side selected for this mode.

        When locked, every connected axle without a value from another
        tool is held stationary (speed 0, torque 0). This also happens
        when nothing drives the selector at all.
        """
        center = tool.connection("Center")
        selection = tool.selection(mode)

        if selection == SelectorMode.LOCKED:
            outputs = [
                Output(axle_id=conn.axle_id, speed=0.0, torque=0.0)
                for conn in tool.connections
                if conn.axle_id is not None and not self._known(conn, tool, values)
            ]
            if not outputs:
                return Evaluation(ToolFlagged("No input"))
            return Evaluation(ToolOk(), outputs, exclusive=False)

        active = tool.connection(selection.value)
        return self._pass_through(tool, center, active, values, 1, 1, invert=False)

    def evaluate_differential(self, tool: DifferentialTool, mode: int, values: AxleValues) -> Evaluation:
        """
        Differential: any two known connections determine the third.

        A, B known    -> Body speed = (A + B) / 2, torque = 2 (A + B)
        Body, X known -> other side speed = 2 Body - X, torque = (Body + X) / 2
        """
        body = tool.connection("Body")
        side_a = tool.connection("A")
        side_b = tool.connection("B")
        conns = [body, side_a, side_b]
        known = [c for c in conns if self._known(c, tool, values)]

        if len(known) == 3:
            return Evaluation(self._conflict(known, values))
        if len(known) < 2:
            return Evaluation(ToolFlagged("No input"))

        if body not in known:
            a, b = values[side_a.axle_id], values[side_b.axle_id]
            out = body
            speed = (a.speed + b.speed) / 2
            torque = 2 * (a.torque + b.torque)
        else:
            out, other = (side_a, side_b) if side_a not in known else (side_b, side_a)
            body_value, other_value = values[body.axle_id], values[other.axle_id]
            speed = 2 * body_value.speed - other_value.speed
            torque = (body_value.torque + other_value.torque) / 2

        if out.axle_id is None:
            return Evaluation(ToolFlagged("Output not connected"))

        return Evaluation(ToolOk(), [Output(axle_id=out.axle_id, speed=speed, torque=torque)])


def propagate(gearbox: Gearbox) -> GearboxResult:
    """Compute all modes of a gearbox."""
    return GearboxEngine(gearbox).compute()
