"""
Pytest configuration and shared fixtures.
"""

import pytest

from brickcalc.gearbox.model import Gearbox
from brickcalc.models.inputs import GearboxDocument, GearCouplingInputs, LiftarmInputs


@pytest.fixture
def small_liftarm_inputs() -> LiftarmInputs:
    """Whole-stud search with lengths up to 3."""
    return LiftarmInputs(min_a=1, max_a=3, min_b=1, max_b=3)


@pytest.fixture
def default_coupling_inputs() -> GearCouplingInputs:
    """Default gear selection and tolerances."""
    return GearCouplingInputs()


@pytest.fixture
def gearbox() -> Gearbox:
    """Empty gearbox (source on Axle 1) that recomputes on every change."""
    return Gearbox()


@pytest.fixture
def example_document() -> GearboxDocument:
    """Two-speed example: 8:24 and 16:16 couplings joined by a selector."""
    return GearboxDocument.example()


@pytest.fixture
def example_gearbox(example_document) -> Gearbox:
    """Gearbox built from the two-speed example."""
    return Gearbox.from_document(example_document)


def build_chain(length: int, reverse: bool = False) -> Gearbox:
    """
    Gearbox with `length` 16:16 couplings in series, Axle 1 -> Axle length+1.

    With reverse=True the couplings are ordered so the one furthest from
    the source is evaluated first, which needs one sweep per coupling.
    """
    box = Gearbox(mode_count=1, auto_compute=False)
    tools = [box.add_tool("coupling") for _ in range(length)]
    ordered = list(reversed(tools)) if reverse else tools
    upstream = 1
    for tool in ordered:
        box.set_connection(tool.id, "Gear A", upstream)
        upstream = box.set_connection(tool.id, "Gear B", "new")
    return box


@pytest.fixture
def chain_factory():
    """Factory for series coupling chains."""
    return build_chain
