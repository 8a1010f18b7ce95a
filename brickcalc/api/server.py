"""
FastAPI server for the Technic calculators.

Exposes the liftarm, gear coupling, distance and gearbox calculators as
JSON endpoints.
"""

from typing import Optional, Union

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from brickcalc import __version__
from brickcalc.distances.grid import compute_distance_grid
from brickcalc.gearbox.model import Gearbox
from brickcalc.gears.catalog import DEFAULT_SELECTION, STANDARD_TEETH, WORM_RADII, parse_gear
from brickcalc.gears.couplings import enumerate_gear_couplings
from brickcalc.liftarms.enumerator import apply_preset, enumerate_liftarms
from brickcalc.models.inputs import (
    DistanceInputs,
    GearboxDocument,
    GearCouplingInputs,
    LiftarmInputs,
    LiftarmPreset,
)
from brickcalc.models.outputs import (
    DistanceGrid,
    GearboxResult,
    GearCouplingResult,
    LiftarmResult,
)

# Create FastAPI app
app = FastAPI(
    title="Technic Calculators API",
    description="""
    Liftarm geometry, gear coupling distances, planar distances and
    gearbox speed/torque propagation for Technic Brick designs.
    """,
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


class GearInfo(BaseModel):
    """A catalog gear."""
    id: Union[int, str]
    teeth: int
    radius: float
    is_worm: bool
    default_selected: bool


class GearboxComputeResponse(BaseModel):
    """Normalised gearbox description with its computed result."""
    gearbox: GearboxDocument
    result: GearboxResult


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Check if the API is running."""
    return HealthResponse(status="healthy", version=__version__)


@app.get("/gears", response_model=list[GearInfo], tags=["Reference"])
async def list_gears():
    """List the gear catalog: both worms, then the standard gears."""
    gears = []
    for gear_id in [*WORM_RADII, *STANDARD_TEETH]:
        spec = parse_gear(gear_id)
        gears.append(GearInfo(
            id=spec.gear_id,
            teeth=spec.teeth,
            radius=spec.radius,
            is_worm=spec.is_worm,
            default_selected=spec.gear_id in DEFAULT_SELECTION,
        ))
    return gears


@app.post("/liftarms", response_model=LiftarmResult, tags=["Liftarms"])
async def liftarms(
    inputs: LiftarmInputs,
    preset: Optional[LiftarmPreset] = Query(default=None, description="Row filter preset"),
):
    """
    Enumerate stud positions reachable with two pinned liftarms.

    Positions are sorted by stud x, stud y, A length, B length.
    """
    try:
        result = enumerate_liftarms(inputs)
        if preset is not None:
            result.positions = apply_preset(result.positions, preset)
        return result
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/gear-couplings", response_model=GearCouplingResult, tags=["Gears"])
async def gear_couplings(inputs: GearCouplingInputs):
    """Enumerate mounting offsets for every pair of selected gears."""
    try:
        return enumerate_gear_couplings(inputs)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/distances", response_model=DistanceGrid, tags=["Distances"])
async def distances(inputs: DistanceInputs):
    """Distances from each grid point around the target."""
    return compute_distance_grid(inputs)


@app.post("/gearbox/compute", response_model=GearboxComputeResponse, tags=["Gearbox"])
async def compute_gearbox(doc: GearboxDocument):
    """
    Build the gearbox described by the document and propagate every mode.

    Tool problems (no input, conflicts) are reported per mode in the
    result, not as HTTP errors. Malformed graphs (unknown axles,
    connections or parameters) return 400.
    """
    try:
        box = Gearbox.from_document(doc)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return GearboxComputeResponse(gearbox=box.to_document(), result=box.result)


@app.get("/gearbox/example", response_model=GearboxDocument, tags=["Gearbox"])
async def gearbox_example():
    """Get an example gearbox description."""
    return GearboxDocument.example()
