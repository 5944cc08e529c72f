"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# --- Frames & state ---

class VectorSchema(BaseModel):
    x: float
    y: float


class LatticeSchema(BaseModel):
    """Site values, row-major.

    Discrete lattices (binary, multi-state) are RLE-encoded as
    ``[value, count, value, count, ...]``; continuous lattices are sent raw.
    """

    size: int
    encoding: str = Field(description="'rle' or 'raw'")
    data: list[int | float]


class FrameResponse(BaseModel):
    sweep: int
    timestamp: float
    model: str
    size: int
    order_parameter: float
    components: VectorSchema | None = None
    state_count: int | None = None
    lattice: LatticeSchema | None = None


class ObservablesSchema(BaseModel):
    order_parameter: float
    components: VectorSchema | None = None


class CurrentStateResponse(BaseModel):
    sweep: int
    model: str
    size: int
    state_count: int
    observables: ObservablesSchema
    lattice: LatticeSchema | None = None


# --- History ---

class SampleSchema(BaseModel):
    sweep: int
    value: float
    timestamp: float


class RollingStatsSchema(BaseModel):
    count: int
    mean: float
    std: float
    minimum: float
    maximum: float


class HistoryResponse(BaseModel):
    capacity: int
    samples: list[SampleSchema] = Field(default_factory=list)
    stats: RollingStatsSchema | None = None


# --- Parameters ---

class ParametersResponse(BaseModel):
    temperature: float
    beta: float
    field: float
    boundary: str
    model: str
    algorithm: str
    state_count: int
    steps_per_frame: int
    max_steps_per_frame: int
    frame_rate: float
    lattice_size: int | None = None


class ParameterUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    temperature: float | None = Field(None, gt=0)
    field: float | None = None
    boundary: str | None = Field(None, description="periodic | fixed_high | fixed_low")
    model: str | None = Field(None, description="binary | continuous | multi_state")
    algorithm: str | None = Field(None, description="local | cluster")
    state_count: int | None = None
    steps_per_frame: int | None = Field(None, ge=1)
    frame_rate: float | None = Field(None, gt=0)
    lattice_size: int | None = Field(None, gt=0)


# --- Control ---

class ControlResponse(BaseModel):
    status: str  # "ok" | "noop" | "error"
    message: str
    sweep: int = 0
    running: bool = False


# --- Config ---

class SimulationConfigResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    lattice_size: int
    model_kind: str
    potts_states: int
    temperature: float
    field: float
    boundary: str
    algorithm: str
    seed: int
    steps_per_frame: int
    max_steps_per_frame: int
    target_fps: float
    history_points: int
