"""GET /api/v1/state, /state/current, /history — lattice frames and observables (polled by UI)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from spinlab.api.dependencies import get_clock
from spinlab.api.schemas import (
    CurrentStateResponse,
    FrameResponse,
    HistoryResponse,
    LatticeSchema,
    ObservablesSchema,
    RollingStatsSchema,
    SampleSchema,
    VectorSchema,
)
from spinlab.core.enums import ModelKind
from spinlab.engine.clock import SimulationClock

router = APIRouter()


def rle_encode(values: tuple | list) -> list[int]:
    """RLE encode: [value, count, value, count, ...]."""
    rle: list[int] = []
    if not values:
        return rle
    cur_val = int(values[0])
    cur_count = 1
    for v in values[1:]:
        v = int(v)
        if v == cur_val:
            cur_count += 1
        else:
            rle.append(cur_val)
            rle.append(cur_count)
            cur_val = v
            cur_count = 1
    rle.append(cur_val)
    rle.append(cur_count)
    return rle


def _serialize_lattice(values: tuple, size: int, kind: ModelKind) -> LatticeSchema:
    if kind == ModelKind.CONTINUOUS:
        return LatticeSchema(size=size, encoding="raw", data=list(values))
    return LatticeSchema(size=size, encoding="rle", data=rle_encode(values))


def _vector(components: tuple[float, float] | None) -> VectorSchema | None:
    if components is None:
        return None
    return VectorSchema(x=components[0], y=components[1])


@router.get("/state", response_model=FrameResponse)
def get_state(
    include_lattice: bool = Query(True, description="Include the lattice payload"),
    clock: SimulationClock = Depends(get_clock),
) -> FrameResponse:
    frame = clock.latest_frame()
    if frame is None:
        raise HTTPException(status_code=503, detail="No frame emitted yet.")
    return FrameResponse(
        sweep=frame.sweep,
        timestamp=frame.timestamp,
        model=frame.model_kind.label,
        size=frame.size,
        order_parameter=frame.order_parameter,
        components=_vector(frame.components),
        state_count=frame.state_count,
        lattice=_serialize_lattice(frame.lattice, frame.size, frame.model_kind) if include_lattice else None,
    )


@router.get("/state/current", response_model=CurrentStateResponse)
def get_current_state(
    include_lattice: bool = Query(True, description="Include the lattice payload"),
    clock: SimulationClock = Depends(get_clock),
) -> CurrentStateResponse:
    view = clock.get_current_state()
    if view is None:
        raise HTTPException(status_code=503, detail="Simulation not initialized yet.")
    return CurrentStateResponse(
        sweep=view.sweep,
        model=view.model_kind.label,
        size=view.size,
        state_count=view.state_count,
        observables=ObservablesSchema(
            order_parameter=view.observables.order_parameter,
            components=_vector(view.observables.components),
        ),
        lattice=_serialize_lattice(view.lattice, view.size, view.model_kind) if include_lattice else None,
    )


@router.get("/history", response_model=HistoryResponse)
def get_history(
    limit: int = Query(400, ge=1, le=10_000, description="Most recent samples to return"),
    clock: SimulationClock = Depends(get_clock),
) -> HistoryResponse:
    history = clock.history
    stats = history.stats()
    return HistoryResponse(
        capacity=history.capacity,
        samples=[SampleSchema(sweep=s.sweep, value=s.value, timestamp=s.timestamp) for s in history.latest(limit)],
        stats=RollingStatsSchema(
            count=stats.count, mean=stats.mean, std=stats.std,
            minimum=stats.minimum, maximum=stats.maximum,
        ) if stats else None,
    )
