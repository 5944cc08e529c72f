"""GET /api/v1/config — expose the startup configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from spinlab.api.dependencies import get_clock
from spinlab.api.schemas import SimulationConfigResponse
from spinlab.engine.clock import SimulationClock

router = APIRouter()


@router.get("/config", response_model=SimulationConfigResponse)
def get_config(clock: SimulationClock = Depends(get_clock)) -> SimulationConfigResponse:
    cfg = clock.config
    return SimulationConfigResponse(
        lattice_size=cfg.lattice_size,
        model_kind=cfg.model_kind,
        potts_states=cfg.potts_states,
        temperature=cfg.temperature,
        field=cfg.field,
        boundary=cfg.boundary,
        algorithm=cfg.algorithm,
        seed=cfg.seed,
        steps_per_frame=cfg.steps_per_frame,
        max_steps_per_frame=cfg.max_steps_per_frame,
        target_fps=cfg.target_fps,
        history_points=cfg.history_points,
    )
