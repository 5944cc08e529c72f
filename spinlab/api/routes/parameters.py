"""GET/PATCH /api/v1/parameters — live simulation parameters."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from spinlab.api.dependencies import get_clock
from spinlab.api.schemas import ParametersResponse, ParameterUpdate
from spinlab.engine.clock import SimulationClock
from spinlab.errors import InvalidParameterError, SimulationStateError

logger = logging.getLogger(__name__)

router = APIRouter()


def _describe(clock: SimulationClock) -> ParametersResponse:
    p = clock.params.current()
    return ParametersResponse(
        temperature=p.temperature,
        beta=p.beta,
        field=p.field,
        boundary=p.boundary.label,
        model=p.model_kind.label,
        algorithm=p.algorithm.label,
        state_count=p.state_count,
        steps_per_frame=p.steps_per_frame,
        max_steps_per_frame=clock.params.max_steps_per_frame,
        frame_rate=clock.frame_rate,
        lattice_size=clock.lattice_size,
    )


@router.get("/parameters", response_model=ParametersResponse)
def get_parameters(clock: SimulationClock = Depends(get_clock)) -> ParametersResponse:
    return _describe(clock)


@router.patch("/parameters", response_model=ParametersResponse)
def update_parameters(
    update: ParameterUpdate,
    clock: SimulationClock = Depends(get_clock),
) -> ParametersResponse:
    """Apply each provided field in turn; the first rejected value aborts the rest.

    Model kind is applied before state count so a combined update re-randomizes once
    for the final q.
    """
    try:
        if update.temperature is not None:
            clock.set_temperature(update.temperature)
        if update.field is not None:
            clock.set_field(update.field)
        if update.boundary is not None:
            clock.set_boundary(update.boundary)
        if update.algorithm is not None:
            clock.set_algorithm(update.algorithm)
        if update.steps_per_frame is not None:
            clock.set_steps_per_frame(update.steps_per_frame)
        if update.frame_rate is not None:
            clock.set_frame_rate(update.frame_rate)
        if update.state_count is not None and update.model is not None:
            clock.params.set_state_count(update.state_count)
        if update.model is not None:
            clock.set_model_kind(update.model)
        if update.state_count is not None:
            clock.set_state_count(update.state_count)
        if update.lattice_size is not None:
            clock.set_lattice_size(update.lattice_size)
    except InvalidParameterError as exc:
        logger.warning("Rejected parameter update: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except SimulationStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _describe(clock)
