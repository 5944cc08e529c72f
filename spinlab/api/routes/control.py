"""POST /api/v1/control/{action} — simulation lifecycle controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Query

from spinlab.api.dependencies import get_clock
from spinlab.api.schemas import ControlResponse
from spinlab.engine.clock import SimulationClock
from spinlab.errors import SimulationStateError

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    stop = "stop"
    step = "step"
    reset = "reset"


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    sweeps: int = Query(1, ge=1, le=1000, description="Steps to run for 'step'"),
    clock: SimulationClock = Depends(get_clock),
) -> ControlResponse:
    try:
        match action:
            case ControlAction.start:
                if clock.running:
                    return _respond(clock, "noop", "Already running.")
                clock.start()
                return _respond(clock, "ok", "Simulation started.")

            case ControlAction.stop:
                if not clock.running:
                    return _respond(clock, "noop", "Not running.")
                clock.stop()
                return _respond(clock, "ok", "Simulation stopped.")

            case ControlAction.step:
                if clock.running:
                    clock.stop()
                clock.advance(sweeps)
                return _respond(clock, "ok", f"Advanced {sweeps} step(s).")

            case ControlAction.reset:
                clock.reset()
                return _respond(clock, "ok", "Lattice reset.")
    except SimulationStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


def _respond(clock: SimulationClock, status: str, message: str) -> ControlResponse:
    return ControlResponse(status=status, message=message, sweep=clock.sweep, running=clock.running)
