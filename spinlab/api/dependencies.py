"""FastAPI dependency injection — provides the SimulationClock singleton."""

from __future__ import annotations

from spinlab.engine.clock import SimulationClock

_clock: SimulationClock | None = None


def set_clock(clock: SimulationClock | None) -> None:
    global _clock
    _clock = clock


def get_clock() -> SimulationClock:
    if _clock is None:
        raise RuntimeError("SimulationClock not initialized — server not started correctly.")
    return _clock
