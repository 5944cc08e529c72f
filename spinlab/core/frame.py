"""Immutable snapshots of the lattice and its observables."""

from __future__ import annotations

from dataclasses import dataclass

from spinlab.core.enums import ModelKind
from spinlab.core.lattice import LatticeState
from spinlab.systems.observables import Observables, compute_observables


@dataclass(frozen=True, slots=True)
class Frame:
    """Read-only view emitted to consumers, safe to share across threads.

    ``lattice`` is a tuple copy taken while the writer was parked between
    batches, so it never reflects a half-applied sweep.
    """

    lattice: tuple
    size: int
    order_parameter: float
    components: tuple[float, float] | None
    model_kind: ModelKind
    state_count: int | None
    sweep: int
    timestamp: float

    @classmethod
    def capture(cls, lattice: LatticeState, sweep: int, timestamp: float) -> Frame:
        obs = compute_observables(lattice)
        return cls(
            lattice=lattice.values(),
            size=lattice.size,
            order_parameter=obs.order_parameter,
            components=obs.components,
            model_kind=lattice.kind,
            state_count=lattice.states if lattice.kind == ModelKind.MULTI_STATE else None,
            sweep=sweep,
            timestamp=timestamp,
        )


@dataclass(frozen=True, slots=True)
class StateView:
    """On-demand snapshot returned by ``get_current_state()``."""

    lattice: tuple
    observables: Observables
    model_kind: ModelKind
    size: int
    state_count: int
    sweep: int

    @classmethod
    def capture(cls, lattice: LatticeState, sweep: int) -> StateView:
        return cls(
            lattice=lattice.values(),
            observables=compute_observables(lattice),
            model_kind=lattice.kind,
            size=lattice.size,
            state_count=lattice.states,
            sweep=sweep,
        )
