"""Random-sequential Metropolis sweeps.

Each sweep visits every site exactly once, in a fresh uniformly random
permutation (not sampling with replacement). At most one acceptance draw
is made per site, and none when dE <= 0.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from spinlab.core.enums import Domain, ModelKind
from spinlab.core.lattice import wrap_angle
from spinlab.engine.energy import binary_flip_delta, metropolis_accepts, potts_delta, rotator_delta

if TYPE_CHECKING:
    from spinlab.core.lattice import LatticeState
    from spinlab.core.params import SimulationParameters
    from spinlab.systems.rng import DeterministicRNG

MAX_ANGLE_CHANGE = 0.5  # radians, half-width of the rotator proposal


def visiting_order(site_count: int, rng: DeterministicRNG) -> list[int]:
    order = list(range(site_count))
    rng.shuffle(Domain.SITE_ORDER, order)
    return order


def binary_sweep(lattice: LatticeState, params: SimulationParameters, rng: DeterministicRNG) -> int:
    """One Ising sweep. Returns the number of accepted flips."""
    L = lattice.size
    beta, field, boundary = params.beta, params.field, params.boundary
    draw = partial(rng.next_float, Domain.ACCEPTANCE)
    accepted = 0
    for idx in visiting_order(lattice.site_count, rng):
        i, j = divmod(idx, L)
        delta = binary_flip_delta(lattice, i, j, boundary, field)
        if metropolis_accepts(delta, beta, draw):
            lattice.set(idx, -lattice.at(idx))
            accepted += 1
    return accepted


def rotator_sweep(lattice: LatticeState, params: SimulationParameters, rng: DeterministicRNG) -> int:
    """One XY sweep with proposals theta + U(-0.5, 0.5), wrapped into [0, 2pi)."""
    L = lattice.size
    beta, field, boundary = params.beta, params.field, params.boundary
    draw = partial(rng.next_float, Domain.ACCEPTANCE)
    accepted = 0
    for idx in visiting_order(lattice.site_count, rng):
        i, j = divmod(idx, L)
        old = lattice.at(idx)
        new = wrap_angle(old + rng.uniform(Domain.PROPOSAL, -MAX_ANGLE_CHANGE, MAX_ANGLE_CHANGE))
        delta = rotator_delta(lattice, i, j, boundary, field, old, new)
        if metropolis_accepts(delta, beta, draw):
            lattice.set(idx, new)
            accepted += 1
    return accepted


def propose_other_state(current: int, q: int, rng: DeterministicRNG) -> int:
    """Uniform draw from the q-1 states different from *current*."""
    candidate = rng.next_int(Domain.PROPOSAL, 0, q - 2)
    return candidate + 1 if candidate >= current else candidate


def potts_sweep(lattice: LatticeState, params: SimulationParameters, rng: DeterministicRNG) -> int:
    """One Potts sweep. q comes from the lattice, which was allocated for it."""
    L = lattice.size
    q = lattice.states
    beta, field, boundary = params.beta, params.field, params.boundary
    draw = partial(rng.next_float, Domain.ACCEPTANCE)
    accepted = 0
    for idx in visiting_order(lattice.site_count, rng):
        i, j = divmod(idx, L)
        old = lattice.at(idx)
        new = propose_other_state(old, q, rng)
        delta = potts_delta(lattice, i, j, boundary, field, old, new)
        if metropolis_accepts(delta, beta, draw):
            lattice.set(idx, new)
            accepted += 1
    return accepted


SWEEPS = {
    ModelKind.BINARY: binary_sweep,
    ModelKind.CONTINUOUS: rotator_sweep,
    ModelKind.MULTI_STATE: potts_sweep,
}
