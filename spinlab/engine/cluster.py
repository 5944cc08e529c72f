"""Single-cluster Wolff update for the binary model in a non-zero field.

Growth uses only the bond probability p_add = 1 - exp(-2 beta); the field
enters solely through the final accept/reject of the whole flip. With
h != 0 this is an approximation to detailed balance and is kept as such.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

from spinlab.core.enums import BoundaryKind, Domain, ModelKind
from spinlab.engine.energy import cluster_field_delta, metropolis_accepts

if TYPE_CHECKING:
    from spinlab.core.lattice import LatticeState
    from spinlab.core.params import SimulationParameters
    from spinlab.systems.rng import DeterministicRNG

FIELD_EPSILON = 1e-10


@dataclass(frozen=True, slots=True)
class Cluster:
    """Result of one growth pass."""

    seed: int
    spin: int
    sites: frozenset[int]
    bonds_tested: int
    bonds_added: int

    def __len__(self) -> int:
        return len(self.sites)


def cluster_supported(model_kind: ModelKind, field: float) -> bool:
    return model_kind == ModelKind.BINARY and abs(field) > FIELD_EPSILON


def bond_probability(beta: float) -> float:
    return 1.0 - math.exp(-2.0 * beta)


def grow_cluster(
    lattice: LatticeState,
    seed: int,
    beta: float,
    boundary: BoundaryKind,
    rng: DeterministicRNG,
) -> Cluster:
    """Grow a cluster of same-valued sites from *seed* with an explicit stack.

    Every (member, unvisited same-valued neighbour) pair gets its own
    independent p_add trial. Ghost sites beyond a fixed boundary are never
    added.
    """
    L = lattice.size
    p_add = bond_probability(beta)
    spin = lattice.at(seed)
    members = {seed}
    stack = [seed]
    tested = 0
    added = 0
    while stack:
        current = stack.pop()
        i, j = divmod(current, L)
        for ni, nj in ((i + 1, j), (i - 1, j), (i, j + 1), (i, j - 1)):
            neighbor = lattice.neighbor_index(ni, nj, boundary)
            if neighbor == -1 or neighbor in members:
                continue
            if lattice.at(neighbor) != spin:
                continue
            tested += 1
            if rng.next_float(Domain.CLUSTER_BOND) < p_add:
                members.add(neighbor)
                stack.append(neighbor)
                added += 1
    return Cluster(seed=seed, spin=spin, sites=frozenset(members), bonds_tested=tested, bonds_added=added)


def wolff_step(
    lattice: LatticeState, params: SimulationParameters, rng: DeterministicRNG,
) -> tuple[Cluster | None, bool]:
    """Grow one cluster and try to flip it.

    Returns ``(None, False)`` without touching the lattice or the random
    source when the model is not binary or |h| <= 1e-10.
    """
    if lattice.kind != ModelKind.BINARY or not cluster_supported(params.model_kind, params.field):
        return None, False

    seed = rng.next_int(Domain.CLUSTER_SEED, 0, lattice.site_count - 1)
    cluster = grow_cluster(lattice, seed, params.beta, params.boundary, rng)

    delta = cluster_field_delta(lattice, cluster.sites, params.field)
    flipped = metropolis_accepts(delta, params.beta, partial(rng.next_float, Domain.ACCEPTANCE))
    if flipped:
        for idx in cluster.sites:
            lattice.set(idx, -lattice.at(idx))
    return cluster, flipped
