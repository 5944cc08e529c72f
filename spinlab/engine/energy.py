"""Local energy changes for a single-site update, one function per model kind.

Coupling J = 1 throughout. Neighbour values come from ``LatticeState.get``
so every boundary policy is honoured.
"""

from __future__ import annotations

import math

from spinlab.core.enums import BoundaryKind
from spinlab.core.lattice import LatticeState


def binary_flip_delta(lattice: LatticeState, i: int, j: int, boundary: BoundaryKind, field: float) -> float:
    """dE for s -> -s: 2 s (sum of neighbours + h)."""
    s = lattice.at(i * lattice.size + j)
    nb = (
        lattice.get(i + 1, j, boundary)
        + lattice.get(i - 1, j, boundary)
        + lattice.get(i, j + 1, boundary)
        + lattice.get(i, j - 1, boundary)
    )
    return 2.0 * s * (nb + field)


def rotator_site_energy(theta: float, neighbors: tuple, field: float) -> float:
    energy = 0.0
    for other in neighbors:
        energy -= math.cos(theta - other)
    return energy - field * math.cos(theta)


def rotator_delta(
    lattice: LatticeState, i: int, j: int, boundary: BoundaryKind, field: float, old: float, new: float,
) -> float:
    neighbors = lattice.neighbors(i, j, boundary)
    return rotator_site_energy(new, neighbors, field) - rotator_site_energy(old, neighbors, field)


def potts_site_energy(state: int, neighbors: tuple, field: float) -> float:
    # Kronecker-delta coupling; the field favours state 0 only
    energy = -float(sum(1 for other in neighbors if other == state))
    if state == 0:
        energy -= field
    return energy


def potts_delta(
    lattice: LatticeState, i: int, j: int, boundary: BoundaryKind, field: float, old: int, new: int,
) -> float:
    neighbors = lattice.neighbors(i, j, boundary)
    return potts_site_energy(new, neighbors, field) - potts_site_energy(old, neighbors, field)


def cluster_field_delta(lattice: LatticeState, sites, field: float) -> float:
    """dE of flipping every site in *sites* when only the field term changes."""
    return 2.0 * field * sum(lattice.at(idx) for idx in sites)


def metropolis_accepts(delta: float, beta: float, draw) -> bool:
    """Metropolis rule. ``draw`` is a zero-argument callable, only invoked when dE > 0."""
    if delta <= 0.0:
        return True
    return draw() < math.exp(-beta * delta)
