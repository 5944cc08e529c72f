"""Order parameters computed from a lattice snapshot.

Pure functions: nothing here mutates the lattice or reads the live
parameter store. The Potts state count is taken from the lattice itself.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from spinlab.core.enums import ModelKind
from spinlab.core.lattice import LatticeState


@dataclass(frozen=True, slots=True)
class Observables:
    """Scalar order parameter plus, for the continuous model, its vector components."""

    order_parameter: float
    mx: float | None = None
    my: float | None = None

    @property
    def components(self) -> tuple[float, float] | None:
        if self.mx is None or self.my is None:
            return None
        return (self.mx, self.my)


def magnetization(sites: Iterable[int], count: int) -> float:
    """Binary model: mean spin, in [-1, 1]."""
    return sum(sites) / count


def vector_magnetization(angles: Iterable[float], count: int) -> tuple[float, float]:
    """Continuous model: (mean cos theta, mean sin theta)."""
    sum_x = 0.0
    sum_y = 0.0
    for theta in angles:
        sum_x += math.cos(theta)
        sum_y += math.sin(theta)
    return sum_x / count, sum_y / count


def potts_order_parameter(states: Iterable[int], count: int, q: int) -> float:
    """Multi-state model: (n0 - N/q) / (N - N/q).

    +1 when every site is in state 0, 0 for an exactly uniform split.
    """
    n0 = sum(1 for s in states if s == 0)
    expected = count / q
    max_deviation = count - expected
    if max_deviation <= 0.0:
        return 0.0
    return (n0 - expected) / max_deviation


def compute_observables(lattice: LatticeState) -> Observables:
    n = lattice.site_count
    if lattice.kind == ModelKind.BINARY:
        return Observables(order_parameter=magnetization(lattice, n))
    if lattice.kind == ModelKind.CONTINUOUS:
        mx, my = vector_magnetization(lattice, n)
        return Observables(order_parameter=math.hypot(mx, my), mx=mx, my=my)
    return Observables(order_parameter=potts_order_parameter(lattice, n, lattice.states))
