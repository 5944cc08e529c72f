"""Square spin lattice with boundary-aware neighbour reads."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from spinlab.core.enums import BoundaryKind, Domain, ModelKind
from spinlab.errors import InvalidParameterError

if TYPE_CHECKING:
    from spinlab.systems.rng import DeterministicRNG

TWO_PI = 2.0 * math.pi

MIN_STATES = 2
MAX_STATES = 10


def clamp_states(q: int) -> int:
    """Clamp a Potts state count into [MIN_STATES, MAX_STATES]."""
    return max(MIN_STATES, min(MAX_STATES, int(q)))


def wrap_angle(theta: float) -> float:
    """Normalize an angle into [0, 2pi)."""
    theta = theta % TWO_PI
    # Float modulo of a tiny negative value can round up to exactly 2pi
    if theta >= TWO_PI:
        return 0.0
    return theta


class LatticeState:
    """L x L grid backed by a flat row-major list: site (i, j) -> i*L + j.

    Tagged by ``kind``; binary and multi-state lattices hold ints,
    continuous lattices hold floats (radians). Storage is never padded:
    the boundary policy only changes what ``get`` returns off-grid.
    """

    __slots__ = ("size", "kind", "states", "_sites")

    def __init__(self, size: int, kind: ModelKind, states: int, sites: list) -> None:
        if size <= 0:
            raise InvalidParameterError("size", size, "lattice size must be positive")
        if len(sites) != size * size:
            raise InvalidParameterError("sites", len(sites), f"expected {size * size} sites")
        self.size = size
        self.kind = kind
        self.states = clamp_states(states)
        self._sites = sites

    @classmethod
    def create(cls, size: int, kind: ModelKind, states: int, rng: DeterministicRNG) -> LatticeState:
        """Allocate L*L sites and fill them uniformly at random for *kind*."""
        if not isinstance(size, int) or isinstance(size, bool) or size <= 0:
            raise InvalidParameterError("size", size, "lattice size must be a positive integer")
        q = clamp_states(states)
        n = size * size
        if kind == ModelKind.BINARY:
            sites = [1 if rng.next_float(Domain.LATTICE_INIT) < 0.5 else -1 for _ in range(n)]
        elif kind == ModelKind.CONTINUOUS:
            sites = [wrap_angle(rng.next_float(Domain.LATTICE_INIT) * TWO_PI) for _ in range(n)]
        else:
            sites = [rng.next_int(Domain.LATTICE_INIT, 0, q - 1) for _ in range(n)]
        return cls(size, kind, q, sites)

    @classmethod
    def filled(cls, size: int, kind: ModelKind, value, states: int = 3) -> LatticeState:
        """Uniform lattice, every site set to *value*."""
        return cls(size, kind, states, [value] * (size * size))

    # -- access --

    @property
    def site_count(self) -> int:
        return self.size * self.size

    def index(self, i: int, j: int) -> int:
        return i * self.size + j

    def boundary_value(self, boundary: BoundaryKind):
        """Value read for a ghost site outside the grid under a fixed boundary."""
        high = boundary == BoundaryKind.FIXED_HIGH
        if self.kind == ModelKind.BINARY:
            return 1 if high else -1
        if self.kind == ModelKind.CONTINUOUS:
            return 0.0 if high else math.pi
        return 0 if high else self.states - 1

    def get(self, i: int, j: int, boundary: BoundaryKind = BoundaryKind.PERIODIC):
        """Effective value at (i, j); off-grid reads follow *boundary*."""
        L = self.size
        if 0 <= i < L and 0 <= j < L:
            return self._sites[i * L + j]
        if boundary == BoundaryKind.PERIODIC:
            return self._sites[(i % L) * L + (j % L)]
        return self.boundary_value(boundary)

    def neighbor_index(self, i: int, j: int, boundary: BoundaryKind = BoundaryKind.PERIODIC) -> int:
        """Flat index of (i, j), wrapped if periodic; -1 if off-grid under a fixed boundary."""
        L = self.size
        if boundary == BoundaryKind.PERIODIC:
            return (i % L) * L + (j % L)
        if 0 <= i < L and 0 <= j < L:
            return i * L + j
        return -1

    def neighbors(self, i: int, j: int, boundary: BoundaryKind = BoundaryKind.PERIODIC) -> tuple:
        """Effective values of the four cardinal neighbours of (i, j)."""
        return (
            self.get(i + 1, j, boundary),
            self.get(i - 1, j, boundary),
            self.get(i, j + 1, boundary),
            self.get(i, j - 1, boundary),
        )

    def at(self, index: int):
        return self._sites[index]

    def set(self, index: int, value) -> None:
        """Raw in-bounds write; callers guarantee index and value domain."""
        self._sites[index] = value

    # -- snapshots --

    def values(self) -> tuple:
        """Immutable copy of the raw site values, row-major."""
        return tuple(self._sites)

    def copy(self) -> LatticeState:
        new = LatticeState.__new__(LatticeState)
        new.size = self.size
        new.kind = self.kind
        new.states = self.states
        new._sites = list(self._sites)
        return new

    def __len__(self) -> int:
        return len(self._sites)

    def __iter__(self):
        return iter(self._sites)

    def __repr__(self) -> str:
        return f"LatticeState(size={self.size}, kind={self.kind.name}, states={self.states})"
