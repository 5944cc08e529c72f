"""Domain-separated deterministic RNG using xxhash.

The Golden Rule: the outcome of a sweep depends ONLY on
Seed + lattice state before the sweep + the draw counters.

Formula: RNG_Value = Hash(Seed, Domain, Counter[Domain])
"""

from __future__ import annotations

import struct

import xxhash

from spinlab.core.enums import Domain


class DeterministicRNG:
    """Counter-based pseudo-random stream, one independent counter per domain.

    Each draw is a pure function of (seed, domain, counter); advancing one
    domain never perturbs another, so e.g. changing the proposal width does
    not reshuffle the visiting order. Not thread-safe: owned by the single
    lattice writer.
    """

    __slots__ = ("_seed", "_counters")

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._counters: dict[Domain, int] = {}

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, counter: int) -> int:
        payload = struct.pack("<qiQ", self._seed, domain.value, counter)
        return xxhash.xxh64(payload).intdigest()

    def _next(self, domain: Domain) -> int:
        counter = self._counters.get(domain, 0)
        self._counters[domain] = counter + 1
        return self._hash(domain, counter)

    def next_float(self, domain: Domain) -> float:
        """Return a float in [0.0, 1.0)."""
        # 53 high bits so the result is exactly representable and never rounds up to 1.0
        return (self._next(domain) >> 11) / float(1 << 53)

    def next_int(self, domain: Domain, low: int, high: int) -> int:
        """Return an integer in [low, high] inclusive."""
        f = self.next_float(domain)
        return low + int(f * (high - low + 1))

    def next_bool(self, domain: Domain, probability: float = 0.5) -> bool:
        """Return True with the given probability."""
        return self.next_float(domain) < probability

    def uniform(self, domain: Domain, low: float, high: float) -> float:
        """Return a float in [low, high)."""
        return low + (high - low) * self.next_float(domain)

    def shuffle(self, domain: Domain, items: list) -> None:
        """Fisher-Yates shuffle *items* in place."""
        for i in range(len(items) - 1, 0, -1):
            j = self.next_int(domain, 0, i)
            items[i], items[j] = items[j], items[i]

    def draws(self, domain: Domain) -> int:
        """Number of values drawn so far from *domain*."""
        return self._counters.get(domain, 0)
