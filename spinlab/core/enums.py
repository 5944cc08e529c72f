"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


class _ParsableEnum(IntEnum):
    """IntEnum that also accepts its lower-case name or a legacy alias."""

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {}

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().replace("-", "_")
            key = cls._aliases().get(key.lower(), key)
            try:
                return cls[key.upper()]
            except KeyError:
                pass
        elif isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        choices = ", ".join(m.name.lower() for m in cls)
        raise ValueError(f"{value!r} is not a valid {cls.__name__} (choose from {choices})")

    @property
    def label(self) -> str:
        return self.name.lower()


@unique
class ModelKind(_ParsableEnum):
    """Spin representation held by a lattice."""

    BINARY = 0        # Ising: s in {+1, -1}
    CONTINUOUS = 1    # XY rotator: theta in [0, 2pi)
    MULTI_STATE = 2   # Potts: s in {0..q-1}

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {"ising": "binary", "rotator": "continuous", "xy": "continuous", "potts": "multi_state"}


@unique
class BoundaryKind(_ParsableEnum):
    """Rule for resolving neighbour reads outside the grid."""

    PERIODIC = 0
    FIXED_HIGH = 1
    FIXED_LOW = 2

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {"fixedup": "fixed_high", "fixed_up": "fixed_high", "fixeddown": "fixed_low", "fixed_down": "fixed_low"}


@unique
class AlgorithmKind(_ParsableEnum):
    """Monte Carlo update algorithm."""

    LOCAL = 0     # random-sequential Metropolis sweep
    CLUSTER = 1   # single-cluster Wolff flip

    @classmethod
    def _aliases(cls) -> dict[str, str]:
        return {"metropolis": "local", "local_sweep": "local", "wolff": "cluster"}


@unique
class MoveKind(IntEnum):
    """What a single engine step actually did."""

    NOOP = 0
    SWEEP = 1
    CLUSTER = 2


@unique
class Domain(IntEnum):
    """RNG domains for deterministic randomness isolation."""

    LATTICE_INIT = 0
    SITE_ORDER = 1
    PROPOSAL = 2
    ACCEPTANCE = 3
    CLUSTER_SEED = 4
    CLUSTER_BOND = 5
