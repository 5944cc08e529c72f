"""Engine systems: RNG and observables."""

from spinlab.systems.rng import DeterministicRNG
from spinlab.systems.observables import Observables, compute_observables

__all__ = ["DeterministicRNG", "Observables", "compute_observables"]
