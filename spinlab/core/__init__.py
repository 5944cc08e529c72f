"""Core data models: lattice, parameters, snapshots."""

from spinlab.core.enums import AlgorithmKind, BoundaryKind, Domain, ModelKind, MoveKind
from spinlab.core.lattice import LatticeState
from spinlab.core.params import ParameterStore, SimulationParameters
from spinlab.core.frame import Frame, StateView

__all__ = [
    "AlgorithmKind",
    "BoundaryKind",
    "Domain",
    "Frame",
    "LatticeState",
    "ModelKind",
    "MoveKind",
    "ParameterStore",
    "SimulationParameters",
    "StateView",
]
