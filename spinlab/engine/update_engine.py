"""UpdateEngine — advances a lattice by one Monte Carlo step.

Dispatch by (model kind, algorithm):
  - local sweep        → one random-sequential Metropolis sweep for the model
  - cluster (Wolff)    → one cluster attempt, binary model with |h| > 1e-10 only;
                         otherwise the local sweep runs instead
  - lattice/params disagree on the model kind → no-op
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from spinlab.core.enums import AlgorithmKind, MoveKind
from spinlab.engine.cluster import cluster_supported, wolff_step
from spinlab.engine.metropolis import SWEEPS

if TYPE_CHECKING:
    from spinlab.core.lattice import LatticeState
    from spinlab.core.params import SimulationParameters
    from spinlab.systems.rng import DeterministicRNG

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StepResult:
    """Outcome of one ``step()`` call."""

    move: MoveKind
    attempted: int = 0
    accepted: int = 0
    cluster_size: int = 0

    @property
    def changed(self) -> bool:
        return self.accepted > 0


NOOP = StepResult(move=MoveKind.NOOP)


class UpdateEngine:
    """Stateless Monte Carlo stepper.

    Reads parameters on every call; the caller passes a fresh
    ``SimulationParameters`` (or the live store) each time.
    """

    __slots__ = ()

    def step(self, lattice: LatticeState, params: SimulationParameters, rng: DeterministicRNG) -> StepResult:
        if lattice.kind != params.model_kind:
            # Model change in flight: the lattice is about to be replaced.
            logger.debug("Skipping step: lattice is %s, parameters say %s", lattice.kind.name, params.model_kind.name)
            return NOOP
        if params.algorithm == AlgorithmKind.CLUSTER and cluster_supported(lattice.kind, params.field):
            return self.cluster_step(lattice, params, rng)
        return self.sweep(lattice, params, rng)

    def sweep(self, lattice: LatticeState, params: SimulationParameters, rng: DeterministicRNG) -> StepResult:
        """One local Metropolis sweep for the lattice's own model kind."""
        accepted = SWEEPS[lattice.kind](lattice, params, rng)
        return StepResult(move=MoveKind.SWEEP, attempted=lattice.site_count, accepted=accepted)

    def cluster_step(self, lattice: LatticeState, params: SimulationParameters, rng: DeterministicRNG) -> StepResult:
        """One Wolff attempt; a NOOP result for any unsupported model or zero field."""
        cluster, flipped = wolff_step(lattice, params, rng)
        if cluster is None:
            return NOOP
        return StepResult(
            move=MoveKind.CLUSTER,
            attempted=1,
            accepted=len(cluster) if flipped else 0,
            cluster_size=len(cluster),
        )
