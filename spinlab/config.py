"""Simulation configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable configuration for a simulation session."""

    # Lattice
    lattice_size: int = 300
    model_kind: str = "binary"
    potts_states: int = 3

    # Physics
    temperature: float = 2.5
    field: float = 0.0
    boundary: str = "periodic"
    algorithm: str = "local"

    # Randomness
    seed: int = 42

    # Timing
    steps_per_frame: int = 1
    max_steps_per_frame: int = 30
    target_fps: float = 30.0

    # Observables
    history_points: int = 400

    # Host
    autostart: bool = True

    # Logging
    log_level: str = "INFO"
