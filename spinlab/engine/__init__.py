"""Engine layer: Monte Carlo updates and the simulation clock."""

from spinlab.engine.update_engine import StepResult, UpdateEngine
from spinlab.engine.clock import SimulationClock

__all__ = ["SimulationClock", "StepResult", "UpdateEngine"]
