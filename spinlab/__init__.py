"""spinlab — interactive Monte Carlo engine for 2D spin lattices."""

from spinlab.config import SimulationConfig
from spinlab.engine.clock import SimulationClock, initialize

__all__ = ["SimulationClock", "SimulationConfig", "initialize"]

__version__ = "0.1.0"
