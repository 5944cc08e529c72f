"""HTTP host for the simulation engine."""
