"""Exception hierarchy for the simulation engine."""

from __future__ import annotations


class SpinLabError(Exception):
    """Base class for all engine errors."""


class InvalidParameterError(SpinLabError, ValueError):
    """A parameter value was rejected; the previous value is left intact."""

    def __init__(self, name: str, value: object, reason: str) -> None:
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {name}={value!r}: {reason}")


class SimulationStateError(SpinLabError):
    """A control operation is not legal in the current lifecycle state."""


class NotInitializedError(SimulationStateError):
    """A control operation was requested before ``initialize()``."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot {operation}: simulation not initialized.")
