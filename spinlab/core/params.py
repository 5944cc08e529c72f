"""Validated, mutable simulation parameters shared by the stepping and reading paths."""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass

from spinlab.core.enums import AlgorithmKind, BoundaryKind, ModelKind
from spinlab.core.lattice import clamp_states
from spinlab.errors import InvalidParameterError

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS_PER_FRAME = 30


@dataclass(frozen=True, slots=True)
class SimulationParameters:
    """Point-in-time copy of every parameter, taken once per step."""

    beta: float
    field: float
    boundary: BoundaryKind
    model_kind: ModelKind
    algorithm: AlgorithmKind
    state_count: int
    steps_per_frame: int

    @property
    def temperature(self) -> float:
        return 1.0 / self.beta


class ParameterStore:
    """Holder for the live parameters.

    Every setter either stores a valid value or raises
    ``InvalidParameterError`` leaving the previous value intact; NaN or
    infinity never reaches beta. Each field write is atomic; compound
    updates (e.g. model kind + state count) are not.
    """

    __slots__ = (
        "_lock",
        "_beta",
        "_field",
        "_boundary",
        "_model_kind",
        "_algorithm",
        "_state_count",
        "_steps_per_frame",
        "_max_steps_per_frame",
    )

    def __init__(
        self,
        temperature: float = 2.5,
        field: float = 0.0,
        boundary: BoundaryKind | str = BoundaryKind.PERIODIC,
        model_kind: ModelKind | str = ModelKind.BINARY,
        algorithm: AlgorithmKind | str = AlgorithmKind.LOCAL,
        state_count: int = 3,
        steps_per_frame: int = 1,
        max_steps_per_frame: int = DEFAULT_MAX_STEPS_PER_FRAME,
    ) -> None:
        self._lock = threading.Lock()
        self._beta = 0.4
        self._field = 0.0
        self._boundary = BoundaryKind.PERIODIC
        self._model_kind = ModelKind.BINARY
        self._algorithm = AlgorithmKind.LOCAL
        self._state_count = 3
        self._steps_per_frame = 1
        self._max_steps_per_frame = max(1, int(max_steps_per_frame))

        self.set_temperature(temperature)
        self.set_field(field)
        self.set_boundary(boundary)
        self.set_model_kind(model_kind)
        self.set_algorithm(algorithm)
        self.set_state_count(state_count)
        self.set_steps_per_frame(steps_per_frame)

    # -- read access --

    @property
    def beta(self) -> float:
        return self._beta

    @property
    def temperature(self) -> float:
        return 1.0 / self._beta

    @property
    def field(self) -> float:
        return self._field

    @property
    def boundary(self) -> BoundaryKind:
        return self._boundary

    @property
    def model_kind(self) -> ModelKind:
        return self._model_kind

    @property
    def algorithm(self) -> AlgorithmKind:
        return self._algorithm

    @property
    def state_count(self) -> int:
        return self._state_count

    @property
    def steps_per_frame(self) -> int:
        return self._steps_per_frame

    @property
    def max_steps_per_frame(self) -> int:
        return self._max_steps_per_frame

    def current(self) -> SimulationParameters:
        with self._lock:
            return SimulationParameters(
                beta=self._beta,
                field=self._field,
                boundary=self._boundary,
                model_kind=self._model_kind,
                algorithm=self._algorithm,
                state_count=self._state_count,
                steps_per_frame=self._steps_per_frame,
            )

    # -- mutation --

    def set_temperature(self, temperature: float) -> float:
        value = _as_float("temperature", temperature)
        if value <= 0.0:
            raise InvalidParameterError("temperature", temperature, "temperature must be > 0")
        beta = 1.0 / value
        if not math.isfinite(beta) or beta <= 0.0:
            raise InvalidParameterError("temperature", temperature, "inverse temperature is not finite")
        with self._lock:
            self._beta = beta
        return value

    def set_field(self, field: float) -> float:
        value = _as_float("field", field)
        with self._lock:
            self._field = value
        return value

    def set_boundary(self, boundary: BoundaryKind | str) -> BoundaryKind:
        value = parse_enum("boundary", BoundaryKind, boundary)
        with self._lock:
            self._boundary = value
        return value

    def set_model_kind(self, model_kind: ModelKind | str) -> ModelKind:
        value = parse_enum("model_kind", ModelKind, model_kind)
        with self._lock:
            self._model_kind = value
        return value

    def set_algorithm(self, algorithm: AlgorithmKind | str) -> AlgorithmKind:
        value = parse_enum("algorithm", AlgorithmKind, algorithm)
        with self._lock:
            self._algorithm = value
        return value

    def set_state_count(self, state_count: int) -> int:
        if isinstance(state_count, bool) or not isinstance(state_count, (int, float)) or not math.isfinite(state_count):
            raise InvalidParameterError("state_count", state_count, "state count must be an integer")
        value = clamp_states(state_count)
        if value != state_count:
            logger.warning("State count %s clamped to %d", state_count, value)
        with self._lock:
            self._state_count = value
        return value

    def set_steps_per_frame(self, steps: int) -> int:
        if isinstance(steps, bool) or not isinstance(steps, int):
            raise InvalidParameterError("steps_per_frame", steps, "steps per frame must be an integer")
        if steps < 1:
            raise InvalidParameterError("steps_per_frame", steps, "steps per frame must be >= 1")
        value = min(steps, self._max_steps_per_frame)
        with self._lock:
            self._steps_per_frame = value
        return value


def _as_float(name: str, raw: object) -> float:
    if isinstance(raw, bool):
        raise InvalidParameterError(name, raw, "expected a number")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidParameterError(name, raw, "expected a number") from None
    if not math.isfinite(value):
        raise InvalidParameterError(name, raw, "value must be finite")
    return value


def parse_enum(name: str, enum_cls, raw: object):
    try:
        return enum_cls.parse(raw)
    except ValueError as exc:
        raise InvalidParameterError(name, raw, str(exc)) from None
